"""
Unit tests for OrderRepository
"""
from datetime import datetime
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from psycopg2.extras import Json

from storefront.domain.order import Order
from storefront.repositories.order_repository import OrderRepository


@pytest.fixture
def db():
    with patch('storefront.repositories.order_repository.get_db_connection_dict') as mock_get_conn:
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        yield mock_conn, mock_cursor


def make_row(**overrides):
    row = {
        'id': str(uuid4()),
        'products': [{'price': 10}],
        'payment': {'success': True, 'transaction': {'id': 'txn_1'}},
        'buyer': '1',
        'status': 'Not Process',
        'created_at': datetime(2026, 1, 15, 12, 0, 0)
    }
    row.update(overrides)
    return row


class TestOrderRepository:

    def test_create_stores_json_columns(self, db):
        mock_conn, mock_cursor = db
        mock_cursor.fetchone.return_value = make_row()
        order = Order(products=[{'price': 10}], payment={'success': True}, buyer='1')

        stored = OrderRepository().create(order)

        sql, params = mock_cursor.execute.call_args[0]
        assert 'INSERT INTO orders' in sql
        assert isinstance(params[0], Json)
        assert isinstance(params[1], Json)
        assert params[2:] == ('1', 'Not Process')
        assert stored.id is not None
        mock_conn.commit.assert_called_once()
        mock_conn.close.assert_called_once()

    def test_create_rolls_back_on_error(self, db):
        mock_conn, mock_cursor = db
        mock_cursor.execute.side_effect = RuntimeError('relation "orders" does not exist')

        with pytest.raises(RuntimeError):
            OrderRepository().create(Order(products=[], payment={}, buyer='1'))

        mock_conn.rollback.assert_called_once()
        mock_conn.close.assert_called_once()

    def test_find_by_buyer(self, db):
        mock_conn, mock_cursor = db
        mock_cursor.fetchall.return_value = [make_row(), make_row(products=None, payment=None)]

        orders = OrderRepository().find_by_buyer('1', limit=10)

        assert len(orders) == 2
        assert orders[1].products == []
        assert orders[1].payment == {}
        assert mock_cursor.execute.call_args[0][1] == ('1', 10)
