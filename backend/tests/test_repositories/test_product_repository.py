"""
Unit tests for ProductRepository

These tests validate repository logic without requiring a database connection.
"""
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from storefront.domain.product import Product, ProductPhoto, ProductWrite
from storefront.repositories.product_repository import ProductRepository


def make_row(**overrides):
    row = {
        'id': str(uuid4()),
        'name': 'Test Name',
        'slug': 'test-name',
        'description': 'Test Description',
        'price': Decimal('100.00'),
        'category': 'Test Category',
        'quantity': 10,
        'shipping': True,
        'photo': None,
        'photo_content_type': None,
        'created_at': datetime.now(),
        'updated_at': None
    }
    row.update(overrides)
    return row


@pytest.fixture
def write():
    return ProductWrite(
        name='Test Name',
        slug='test-name',
        description='Test Description',
        price=Decimal('100'),
        category='Test Category',
        quantity=10,
        shipping=True
    )


@pytest.fixture
def db():
    """Mocked connection and cursor returned by get_db_connection_dict"""
    with patch('storefront.repositories.product_repository.get_db_connection_dict') as mock_get_conn:
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        yield mock_conn, mock_cursor


class TestProductRepository:
    """Test ProductRepository methods"""

    def test_create_returns_product_and_commits(self, db, write):
        """Test create inserts, commits and maps the returned row"""
        mock_conn, mock_cursor = db
        mock_cursor.fetchone.return_value = make_row(
            photo=memoryview(b'mock-photo-data'),
            photo_content_type='image/jpeg'
        )

        product = ProductRepository().create(write, ProductPhoto(data=b'mock-photo-data', content_type='image/jpeg'))

        assert isinstance(product, Product)
        assert product.slug == 'test-name'
        assert product.photo.data == b'mock-photo-data'
        assert product.photo.content_type == 'image/jpeg'

        sql, params = mock_cursor.execute.call_args[0]
        assert 'INSERT INTO products' in sql
        assert params[1] == 'test-name'
        mock_conn.commit.assert_called_once()
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    def test_create_rolls_back_on_error(self, db, write):
        """Test a failed insert is rolled back and re-raised"""
        mock_conn, mock_cursor = db
        mock_cursor.execute.side_effect = RuntimeError('duplicate key value violates unique constraint')

        with pytest.raises(RuntimeError):
            ProductRepository().create(write)

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_called_once()

    def test_update_without_photo_keeps_stored_photo(self, db, write):
        """Test update_by_id leaves the photo columns alone when no photo is given"""
        mock_conn, mock_cursor = db
        pid = uuid4()
        mock_cursor.fetchone.return_value = make_row(id=str(pid))

        product = ProductRepository().update_by_id(pid, write)

        sql, params = mock_cursor.execute.call_args[0]
        assert 'photo =' not in sql
        assert params[-1] == str(pid)
        assert product.id == pid

    def test_update_with_photo_replaces_it(self, db, write):
        mock_conn, mock_cursor = db
        mock_cursor.fetchone.return_value = make_row()

        ProductRepository().update_by_id(uuid4(), write, ProductPhoto(data=b'new', content_type='image/png'))

        sql, params = mock_cursor.execute.call_args[0]
        assert 'photo = %s' in sql
        assert 'image/png' in params

    def test_update_returns_none_when_not_found(self, db, write):
        mock_conn, mock_cursor = db
        mock_cursor.fetchone.return_value = None

        assert ProductRepository().update_by_id(uuid4(), write) is None

    def test_delete_reports_whether_a_row_was_removed(self, db):
        mock_conn, mock_cursor = db
        mock_cursor.fetchone.side_effect = [{'id': str(uuid4())}, None]

        repo = ProductRepository()
        assert repo.delete_by_id(uuid4()) is True
        assert repo.delete_by_id(uuid4()) is False

    def test_find_by_slug_returns_none_when_not_found(self, db):
        mock_conn, mock_cursor = db
        mock_cursor.fetchone.return_value = None

        assert ProductRepository().find_by_slug('missing') is None
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    def test_find_by_id_maps_row(self, db):
        mock_conn, mock_cursor = db
        row = make_row()
        mock_cursor.fetchone.return_value = row

        product = ProductRepository().find_by_id(row['id'])

        assert str(product.id) == row['id']
        assert product.price == Decimal('100.00')
        assert product.photo is None
