"""
Order Repository - Data Access Layer for Orders

Orders are inserted once by checkout and read back for the buyer's
dashboard. `products` and `payment` are stored as JSONB.
"""
from typing import List

from psycopg2.extras import Json

from storefront.core.database import get_db_connection_dict
from storefront.domain.order import Order


class OrderRepository:
    """Repository for Order data access"""

    @staticmethod
    def _map_row_to_order(row: dict) -> Order:
        return Order(
            id=row['id'],
            products=row['products'] or [],
            payment=row['payment'] or {},
            buyer=row['buyer'],
            status=row['status'],
            created_at=row.get('created_at')
        )

    def create(self, order: Order) -> Order:
        """
        Insert an order

        Args:
            order: Order without id

        Returns:
            The stored Order with id and created_at filled in
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO orders (products, payment, buyer, status)
                VALUES (%s, %s, %s, %s)
                RETURNING id, products, payment, buyer, status, created_at
            """, (
                Json(order.products),
                Json(order.payment),
                order.buyer,
                order.status
            ))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_order(row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def find_by_buyer(self, buyer: str, limit: int = 50) -> List[Order]:
        """
        Find a buyer's orders, newest first

        Args:
            buyer: Buyer user id
            limit: Maximum orders to return
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, products, payment, buyer, status, created_at
                FROM orders
                WHERE buyer = %s
                ORDER BY created_at DESC
                LIMIT %s
            """, (buyer, limit))

            return [self._map_row_to_order(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()
