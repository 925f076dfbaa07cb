"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.
"""
from typing import Optional
from uuid import UUID

import psycopg2

from storefront.core.database import get_db_connection_dict
from storefront.domain.product import Product, ProductPhoto, ProductWrite

PRODUCT_COLUMNS = """
    id, name, slug, description, price, category, quantity, shipping,
    photo, photo_content_type, created_at, updated_at
"""


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        """Map a products row to the Product domain model (BYTEA arrives as memoryview)"""
        photo = None
        if row.get('photo') is not None:
            photo = ProductPhoto(
                data=bytes(row['photo']),
                content_type=row.get('photo_content_type')
            )

        return Product(
            id=row['id'],
            name=row['name'],
            slug=row['slug'],
            description=row['description'],
            price=row['price'],
            category=row['category'],
            quantity=row['quantity'],
            shipping=row['shipping'],
            photo=photo,
            created_at=row.get('created_at'),
            updated_at=row.get('updated_at')
        )

    def create(self, product: ProductWrite, photo: Optional[ProductPhoto] = None) -> Product:
        """
        Insert a new product

        Args:
            product: Validated product fields (slug already derived)
            photo: Optional photo blob

        Returns:
            The stored Product

        Raises:
            psycopg2.Error: on constraint violations (e.g. duplicate slug)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO products (
                    name, slug, description, price, category, quantity,
                    shipping, photo, photo_content_type
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                RETURNING {PRODUCT_COLUMNS}
            """, (
                product.name,
                product.slug,
                product.description,
                product.price,
                product.category,
                product.quantity,
                product.shipping,
                psycopg2.Binary(photo.data) if photo else None,
                photo.content_type if photo else None
            ))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def update_by_id(
        self,
        product_id: UUID,
        product: ProductWrite,
        photo: Optional[ProductPhoto] = None
    ) -> Optional[Product]:
        """
        Update a product in place, keeping its identity

        The stored photo is only replaced when a new one is given.

        Returns:
            Updated Product or None if no product has this id
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            assignments = [
                "name = %s",
                "slug = %s",
                "description = %s",
                "price = %s",
                "category = %s",
                "quantity = %s",
                "shipping = %s",
            ]
            params = [
                product.name,
                product.slug,
                product.description,
                product.price,
                product.category,
                product.quantity,
                product.shipping,
            ]

            if photo is not None:
                assignments.extend(["photo = %s", "photo_content_type = %s"])
                params.extend([psycopg2.Binary(photo.data), photo.content_type])

            cursor.execute(f"""
                UPDATE products
                SET {", ".join(assignments)},
                    updated_at = NOW()
                WHERE id = %s
                RETURNING {PRODUCT_COLUMNS}
            """, params + [str(product_id)])

            row = cursor.fetchone()
            conn.commit()

            if not row:
                return None

            return self._map_row_to_product(row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def delete_by_id(self, product_id: UUID) -> bool:
        """
        Delete a product

        Returns:
            True if a row was deleted, False if no product has this id
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                DELETE FROM products
                WHERE id = %s
                RETURNING id
            """, (str(product_id),))

            row = cursor.fetchone()
            conn.commit()
            return row is not None

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, product_id: UUID) -> Optional[Product]:
        """
        Find product by ID

        Returns:
            Product or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE id = %s
            """, (str(product_id),))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def find_by_slug(self, slug: str) -> Optional[Product]:
        """Find product by slug"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE slug = %s
            """, (slug,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()
