"""
Variant Repository - product variants (size, shade, pack count)
"""
from typing import List, Optional

from psycopg2 import errors
from psycopg2.extras import Json

from dental_supply.core.database import get_db_connection_dict
from dental_supply.core.exceptions import ConflictError
from dental_supply.domain.catalog import Variant, VariantCreate, VariantUpdate
from dental_supply.repositories.base import build_update_clause

VARIANT_COLUMNS = """
    id, product_id, name, sku, price, stock, attributes, image_url,
    created_at, updated_at
"""

UPDATABLE_COLUMNS = ("name", "sku", "price", "stock", "attributes", "image_url")


class VariantRepository:
    """Repository for product variant data access"""

    def find_by_product(self, product_id: int) -> List[Variant]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {VARIANT_COLUMNS}
                FROM product_variants
                WHERE product_id = %s
                ORDER BY id
            """, (product_id,))
            return [Variant(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, variant_id: int) -> Optional[Variant]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {VARIANT_COLUMNS}
                FROM product_variants
                WHERE id = %s
            """, (variant_id,))
            row = cursor.fetchone()
            return Variant(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, product_id: int, data: VariantCreate) -> Variant:
        """
        Raises:
            ConflictError: If the SKU is already used by another variant
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO product_variants (
                    product_id, name, sku, price, stock, attributes, image_url,
                    created_at, updated_at
                ) VALUES (%s, %s, %s, %s, %s, %s, %s, NOW(), NOW())
                RETURNING {VARIANT_COLUMNS}
            """, (
                product_id,
                data.name,
                data.sku,
                data.price,
                data.stock,
                Json(data.attributes),
                data.image_url
            ))

            row = cursor.fetchone()
            conn.commit()
            return Variant(**row)

        except errors.UniqueViolation:
            conn.rollback()
            raise ConflictError(f"SKU '{data.sku}' already exists")

        finally:
            cursor.close()
            conn.close()

    def update(self, variant_id: int, data: VariantUpdate) -> Optional[Variant]:
        changes = data.model_dump(exclude_unset=True)
        if changes.get("attributes") is not None:
            changes["attributes"] = Json(changes["attributes"])

        set_clause, values = build_update_clause(changes, UPDATABLE_COLUMNS)
        if not set_clause:
            return self.find_by_id(variant_id)

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE product_variants
                SET {set_clause}
                WHERE id = %s
                RETURNING {VARIANT_COLUMNS}
            """, values + [variant_id])

            row = cursor.fetchone()
            if not row:
                return None

            conn.commit()
            return Variant(**row)

        except errors.UniqueViolation:
            conn.rollback()
            raise ConflictError(f"SKU '{data.sku}' already exists")

        finally:
            cursor.close()
            conn.close()

    def delete(self, variant_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM product_variants WHERE id = %s RETURNING id", (variant_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        finally:
            cursor.close()
            conn.close()
