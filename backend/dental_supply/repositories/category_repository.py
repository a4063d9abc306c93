"""
Category Repository - admin-managed category records
"""
from typing import List, Optional

from psycopg2 import errors

from dental_supply.core.database import get_db_connection_dict
from dental_supply.core.exceptions import ConflictError
from dental_supply.domain.catalog import Category, CategoryCreate, CategoryUpdate
from dental_supply.repositories.base import build_update_clause

CATEGORY_COLUMNS = "id, name, description, created_at, updated_at"


class CategoryRepository:
    """Repository for Category data access"""

    def find_all(self) -> List[Category]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"SELECT {CATEGORY_COLUMNS} FROM categories ORDER BY name")
            return [Category(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, category_id: int) -> Optional[Category]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"SELECT {CATEGORY_COLUMNS} FROM categories WHERE id = %s", (category_id,))
            row = cursor.fetchone()
            return Category(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def create(self, data: CategoryCreate) -> Category:
        """
        Raises:
            ConflictError: If a category with this name exists
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO categories (name, description, created_at, updated_at)
                VALUES (%s, %s, NOW(), NOW())
                RETURNING {CATEGORY_COLUMNS}
            """, (data.name, data.description))

            row = cursor.fetchone()
            conn.commit()
            return Category(**row)

        except errors.UniqueViolation:
            conn.rollback()
            raise ConflictError(f"Category '{data.name}' already exists")

        finally:
            cursor.close()
            conn.close()

    def update(self, category_id: int, data: CategoryUpdate) -> Optional[Category]:
        set_clause, values = build_update_clause(
            data.model_dump(exclude_unset=True), ("name", "description")
        )
        if not set_clause:
            return self.find_by_id(category_id)

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE categories
                SET {set_clause}
                WHERE id = %s
                RETURNING {CATEGORY_COLUMNS}
            """, values + [category_id])

            row = cursor.fetchone()
            if not row:
                return None

            conn.commit()
            return Category(**row)

        except errors.UniqueViolation:
            conn.rollback()
            raise ConflictError(f"Category '{data.name}' already exists")

        finally:
            cursor.close()
            conn.close()

    def delete(self, category_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM categories WHERE id = %s RETURNING id", (category_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        finally:
            cursor.close()
            conn.close()
