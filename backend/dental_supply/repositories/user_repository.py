"""
User Repository - Data Access Layer for Users
"""
from typing import List, Optional

from psycopg2 import errors

from dental_supply.core.database import get_db_connection_dict
from dental_supply.core.exceptions import ConflictError
from dental_supply.domain.user import User, UserInDB, UserRole

USER_COLUMNS = """
    id, email, first_name, last_name, role, last_login, created_at, updated_at
"""


class UserRepository:
    """Repository for User data access"""

    def find_by_email(self, email: str) -> Optional[UserInDB]:
        """Find a user by email (case-insensitive), including the password hash"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {USER_COLUMNS}, password_hash
                FROM users
                WHERE LOWER(email) = LOWER(%s)
            """, (email,))

            row = cursor.fetchone()
            return UserInDB(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_by_id(self, user_id: int) -> Optional[User]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {USER_COLUMNS}
                FROM users
                WHERE id = %s
            """, (user_id,))

            row = cursor.fetchone()
            return User(**row) if row else None

        finally:
            cursor.close()
            conn.close()

    def find_all(self) -> List[User]:
        """All users, newest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {USER_COLUMNS}
                FROM users
                ORDER BY created_at DESC
            """)
            return [User(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def create(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.USER
    ) -> User:
        """
        Insert a user

        Raises:
            ConflictError: If the email is already registered
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO users (email, password_hash, first_name, last_name, role, created_at, updated_at)
                VALUES (%s, %s, %s, %s, %s, NOW(), NOW())
                RETURNING {USER_COLUMNS}
            """, (email.lower(), password_hash, first_name, last_name, role.value))

            row = cursor.fetchone()
            conn.commit()
            return User(**row)

        except errors.UniqueViolation:
            conn.rollback()
            raise ConflictError("User already exists")

        finally:
            cursor.close()
            conn.close()

    def update_role(self, user_id: int, role: UserRole) -> Optional[User]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE users
                SET role = %s, updated_at = NOW()
                WHERE id = %s
                RETURNING {USER_COLUMNS}
            """, (role.value, user_id))

            row = cursor.fetchone()
            if not row:
                return None

            conn.commit()
            return User(**row)

        finally:
            cursor.close()
            conn.close()

    def touch_last_login(self, user_id: int):
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE users SET last_login = NOW() WHERE id = %s
            """, (user_id,))
            conn.commit()

        finally:
            cursor.close()
            conn.close()

    def delete(self, user_id: int) -> bool:
        """Delete a user; their orders remain with user_id set to NULL"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM users WHERE id = %s RETURNING id", (user_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        finally:
            cursor.close()
            conn.close()
