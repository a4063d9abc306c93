"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and returns Order domain models.
Write methods accept an optional connection; when given, the caller owns
the transaction and nothing is committed here.
"""
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from psycopg2.extras import Json

from dental_supply.core.database import get_db_connection_dict
from dental_supply.domain.order import Order, OrderItem, OrderStatus, ShippingAddress
from dental_supply.domain.report import SalesLine, SalesReportFilters

ORDER_COLUMNS = """
    o.id, o.user_id, o.total_amount, o.shipping_address, o.status,
    o.created_at, o.updated_at
"""


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    Returns Order domain models with their items.
    """

    @staticmethod
    def _map_row_to_item(row: dict) -> OrderItem:
        return OrderItem(
            id=row['id'],
            product=row['product_id'],
            name=row['product_name'],
            category=row.get('category'),
            quantity=row['quantity'],
            price=row['unit_price']
        )

    @staticmethod
    def _map_row_to_order(row: dict, items: List[OrderItem]) -> Order:
        return Order(
            id=row['id'],
            user=row['user_id'],
            items=items,
            total_amount=row['total_amount'],
            shipping_address=ShippingAddress.model_validate(row['shipping_address']),
            status=row['status'],
            created_at=row['created_at'],
            updated_at=row.get('updated_at')
        )

    def _load_items(self, cursor, order_ids: List[int]) -> Dict[int, List[OrderItem]]:
        """Fetch items for many orders in one query, grouped by order id"""
        if not order_ids:
            return {}

        cursor.execute("""
            SELECT id, order_id, product_id, product_name, category, quantity, unit_price
            FROM order_items
            WHERE order_id = ANY(%s)
            ORDER BY order_id, id
        """, (order_ids,))

        items_by_order: Dict[int, List[OrderItem]] = {}
        for row in cursor.fetchall():
            items_by_order.setdefault(row['order_id'], []).append(self._map_row_to_item(row))

        return items_by_order

    def _build_orders(self, cursor, rows) -> List[Order]:
        items_by_order = self._load_items(cursor, [row['id'] for row in rows])
        return [self._map_row_to_order(row, items_by_order.get(row['id'], [])) for row in rows]

    # =========================================================================
    # Writes
    # =========================================================================

    def insert(
        self,
        user_id: int,
        items: List[OrderItem],
        total_amount: Decimal,
        shipping_address: ShippingAddress,
        conn
    ) -> Order:
        """
        Insert an order (status pending) and its items inside the caller's transaction

        Returns:
            The stored Order with generated ids and timestamps
        """
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO orders AS o (user_id, total_amount, shipping_address, status, created_at, updated_at)
                VALUES (%s, %s, %s, %s, NOW(), NOW())
                RETURNING {ORDER_COLUMNS}
            """, (
                user_id,
                total_amount,
                Json(shipping_address.model_dump()),
                OrderStatus.PENDING.value
            ))
            order_row = cursor.fetchone()

            stored_items = []
            for item in items:
                cursor.execute("""
                    INSERT INTO order_items (order_id, product_id, product_name, category, quantity, unit_price)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING id, order_id, product_id, product_name, category, quantity, unit_price
                """, (
                    order_row['id'],
                    item.product,
                    item.name,
                    item.category,
                    item.quantity,
                    item.price
                ))
                stored_items.append(self._map_row_to_item(cursor.fetchone()))

            return self._map_row_to_order(order_row, stored_items)

        finally:
            cursor.close()

    def get_status_for_update(self, order_id: int, conn) -> Optional[OrderStatus]:
        """Lock the order row and return its current status (None if missing)"""
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT status FROM orders WHERE id = %s FOR UPDATE
            """, (order_id,))
            row = cursor.fetchone()
            return OrderStatus(row['status']) if row else None

        finally:
            cursor.close()

    def update_status(self, order_id: int, status: OrderStatus, conn=None) -> bool:
        """
        Set the status of an order

        Returns:
            True if the order exists
        """
        should_close = conn is None
        if conn is None:
            conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE orders
                SET status = %s, updated_at = NOW()
                WHERE id = %s
                RETURNING id
            """, (status.value, order_id))
            updated = cursor.fetchone() is not None

            if should_close:
                conn.commit()
            return updated

        finally:
            cursor.close()
            if should_close:
                conn.close()

    # =========================================================================
    # Reads
    # =========================================================================

    def find_by_id(self, order_id: int, user_id: Optional[int] = None) -> Optional[Order]:
        """
        Find order by ID with its items

        Args:
            order_id: Internal order ID
            user_id: When given, only match an order owned by this user

        Returns:
            Order or None if not found (or not owned by user_id)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = ["o.id = %s"]
            params = [order_id]

            if user_id is not None:
                conditions.append("o.user_id = %s")
                params.append(user_id)

            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders o
                WHERE {" AND ".join(conditions)}
            """, params)

            row = cursor.fetchone()
            if not row:
                return None

            return self._build_orders(cursor, [row])[0]

        finally:
            cursor.close()
            conn.close()

    def find_by_user(self, user_id: int) -> List[Order]:
        """All orders of one user, newest first"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders o
                WHERE o.user_id = %s
                ORDER BY o.created_at DESC, o.id DESC
            """, (user_id,))

            return self._build_orders(cursor, cursor.fetchall())

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        status: Optional[OrderStatus] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Find orders across all users

        Returns:
            Tuple of (list of orders, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if status:
                conditions.append("o.status = %s")
                params.append(status.value)

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM orders o
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {ORDER_COLUMNS}
                FROM orders o
                WHERE {where_clause}
                ORDER BY o.created_at DESC, o.id DESC
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            return self._build_orders(cursor, cursor.fetchall()), total

        finally:
            cursor.close()
            conn.close()

    def fetch_sales_lines(self, filters: SalesReportFilters) -> List[SalesLine]:
        """
        Order line items matching the report filters

        Date bounds are inclusive and compared on the order's calendar date;
        category is matched exactly against the category captured on the item.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if filters.start_date:
                conditions.append("o.created_at::date >= %s")
                params.append(filters.start_date)

            if filters.end_date:
                conditions.append("o.created_at::date <= %s")
                params.append(filters.end_date)

            if filters.category:
                conditions.append("oi.category = %s")
                params.append(filters.category)

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT
                    o.id as order_id,
                    o.created_at as order_date,
                    oi.product_id,
                    oi.product_name,
                    oi.category,
                    oi.quantity,
                    oi.unit_price
                FROM order_items oi
                JOIN orders o ON o.id = oi.order_id
                WHERE {where_clause}
                ORDER BY o.created_at, oi.id
            """, params)

            return [SalesLine(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()
