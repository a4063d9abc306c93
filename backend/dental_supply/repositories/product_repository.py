"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.
The stock methods take an open connection so order placement can run them
inside a single transaction.
"""
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from dental_supply.core.database import get_db_connection_dict
from dental_supply.domain.product import Product, ProductCreate, ProductUpdate
from dental_supply.repositories.base import build_update_clause

PRODUCT_COLUMNS = """
    id, name, description, price, category, image_url, in_stock,
    created_at, updated_at
"""

UPDATABLE_COLUMNS = ("name", "description", "price", "category", "image_url", "in_stock")


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        return Product(
            id=row['id'],
            name=row['name'],
            description=row['description'] or "",
            price=row['price'],
            category=row['category'],
            image_url=row['image_url'] or "",
            in_stock=row['in_stock'],
            created_at=row['created_at'],
            updated_at=row.get('updated_at')
        )

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """
        Find product by ID

        Args:
            product_id: Internal product ID

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
            """, (product_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def find_all(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        in_stock_only: bool = False,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters

        Args:
            category: Exact category match
            search: Case-insensitive match on name or description
            in_stock_only: Only products with stock > 0
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = []
            params = []

            if category:
                conditions.append("category = %s")
                params.append(category)

            if search:
                conditions.append("(name ILIKE %s OR description ILIKE %s)")
                search_term = f"%{search}%"
                params.extend([search_term, search_term])

            if in_stock_only:
                conditions.append("in_stock > 0")

            where_clause = " AND ".join(conditions) if conditions else "1=1"

            cursor.execute(f"""
                SELECT COUNT(*) as total
                FROM products
                WHERE {where_clause}
            """, params)
            total = cursor.fetchone()['total']

            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE {where_clause}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
            """, params + [limit, offset])

            rows = cursor.fetchall()
            products = [self._map_row_to_product(row) for row in rows]

            return products, total

        finally:
            cursor.close()
            conn.close()

    def create(self, data: ProductCreate) -> Product:
        """Insert a product and return it"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO products (
                    name, description, price, category, image_url, in_stock,
                    created_at, updated_at
                ) VALUES (%s, %s, %s, %s, %s, %s, NOW(), NOW())
                RETURNING {PRODUCT_COLUMNS}
            """, (
                data.name,
                data.description,
                data.price,
                data.category,
                data.image_url,
                data.in_stock
            ))

            row = cursor.fetchone()
            conn.commit()
            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def update(self, product_id: int, data: ProductUpdate) -> Optional[Product]:
        """
        Apply a partial update

        Returns:
            Updated product, or None if it does not exist. With nothing to
            change, the current product is returned untouched.
        """
        set_clause, values = build_update_clause(
            data.model_dump(exclude_unset=True), UPDATABLE_COLUMNS
        )
        if not set_clause:
            return self.find_by_id(product_id)

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE products
                SET {set_clause}
                WHERE id = %s
                RETURNING {PRODUCT_COLUMNS}
            """, values + [product_id])

            row = cursor.fetchone()
            if not row:
                return None

            conn.commit()
            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def delete(self, product_id: int) -> bool:
        """Delete a product; order items keep their name/price snapshot"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM products WHERE id = %s RETURNING id", (product_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        finally:
            cursor.close()
            conn.close()

    # =========================================================================
    # Stock (transactional)
    # =========================================================================

    def lock_for_update(self, product_ids: Sequence[int], conn) -> Dict[int, Product]:
        """
        Lock the given product rows for the rest of the caller's transaction.

        Rows are locked in id order so concurrent checkouts touching the same
        products cannot deadlock.

        Returns:
            Dict of product id -> Product for the ids that exist
        """
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {PRODUCT_COLUMNS}
                FROM products
                WHERE id = ANY(%s)
                ORDER BY id
                FOR UPDATE
            """, (sorted(set(product_ids)),))

            return {row['id']: self._map_row_to_product(row) for row in cursor.fetchall()}

        finally:
            cursor.close()

    def decrement_stock(self, product_id: int, quantity: int, conn) -> Optional[int]:
        """
        Take `quantity` units out of stock if at least that many are left.

        The check and the write are one statement, so stock cannot go
        negative even without the row lock.

        Returns:
            Remaining stock, or None if stock was insufficient (or the
            product is gone)
        """
        cursor = conn.cursor()

        try:
            cursor.execute("""
                UPDATE products
                SET in_stock = in_stock - %s,
                    updated_at = NOW()
                WHERE id = %s AND in_stock >= %s
                RETURNING in_stock
            """, (quantity, product_id, quantity))

            row = cursor.fetchone()
            return row['in_stock'] if row else None

        finally:
            cursor.close()

    # =========================================================================
    # Statistics
    # =========================================================================

    def get_stats(self, low_stock_threshold: int, top_n: int = 5) -> dict:
        """
        Catalog and sales statistics for the admin product dashboard

        Returns:
            Dict with totals, stock alerts, per-category stats and sales stats
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT
                    COUNT(*) as total_products,
                    COALESCE(SUM(price * in_stock), 0) as total_value,
                    COUNT(*) FILTER (WHERE in_stock > 0 AND in_stock <= %s) as low_stock_count,
                    COUNT(*) FILTER (WHERE in_stock <= 0) as out_of_stock_count
                FROM products
            """, (low_stock_threshold,))
            totals = cursor.fetchone()

            cursor.execute("""
                SELECT
                    category,
                    COUNT(*) as count,
                    COALESCE(SUM(price * in_stock), 0) as total_value,
                    COALESCE(AVG(price), 0) as average_price
                FROM products
                GROUP BY category
                ORDER BY category
            """)
            by_category = cursor.fetchall()

            cursor.execute("""
                SELECT
                    COALESCE(SUM(total_amount), 0) as total_sales,
                    COUNT(*) as order_count
                FROM orders
            """)
            sales = cursor.fetchone()

            cursor.execute("""
                SELECT
                    oi.product_id as id,
                    oi.product_name as name,
                    SUM(oi.quantity) as sales,
                    SUM(oi.quantity * oi.unit_price) as revenue
                FROM order_items oi
                GROUP BY oi.product_id, oi.product_name
                ORDER BY revenue DESC
                LIMIT %s
            """, (top_n,))
            top_products = cursor.fetchall()

            total_sales = Decimal(sales['total_sales'])
            order_count = sales['order_count']
            average_order_value = total_sales / order_count if order_count else Decimal('0')

            return {
                'totalProducts': totals['total_products'],
                'totalValue': float(totals['total_value']),
                'lowStockCount': totals['low_stock_count'],
                'outOfStockCount': totals['out_of_stock_count'],
                'categoryStats': [
                    {
                        'category': row['category'],
                        'count': row['count'],
                        'totalValue': float(row['total_value']),
                        'averagePrice': round(float(row['average_price']), 2)
                    }
                    for row in by_category
                ],
                'salesStats': {
                    'totalSales': float(total_sales),
                    'averageOrderValue': round(float(average_order_value), 2),
                    'topProducts': [
                        {
                            'id': row['id'],
                            'name': row['name'],
                            'sales': int(row['sales']),
                            'revenue': float(row['revenue'])
                        }
                        for row in top_products
                    ]
                }
            }

        finally:
            cursor.close()
            conn.close()
