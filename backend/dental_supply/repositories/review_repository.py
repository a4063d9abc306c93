"""
Review Repository - product reviews and their moderation status
"""
from typing import List, Optional

from dental_supply.core.database import get_db_connection_dict
from dental_supply.domain.catalog import Review, ReviewCreate, ReviewStats, ReviewStatus

REVIEW_COLUMNS = """
    id, product_id, user_id, user_name, rating, comment, status,
    created_at, updated_at
"""


class ReviewRepository:
    """Repository for product review data access"""

    def find_by_product(self, product_id: int, approved_only: bool = True) -> List[Review]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            conditions = ["product_id = %s"]
            params = [product_id]

            if approved_only:
                conditions.append("status = %s")
                params.append(ReviewStatus.APPROVED.value)

            cursor.execute(f"""
                SELECT {REVIEW_COLUMNS}
                FROM product_reviews
                WHERE {" AND ".join(conditions)}
                ORDER BY created_at DESC
            """, params)
            return [Review(**row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def create(self, product_id: int, user_id: int, user_name: str, data: ReviewCreate) -> Review:
        """New reviews start as pending until an admin moderates them"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                INSERT INTO product_reviews (
                    product_id, user_id, user_name, rating, comment, status,
                    created_at, updated_at
                ) VALUES (%s, %s, %s, %s, %s, %s, NOW(), NOW())
                RETURNING {REVIEW_COLUMNS}
            """, (
                product_id,
                user_id,
                user_name,
                data.rating,
                data.comment,
                ReviewStatus.PENDING.value
            ))

            row = cursor.fetchone()
            conn.commit()
            return Review(**row)

        finally:
            cursor.close()
            conn.close()

    def update_status(self, review_id: int, status: ReviewStatus) -> Optional[Review]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                UPDATE product_reviews
                SET status = %s, updated_at = NOW()
                WHERE id = %s
                RETURNING {REVIEW_COLUMNS}
            """, (status.value, review_id))

            row = cursor.fetchone()
            if not row:
                return None

            conn.commit()
            return Review(**row)

        finally:
            cursor.close()
            conn.close()

    def delete(self, review_id: int) -> bool:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM product_reviews WHERE id = %s RETURNING id", (review_id,))
            deleted = cursor.fetchone() is not None
            conn.commit()
            return deleted

        finally:
            cursor.close()
            conn.close()

    def get_stats(self, product_id: int) -> ReviewStats:
        """Average and distribution over approved reviews only"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT rating, COUNT(*) as count
                FROM product_reviews
                WHERE product_id = %s AND status = %s
                GROUP BY rating
            """, (product_id, ReviewStatus.APPROVED.value))

            distribution = {rating: 0 for rating in range(1, 6)}
            for row in cursor.fetchall():
                distribution[row['rating']] = row['count']

            total = sum(distribution.values())
            average = (
                sum(rating * count for rating, count in distribution.items()) / total
                if total else 0.0
            )

            return ReviewStats(
                average_rating=round(average, 2),
                total_reviews=total,
                rating_distribution=distribution
            )

        finally:
            cursor.close()
            conn.close()
