"""
Sales Report Service
Aggregates order line items into the admin sales report

The repository returns matching line items; everything else (totals,
category shares, monthly buckets, top products) is computed here so it can
be tested without a database.
"""
import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Dict, Iterable, Optional

from dental_supply.core.config import settings
from dental_supply.domain.report import (
    CategorySales,
    MonthlySales,
    SalesLine,
    SalesReport,
    SalesReportFilters,
    TopProduct,
)
from dental_supply.repositories.order_repository import OrderRepository

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


def build_sales_report(lines: Iterable[SalesLine], top_n: int = 5) -> SalesReport:
    """
    Aggregate line items into a SalesReport.

    - total_sales: sum of quantity * unit price over all lines
    - total_orders: distinct orders among the lines
    - average_order_value: total_sales / total_orders, 0 with no orders
    - sales_by_category: per category total and share of total_sales (%),
      largest first
    - sales_by_month: per YYYY-MM of the order date, oldest first
    - top_products: by revenue, at most top_n
    """
    total_sales = Decimal("0")
    order_ids = set()
    by_category: Dict[str, Decimal] = {}
    by_month: Dict[str, Decimal] = {}
    by_product: Dict[object, dict] = OrderedDict()

    for line in lines:
        amount = line.line_total
        total_sales += amount
        order_ids.add(line.order_id)

        category = line.category or UNCATEGORIZED
        by_category[category] = by_category.get(category, Decimal("0")) + amount

        month = line.order_date.strftime("%Y-%m")
        by_month[month] = by_month.get(month, Decimal("0")) + amount

        # Deleted products have no id; group those by their recorded name
        key = line.product_id if line.product_id is not None else f"name:{line.product_name}"
        entry = by_product.setdefault(key, {
            "product_id": line.product_id,
            "name": line.product_name,
            "total_sales": Decimal("0"),
            "quantity": 0,
        })
        entry["total_sales"] += amount
        entry["quantity"] += line.quantity

    total_orders = len(order_ids)
    average = total_sales / total_orders if total_orders else Decimal("0")

    sales_by_category = [
        CategorySales(
            category=category,
            total=total,
            percentage=round(float(total / total_sales * 100), 2) if total_sales else 0.0
        )
        for category, total in sorted(by_category.items(), key=lambda kv: (-kv[1], kv[0]))
    ]

    sales_by_month = [
        MonthlySales(month=month, total=total)
        for month, total in sorted(by_month.items())
    ]

    ranked = sorted(by_product.values(), key=lambda p: (-p["total_sales"], p["name"]))
    top_products = [TopProduct(**entry) for entry in ranked[:max(top_n, 0)]]

    return SalesReport(
        total_sales=total_sales,
        total_orders=total_orders,
        average_order_value=average,
        sales_by_category=sales_by_category,
        sales_by_month=sales_by_month,
        top_products=top_products
    )


class SalesReportService:

    def __init__(self, orders: Optional[OrderRepository] = None):
        self.orders = orders or OrderRepository()

    def get_report(self, filters: SalesReportFilters, top_n: Optional[int] = None) -> SalesReport:
        lines = self.orders.fetch_sales_lines(filters)
        report = build_sales_report(lines, top_n if top_n is not None else settings.SALES_REPORT_TOP_N)

        logger.info(
            f"Sales report ({filters.start_date} .. {filters.end_date}, category={filters.category}): "
            f"{report.total_orders} orders, {report.total_sales} total"
        )
        return report
