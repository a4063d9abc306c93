"""
Sales report models

A report is derived on request from order line items; nothing here is
persisted.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, model_validator

from dental_supply.domain.common import CamelModel, Money


class SalesReportFilters(CamelModel):
    """Date range (inclusive on both ends) and exact category match; None means all"""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category: Optional[str] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self


class SalesLine(CamelModel):
    """One order line item as read for reporting"""
    order_id: int
    order_date: datetime
    product_id: Optional[int] = None
    product_name: str
    category: Optional[str] = None
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class CategorySales(CamelModel):
    category: str
    total: Money
    percentage: float


class MonthlySales(CamelModel):
    month: str = Field(..., description="YYYY-MM")
    total: Money


class TopProduct(CamelModel):
    product_id: Optional[int] = None
    name: str
    total_sales: Money
    quantity: int


class SalesReport(CamelModel):
    total_sales: Money = Decimal("0")
    total_orders: int = 0
    average_order_value: Money = Decimal("0")
    sales_by_category: List[CategorySales] = Field(default_factory=list)
    sales_by_month: List[MonthlySales] = Field(default_factory=list)
    top_products: List[TopProduct] = Field(default_factory=list)
