"""
Service Layer - Business Logic

Services coordinate repositories and enforce the rules that span more than
one table (stock vs. orders, credentials vs. tokens).
"""
from dental_supply.services.auth_service import AuthService
from dental_supply.services.order_service import OrderService
from dental_supply.services.sales_report_service import SalesReportService, build_sales_report

__all__ = [
    'AuthService',
    'OrderService',
    'SalesReportService',
    'build_sales_report',
]
