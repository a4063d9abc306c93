"""
API tests for /api/admin
"""
from datetime import date
from unittest.mock import patch

from conftest import make_user
from dental_supply.domain.report import SalesReport
from dental_supply.domain.user import UserRole


class TestSalesReport:

    def test_requires_admin(self, client, user_headers):
        response = client.get("/api/admin/sales-report", headers=user_headers)

        assert response.status_code == 403

    @patch('dental_supply.api.admin.SalesReportService')
    def test_passes_filters(self, MockService, client, admin_headers):
        MockService.return_value.get_report.return_value = SalesReport()

        response = client.get(
            "/api/admin/sales-report",
            params={"startDate": "2024-01-01", "endDate": "2024-01-31", "category": "Hygiene", "top": 3},
            headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["averageOrderValue"] == 0

        filters = MockService.return_value.get_report.call_args.args[0]
        assert filters.start_date == date(2024, 1, 1)
        assert filters.end_date == date(2024, 1, 31)
        assert filters.category == "Hygiene"
        assert MockService.return_value.get_report.call_args.kwargs["top_n"] == 3

    @patch('dental_supply.api.admin.SalesReportService')
    def test_inverted_range_rejected(self, MockService, client, admin_headers):
        response = client.get(
            "/api/admin/sales-report",
            params={"startDate": "2024-02-01", "endDate": "2024-01-01"},
            headers=admin_headers
        )

        assert response.status_code == 400
        MockService.return_value.get_report.assert_not_called()

    def test_bad_date_format(self, client, admin_headers):
        response = client.get("/api/admin/sales-report", params={"startDate": "yesterday"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "startDate"


class TestUsers:

    @patch('dental_supply.api.admin.UserRepository')
    def test_cannot_demote_self(self, MockRepo, client, admin, admin_headers):
        response = client.patch(f"/api/admin/users/{admin.id}", json={"role": "user"}, headers=admin_headers)

        assert response.status_code == 400
        MockRepo.return_value.update_role.assert_not_called()

    @patch('dental_supply.api.admin.UserRepository')
    def test_cannot_delete_self(self, MockRepo, client, admin, admin_headers):
        response = client.delete(f"/api/admin/users/{admin.id}", headers=admin_headers)

        assert response.status_code == 400
        MockRepo.return_value.delete.assert_not_called()

    @patch('dental_supply.api.admin.UserRepository')
    def test_promote_other_user(self, MockRepo, client, admin_headers):
        MockRepo.return_value.update_role.return_value = make_user(1, UserRole.ADMIN)

        response = client.patch("/api/admin/users/1", json={"role": "admin"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["role"] == "admin"
        MockRepo.return_value.update_role.assert_called_once_with(1, UserRole.ADMIN)

    @patch('dental_supply.api.admin.UserRepository')
    def test_delete_missing_user(self, MockRepo, client, admin_headers):
        MockRepo.return_value.delete.return_value = False

        response = client.delete("/api/admin/users/55", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"message": "User not found"}


class TestAdminOrders:

    @patch('dental_supply.api.admin.OrderRepository')
    def test_envelope_and_status_filter(self, MockRepo, client, admin_headers):
        MockRepo.return_value.find_all.return_value = ([], 0)

        response = client.get("/api/admin/orders", params={"status": "shipped"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"status": "success", "total": 0, "limit": 50, "offset": 0, "count": 0, "data": []}
        assert MockRepo.return_value.find_all.call_args.kwargs["status"].value == "shipped"
