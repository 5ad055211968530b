"""
Authorization tests.

Verifies:
- Unauthenticated requests to protected endpoints return 401
- Customers are denied back-office operations (403)
- Admins run the back office but cannot manage roles (owner only)
- Storefront reads stay public
"""

import pytest


# =============================================================================
# UNAUTHENTICATED ACCESS (401)
# =============================================================================


class TestUnauthenticatedAccess:
    """All protected endpoints return 401 without a token."""

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/auth/me"),
            ("POST", "/api/auth/request-admin"),
            ("GET", "/api/products/all"),
            ("POST", "/api/products"),
            ("PUT", "/api/products/1"),
            ("DELETE", "/api/products/1"),
            ("POST", "/api/payments"),
            ("GET", "/api/payments"),
            ("POST", "/api/payments/1/upload-proof"),
            ("GET", "/api/admin/payments/pending"),
            ("GET", "/api/admin/payments/history"),
            ("PUT", "/api/admin/payments/1/approve"),
            ("PUT", "/api/admin/payments/1/reject"),
            ("GET", "/api/admin/requests"),
            ("PUT", "/api/admin/requests/1/approve"),
            ("PUT", "/api/admin/requests/1/reject"),
            ("GET", "/api/admin/users"),
            ("PUT", "/api/admin/users/1/role"),
            ("PUT", "/api/admin/users/1/active"),
            ("GET", "/api/admin/logs"),
            ("GET", "/api/settings"),
            ("POST", "/api/settings"),
            ("POST", "/api/warnings"),
            ("PUT", "/api/warnings/1"),
        ],
    )
    def test_requires_auth(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"


# =============================================================================
# CUSTOMER DENIED BACK OFFICE (403)
# =============================================================================


class TestCustomerDenied:
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/products/all"),
            ("POST", "/api/products"),
            ("GET", "/api/admin/payments/pending"),
            ("GET", "/api/admin/payments/history"),
            ("PUT", "/api/admin/payments/1/approve"),
            ("PUT", "/api/admin/payments/1/reject"),
            ("GET", "/api/admin/requests"),
            ("GET", "/api/admin/users"),
            ("PUT", "/api/admin/users/1/role"),
            ("PUT", "/api/admin/users/1/active"),
            ("GET", "/api/admin/logs"),
            ("GET", "/api/settings"),
            ("POST", "/api/settings"),
            ("POST", "/api/warnings"),
        ],
    )
    def test_customer_forbidden(self, client, customer_headers, method, path):
        resp = getattr(client, method.lower())(path, json={}, headers=customer_headers)
        assert resp.status_code == 403, f"{method} {path} returned {resp.status_code}"
        assert resp.json["error"] == "Permission denied"


# =============================================================================
# ADMIN VS OWNER
# =============================================================================


class TestAdminLimits:
    @pytest.mark.parametrize("path", ["/api/admin/users/1/role", "/api/admin/users/1/active"])
    def test_admin_cannot_manage_accounts(self, client, admin_headers, path):
        resp = client.put(path, json={}, headers=admin_headers)
        assert resp.status_code == 403

    def test_admin_reads_back_office(self, client, admin_headers):
        for path in ("/api/admin/users", "/api/admin/logs", "/api/admin/requests", "/api/settings"):
            assert client.get(path, headers=admin_headers).status_code == 200, path


class TestPublicEndpoints:
    @pytest.mark.parametrize(
        "path",
        ["/api/products", "/api/warnings", "/api/settings/pixKey", "/api/health"],
    )
    def test_public_reads(self, client, db_session, path):
        assert client.get(path).status_code == 200
