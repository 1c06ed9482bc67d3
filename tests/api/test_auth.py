# Back-office API Tests - Authentication & Authorization
#
# Tests for:
# - Login/logout flows
# - Session validation
# - Role-based access control (401 vs 403)
# - Route guard answers for the front-end

import pytest

from tests.conftest import ADMIN, APIClient, TestFailure, assert_response


class TestLogin:
    """Login endpoint tests."""

    @pytest.mark.smoke
    @pytest.mark.auth
    def test_login_valid_credentials(self, client: APIClient):
        """
        SCENARIO: User provides correct email and password
        EXPECTED: HTTP 200 with token and user info, no password
        """
        response = client.post("/api/auth/login", json={"email": ADMIN[0], "password": ADMIN[1]})

        assert_response(
            response, 200,
            scenario="Login with valid credentials",
            code_location="backend/backoffice/routes/auth.py:login_route"
        )

        data = response.json()
        for key in ("token", "user", "session"):
            if key not in data:
                raise TestFailure(
                    scenario=f"Login response should contain {key}",
                    expected=f"Response has '{key}' field",
                    actual=f"Response keys: {list(data.keys())}",
                    likely_cause="Response format changed in login_route",
                    code_location="backend/backoffice/routes/auth.py:login_route",
                    response=response
                )

        assert data["user"]["email"] == ADMIN[0]
        assert data["user"]["role"] == "admin"
        assert "password_hash" not in data["user"]

    @pytest.mark.smoke
    @pytest.mark.auth
    def test_login_invalid_password(self, client: APIClient):
        response = client.post("/api/auth/login", json={"email": ADMIN[0], "password": "WrongPassword123!"})

        assert_response(
            response, 401,
            scenario="Login with wrong password",
            code_location="backend/backoffice/routes/auth.py:login_route",
            expected_body_contains="Invalid email or password"
        )

    @pytest.mark.auth
    def test_login_unknown_email(self, client: APIClient):
        """Unknown email answers exactly like a wrong password."""
        response = client.post("/api/auth/login", json={"email": "nobody@store.com", "password": "whatever1"})

        assert_response(
            response, 401,
            scenario="Login with unknown email",
            code_location="backend/backoffice/services/auth_service.py:authenticate",
            expected_body_contains="Invalid email or password"
        )


class TestSession:

    @pytest.mark.smoke
    @pytest.mark.auth
    def test_logout_invalidates_token(self, staff_client: APIClient):
        assert_response(
            staff_client.get("/api/auth/me"), 200,
            scenario="Fresh token is accepted",
            code_location="backend/backoffice/decorators.py:require_auth"
        )

        token = staff_client.token
        assert staff_client.logout()

        staff_client.token = token
        assert_response(
            staff_client.get("/api/auth/me"), 401,
            scenario="Token is rejected after logout",
            code_location="backend/backoffice/services/session_service.py:revoke_session"
        )


class TestRoleAccess:

    @pytest.mark.rbac
    @pytest.mark.parametrize("path", ["/api/products", "/api/users", "/api/expenses", "/api/transactions"])
    def test_unauthenticated_gets_401(self, client: APIClient, path):
        assert_response(
            client.get(path), 401,
            scenario=f"GET {path} without a token",
            code_location="backend/backoffice/decorators.py:require_auth"
        )

    @pytest.mark.rbac
    @pytest.mark.parametrize("path", ["/api/users", "/api/expenses", "/api/transactions"])
    def test_staff_gets_403(self, staff_client: APIClient, path):
        assert_response(
            staff_client.get(path), 403,
            scenario=f"Staff GET {path}",
            code_location="backend/backoffice/decorators.py:require_role"
        )

    @pytest.mark.rbac
    def test_supervisor_reads_accounting_not_users(self, supervisor_client: APIClient):
        assert_response(
            supervisor_client.get("/api/expenses"), 200,
            scenario="Supervisor lists expenses",
            code_location="backend/backoffice/routes/expenses.py:list_expenses"
        )
        assert_response(
            supervisor_client.get("/api/users"), 403,
            scenario="Supervisor lists users",
            code_location="backend/backoffice/routes/users.py:list_users"
        )

    @pytest.mark.rbac
    def test_route_guard(self, staff_client: APIClient):
        response = staff_client.get("/api/auth/access", params={"path": "/dashboard"})
        assert_response(
            response, 200,
            scenario="Route guard for staff on /dashboard",
            code_location="backend/backoffice/access.py:evaluate_route_access"
        )
        assert response.json() == {"decision": "redirect", "redirectTo": "/products"}
