# Back-office Live-Server Tests - Shared Configuration and Fixtures
#
# This module provides:
# - Test server provisioning (ephemeral SQLite + file stores per run)
# - Default accounts seeded through `flask system init`
# - Authentication helpers
# - Failure message formatting

import os
import sys
import time
import tempfile
import subprocess
import shutil
from pathlib import Path
from typing import Generator, Optional, Dict, Any
from dataclasses import dataclass

import pytest
import httpx

REPO_ROOT = Path(__file__).parent.parent
BACKEND_DIR = REPO_ROOT / "backend"


# Accounts created by `flask system init` (see backend/backoffice/cli.py)
ADMIN = ("admin@store.com", "admin123")
SUPERVISOR = ("supervisor@store.com", "super123")
STAFF = ("staff@store.com", "staff123")


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class TestConfig:
    """Test configuration with environment variable overrides."""
    backend_base_url: str = os.environ.get("TEST_BACKEND_URL", "http://127.0.0.1:5001")
    request_timeout: float = float(os.environ.get("TEST_REQUEST_TIMEOUT", "30"))
    server_startup_timeout: float = float(os.environ.get("TEST_SERVER_STARTUP_TIMEOUT", "30"))

    @property
    def port(self) -> str:
        return self.backend_base_url.rsplit(":", 1)[-1].strip("/")


# =============================================================================
# FAILURE MESSAGE HELPER
# =============================================================================

class TestFailure(Exception):
    """
    Failure with a human-readable breakdown:
    scenario, expected, actual, likely cause and where to look.
    """

    def __init__(
        self,
        scenario: str,
        expected: str,
        actual: str,
        likely_cause: str,
        code_location: str,
        response: Optional[httpx.Response] = None,
        extra_context: Optional[Dict[str, Any]] = None
    ):
        self.scenario = scenario
        self.expected = expected
        self.actual = actual
        self.likely_cause = likely_cause
        self.code_location = code_location
        self.response = response
        self.extra_context = extra_context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [
            "",
            "=" * 80,
            "TEST FAILURE DETAILS",
            "=" * 80,
            f"SCENARIO: {self.scenario}",
            "-" * 80,
            f"EXPECTED: {self.expected}",
            f"ACTUAL: {self.actual}",
            "-" * 80,
            f"LIKELY CAUSE: {self.likely_cause}",
            f"CODE LOCATION: {self.code_location}",
        ]

        if self.response is not None:
            lines.extend([
                "-" * 80,
                f"HTTP STATUS: {self.response.status_code}",
                f"RESPONSE BODY: {self.response.text[:1000]}",
            ])

        if self.extra_context:
            lines.append("-" * 80)
            lines.append("EXTRA CONTEXT:")
            for key, value in self.extra_context.items():
                lines.append(f"  {key}: {value}")

        lines.append("=" * 80)
        return "\n".join(lines)


def assert_response(
    response: httpx.Response,
    expected_status: int,
    scenario: str,
    code_location: str,
    expected_body_contains: Optional[str] = None
):
    """Raise TestFailure unless the response has the expected status (and body text)."""
    if response.status_code != expected_status:
        raise TestFailure(
            scenario=scenario,
            expected=f"HTTP {expected_status}",
            actual=f"HTTP {response.status_code}",
            likely_cause=_infer_cause(response),
            code_location=code_location,
            response=response
        )

    if expected_body_contains and expected_body_contains not in response.text:
        raise TestFailure(
            scenario=scenario,
            expected=f"Response body contains: {expected_body_contains}",
            actual=f"Response body: {response.text[:500]}",
            likely_cause="Response format changed or wrong endpoint hit",
            code_location=code_location,
            response=response
        )


def _infer_cause(response: httpx.Response) -> str:
    if response.status_code == 401:
        return "Authentication failed - token invalid/missing or session expired"
    elif response.status_code == 403:
        return "Permission denied - role not allowed for this endpoint"
    elif response.status_code == 404:
        return "Resource not found - wrong id or already deleted"
    elif response.status_code == 400:
        return "Invalid request - missing required field, validation failed or duplicate"
    elif response.status_code == 405:
        return "Method not allowed on this resource"
    elif response.status_code == 500:
        return "Server error - check backend logs for stack trace"
    else:
        return f"Unexpected status code {response.status_code}"


# =============================================================================
# HTTP CLIENT WITH AUTH HELPERS
# =============================================================================

class APIClient:
    """HTTP client wrapper holding the bearer token of the signed-in user."""

    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(timeout=timeout)
        self.token: Optional[str] = None
        self.current_user: Optional[Dict] = None

    def _headers(self) -> Dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> httpx.Response:
        return self.client.get(f"{self.base_url}{path}", headers=self._headers(), params=params, **kwargs)

    def post(self, path: str, json: Optional[Dict] = None, **kwargs) -> httpx.Response:
        return self.client.post(f"{self.base_url}{path}", headers=self._headers(), json=json, **kwargs)

    def put(self, path: str, json: Optional[Dict] = None, **kwargs) -> httpx.Response:
        return self.client.put(f"{self.base_url}{path}", headers=self._headers(), json=json, **kwargs)

    def delete(self, path: str, params: Optional[Dict] = None, **kwargs) -> httpx.Response:
        return self.client.delete(f"{self.base_url}{path}", headers=self._headers(), params=params, **kwargs)

    def login(self, email: str, password: str) -> bool:
        """Authenticate and store token."""
        response = self.post("/api/auth/login", json={"email": email, "password": password})
        if response.status_code == 200:
            data = response.json()
            self.token = data.get("token")
            self.current_user = data.get("user")
            return True
        return False

    def logout(self) -> bool:
        if not self.token:
            return True
        response = self.post("/api/auth/logout")
        if response.status_code == 200:
            self.token = None
            self.current_user = None
            return True
        return False

    def close(self):
        self.client.close()


# =============================================================================
# SERVER MANAGEMENT
# =============================================================================

class ServerManager:
    """Manages the Flask backend process for tests."""

    def __init__(self, config: TestConfig):
        self.config = config
        self.process: Optional[subprocess.Popen] = None
        self.work_dir: Optional[Path] = None

    def _env(self) -> Dict[str, str]:
        env = os.environ.copy()
        env["DATABASE_URL"] = f"sqlite:///{self.work_dir / 'test_backoffice.sqlite3'}"
        env["AVATAR_UPLOAD_DIR"] = str(self.work_dir / "avatars")
        env["USER_PROFILES_FILE"] = str(self.work_dir / "user-profiles.json")
        env["BCRYPT_LOG_ROUNDS"] = "4"
        env["FLASK_APP"] = "wsgi.py"
        return env

    def start(self) -> bool:
        """Create and seed a throwaway database, then start `flask run`."""
        self.work_dir = Path(tempfile.mkdtemp(prefix="backoffice_test_"))
        env = self._env()

        subprocess.run(
            [sys.executable, "-m", "flask", "system", "init"],
            cwd=str(BACKEND_DIR),
            env=env,
            check=True,
            capture_output=True,
        )

        self.process = subprocess.Popen(
            [sys.executable, "-m", "flask", "run", "--port", self.config.port],
            cwd=str(BACKEND_DIR),
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        return self._wait_for_server()

    def _wait_for_server(self) -> bool:
        start_time = time.time()
        while time.time() - start_time < self.config.server_startup_timeout:
            try:
                response = httpx.get(f"{self.config.backend_base_url}/api/health", timeout=2.0)
                if response.status_code in (200, 503):  # 503 means degraded but running
                    return True
            except (httpx.ConnectError, httpx.TimeoutException):
                pass
            time.sleep(0.5)
        return False

    def stop(self):
        if self.process:
            self.process.terminate()
            try:
                self.process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self.process.kill()
            self.process = None

        if self.work_dir and self.work_dir.exists():
            shutil.rmtree(self.work_dir, ignore_errors=True)


# =============================================================================
# PYTEST FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def test_config() -> TestConfig:
    return TestConfig()


@pytest.fixture(scope="session")
def server_manager(test_config: TestConfig) -> Generator[ServerManager, None, None]:
    """
    Server is started once per test session.
    Set TEST_EXTERNAL_SERVER to run against an already running, seeded backend.
    """
    manager = ServerManager(test_config)

    if os.environ.get("TEST_EXTERNAL_SERVER"):
        yield manager
    else:
        if not manager.start():
            manager.stop()
            pytest.fail("Failed to start test server")
        yield manager
        manager.stop()


@pytest.fixture(scope="session")
def api_client(test_config: TestConfig, server_manager: ServerManager) -> Generator[APIClient, None, None]:
    client = APIClient(test_config.backend_base_url, timeout=test_config.request_timeout)
    yield client
    client.close()


@pytest.fixture
def client(api_client: APIClient) -> APIClient:
    """API client with any previous auth state cleared."""
    api_client.token = None
    api_client.current_user = None
    return api_client


@pytest.fixture
def admin_client(client: APIClient) -> APIClient:
    if not client.login(*ADMIN):
        pytest.fail("Failed to login as admin")
    return client


@pytest.fixture
def supervisor_client(client: APIClient) -> APIClient:
    if not client.login(*SUPERVISOR):
        pytest.fail("Failed to login as supervisor")
    return client


@pytest.fixture
def staff_client(client: APIClient) -> APIClient:
    if not client.login(*STAFF):
        pytest.fail("Failed to login as staff")
    return client


# =============================================================================
# TEST MARKERS
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "smoke: Quick smoke tests for critical paths")
    config.addinivalue_line("markers", "auth: Authentication tests")
    config.addinivalue_line("markers", "rbac: Role-based access control tests")
    config.addinivalue_line("markers", "catalog: Product and category tests")
    config.addinivalue_line("markers", "accounting: Invoice, expense and audit trail tests")
