import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from club_registry.main import app
from club_registry.settings import settings
from fakes import FakePool


@pytest.fixture(autouse=True)
def force_test_settings():
	"""Dev mode so API tests can authenticate with X-User-Id."""
	original_env = settings.environment
	original_depth = settings.max_fetch_depth
	original_public = settings.obs_metrics_public
	original_token = settings.obs_admin_token
	settings.environment = "dev"
	try:
		yield
	finally:
		settings.environment = original_env
		settings.max_fetch_depth = original_depth
		settings.obs_metrics_public = original_public
		settings.obs_admin_token = original_token


@pytest.fixture
def fake_pool():
	return FakePool()


@pytest_asyncio.fixture
async def api_client(fake_pool):
	app.state.pool = fake_pool
	transport = ASGITransport(app=app)
	try:
		async with AsyncClient(transport=transport, base_url="http://testserver") as client:
			yield client
	finally:
		app.state.pool = None
