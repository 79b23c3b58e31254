"""
Main conftest file that imports and re-exports all fixtures from modular files.
This approach improves maintainability by organizing fixtures into logical modules.
"""

import os

from dotenv import load_dotenv

# Explicitly load the test environment variables before importing any app modules
dotenv_path = os.path.join(os.path.dirname(__file__), "..", ".env.test")
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path=dotenv_path, override=True)
else:
    print(f"Warning: .env.test file not found at {dotenv_path}")

import pytest

# Import and re-export fixtures from modular files
from tests.fixtures.client import client, mcp_service, mcp_transport
from tests.fixtures.db import db_session, test_engine


@pytest.fixture
def tenant_id() -> str:
    """Tenant configured in .env.test."""
    return os.environ.get("AGENT_DASHBOARD_SERVICE_TENANT_ID", "test-tenant")
