"""Pytest fixtures for the freight bridge tests."""

import os
import sys

import pytest

# Ensure project root is on sys.path so `src` imports resolve
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from src.integrations.clients.mocks.ssw import MockSswClient  # noqa: E402
from src.integrations.freight.engine import FreightEngine  # noqa: E402
from src.utils.config_loader import CredentialsConfig, SswConfig  # noqa: E402


@pytest.fixture
def ssw_config():
    """Config with a fallback SSW account so payloads can omit credentials."""
    return SswConfig(
        credentials=CredentialsConfig(
            domain="OST",
            login="cotawa",
            password="s3cret-pass",
            payer_password="1234",
        )
    )


@pytest.fixture
def valid_payload():
    return {
        "payerDocument": "123.456.789-09",
        "originPostalCode": "01310-100",
        "destinationPostalCode": "30140-071",
        "merchandiseValue": 1500,
        "weight": 23,
    }


@pytest.fixture
def mock_client():
    return MockSswClient()


@pytest.fixture
def engine(mock_client, ssw_config):
    return FreightEngine(mock_client, ssw_config)
