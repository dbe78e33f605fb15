"""Shared fixtures for the booru sidebar test suite."""

import pytest
from fastapi.testclient import TestClient

from booru_sidebar.config import Settings
from booru_sidebar.main import app
from booru_sidebar.services.response_normalizer import ResponseNormalizer
from booru_sidebar.services.similarity_service import SimilarityService


@pytest.fixture
def client():
    """HTTP client bound to the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def settings():
    """Settings isolated from the environment and .env files."""
    return Settings(_env_file=None)


@pytest.fixture
def similarity_service(settings):
    return SimilarityService(settings)


@pytest.fixture
def normalizer():
    return ResponseNormalizer()
