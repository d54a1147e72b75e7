from __future__ import annotations

import os

import pytest

from objstore.common.config import Settings, get_settings
from objstore.services import object_service
from tests.services.mock_storage import MockStorageClient

# Keep the suite independent of a developer's S3 environment
for _name in (
    "S3_ENDPOINT_URL",
    "S3_REGION",
    "S3_ACCESS_KEY_ID",
    "S3_SECRET_ACCESS_KEY",
    "S3_USE_SSL",
    "S3_ADDRESSING_STYLE",
    "S3_CONTENT_TYPE",
    "S3_LIST_MAX_KEYS",
    "ENABLE_METRICS",
):
    os.environ.pop(_name, None)
get_settings.cache_clear()  # type: ignore[attr-defined]

# Small parts keep multipart tests fast; 1 KiB stands in for 5 MiB.
TEST_PART_SIZE = 1024


@pytest.fixture(autouse=True)
def small_part_size(monkeypatch):
    monkeypatch.setattr(object_service, "DEFAULT_PART_SIZE", TEST_PART_SIZE)
    yield TEST_PART_SIZE


@pytest.fixture()
def settings():
    return Settings(
        S3_ENDPOINT_URL="http://localhost:9000",
        S3_ACCESS_KEY_ID="test-key",
        S3_SECRET_ACCESS_KEY="test-secret",
        S3_USE_SSL=False,
    )


@pytest.fixture()
def mock_storage():
    return MockStorageClient()
