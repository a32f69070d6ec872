"""Shared fixtures for object store tests."""

from unittest.mock import MagicMock

import pytest

from objectstore import Endpoint, ObjectStoreClient

from .utils import FakeS3


@pytest.fixture
def fake_s3():
    return FakeS3()


@pytest.fixture
def mock_s3():
    """Bare MagicMock boto3 client."""
    return MagicMock()


@pytest.fixture
def store(mock_s3):
    """Client for test-bucket backed by a MagicMock boto3 client."""
    return ObjectStoreClient("test-bucket", mock_s3, Endpoint.http("http://localhost:9000"))


@pytest.fixture
def fake_store(fake_s3):
    """Client for test-bucket backed by the in-memory FakeS3."""
    return ObjectStoreClient("test-bucket", fake_s3, Endpoint.http("http://localhost:9000"))
