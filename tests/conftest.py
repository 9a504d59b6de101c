"""Pytest configuration and shared fixtures for all tests."""

import pytest
from typing import Any, Dict, Optional
from unittest.mock import Mock

from vsts.config.config import Config, VstsConfig
from vsts.azure_devops.http_client import HttpClient


INSTANCE_NAME = "Foo"
PROJECT_NAME = "FooProject"
REPOSITORY_NAME = "FooRepo"
API_VERSION = "4.1"


# ===========================
# Configuration Fixtures
# ===========================


@pytest.fixture
def sample_vsts_config():
    """Sample VSTS configuration for testing."""
    return VstsConfig(
        instance_name=INSTANCE_NAME,
        pat_token="test-pat-token",
        api_version=API_VERSION,
        verify_ssl=True,
        timeout=30,
    )


@pytest.fixture
def sample_config(sample_vsts_config):
    """Complete sample configuration for testing."""
    return Config(vsts=sample_vsts_config, log_level="DEBUG")


@pytest.fixture
def temp_config_file(tmp_path, sample_config):
    """Create a temporary config file for testing."""
    import yaml

    config_file = tmp_path / "test_config.yaml"
    config_dict = {
        "vsts": {
            "instance_name": sample_config.vsts.instance_name,
            "pat_token": sample_config.vsts.pat_token,
            "api_version": sample_config.vsts.api_version,
            "timeout": sample_config.vsts.timeout,
        },
        "log_level": sample_config.log_level,
    }

    with open(config_file, "w") as f:
        yaml.dump(config_dict, f)

    return str(config_file)


# ===========================
# Mock HTTP Fixtures
# ===========================


class FakeResponses:
    """
    Canned JSON documents keyed by URL.

    Each value is either a JSON document, None (empty response) or an
    exception instance to raise.
    """

    def __init__(self):
        self.get: Dict[str, Any] = {}
        self.post: Dict[str, Any] = {}

    @staticmethod
    def _answer(table: Dict[str, Any], url: str, parser) -> Optional[Any]:
        if url not in table:
            raise AssertionError(f"Unexpected request: {url}")
        data = table[url]
        if isinstance(data, Exception):
            raise data
        if data is None:
            return None
        return parser(data)


@pytest.fixture
def responses():
    """Canned responses used by ``mock_http_client``."""
    return FakeResponses()


@pytest.fixture
def mock_http_client(responses):
    """Mock HttpClient answering from ``responses`` and parsing like the real one."""
    client = Mock(spec=HttpClient)
    client.execute_get.side_effect = lambda url, parser: FakeResponses._answer(
        responses.get, url, parser
    )
    client.execute_post.side_effect = lambda url, body, parser: FakeResponses._answer(
        responses.post, url, parser
    )
    return client


# ===========================
# Mock API Response Fixtures
# ===========================


def pull_request_json(pr_id: int, creation_date: str = "2018-05-01T10:00:00Z", **extra):
    """Build a pull request document as returned by the service."""
    data = {
        "pullRequestId": pr_id,
        "title": f"PR {pr_id}",
        "description": "",
        "sourceRefName": "refs/heads/feature",
        "targetRefName": "refs/heads/master",
        "status": "active",
        "creationDate": creation_date,
        "createdBy": {
            "id": "user-123",
            "displayName": "John Doe",
            "uniqueName": "john.doe@example.com",
        },
        "repository": {
            "id": "repo-123",
            "name": REPOSITORY_NAME,
            "project": {"id": "proj-123", "name": PROJECT_NAME},
        },
        "reviewers": [],
    }
    data.update(extra)
    return data


@pytest.fixture
def make_pull_request():
    """Factory for pull request documents."""
    return pull_request_json


@pytest.fixture
def mock_pr_response():
    """Mock API response for a single pull request."""
    return pull_request_json(
        123,
        reviewers=[{"id": "rev-1", "displayName": "Jane Roe", "uniqueName": "jane@example.com"}],
        mergeStatus="succeeded",
    )


@pytest.fixture
def mock_thread_response():
    """Mock API response for a pull request comment thread."""
    return {
        "id": 7,
        "status": "active",
        "publishedDate": "2018-05-02T08:30:00.1234567Z",
        "lastUpdatedDate": "2018-05-02T09:00:00Z",
        "threadContext": {
            "filePath": "/src/main.py",
            "rightFileStart": {"line": 12, "offset": 1},
            "rightFileEnd": {"line": 12, "offset": 5},
        },
        "comments": [
            {
                "id": 1,
                "parentCommentId": 0,
                "content": "Please add a test.",
                "commentType": "text",
                "author": {"id": "rev-1", "displayName": "Jane Roe"},
                "publishedDate": "2018-05-02T08:30:00Z",
            }
        ],
        "properties": {},
        "isDeleted": False,
    }


# ===========================
# Test Markers
# ===========================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ===========================
# Environment Setup
# ===========================


@pytest.fixture(autouse=True)
def clean_env_vars(monkeypatch):
    """Clean environment variables before each test."""
    env_vars = [
        "VSTS_INSTANCE",
        "VSTS_ACCESS_TOKEN",
        "VSTS_API_VERSION",
        "VSTS_VERIFY_SSL",
        "VSTS_TIMEOUT",
        "CONFIG_PATH",
        "LOG_LEVEL",
    ]

    for var in env_vars:
        monkeypatch.delenv(var, raising=False)
