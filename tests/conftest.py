import json
import re

import pytest
import requests

from portfolio_generator.models import GeneratorConfig
from portfolio_generator.services.github_service import GitHubService


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; routes each GET through a handler."""

    def __init__(self, handler):
        self.handler = handler
        self.calls = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers or {}, "timeout": timeout})
        result = self.handler(url, headers or {})
        if isinstance(result, Exception):
            raise result
        return result

    def close(self):
        self.closed = True


def page_number(url):
    match = re.search(r"[?&]page=(\d+)", url)
    return int(match.group(1)) if match else 1


@pytest.fixture
def make_repo():
    def _make_repo(name="demo", owner="octocat", **overrides):
        repo = {
            "name": name,
            "full_name": f"{owner}/{name}",
            "html_url": f"https://github.com/{owner}/{name}",
            "description": f"{name} description",
            "topics": ["python", "cli"],
            "stargazers_count": 1,
            "forks_count": 0,
            "updated_at": "2024-03-01T10:00:00Z",
            "created_at": "2023-01-01T10:00:00Z",
            "language": "Python",
            "license": {"spdx_id": "MIT", "name": "MIT License"},
            "size": 120,
            "open_issues_count": 2,
            "default_branch": "main",
        }
        repo.update(overrides)
        return repo

    return _make_repo


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def make_service():
    def _make_service(handler, username="octocat", token="", **kwargs):
        session = FakeSession(handler)
        config = GeneratorConfig(github_username=username, github_token=token)
        return GitHubService(config, session=session, verbose=False, **kwargs), session

    return _make_service


@pytest.fixture
def connection_error():
    return requests.ConnectionError("network down")


@pytest.fixture
def get_page_number():
    return page_number
