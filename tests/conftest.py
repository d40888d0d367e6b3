"""Shared pytest fixtures for feedback-jira tests.

Fixture Organization:
    - Jira fixtures: connection details and sample feedback
    - Transport fixtures: a recording httpx.MockTransport standing in for Jira Cloud
    - Config fixtures: reset the configuration singleton between tests
"""

import json
from collections.abc import Callable

import httpx
import pytest

from feedback_jira.config import reset_config
from feedback_jira.models import JiraDetails, UserFeedback

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served, in order.

    ``routes`` maps a URL path suffix to either an ``httpx.Response`` or a
    callable ``(request) -> httpx.Response``; the first matching suffix wins.
    Unmatched requests answer 404.
    """

    def __init__(self, routes: dict[str, httpx.Response | Callable] | None = None):
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for suffix, route in self.routes.items():
            if request.url.path.endswith(suffix):
                if callable(route):
                    return route(request)
                # Fresh response per request so a route can be served twice
                return httpx.Response(
                    route.status_code, headers=route.headers, content=route.content
                )
        return httpx.Response(404, json={"errorMessages": ["not found"]})

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def json_body(self, index: int = 0) -> dict:
        """Decode the body of the ``index``-th recorded request as JSON."""
        return json.loads(self.requests[index].content)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Reset the config singleton and strip Jira env vars between tests."""
    for key in (
        "JIRA_DOMAIN_NAME",
        "JIRA_EMAIL",
        "JIRA_API_TOKEN",
        "JIRA_PROJECT_KEY",
        "JIRA_ISSUE_TYPE",
        "JIRA_PARENT_KEY",
        "JIRA_LABELS",
        "INCLUDE_DEVICE_DETAILS",
        "INCLUDE_SCREENSHOT",
        "CUSTOM_BODY_FORMAT",
        "HTTP_TIMEOUT_SECONDS",
        "FEEDBACK_JIRA_LOG_LEVEL",
        "FEEDBACK_JIRA_LOG_FORMAT",
    ):
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def jira_details() -> JiraDetails:
    """Jira details for a test site."""
    return JiraDetails(
        domain_name="test",
        jira_email="user@example.com",
        api_token="secret-token",
        project_key="FB",
    )


@pytest.fixture
def feedback() -> UserFeedback:
    """Feedback with text and a screenshot."""
    return UserFeedback(text="Save button is greyed out. Tried twice.", screenshot=PNG_BYTES)


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory for transports with custom routes."""
    return RecordingTransport


@pytest.fixture
def jira_transport() -> RecordingTransport:
    """Transport answering like a healthy Jira Cloud site."""
    return RecordingTransport(
        {
            "/rest/api/3/issue": httpx.Response(
                201,
                json={
                    "id": "10001",
                    "key": "FB-1",
                    "self": "https://test.atlassian.net/rest/api/3/issue/10001",
                },
            ),
            "/attachments": httpx.Response(
                200, json=[{"id": "20001", "filename": "screenshot.png"}]
            ),
        }
    )
