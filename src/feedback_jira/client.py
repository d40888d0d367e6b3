"""Jira Cloud REST API client for filing feedback.

Provides an async httpx-based client for Jira Cloud API v3 with Basic Auth.
Covers the two calls a feedback submission needs: creating an issue and
attaching a file to it.

Reference: https://developer.atlassian.com/cloud/jira/platform/rest/v3/intro/
"""

import base64
import logging
from typing import Any

import httpx

logger = logging.getLogger("feedback_jira.client")

__all__ = [
    "AttachmentUploadError",
    "IssueCreationError",
    "JiraClient",
    "JiraClientError",
    "JiraNetworkError",
    "JiraResponseError",
    "basic_auth_header",
]


class JiraClientError(Exception):
    """Base class for errors raised while talking to Jira."""

    pass


class JiraNetworkError(JiraClientError):
    """Raised when a request fails at the transport level (connect, timeout, ...).

    The underlying httpx error is available as ``__cause__``.
    """

    pass


class JiraResponseError(JiraClientError):
    """Raised when a successful create-issue response cannot be deserialized."""

    pass


class IssueCreationError(JiraClientError):
    """Raised when Jira rejects the create-issue request.

    Attributes:
        status_code: HTTP status returned by Jira
        body: Raw response body, kept for diagnostics
    """

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Jira issue creation failed with status {status_code}")


class AttachmentUploadError(JiraClientError):
    """Raised when Jira rejects the attachment upload.

    The issue itself has already been created at this point and is not
    rolled back; ``issue_id`` identifies it.

    Attributes:
        status_code: HTTP status returned by Jira
        reason: HTTP reason phrase
        issue_id: Id of the issue the attachment was meant for
    """

    def __init__(self, status_code: int, reason: str = "", issue_id: str | None = None) -> None:
        self.status_code = status_code
        self.reason = reason
        self.issue_id = issue_id
        super().__init__(f"Failed to upload attachment: {status_code} {reason}".rstrip())


def basic_auth_header(email: str, api_token: str) -> str:
    """Build a Basic Auth header value: ``Basic base64(email:api_token)``."""
    credentials = f"{email}:{api_token}"
    encoded = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def _is_success(status_code: int) -> bool:
    # Jira answers 201 on create; redirects are not followed and count as success
    return 200 <= status_code < 400


class JiraClient:
    """Jira Cloud REST API client using httpx with Basic Auth.

    An ``httpx.AsyncClient`` may be injected (for tests or to share a
    connection pool); an injected client is left open on :meth:`close`.

    Attributes:
        base_url: Jira site URL (e.g., https://company.atlassian.net)
        auth_header: Basic Auth header (base64 encoded email:api_token)

    Example:
        >>> async with JiraClient("company", "user@example.com", "token") as client:
        ...     issue_id = await client.create_issue({"fields": {...}})
        ...     await client.upload_attachment(issue_id, png_bytes, "screenshot.png")
    """

    def __init__(
        self,
        domain_name: str,
        email: str,
        api_token: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        """Initialize Jira client with authentication.

        Args:
            domain_name: Atlassian site name ('company' for company.atlassian.net)
            email: Jira account email for Basic Auth
            api_token: Jira API token for authentication
            client: Optional pre-built httpx.AsyncClient
            timeout: Read timeout in seconds for the default client
        """
        self.base_url = f"https://{domain_name}.atlassian.net"
        self.auth_header = basic_auth_header(email, api_token)

        self._owns_client = client is None
        if client is None:
            timeout_config = httpx.Timeout(
                connect=5.0,
                read=timeout,
                write=timeout,  # Screenshot uploads can be large
                pool=5.0,
            )
            client = httpx.AsyncClient(timeout=timeout_config)
        self.client = client

    async def create_issue(self, payload: dict[str, Any]) -> str:
        """Create an issue and return its id.

        Sends POST request to /rest/api/3/issue.

        Args:
            payload: Issue body, ``{"fields": {...}}``

        Returns:
            The id of the created issue (e.g. '10001')

        Raises:
            JiraNetworkError: If the request fails at the transport level
            IssueCreationError: If Jira answers outside the 2xx-3xx range
            JiraResponseError: If the response is not JSON or has no string ``id``
        """
        url = f"{self.base_url}/rest/api/3/issue"
        try:
            response = await self.client.post(
                url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "Authorization": self.auth_header,
                },
            )
        except httpx.TimeoutException as e:
            logger.error("jira_create_issue_timeout", extra={"error": str(e)})
            raise JiraNetworkError("JIRA_CREATE_ISSUE_TIMEOUT") from e
        except httpx.HTTPError as e:
            logger.error("jira_create_issue_error", extra={"error": str(e)})
            raise JiraNetworkError(f"JIRA_CREATE_ISSUE_ERROR: {e}") from e

        status_code = response.status_code
        logger.debug("jira_create_issue_response", extra={"status_code": status_code})

        if not _is_success(status_code):
            body = response.text
            logger.debug(
                "jira_create_issue_error_body",
                extra={"status_code": status_code, "body": body},
            )
            raise IssueCreationError(status_code, body)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                "jira_create_issue_invalid_json",
                extra={"status_code": status_code, "error": str(e)},
            )
            raise JiraResponseError(f"JIRA_CREATE_ISSUE_INVALID_JSON: {e}") from e

        issue_id = data.get("id") if isinstance(data, dict) else None
        if not isinstance(issue_id, str):
            raise JiraResponseError(f"JIRA_CREATE_ISSUE_MISSING_ID: {data!r}")

        logger.info(
            "jira_issue_created",
            extra={"issue_id": issue_id, "issue_key": data.get("key")},
        )
        return issue_id

    async def upload_attachment(
        self,
        issue_id: str,
        data: bytes,
        filename: str,
        content_type: str = "image/png",
    ) -> str:
        """Attach a file to an existing issue.

        Sends multipart POST request to /rest/api/3/issue/{id}/attachments
        with a single ``file`` field. Jira requires the
        ``X-Atlassian-Token: no-check`` header to bypass XSRF checks.

        Args:
            issue_id: Id (or key) of the issue to attach to
            data: File content
            filename: File name shown in Jira
            content_type: MIME type of the file

        Returns:
            Response body on success

        Raises:
            JiraNetworkError: If the request fails at the transport level
            AttachmentUploadError: If Jira answers outside the 2xx-3xx range
        """
        url = f"{self.base_url}/rest/api/3/issue/{issue_id}/attachments"
        logger.debug(
            "jira_attachment_request",
            extra={"issue_id": issue_id, "attachment_name": filename, "size_bytes": len(data)},
        )
        try:
            response = await self.client.post(
                url,
                files={"file": (filename, data, content_type)},
                headers={
                    "Authorization": self.auth_header,
                    "X-Atlassian-Token": "no-check",
                },
            )
        except httpx.TimeoutException as e:
            logger.error(
                "jira_attachment_timeout",
                extra={"issue_id": issue_id, "error": str(e)},
            )
            raise JiraNetworkError("JIRA_ATTACHMENT_TIMEOUT") from e
        except httpx.HTTPError as e:
            logger.error(
                "jira_attachment_error",
                extra={"issue_id": issue_id, "error": str(e)},
            )
            raise JiraNetworkError(f"JIRA_ATTACHMENT_ERROR: {e}") from e

        logger.debug(
            "jira_attachment_response",
            extra={
                "issue_id": issue_id,
                "status_code": response.status_code,
                "reason": response.reason_phrase,
            },
        )

        if not _is_success(response.status_code):
            raise AttachmentUploadError(
                response.status_code, response.reason_phrase, issue_id=issue_id
            )

        logger.info(
            "jira_attachment_uploaded",
            extra={"issue_id": issue_id, "attachment_name": filename},
        )
        return response.text

    async def close(self) -> None:
        """Close the HTTP client connection if this instance created it."""
        if self._owns_client and self.client is not None:
            await self.client.aclose()

    async def __aenter__(self) -> "JiraClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
