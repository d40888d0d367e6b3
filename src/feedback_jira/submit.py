"""Feedback submission to Jira.

Turns a piece of user feedback into a Jira issue: build the issue payload,
create the issue, then attach the screenshot. The two requests are strictly
sequential and never retried; an attachment failure leaves the created issue
in place.
"""

import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from .adf import build_description
from .client import AttachmentUploadError, JiraClient
from .device import get_device_details
from .models import JiraCustomBodyFormat, JiraDetails, UserFeedback

logger = logging.getLogger("feedback_jira.submit")

__all__ = [
    "DEFAULT_SUMMARY",
    "OnFeedbackCallback",
    "build_issue_payload",
    "compute_summary",
    "screenshot_filename",
    "submit_feedback",
    "upload_to_jira",
]

DEFAULT_SUMMARY = "Feedback"

OnSubmit = Callable[[bool], None]
OnFeedbackCallback = Callable[[UserFeedback], Awaitable[str]]


def compute_summary(text: str) -> str:
    """Derive the issue summary from the feedback text.

    The summary is the text up to the first period, trimmed. Text without a
    period is used whole; blank text falls back to "Feedback".

    Example:
        >>> compute_summary("  The button is broken. It does nothing.")
        'The button is broken'
        >>> compute_summary("   ")
        'Feedback'
    """
    if not text.strip():
        return DEFAULT_SUMMARY
    return text.split(".", 1)[0].strip()


def build_issue_payload(
    jira_details: JiraDetails,
    summary: str,
    description: dict[str, Any],
) -> dict[str, Any]:
    """Build the create-issue request body.

    ``parent`` and ``labels`` are only included when set on ``jira_details``.
    """
    fields: dict[str, Any] = {
        "summary": summary,
        "issuetype": {"name": jira_details.issue_type},
        "project": {"key": jira_details.project_key},
        "description": description,
    }
    if jira_details.parent_key is not None:
        fields["parent"] = {"key": jira_details.parent_key}
    if jira_details.labels is not None:
        fields["labels"] = list(jira_details.labels)
    return {"fields": fields}


def screenshot_filename() -> str:
    """Generate an attachment name like ``screenshot-1700000000000.png``."""
    return f"screenshot-{time.time_ns() // 1_000_000}.png"


async def submit_feedback(
    jira_details: JiraDetails,
    feedback: UserFeedback,
    description: dict[str, Any],
    include_screenshot: bool = True,
    client: httpx.AsyncClient | None = None,
    on_submit: OnSubmit | None = None,
) -> str:
    """Create a Jira issue for ``feedback`` and attach its screenshot.

    ``on_submit(True)`` is called before any network work and
    ``on_submit(False)`` once the submission ends, whether it succeeded or
    not. Errors are re-raised unchanged after the notification.

    Args:
        jira_details: Jira site, credentials and issue settings
        feedback: The user's feedback
        description: Rendered ADF description (see :func:`build_description`)
        include_screenshot: Upload ``feedback.screenshot`` when non-empty
        client: Optional httpx.AsyncClient to send requests through
        on_submit: Optional callback notified of the submitting state

    Returns:
        The id of the created issue

    Raises:
        JiraNetworkError: Transport failure on either request
        IssueCreationError: Jira rejected the issue; no attachment is sent
        JiraResponseError: The create-issue response could not be read
        AttachmentUploadError: Jira rejected the attachment; the issue exists
    """
    payload = build_issue_payload(
        jira_details, compute_summary(feedback.text), description
    )

    if on_submit is not None:
        on_submit(True)
    try:
        async with JiraClient(
            jira_details.domain_name,
            jira_details.jira_email,
            jira_details.api_token,
            client=client,
        ) as jira:
            issue_id = await jira.create_issue(payload)

            if include_screenshot and feedback.screenshot:
                try:
                    await jira.upload_attachment(
                        issue_id, feedback.screenshot, screenshot_filename()
                    )
                except AttachmentUploadError:
                    logger.warning(
                        "feedback_attachment_failed",
                        extra={"issue_id": issue_id},
                    )
                    raise

        logger.info(
            "feedback_submitted",
            extra={
                "issue_id": issue_id,
                "project_key": jira_details.project_key,
                "with_screenshot": bool(include_screenshot and feedback.screenshot),
            },
        )
        return issue_id
    finally:
        if on_submit is not None:
            on_submit(False)


def upload_to_jira(
    jira_details: JiraDetails,
    include_device_details: bool = True,
    include_screenshot: bool = True,
    metadata: Mapping[str, Any] | None = None,
    body_format: JiraCustomBodyFormat | str = JiraCustomBodyFormat.PARAGRAPHS,
    client: httpx.AsyncClient | None = None,
    on_submit: OnSubmit | None = None,
    device_details_provider: Callable[[], Mapping[str, Any]] = get_device_details,
) -> OnFeedbackCallback:
    """Create the callback a capture surface invokes when feedback is submitted.

    The returned coroutine function collects device details (when enabled),
    renders the description and submits it.

    Example:
        >>> callback = upload_to_jira(details, metadata={"user": {"id": 42}})
        >>> issue_id = await callback(UserFeedback("Login fails.", screenshot=png))
    """
    body_format = JiraCustomBodyFormat(body_format)

    async def _callback(feedback: UserFeedback) -> str:
        device_details = device_details_provider() if include_device_details else {}
        description = build_description(
            feedback.text,
            device_details=device_details,
            metadata=metadata,
            body_format=body_format,
        )
        return await submit_feedback(
            jira_details,
            feedback,
            description,
            include_screenshot=include_screenshot,
            client=client,
            on_submit=on_submit,
        )

    return _callback
