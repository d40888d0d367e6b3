"""feedback-jira - File user feedback as Jira Cloud issues.

Provides:
- ADF (Atlassian Document Format) rendering of feedback, device details and
  arbitrary custom data
- Jira Cloud REST client for issue creation and attachment upload
- Feedback submission with submitting-state notifications
- Configuration management with environment overrides

Python Version: 3.10+ required
"""

# Logging Configuration - configure before other imports
from .logging_config import StructuredFormatter, configure_logging

# Initialize structured logging on module import
configure_logging()

from .__version__ import __version__
from .adf import build_description
from .client import (
    AttachmentUploadError,
    IssueCreationError,
    JiraClient,
    JiraClientError,
    JiraNetworkError,
    JiraResponseError,
)
from .config import FeedbackJiraConfig, get_config, reset_config
from .device import get_device_details
from .models import JiraCustomBodyFormat, JiraDetails, UserFeedback
from .preview import adf_to_text
from .submit import (
    build_issue_payload,
    compute_summary,
    submit_feedback,
    upload_to_jira,
)

__all__ = [
    "__version__",
    # Models
    "JiraCustomBodyFormat",
    "JiraDetails",
    "UserFeedback",
    # Document builder
    "build_description",
    "adf_to_text",
    # Submission
    "build_issue_payload",
    "compute_summary",
    "submit_feedback",
    "upload_to_jira",
    "get_device_details",
    # Jira client
    "JiraClient",
    "JiraClientError",
    "JiraNetworkError",
    "JiraResponseError",
    "IssueCreationError",
    "AttachmentUploadError",
    # Configuration
    "FeedbackJiraConfig",
    "get_config",
    "reset_config",
    # Logging
    "configure_logging",
    "StructuredFormatter",
]
