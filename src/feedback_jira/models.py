"""Data models for feedback submission.

Defines the feedback payload captured from the user, the Jira connection
details used to file it, and the rendering formats for custom data.
"""

from dataclasses import dataclass, field
from enum import Enum

__all__ = [
    "JiraCustomBodyFormat",
    "JiraDetails",
    "UserFeedback",
]


class JiraCustomBodyFormat(str, Enum):
    """Rendering formats for the custom data section of the issue description.

    Note: Uses (str, Enum) so values compare equal to their plain strings,
    e.g. ``JiraCustomBodyFormat("codeBlock") is JiraCustomBodyFormat.CODE_BLOCK``.
    """

    PARAGRAPHS = "paragraphs"  # Nested paragraphs, general readability (default)
    BULLETS = "bullets"  # Hierarchical bullet lists for quick scanning
    CODE_BLOCK = "codeBlock"  # Pretty-printed JSON for exact structure
    HYBRID = "hybrid"  # Bullets followed by a JSON code block


@dataclass(frozen=True)
class UserFeedback:
    """Feedback captured from the user.

    Attributes:
        text: Free-text feedback as typed by the user
        screenshot: PNG bytes of the screenshot (empty when none was taken)
    """

    text: str
    screenshot: bytes = b""


@dataclass(frozen=True)
class JiraDetails:
    """Jira connection and issue configuration.

    Attributes:
        domain_name: Atlassian site name, e.g. 'yourcompany' for yourcompany.atlassian.net
        jira_email: Atlassian account email the API token belongs to
        api_token: Atlassian API token for ``jira_email``
        project_key: Jira project key (e.g. 'ENG')
        issue_type: Issue type name (e.g. 'Bug', 'Task')
        parent_key: Parent issue key for sub-tasks (optional)
        labels: Labels to apply (optional)
    """

    domain_name: str
    jira_email: str
    api_token: str = field(repr=False)
    project_key: str
    issue_type: str = "Bug"
    parent_key: str | None = None
    labels: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        # Accept any iterable of labels but store it immutably
        if self.labels is not None and not isinstance(self.labels, tuple):
            object.__setattr__(self, "labels", tuple(self.labels))
