"""Configuration management with pydantic-settings for feedback-jira.

- pydantic-settings for type-safe configuration
- Automatic .env file loading with proper precedence
- SecretStr for the Jira API token
- Frozen config (immutable after load)

References:
- Pydantic Settings: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

import json
import logging
from functools import lru_cache
from typing import Annotated
from urllib.parse import urlparse

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .models import JiraCustomBodyFormat, JiraDetails

logger = logging.getLogger("feedback_jira.config")

__all__ = [
    "FeedbackJiraConfig",
    "get_config",
    "reset_config",
]

ATLASSIAN_SUFFIX = ".atlassian.net"


class FeedbackJiraConfig(BaseSettings):
    """Configuration for feedback-jira.

    Loads from (in order of precedence):
    1. Environment variables (highest priority)
    2. .env file in the working directory
    3. Default values (lowest priority)

    Attributes:
        jira_domain_name: Atlassian site name ('company' for company.atlassian.net)
        jira_email: Jira account email for Basic Auth
        jira_api_token: Jira API token (stored as SecretStr)
        jira_project_key: Project the feedback issues are filed in
        jira_issue_type: Issue type name for feedback issues
        jira_parent_key: Optional parent issue key (feedback filed as sub-tasks)
        jira_labels: Optional labels applied to every feedback issue
        include_device_details: Add the "Device details" section
        include_screenshot: Upload the screenshot as an attachment
        custom_body_format: Rendering format for custom data
        http_timeout_seconds: Read/write timeout for Jira requests
        log_level: Log level (FEEDBACK_JIRA_LOG_LEVEL)
        log_format: Log format, json or text (FEEDBACK_JIRA_LOG_FORMAT)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,  # Use defaults instead of empty strings
        case_sensitive=False,  # JIRA_EMAIL = jira_email
        validate_default=True,
        frozen=True,
        extra="ignore",
    )

    jira_domain_name: str = Field(
        default="",
        description="Atlassian site name, or the full https://<site>.atlassian.net URL",
    )

    jira_email: str = Field(
        default="",
        description="Jira account email for Basic Auth",
    )

    jira_api_token: SecretStr = Field(
        default=SecretStr(""),
        description="Jira API token for authentication (stored securely)",
    )

    jira_project_key: str = Field(
        default="",
        description="Project key feedback issues are created in (e.g., 'ENG')",
    )

    jira_issue_type: str = Field(
        default="Bug",
        description="Issue type name for feedback issues",
    )

    jira_parent_key: str | None = Field(
        default=None,
        description="Parent issue key when feedback is filed as sub-tasks",
    )

    # NoDecode: the validator below parses both CSV and JSON list values
    jira_labels: Annotated[list[str] | None, NoDecode] = Field(
        default=None,
        description="Labels applied to feedback issues (e.g., 'feedback,mobile')",
    )

    include_device_details: bool = Field(
        default=True,
        description="Append device and app details to the description",
    )

    include_screenshot: bool = Field(
        default=True,
        description="Upload the screenshot as an issue attachment",
    )

    custom_body_format: JiraCustomBodyFormat = Field(
        default=JiraCustomBodyFormat.PARAGRAPHS,
        description="How custom data is rendered: paragraphs, bullets, codeBlock or hybrid",
    )

    http_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        le=300,
        description="Read/write timeout for Jira requests in seconds",
    )

    # Logging, read from the same variables configure_logging() uses
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        validation_alias="feedback_jira_log_level",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    log_format: str = Field(
        default="json",
        pattern="^(json|text)$",
        validation_alias="feedback_jira_log_format",
        description="Log format: json (production), text (development)",
    )

    @field_validator("jira_domain_name", mode="before")
    @classmethod
    def normalize_domain_name(cls, v):
        """Reduce 'https://company.atlassian.net/' or 'company.atlassian.net' to 'company'."""
        if not isinstance(v, str):
            return v
        v = v.strip()
        if "://" in v:
            v = urlparse(v).hostname or ""
        v = v.rstrip("/")
        if v.endswith(ATLASSIAN_SUFFIX):
            v = v[: -len(ATLASSIAN_SUFFIX)]
        if "/" in v or "." in v:
            raise ValueError(
                f"JIRA_DOMAIN_NAME must be an Atlassian site name, got '{v}'"
            )
        return v

    @field_validator("log_level", "log_format", mode="before")
    @classmethod
    def normalize_log_settings(cls, v, info):
        """Accept any case: level upper-cased, format lower-cased."""
        if isinstance(v, str):
            return v.upper() if info.field_name == "log_level" else v.lower()
        return v

    @field_validator("jira_labels", mode="before")
    @classmethod
    def parse_jira_labels(cls, v):
        """Parse comma-separated string into list for JIRA_LABELS env var."""
        if isinstance(v, str):
            if v.strip().startswith("["):
                return json.loads(v)
            return [label.strip() for label in v.split(",") if label.strip()]
        return v

    def to_jira_details(self) -> JiraDetails:
        """Build JiraDetails from this configuration.

        Raises:
            ValueError: If a required Jira setting is missing.
        """
        required = {
            "JIRA_DOMAIN_NAME": self.jira_domain_name,
            "JIRA_EMAIL": self.jira_email,
            "JIRA_API_TOKEN": self.jira_api_token.get_secret_value(),
            "JIRA_PROJECT_KEY": self.jira_project_key,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ValueError(f"Missing Jira configuration: {', '.join(missing)}")

        return JiraDetails(
            domain_name=self.jira_domain_name,
            jira_email=self.jira_email,
            api_token=self.jira_api_token.get_secret_value(),
            project_key=self.jira_project_key,
            issue_type=self.jira_issue_type,
            parent_key=self.jira_parent_key,
            labels=self.jira_labels,
        )


@lru_cache(maxsize=1)
def get_config() -> FeedbackJiraConfig:
    """Get global configuration singleton.

    First call loads from environment + .env file, subsequent calls return
    the cached instance.

    Raises:
        ValidationError: If configuration values are invalid.
    """
    return FeedbackJiraConfig()


def reset_config() -> None:
    """Reset configuration singleton for testing.

    Clears the cached configuration so tests can load it again with a
    different environment.
    """
    get_config.cache_clear()
