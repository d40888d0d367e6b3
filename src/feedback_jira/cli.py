"""Feedback submission CLI.

Command-line tool for filing feedback as a Jira issue.

Usage:
    feedback-jira --text "Login button does nothing."
    feedback-jira --text "Crash on save." --screenshot shot.png
    feedback-jira --text "Slow sync." --metadata context.json --format hybrid
    feedback-jira --text "Typo on home page." --dry-run
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

import httpx

from .adf import build_description
from .client import AttachmentUploadError, IssueCreationError, JiraClientError
from .config import get_config
from .device import get_device_details
from .logging_config import configure_logging
from .models import JiraCustomBodyFormat, UserFeedback
from .preview import adf_to_text
from .submit import compute_summary, submit_feedback

FORMAT_CHOICES = [f.value for f in JiraCustomBodyFormat]


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="feedback-jira",
        description="File user feedback as a Jira Cloud issue",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Configuration:
  Configure credentials in the environment or .env:
    JIRA_DOMAIN_NAME=company          # company.atlassian.net
    JIRA_EMAIL=user@example.com
    JIRA_API_TOKEN=your_api_token
    JIRA_PROJECT_KEY=PROJ
  Optional:
    JIRA_ISSUE_TYPE=Bug  JIRA_PARENT_KEY=PROJ-1  JIRA_LABELS=feedback,mobile
        """,
    )
    parser.add_argument("--text", required=True, help="Feedback text")
    parser.add_argument(
        "--screenshot",
        type=Path,
        metavar="PATH",
        help="PNG screenshot to attach to the issue",
    )
    parser.add_argument(
        "--metadata",
        type=Path,
        metavar="JSON_FILE",
        help="JSON object rendered in the 'Custom data' section",
    )
    parser.add_argument(
        "--format",
        dest="body_format",
        choices=FORMAT_CHOICES,
        help="Rendering format for custom data (default: from configuration)",
    )
    parser.add_argument(
        "--no-device-details",
        action="store_true",
        help="Leave the 'Device details' section out",
    )
    parser.add_argument(
        "--no-screenshot",
        action="store_true",
        help="Do not upload the screenshot",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the issue that would be created and exit (no network)",
    )
    return parser


def load_metadata(path: Path | None) -> dict | None:
    """Load the custom data object from a JSON file.

    Raises:
        ValueError: If the file does not hold a JSON object.
    """
    if path is None:
        return None
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: metadata must be a JSON object")
    return data


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
        configure_logging(config.log_level, config.log_format)
        metadata = load_metadata(args.metadata)
        screenshot = args.screenshot.read_bytes() if args.screenshot else b""
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    body_format = JiraCustomBodyFormat(args.body_format or config.custom_body_format)
    include_device_details = config.include_device_details and not args.no_device_details
    include_screenshot = config.include_screenshot and not args.no_screenshot

    feedback = UserFeedback(text=args.text, screenshot=screenshot)
    description = build_description(
        feedback.text,
        device_details=get_device_details() if include_device_details else None,
        metadata=metadata,
        body_format=body_format,
    )

    if args.dry_run:
        print(f"Summary: {compute_summary(feedback.text)}")
        print("")
        print(adf_to_text(description))
        print(json.dumps(description, indent=2, ensure_ascii=False))
        return 0

    try:
        jira_details = config.to_jira_details()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        issue_id = asyncio.run(
            _submit(
                feedback,
                description,
                jira_details,
                include_screenshot,
                config.http_timeout_seconds,
            )
        )
    except KeyboardInterrupt:
        print("\nSubmission interrupted by user", file=sys.stderr)
        return 130
    except AttachmentUploadError as e:
        print(f"Error: issue {e.issue_id} created, but {e}", file=sys.stderr)
        return 1
    except IssueCreationError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.body:
            print(e.body, file=sys.stderr)
        return 1
    except JiraClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(issue_id)
    return 0


async def _submit(feedback, description, jira_details, include_screenshot, timeout):
    async with httpx.AsyncClient(timeout=timeout) as client:
        return await submit_feedback(
            jira_details,
            feedback,
            description,
            include_screenshot=include_screenshot,
            client=client,
        )


if __name__ == "__main__":
    sys.exit(main())
