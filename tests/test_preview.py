"""Unit tests for the plain-text description preview."""

from feedback_jira.adf import build_description
from feedback_jira.models import JiraCustomBodyFormat
from feedback_jira.preview import adf_to_text


def test_empty_input():
    """None and empty documents render as empty text."""
    assert adf_to_text(None) == ""
    assert adf_to_text({}) == ""


def test_full_description():
    """Headings, bold labels and rules render as Markdown-like text."""
    doc = build_description(
        "Crash on save.",
        device_details={"brand": "Apple"},
        metadata={"user": {"id": 7}},
    )
    assert adf_to_text(doc) == "\n".join(
        [
            "Crash on save.",
            "",
            "---",
            "",
            "### Device details",
            "",
            "**brand: ** Apple",
            "",
            "---",
            "",
            "### Custom data",
            "",
            "**user**",
            "",
            "**  id: ** 7",
            "",
        ]
    )


def test_bullets_nested():
    """Nested bullet lists are indented."""
    doc = build_description(
        "x", metadata={"user": {"id": 7}, "tags": ["a"]}, body_format=JiraCustomBodyFormat.BULLETS
    )
    text = adf_to_text(doc)
    assert "- **user**\n  - id: 7\n- **tags**\n  - [0]: a" in text


def test_code_block_fenced():
    """Code blocks are fenced with their language."""
    doc = build_description("x", metadata={"a": 1}, body_format=JiraCustomBodyFormat.CODE_BLOCK)
    assert '```json\n{\n  "a": 1\n}\n```' in adf_to_text(doc)


def test_unknown_node_renders_children():
    """Unknown nodes fall back to their children."""
    adf = {
        "type": "doc",
        "content": [
            {"type": "panel", "content": [{"type": "paragraph", "content": [{"type": "text", "text": "inside"}]}]}
        ],
    }
    assert adf_to_text(adf) == "inside\n"
