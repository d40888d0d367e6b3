"""Atlassian Document Format (ADF) builder for feedback issue descriptions.

Renders the feedback text, device details and an arbitrary nested metadata
tree into a single ADF document suitable for the ``description`` field of a
Jira Cloud issue.

The metadata tree must be acyclic; nested mappings and sequences are walked
recursively without cycle detection.

Reference: https://developer.atlassian.com/cloud/jira/platform/apis/document/structure/
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from .models import JiraCustomBodyFormat

__all__ = [
    "build_description",
    "build_bullet_list",
    "build_code_block",
    "build_custom_paragraphs",
    "label_paragraph",
    "paragraph_node",
    "text_node",
    "to_json_text",
]

logger = logging.getLogger("feedback_jira.adf")

DEVICE_DETAILS_HEADING = "Device details"
CUSTOM_DATA_HEADING = "Custom data"

_STRONG = [{"type": "strong"}]


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _stringify(value: Any) -> str:
    """Render a scalar the way it reads in JSON: None -> null, True -> true."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def text_node(text: str, bold: bool = False) -> dict[str, Any]:
    """Create an ADF text node, optionally with a strong mark."""
    node: dict[str, Any] = {"text": text, "type": "text"}
    if bold:
        node["marks"] = list(_STRONG)
    return node


def paragraph_node(text: str, bold: bool = False) -> dict[str, Any]:
    """Create a paragraph holding a single text node."""
    return {"type": "paragraph", "content": [text_node(text, bold=bold)]}


def label_paragraph(label: str, value: Any) -> dict[str, Any]:
    """Create a paragraph with a bold ``label:`` prefix followed by ``value``.

    An empty label omits the bold prefix entirely.
    """
    content = []
    if label:
        content.append(text_node(f"{label}: ", bold=True))
    content.append(text_node(f" {_stringify(value)}"))
    return {"type": "paragraph", "content": content}


def _rule() -> dict[str, Any]:
    return {"type": "rule"}


def _heading(text: str, level: int = 3) -> dict[str, Any]:
    return {
        "type": "heading",
        "attrs": {"level": level},
        "content": [{"type": "text", "text": text}],
    }


def _children(value: Any) -> list[tuple[str, Any]]:
    """Return (label, child) pairs for a mapping or sequence node."""
    if isinstance(value, Mapping):
        return [(str(k), v) for k, v in value.items()]
    return [(f"[{i}]", v) for i, v in enumerate(value)]


def _append_custom_paragraphs(
    key: str, value: Any, out: list[dict[str, Any]], depth: int
) -> None:
    indent = "  " * depth
    if isinstance(value, Mapping) or _is_sequence(value):
        out.append(paragraph_node(f"{indent}{key}", bold=True))
        for child_key, child in _children(value):
            _append_custom_paragraphs(child_key, child, out, depth + 1)
    else:
        out.append(label_paragraph(f"{indent}{key}", value))


def build_custom_paragraphs(metadata: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Render metadata as nested paragraphs indented two spaces per level.

    Mappings and sequences produce a bold label paragraph followed by their
    children one level deeper; scalars produce a ``label: value`` paragraph.

    Example:
        >>> [p["content"][0]["text"] for p in build_custom_paragraphs({"b": {"c": 2}})]
        ['b', '  c: ']
    """
    out: list[dict[str, Any]] = []
    for key, value in metadata.items():
        _append_custom_paragraphs(str(key), value, out, 0)
    return out


def build_bullet_list(value: Mapping[str, Any] | list | tuple) -> dict[str, Any]:
    """Render a mapping or sequence as a hierarchical ADF bullet list.

    Sequence elements are labelled ``[i]``. Nested containers become a bold
    label paragraph followed by a nested bulletList inside the same listItem.
    """
    items = []
    for key, child in _children(value):
        if isinstance(child, Mapping) or _is_sequence(child):
            content = [paragraph_node(key, bold=True), build_bullet_list(child)]
        else:
            content = [paragraph_node(f"{key}: {_stringify(child)}")]
        items.append({"type": "listItem", "content": content})
    return {"type": "bulletList", "content": items}


def _to_plain(value: Any) -> Any:
    """Copy a metadata tree into dicts and lists so json can encode any Mapping."""
    if isinstance(value, Mapping):
        return {k: _to_plain(v) for k, v in value.items()}
    if _is_sequence(value):
        return [_to_plain(v) for v in value]
    return value


def to_json_text(value: Any) -> str:
    """Serialize a metadata tree as 2-space indented JSON.

    Output matches ``JSON.stringify(value, null, 2)``: non-ASCII text is kept
    as-is and key order is preserved. Read-only and custom mappings encode as
    objects, tuples as arrays. Other values JSON cannot represent fall back to
    their ``str()`` form.
    """
    return json.dumps(_to_plain(value), indent=2, ensure_ascii=False, default=str)


def build_code_block(value: Any, language: str = "json") -> dict[str, Any]:
    """Render a metadata tree as a single fenced JSON code block."""
    return {
        "type": "codeBlock",
        "attrs": {"language": language},
        "content": [{"type": "text", "text": to_json_text(value)}],
    }


def _render_custom_data(
    metadata: Mapping[str, Any], body_format: JiraCustomBodyFormat
) -> list[dict[str, Any]]:
    if body_format == JiraCustomBodyFormat.PARAGRAPHS:
        return build_custom_paragraphs(metadata)
    if body_format == JiraCustomBodyFormat.BULLETS:
        return [build_bullet_list(metadata)]
    if body_format == JiraCustomBodyFormat.CODE_BLOCK:
        return [build_code_block(metadata)]
    if body_format == JiraCustomBodyFormat.HYBRID:
        # Bullets for a quick scan, then the full JSON for exact fidelity
        return [build_bullet_list(metadata), _rule(), build_code_block(metadata)]
    raise ValueError(f"Unsupported custom body format: {body_format!r}")


def build_description(
    feedback_text: str,
    device_details: Mapping[str, Any] | None = None,
    metadata: Mapping[str, Any] | None = None,
    body_format: JiraCustomBodyFormat | str = JiraCustomBodyFormat.PARAGRAPHS,
) -> dict[str, Any]:
    """Build the ADF issue description for a piece of feedback.

    Layout:
        1. Paragraph with the feedback text (always present, even when empty)
        2. rule + "Device details" heading + one ``label: value`` paragraph
           per entry, when device details are non-empty
        3. rule + "Custom data" heading + metadata rendered per
           ``body_format``, when metadata is non-empty

    Args:
        feedback_text: Free-text feedback from the user
        device_details: Flat mapping of device/app details (insertion order kept)
        metadata: Arbitrary acyclic tree of mappings, sequences and scalars
        body_format: How the metadata is rendered

    Returns:
        ADF document root: ``{"type": "doc", "version": 1, "content": [...]}``

    Raises:
        ValueError: If ``body_format`` is not a known format

    Example:
        >>> doc = build_description("Button is broken.")
        >>> doc["content"][0]["content"][0]["text"]
        'Button is broken.\\n\\n'
    """
    body_format = JiraCustomBodyFormat(body_format)

    content: list[dict[str, Any]] = [
        {"type": "paragraph", "content": [text_node(f"{feedback_text}\n\n")]}
    ]

    if device_details:
        content.append(_rule())
        content.append(_heading(DEVICE_DETAILS_HEADING))
        for key, value in device_details.items():
            content.append(label_paragraph(str(key), value))

    if metadata:
        content.append(_rule())
        content.append(_heading(CUSTOM_DATA_HEADING))
        content.extend(_render_custom_data(metadata, body_format))

    logger.debug(
        "adf_description_built",
        extra={
            "node_count": len(content),
            "body_format": body_format.value,
            "has_device_details": bool(device_details),
            "has_metadata": bool(metadata),
        },
    )

    return {"type": "doc", "version": 1, "content": content}
