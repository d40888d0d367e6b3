"""Plain-text preview of ADF issue descriptions.

Walks an ADF document produced by :mod:`feedback_jira.adf` and renders it as
Markdown-flavoured text, so a description can be checked on a terminal before
it is sent to Jira.
"""

import logging
from typing import Any

logger = logging.getLogger("feedback_jira.preview")

__all__ = ["adf_to_text"]


def adf_to_text(adf_content: dict[str, Any] | None) -> str:
    """Convert an ADF document to plain text.

    Supported node types: doc, paragraph, text (strong/em/code marks),
    heading, rule, bulletList, listItem, codeBlock, hardBreak. Unknown nodes
    are logged and their children rendered.

    Args:
        adf_content: ADF JSON dict (can be None or empty)

    Returns:
        Plain text representation. Empty string for None/empty input.

    Example:
        >>> adf_to_text({"type": "doc", "content": [{"type": "rule"}]})
        '---\\n'
    """
    if not adf_content:
        return ""

    output: list[str] = []
    _walk_node(adf_content, output, indent_level=0)
    return "\n".join(output)


def _inline_text(content: list[Any], indent_level: int) -> str:
    parts: list[str] = []
    for child in content:
        _walk_node(child, parts, indent_level)
    return "".join(parts)


def _walk_node(node: Any, output: list[str], indent_level: int = 0) -> None:
    if not isinstance(node, dict):
        if isinstance(node, str):
            output.append(node)
        return

    node_type = node.get("type")
    content = node.get("content", [])

    if node_type == "text":
        text = node.get("text", "")
        for mark in node.get("marks", []):
            mark_type = mark.get("type")
            if mark_type == "strong":
                text = f"**{text}**"
            elif mark_type == "em":
                text = f"*{text}*"
            elif mark_type == "code":
                text = f"`{text}`"
        output.append(text)
        return

    if node_type == "hardBreak":
        output.append("\n")
        return

    if node_type == "doc":
        for child in content:
            _walk_node(child, output, indent_level)
        return

    if node_type == "rule":
        output.append("---")
        output.append("")
        return

    if node_type == "paragraph":
        text = _inline_text(content, indent_level).rstrip("\n")
        output.append(text)
        output.append("")
        return

    if node_type == "heading":
        level = node.get("attrs", {}).get("level", 1)
        output.append(f"{'#' * level} {_inline_text(content, indent_level)}")
        output.append("")
        return

    if node_type == "bulletList":
        for child in content:
            _walk_node(child, output, indent_level)
        if indent_level == 0:
            output.append("")
        return

    if node_type == "listItem":
        prefix = f"{'  ' * indent_level}- "
        pending: list[str] = []
        for child in content:
            if child.get("type") == "bulletList":
                if pending:
                    output.append(prefix + "".join(pending))
                    pending = []
                _walk_node(child, output, indent_level + 1)
            else:
                pending.append(_inline_text(child.get("content", []), indent_level))
        if pending:
            output.append(prefix + "".join(pending))
        return

    if node_type == "codeBlock":
        language = node.get("attrs", {}).get("language", "")
        output.append(f"```{language}")
        output.append(_inline_text(content, indent_level))
        output.append("```")
        output.append("")
        return

    logger.warning(
        "adf_unknown_node_type",
        extra={"node_type": node_type, "has_content": bool(content)},
    )
    for child in content:
        _walk_node(child, output, indent_level)
