"""
Notion blocks to Markdown rendering.
"""

from __future__ import annotations

import re
from typing import Any

DEFAULT_CALLOUT_ICON = "💡"

# Block type -> line prefix. Toggles render like quotes.
_PREFIXES = {
    "heading_1": "# ",
    "heading_2": "## ",
    "heading_3": "### ",
    "paragraph": "",
    "bulleted_list_item": "- ",
    "numbered_list_item": "1. ",
    "quote": "> ",
    "toggle": "> ",
}

_BLANK_RUN_RE = re.compile(r"\n{3,}")


def richtext_to_markdown(runs: Any) -> str:
    """Join rich text runs, keeping hyperlinks as [text](url)."""
    out = []
    for run in runs or []:
        if not isinstance(run, dict):
            continue
        text = run.get("plain_text") or ""
        href = run.get("href") or ((run.get("text") or {}).get("link") or {}).get("url")
        out.append(f"[{text}]({href})" if href else text)
    return "".join(out)


def _block_rich_text(block: dict) -> str:
    payload = block.get(block.get("type")) or {}
    return richtext_to_markdown(payload.get("rich_text"))


def render_block(block: Any) -> str | None:
    """Render one block to a Markdown line, or None for unsupported types."""
    if not isinstance(block, dict):
        return None
    t = block.get("type")

    if t in _PREFIXES:
        return f"{_PREFIXES[t]}{_block_rich_text(block)}"

    if t == "callout":
        icon = ((block.get("callout") or {}).get("icon") or {}).get("emoji") or DEFAULT_CALLOUT_ICON
        return f"{icon} {_block_rich_text(block)}"

    if t == "divider":
        return "---"

    return None


def render_blocks_to_markdown(blocks: list[dict]) -> str:
    """
    Render a flat list of blocks to Markdown.

    Children of rendered blocks are not expanded; child_page blocks are
    handled by the subpage collector.
    """
    lines = [line for line in map(render_block, blocks or []) if line is not None]
    return _BLANK_RUN_RE.sub("\n\n", "\n".join(lines)).strip()
