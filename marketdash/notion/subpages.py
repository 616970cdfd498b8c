"""
Depth-bounded collection of nested child pages.

The walk uses an explicit stack rather than recursion so the depth bound is
visible in one place. Output is pre-order: a page is emitted before its own
descendants, and its descendants before its next sibling.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..models import Subpage
from ..utils.logger import get_logger
from .render import render_blocks_to_markdown

if TYPE_CHECKING:
    from .client import NotionReader

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 2
UNTITLED = "Untitled"


def error_placeholder(title: str) -> str:
    return f"[Error loading content for: {title}]"


def join_path(prefix: str, title: str) -> str:
    return f"{prefix}/{title}" if prefix else title


def _child_pages(blocks: list[dict]) -> list[dict]:
    return [b for b in blocks if isinstance(b, dict) and b.get("type") == "child_page"]


def collect_subpages(
    reader: "NotionReader",
    page_id: str,
    path_prefix: str,
    depth: int = 0,
    max_depth: int = DEFAULT_MAX_DEPTH,
    *,
    root_blocks: Optional[list[dict]] = None,
) -> list[Subpage]:
    """
    Collect child pages under `page_id`, rendered to Markdown.

    Args:
        reader: Notion reader used for block fetches
        page_id: Page whose child pages are collected
        path_prefix: Path of `page_id`; children get "prefix/title"
        depth: Depth of `page_id` itself
        max_depth: Nothing is fetched at or beyond this depth
        root_blocks: Already-fetched children of `page_id`, to save a request

    Returns:
        Subpages in pre-order. A child whose blocks cannot be fetched is kept
        with a placeholder body and its descendants are skipped.
    """
    if depth >= max_depth:
        return []

    if root_blocks is None:
        root_blocks = reader.list_block_children(page_id)

    subpages: list[Subpage] = []
    # (child_page block, path of its parent, depth of its parent)
    stack = [(b, path_prefix, depth) for b in reversed(_child_pages(root_blocks))]

    while stack:
        block, prefix, parent_depth = stack.pop()
        child_id = block.get("id") or ""
        title = (block.get("child_page") or {}).get("title") or UNTITLED
        path = join_path(prefix, title)

        try:
            blocks = reader.list_block_children(child_id)
        except Exception as e:
            logger.warning(f"Failed to load subpage '{path}' ({child_id}): {e}")
            subpages.append(Subpage(child_id, title, path, error_placeholder(title)))
            continue

        subpages.append(Subpage(child_id, title, path, render_blocks_to_markdown(blocks)))

        child_depth = parent_depth + 1
        if child_depth < max_depth:
            stack.extend((b, path, child_depth) for b in reversed(_child_pages(blocks)))

    return subpages
