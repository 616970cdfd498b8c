"""
Notion property parsing.

Every parser is total: absent or mistyped input yields None (or an empty
list), never an exception.
"""

from __future__ import annotations

import re
from typing import Any, Optional

# Splits free-text player lists: newline, 、, comma, semicolon, slash, ・
LIST_DELIMITERS = re.compile(r"\n|、|,|;|/|・")

URL_RE = re.compile(r"https?://[\w\-._~:/?#\[\]@!$&'()*+,;=%]+")


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def optional_string(value: Any) -> Optional[str]:
    """Return the stripped string, or None for non-strings and blanks."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def rich_text_plain(runs: Any) -> str:
    """Concatenate plain_text of rich text runs."""
    return "".join(
        run.get("plain_text") or ""
        for run in _as_list(runs)
        if isinstance(run, dict)
    )


def parse_number_property(prop: Any) -> Optional[float]:
    """Read number, or a number wrapped by a formula or rollup."""
    prop = _as_dict(prop)
    t = prop.get("type")
    if t == "number":
        value = prop.get("number")
    elif t in ("formula", "rollup"):
        inner = _as_dict(prop.get(t))
        if inner.get("type") != "number":
            return None
        value = inner.get("number")
    else:
        return None
    # bool is an int subclass; Notion never sends one here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def parse_rich_text_property(prop: Any) -> Optional[str]:
    """Read rich_text or title as one trimmed string."""
    prop = _as_dict(prop)
    t = prop.get("type")
    if t not in ("rich_text", "title"):
        return None
    return optional_string(rich_text_plain(prop.get(t)))


def parse_multi_select_property(prop: Any) -> list[str]:
    """
    Read tag names from a multi_select.

    Text properties are split on LIST_DELIMITERS instead, so a player list
    typed as "A社、B社 / C社" still yields three names.
    """
    prop = _as_dict(prop)
    if prop.get("type") == "multi_select":
        return [
            item["name"]
            for item in _as_list(prop.get("multi_select"))
            if isinstance(item, dict) and item.get("name")
        ]
    text = parse_rich_text_property(prop)
    if not text:
        return []
    return [part.strip() for part in LIST_DELIMITERS.split(text) if part.strip()]


def parse_links_property(prop: Any) -> list[str]:
    """
    Collect URLs from a url, rich_text or files property.

    Sources are merged and de-duplicated in first-seen order:
    direct url field, run hyperlinks, file urls, bare URLs in the text.
    """
    prop = _as_dict(prop)
    t = prop.get("type")
    links: dict[str, None] = {}

    def add(url: Any) -> None:
        if isinstance(url, str) and url:
            links.setdefault(url, None)

    if t == "url":
        add(prop.get("url"))

    if t == "rich_text":
        for run in _as_list(prop.get("rich_text")):
            run = _as_dict(run)
            add(run.get("href"))
            if run.get("type") == "text":
                add(_as_dict(_as_dict(run.get("text")).get("link")).get("url"))

    if t == "files":
        for f in _as_list(prop.get("files")):
            f = _as_dict(f)
            if f.get("type") == "external":
                add(_as_dict(f.get("external")).get("url"))
            elif f.get("type") == "file":
                add(_as_dict(f.get("file")).get("url"))

    text = parse_rich_text_property(prop)
    if text:
        for url in URL_RE.findall(text):
            add(url)

    return list(links)
