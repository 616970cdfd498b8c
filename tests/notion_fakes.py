"""
Notion payload builders and in-memory fakes shared by the tests.
"""
from types import SimpleNamespace


# =============================================================================
# PAYLOAD BUILDERS
# =============================================================================

def run(text, href=None):
    node = {"type": "text", "plain_text": text, "text": {"content": text, "link": None}, "href": href}
    if href:
        node["text"]["link"] = {"url": href}
    return node


def title_prop(text):
    return {"type": "title", "title": [run(text)] if text else []}


def rich_text_prop(*runs):
    return {"type": "rich_text", "rich_text": [r if isinstance(r, dict) else run(r) for r in runs]}


def number_prop(value):
    return {"type": "number", "number": value}


def multi_select_prop(*names):
    return {"type": "multi_select", "multi_select": [{"name": n} for n in names]}


def url_prop(url):
    return {"type": "url", "url": url}


def text_block(block_type, text, block_id=None, **extra):
    payload = {"rich_text": [run(text)] if text else []}
    payload.update(extra)
    return {"id": block_id or f"{block_type}-{text}", "type": block_type, block_type: payload}


def child_page(block_id, title):
    return {"id": block_id, "type": "child_page", "child_page": {"title": title}}


def market_page(page_id, segment, *, y2025=None, y2030=None, **props):
    properties = {"市場セグメント": title_prop(segment)}
    if y2025 is not None:
        properties["2025年市場規模"] = number_prop(y2025)
    if y2030 is not None:
        properties["2030年市場規模"] = number_prop(y2030)
    properties.update(props)
    return {
        "id": page_id,
        "parent": {"type": "database_id", "database_id": "db-1"},
        "properties": properties,
    }


# =============================================================================
# FAKES
# =============================================================================

class FakeReader:
    """
    Stands in for NotionReader.

    `blocks` maps block id -> list of child blocks, or an Exception to raise.
    """

    def __init__(self, pages=None, blocks=None):
        self.pages = pages or []
        self.blocks = blocks or {}
        self.block_calls = []
        self.list_calls = []

    def list_pages(self, database_id, title_filter=None, *, title_property="市場セグメント"):
        self.list_calls.append((database_id, title_filter, title_property))
        return list(self.pages)

    def list_block_children(self, block_id):
        self.block_calls.append(block_id)
        children = self.blocks.get(block_id, [])
        if isinstance(children, Exception):
            raise children
        return list(children)


class FakeEndpoint:
    """Returns queued responses in order and records the kwargs of each call."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def fake_notion_client(*, retrieve=None, query=None, children=None):
    """Build an object shaped like notion_client.Client for NotionReader."""
    return SimpleNamespace(
        databases=SimpleNamespace(retrieve=FakeEndpoint(retrieve or [])),
        data_sources=SimpleNamespace(query=FakeEndpoint(query or [])),
        blocks=SimpleNamespace(children=SimpleNamespace(list=FakeEndpoint(children or []))),
    )


class MemoryStore:
    """Upsert collaborator keyed by (segment, issue, year)."""

    def __init__(self, fail_on=None):
        self.rows = {}
        self.fail_on = fail_on or set()

    def __call__(self, data):
        if data.segment in self.fail_on:
            raise RuntimeError(f"write failed for {data.segment}")
        key = (data.segment, data.issue or "", data.year)
        self.rows[key] = data
        return data
