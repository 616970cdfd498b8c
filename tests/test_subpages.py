"""
Tests for the depth-bounded subpage collector.

Run with: pytest tests/test_subpages.py -v
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from marketdash.notion.subpages import collect_subpages
from marketdash.utils.exceptions import ExternalServiceError

from notion_fakes import FakeReader, child_page, text_block


def tree_reader():
    """
    root
    ├── A  (body "a")
    │   └── A1 (body "a1")
    │       └── A1x
    └── B  (body "b")
    """
    return FakeReader(blocks={
        "root": [text_block("paragraph", "intro"), child_page("A", "Alpha"), child_page("B", "Beta")],
        "A": [text_block("paragraph", "a"), child_page("A1", "Alpha One")],
        "A1": [text_block("paragraph", "a1"), child_page("A1x", "Deep")],
        "A1x": [text_block("paragraph", "deep")],
        "B": [text_block("paragraph", "b")],
    })


class TestCollectSubpages:
    """Tests for collect_subpages."""

    def test_depth_bound_returns_empty(self):
        """At depth == max_depth nothing is fetched, whatever the children."""
        reader = tree_reader()
        assert collect_subpages(reader, "root", "EV", depth=2, max_depth=2) == []
        assert collect_subpages(reader, "root", "EV", depth=3, max_depth=2) == []
        assert reader.block_calls == []

    def test_pre_order_two_levels(self):
        reader = tree_reader()
        subpages = collect_subpages(reader, "root", "EV", max_depth=2)

        assert [s.path for s in subpages] == ["EV/Alpha", "EV/Alpha/Alpha One", "EV/Beta"]
        assert [s.markdown for s in subpages] == ["a", "a1", "b"]
        # A1x sits at depth 3 and is never fetched
        assert "A1x" not in reader.block_calls

    def test_single_level(self):
        reader = tree_reader()
        subpages = collect_subpages(reader, "root", "EV", max_depth=1)
        assert [s.title for s in subpages] == ["Alpha", "Beta"]

    def test_fetches_each_page_once(self):
        reader = tree_reader()
        collect_subpages(reader, "root", "EV", max_depth=3)
        assert sorted(reader.block_calls) == sorted(["root", "A", "A1", "A1x", "B"])

    def test_uses_prefetched_root_blocks(self):
        reader = tree_reader()
        root_blocks = reader.blocks["root"]
        collect_subpages(reader, "root", "EV", max_depth=1, root_blocks=root_blocks)
        assert "root" not in reader.block_calls

    def test_failing_child_keeps_placeholder_and_siblings(self):
        reader = tree_reader()
        reader.blocks["A"] = ExternalServiceError("Notion API error 500", status_code=500)

        subpages = collect_subpages(reader, "root", "EV", max_depth=2)

        assert [s.title for s in subpages] == ["Alpha", "Beta"]
        assert subpages[0].markdown == "[Error loading content for: Alpha]"
        assert subpages[0].id == "A"
        assert subpages[1].markdown == "b"

    def test_root_failure_propagates(self):
        reader = FakeReader(blocks={"root": ExternalServiceError("boom", status_code=502)})
        with pytest.raises(ExternalServiceError):
            collect_subpages(reader, "root", "EV")

    def test_untitled_and_empty_prefix(self):
        reader = FakeReader(blocks={"root": [{"id": "x", "type": "child_page", "child_page": {}}]})
        subpages = collect_subpages(reader, "root", "")
        assert subpages[0].title == "Untitled"
        assert subpages[0].path == "Untitled"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
