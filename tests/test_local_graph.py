from pathlib import Path

import pytest

from refchat.domain.graph import BlockPreview, GraphBlock, GraphPage
from refchat.graph.local_graph import LocalGraph


@pytest.mark.asyncio
async def test_search_ranks_pages_before_blocks(local_graph: LocalGraph) -> None:
    """Test that title matches come first, ranked by match quality."""
    response = await local_graph.search("rob", 10)

    assert [(result.kind, result.id) for result in response.results] == [
        ("page", "page-rob"),
        ("page", "page-robotics"),
        ("page", "page-intro"),
        ("block", "xyz123"),
    ]
    block = response.results[-1]
    assert block.title == "Robert"
    assert block.preview_text == "Robert's notes on"


@pytest.mark.asyncio
async def test_search_exact_title_first(local_graph: LocalGraph) -> None:
    """Test that a case-insensitive exact match outranks prefix matches."""
    local_graph.add_page(GraphPage(uid="page-robo", title="Robo"))

    response = await local_graph.search("robo", 10)

    assert response.results[0].id == "page-robo"
    assert response.results[1].id == "page-robotics"


@pytest.mark.asyncio
async def test_search_marks_daily_notes(local_graph: LocalGraph) -> None:
    """Test that date-titled pages are returned as daily notes."""
    response = await local_graph.search("october", 10)

    assert len(response.results) == 1
    assert response.results[0].kind == "daily-note"
    assert response.results[0].title == "October 19th, 2026"


@pytest.mark.asyncio
async def test_search_respects_limit_and_empty_query(local_graph: LocalGraph) -> None:
    """Test result limits."""
    assert len((await local_graph.search("rob", 2)).results) == 2
    assert (await local_graph.search("  ", 10)).results == []


@pytest.mark.asyncio
async def test_resolve_reference_preview(local_graph: LocalGraph) -> None:
    """Test that the raw block content is returned for known blocks."""
    assert await local_graph.resolve_reference_preview("xyz123") == BlockPreview(
        text="Robert's notes on #planning"
    )
    assert await local_graph.resolve_reference_preview("nope") is None


@pytest.mark.asyncio
async def test_save_and_load(tmp_path: Path, local_graph: LocalGraph) -> None:
    """Test persisting the graph to a JSON file."""
    path = tmp_path / "graph.json"
    local_graph.add_block(GraphBlock(uid="new1", string="Fresh robots", page_uid="page-robotics"))
    local_graph.save(str(path))

    loaded = LocalGraph(path)

    assert await loaded.resolve_reference_preview("new1") == BlockPreview(text="Fresh robots")
    response = await loaded.search("robots", 10)
    assert [result.id for result in response.results] == ["page-intro", "new1"]
    assert response.results[1].title == "Robotics"


def test_save_without_path_raises() -> None:
    """Test that an in-memory graph needs an explicit path to save."""
    with pytest.raises(ValueError):
        LocalGraph().save()


@pytest.mark.asyncio
async def test_missing_file_starts_empty(tmp_path: Path) -> None:
    """Test that a graph path that does not exist yet gives an empty graph."""
    graph = LocalGraph(tmp_path / "missing.json")

    assert (await graph.search("rob", 10)).results == []
    assert await graph.resolve_reference_preview("xyz123") is None
