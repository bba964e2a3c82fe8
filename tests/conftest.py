from datetime import date

import pytest
from fastapi.testclient import TestClient

from refchat.api import create_app
from refchat.composer import Composer
from refchat.domain.document import Document
from refchat.domain.graph import GraphBlock, GraphPage
from refchat.domain.search import SearchResult
from refchat.domain.template import PromptTemplate
from refchat.graph.local_graph import LocalGraph
from tests.fakes import FakePreviewResolver, FakeSearchProvider, FakeTemplateCatalog


@pytest.fixture
def test_templates() -> list[PromptTemplate]:
    return [
        PromptTemplate(
            id="daily-summary",
            title="Daily Summary",
            description="Summarize notes from a specific date",
            prompt="Summarize my notes from [DATE].",
            category="analysis",
        ),
        PromptTemplate(
            id="creative-writing",
            title="Creative Writing",
            description="Brainstorm content from current notes",
            prompt="Help me write.",
            category="writing",
        ),
        PromptTemplate(
            id="task-planner",
            title="Task Planner",
            description="Create action plans",
            prompt="Plan my tasks.",
            category="planning",
        ),
    ]


@pytest.fixture
def rob_results() -> list[SearchResult]:
    return [
        SearchResult(id="xyz123", kind="block", title="People", preview_text="Robert's notes"),
        SearchResult(id="page-rob", kind="page", title="Robert", preview_text="Robert"),
        SearchResult(
            id="10-19-2026", kind="daily-note", title="October 19th, 2026", preview_text=""
        ),
    ]


@pytest.fixture
def fake_resolver() -> FakePreviewResolver:
    return FakePreviewResolver(
        previews={
            "xyz123": "Robert's notes",
            "abc_9": "Meeting with [[Alice]] about **budget**",
        },
        failing={"broken"},
    )


@pytest.fixture
def fake_search(rob_results: list[SearchResult]) -> FakeSearchProvider:
    return FakeSearchProvider(results={"rob": rob_results, "ro": rob_results[:1]})


@pytest.fixture
def fake_catalog(test_templates: list[PromptTemplate]) -> FakeTemplateCatalog:
    return FakeTemplateCatalog(test_templates)


@pytest.fixture
def changes() -> list[str]:
    return []


@pytest.fixture
def sent() -> list[Document]:
    return []


@pytest.fixture
def composer(
    fake_resolver: FakePreviewResolver,
    fake_search: FakeSearchProvider,
    fake_catalog: FakeTemplateCatalog,
    changes: list[str],
    sent: list[Document],
) -> Composer:
    """Composer with fake collaborators and a short debounce."""
    return Composer(
        resolver=fake_resolver,
        search_provider=fake_search,
        template_catalog=fake_catalog,
        on_change=changes.append,
        on_send=sent.append,
        debounce_seconds=0.01,
        separator=" ",
        template_autosend=False,
        today=lambda: date(2026, 10, 19),
    )


@pytest.fixture
def local_graph() -> LocalGraph:
    return LocalGraph.from_data(
        pages={
            "page-rob": GraphPage(uid="page-rob", title="Robert"),
            "page-robotics": GraphPage(uid="page-robotics", title="Robotics"),
            "page-intro": GraphPage(uid="page-intro", title="Intro to robots"),
            "10-19-2026": GraphPage(uid="10-19-2026", title="October 19th, 2026"),
        },
        blocks={
            "xyz123": GraphBlock(
                uid="xyz123", string="Robert's notes on #planning", page_uid="page-rob"
            ),
            "def456": GraphBlock(uid="def456", string="Groceries for the week", page_uid=""),
        },
    )


@pytest.fixture
def test_client(local_graph: LocalGraph, fake_catalog: FakeTemplateCatalog) -> TestClient:
    """Create test client backed by an in-memory graph."""
    app = create_app(
        resolver=local_graph,
        search_provider=local_graph,
        template_catalog=fake_catalog,
    )
    return TestClient(app)
