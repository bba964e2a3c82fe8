from fastapi.testclient import TestClient

from refchat.api import create_app
from refchat.graph.local_graph import LocalGraph
from tests.fakes import FakeSearchProvider, FakeTemplateCatalog


def test_health(test_client: TestClient) -> None:
    """Test health check endpoint."""
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_search_endpoint(test_client: TestClient) -> None:
    """Test that search returns ranked results."""
    response = test_client.get("/api/search", params={"q": "rob", "limit": 2})

    assert response.status_code == 200
    results = response.json()["results"]
    assert [result["id"] for result in results] == ["page-rob", "page-robotics"]
    assert results[0]["kind"] == "page"


def test_search_endpoint_validates_limit(test_client: TestClient) -> None:
    """Test that out-of-range limits are rejected."""
    response = test_client.get("/api/search", params={"q": "rob", "limit": 0})

    assert response.status_code == 422


def test_search_endpoint_failure(
    local_graph: LocalGraph, fake_catalog: FakeTemplateCatalog
) -> None:
    """Test that provider errors become a 500."""
    app = create_app(
        resolver=local_graph,
        search_provider=FakeSearchProvider(fail=True),
        template_catalog=fake_catalog,
    )
    client = TestClient(app)

    response = client.get("/api/search", params={"q": "rob"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_parse_document(test_client: TestClient) -> None:
    """Test turning a canonical string into a document."""
    response = test_client.post(
        "/api/documents/parse", json={"text": "see ((xyz123))\n[[Robert]] ((gone))"}
    )

    assert response.status_code == 200
    paragraphs = response.json()["paragraphs"]
    assert len(paragraphs) == 2
    assert paragraphs[0]["content"] == [
        {"type": "text", "text": "see "},
        {
            "type": "reference",
            "kind": "block",
            "id": "xyz123",
            "preview_text": "Robert's notes on",
        },
    ]
    assert paragraphs[1]["content"][0]["id"] == "Robert"
    assert paragraphs[1]["content"][2]["preview_text"] == "Block gone"


def test_serialize_document(test_client: TestClient) -> None:
    """Test turning a document back into a canonical string."""
    document = {
        "paragraphs": [
            {
                "content": [
                    {"type": "text", "text": "see "},
                    {"type": "reference", "kind": "block", "id": "xyz123", "preview_text": "x"},
                ]
            },
            {"content": [{"type": "reference", "kind": "page", "id": "p", "preview_text": "Robert"}]},
        ]
    }

    response = test_client.post("/api/documents/serialize", json=document)

    assert response.status_code == 200
    assert response.json() == {"text": "see ((xyz123))\n[[Robert]]"}


def test_trigger_endpoint(test_client: TestClient) -> None:
    """Test trigger detection over HTTP."""
    response = test_client.get("/api/triggers", params={"text": "check @rob"})

    assert response.status_code == 200
    context = response.json()
    assert context["active"]
    assert context["kind"] == "at"
    assert context["anchor_offset"] == 6
    assert context["filter_text"] == "rob"
    assert context["marker"] == "@rob"

    response = test_client.get("/api/triggers", params={"text": "check @rob", "cursor": 5})
    assert not response.json()["active"]


def test_templates_endpoint(test_client: TestClient) -> None:
    """Test listing and filtering templates."""
    response = test_client.get("/api/templates")
    assert [template["id"] for template in response.json()] == [
        "daily-summary",
        "creative-writing",
        "task-planner",
    ]

    response = test_client.get("/api/templates", params={"filter": "plan"})
    assert [template["id"] for template in response.json()] == ["task-planner"]
