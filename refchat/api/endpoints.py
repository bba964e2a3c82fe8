from typing import List

from fastapi import APIRouter, HTTPException, Query
from loguru import logger

from refchat.api.schemas import ParseRequest, SerializeResponse
from refchat.config import settings
from refchat.domain.document import Document
from refchat.domain.search import SearchResponse
from refchat.domain.template import PromptTemplate
from refchat.graph.base import PreviewResolver, SearchProvider, TemplateCatalog
from refchat.serialization.references import deserialize, serialize
from refchat.templates.catalog import filter_templates
from refchat.triggers.detector import TriggerContext, detect_trigger


def _create_search_endpoint(search_provider: SearchProvider):
    """Create the universal search endpoint handler."""

    async def search(
        q: str,
        limit: int = Query(default=settings.search_result_limit, ge=1, le=100),
    ) -> SearchResponse:
        """Search pages, daily notes and blocks for the "@" mention menu."""
        try:
            return await search_provider.search(q, limit)
        except Exception as e:
            logger.error(f"Error in search for '{q}': {str(e)}")
            raise HTTPException(status_code=500, detail="Internal server error") from e

    return search


def _create_parse_endpoint(resolver: PreviewResolver):
    """Create the canonical string parsing endpoint handler."""

    async def parse_document(request: ParseRequest) -> Document:
        try:
            return await deserialize(request.text, resolver)
        except Exception as e:
            logger.error(f"Error parsing document: {str(e)}")
            raise HTTPException(status_code=500, detail="Internal server error") from e

    return parse_document


async def serialize_document(document: Document) -> SerializeResponse:
    return SerializeResponse(text=serialize(document))


async def get_trigger(text: str = "", cursor: int | None = None) -> TriggerContext:
    """Detect the trigger context at the cursor (default: end of text)."""
    return detect_trigger(text, len(text) if cursor is None else cursor)


def _create_templates_endpoint(template_catalog: TemplateCatalog):
    """Create the slash-command templates endpoint handler."""

    async def list_templates(filter: str = "") -> List[PromptTemplate]:
        try:
            templates = template_catalog.templates()
        except Exception as e:
            logger.error(f"Failed to load templates: {str(e)}")
            raise HTTPException(status_code=500, detail="Internal server error") from e
        return filter_templates(templates, filter)

    return list_templates


def get_endpoints_router(
    *,
    resolver: PreviewResolver,
    search_provider: SearchProvider,
    template_catalog: TemplateCatalog,
) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    async def health_check():
        return {"status": "healthy"}

    router.get("/api/search")(_create_search_endpoint(search_provider))
    router.post("/api/documents/parse")(_create_parse_endpoint(resolver))
    router.post("/api/documents/serialize")(serialize_document)
    router.get("/api/triggers")(get_trigger)
    router.get("/api/templates")(_create_templates_endpoint(template_catalog))

    return router
