from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from refchat.api.endpoints import get_endpoints_router
from refchat.graph.base import PreviewResolver, SearchProvider, TemplateCatalog


def create_app(
    *,
    resolver: PreviewResolver,
    search_provider: SearchProvider,
    template_catalog: TemplateCatalog,
) -> FastAPI:
    """Create FastAPI app."""
    app = FastAPI()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        router=get_endpoints_router(
            resolver=resolver,
            search_provider=search_provider,
            template_catalog=template_catalog,
        )
    )

    return app
