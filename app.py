import sys

from loguru import logger

from refchat.api import create_app
from refchat.config import settings
from refchat.graph.local_graph import LocalGraph
from refchat.templates.catalog import StaticTemplateCatalog

logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])

logger.info(f"Loading note graph from {settings.local_graph_path}")
graph = LocalGraph(settings.local_graph_path)
template_catalog = StaticTemplateCatalog()
app = create_app(
    resolver=graph,
    search_provider=graph,
    template_catalog=template_catalog,
)
