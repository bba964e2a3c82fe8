"""Slash-command prompt templates."""

from typing import Iterable, List

from refchat.domain.template import PromptTemplate
from refchat.graph.base import TemplateCatalog

BUILTIN_TEMPLATES: list[PromptTemplate] = [
    PromptTemplate(
        id="creative-writing",
        title="Creative Writing",
        description="Help brainstorm and create content from current notes",
        prompt=(
            "Based on my current notes and page content, help me create engaging content. "
            "Analyze the key themes and concepts, then suggest creative ways to develop them "
            "into articles, blog posts, or other written content."
        ),
        category="writing",
    ),
    PromptTemplate(
        id="daily-summary",
        title="Daily Summary",
        description="Summarize notes from a specific date",
        prompt=(
            "Please analyze all my notes from [DATE] and provide a comprehensive summary "
            "including key points, insights, decisions made, and action items for follow-up."
        ),
        category="analysis",
    ),
    PromptTemplate(
        id="knowledge-network",
        title="Knowledge Network",
        description="Find connections between current notes",
        prompt=(
            "Analyze my current notes and identify hidden connections, patterns, and "
            "relationships between different concepts and ideas."
        ),
        category="analysis",
    ),
    PromptTemplate(
        id="task-planner",
        title="Task Planner",
        description="Create action plans from current notes",
        prompt=(
            "Based on my current notes, help me create a practical action plan. Identify the "
            "main objectives, break them down into actionable tasks, and set priorities."
        ),
        category="planning",
    ),
    PromptTemplate(
        id="learning-review",
        title="Learning Review",
        description="Reflect on and consolidate learning",
        prompt=(
            "Review my current notes and help me consolidate key learnings. Highlight "
            "important insights, spot knowledge gaps, and suggest next steps."
        ),
        category="reflection",
    ),
    PromptTemplate(
        id="research-assistant",
        title="Research Assistant",
        description="Expand research based on current notes",
        prompt=(
            "Based on my current research notes, help me identify promising areas for "
            "further investigation and suggest specific research questions."
        ),
        category="research",
    ),
]


class StaticTemplateCatalog(TemplateCatalog):
    """Fixed list of templates, minus the hidden ones."""

    def __init__(
        self,
        templates: Iterable[PromptTemplate] | None = None,
        hidden_ids: Iterable[str] | None = None,
    ) -> None:
        self._templates = list(templates) if templates is not None else list(BUILTIN_TEMPLATES)
        self._hidden_ids = set(hidden_ids or [])

    def templates(self) -> List[PromptTemplate]:
        return [template for template in self._templates if template.id not in self._hidden_ids]


def filter_templates(templates: Iterable[PromptTemplate], filter_text: str) -> list[PromptTemplate]:
    """Case-insensitive substring match on title, description or category."""
    templates = list(templates)
    if not filter_text:
        return templates

    needle = filter_text.lower()
    return [
        template
        for template in templates
        if needle in template.title.lower()
        or needle in template.description.lower()
        or needle in template.category.lower()
    ]
