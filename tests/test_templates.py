from refchat.domain.template import PromptTemplate
from refchat.templates.catalog import BUILTIN_TEMPLATES, StaticTemplateCatalog, filter_templates


def test_builtin_catalog() -> None:
    """Test the default templates."""
    templates = StaticTemplateCatalog().templates()

    assert [template.id for template in templates] == [
        "creative-writing",
        "daily-summary",
        "knowledge-network",
        "task-planner",
        "learning-review",
        "research-assistant",
    ]
    assert "[DATE]" in templates[1].prompt


def test_hidden_templates_are_left_out() -> None:
    """Test hiding templates by id."""
    catalog = StaticTemplateCatalog(hidden_ids=["daily-summary", "task-planner"])

    assert len(catalog.templates()) == len(BUILTIN_TEMPLATES) - 2


def test_filter_matches_title_description_and_category(
    test_templates: list[PromptTemplate],
) -> None:
    """Test case-insensitive template filtering."""
    assert [t.id for t in filter_templates(test_templates, "DAILY")] == ["daily-summary"]
    assert [t.id for t in filter_templates(test_templates, "action")] == ["task-planner"]
    assert [t.id for t in filter_templates(test_templates, "writing")] == ["creative-writing"]
    assert filter_templates(test_templates, "") == test_templates
    assert filter_templates(test_templates, "nothing") == []
