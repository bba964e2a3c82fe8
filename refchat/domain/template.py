"""Prompt template domain models."""

from pydantic import BaseModel


class PromptTemplate(BaseModel):
    """A slash-command template. `[DATE]` in the prompt expands to today's date."""

    id: str
    title: str
    description: str = ""
    prompt: str
    category: str = ""
    is_custom: bool = False
