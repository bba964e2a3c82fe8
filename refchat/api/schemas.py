from pydantic import BaseModel


class ParseRequest(BaseModel):
    """A canonical string to turn into a document."""

    text: str


class SerializeResponse(BaseModel):
    text: str
