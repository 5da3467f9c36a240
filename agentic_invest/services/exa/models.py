"""Pydantic models for Exa answer responses."""

from pydantic import BaseModel, Field


class ExaCitation(BaseModel):
    """A source the answer was grounded on."""

    url: str
    title: str = ""
    text: str | None = None


class ExaAnswerResponse(BaseModel):
    """Answer text with its citations, in the order Exa returned them."""

    answer: str
    citations: list[ExaCitation] = Field(default_factory=list)
    query: str
