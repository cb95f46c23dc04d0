"""Parsed search query model."""

from typing import List, Optional

from pydantic import BaseModel, Field


class ParsedQuery(BaseModel):
    """Structured form of a free-text search query."""

    raw: str = Field(..., description="Original query text")
    id_lookup: Optional[int] = Field(
        None, description="Set when the whole query is an integer id"
    )
    night_only: bool = Field(default=False, description="Only night-shift ants")
    active: Optional[bool] = Field(
        None, description="Required activity state, None for no activity filter"
    )
    term: str = Field(default="", description="Residual text after filter tokens are removed")
    tokens: List[str] = Field(
        default_factory=list, description="Recognized filter tokens, lowercased, in query order"
    )

    @property
    def has_filters(self) -> bool:
        return self.night_only or self.active is not None

    @property
    def lowered_term(self) -> str:
        return self.term.lower()
