"""Tokenizer for the inline filters accepted by employee search."""

import re
from typing import Dict, Optional, Tuple

from ..models.query import ParsedQuery


SHIFT_NIGHT = "shift:night"
SHIFT_DAY = "shift:day"
STATUS_ACTIVE = "status:active"
STATUS_INACTIVE = "status:inactive"
STATUS_DECEASED = "status:avliden"

# token -> (filter name, value)
FILTER_TOKENS: Dict[str, Tuple[str, bool]] = {
    SHIFT_NIGHT: ("night_only", True),
    SHIFT_DAY: ("night_only", False),
    STATUS_ACTIVE: ("active", True),
    STATUS_INACTIVE: ("active", False),
    STATUS_DECEASED: ("active", False),
}

# Evaluation order when a query carries conflicting tokens; later entries win.
_PRECEDENCE = (SHIFT_NIGHT, SHIFT_DAY, STATUS_ACTIVE, STATUS_INACTIVE, STATUS_DECEASED)

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


class QueryParser:
    """Splits a search query into structural filters and a residual text term."""

    def __init__(self) -> None:
        """Initialize the parser."""
        # Longer tokens first so alternation never stops at a shorter overlap.
        alternatives = sorted(FILTER_TOKENS, key=len, reverse=True)
        self.token_regex = re.compile(
            "|".join(re.escape(token) for token in alternatives), re.IGNORECASE
        )

    def parse(self, query: Optional[str]) -> ParsedQuery:
        """
        Parse a free-text query.

        Args:
            query: Raw query, may be None

        Returns:
            ParsedQuery with either ``id_lookup`` set or the filters and term
        """
        raw = query or ""
        text = raw.strip()

        if _ID_PATTERN.fullmatch(text):
            return ParsedQuery(raw=raw, id_lookup=int(text))

        tokens = [match.group(0).lower() for match in self.token_regex.finditer(text)]
        present = set(tokens)

        filters: Dict[str, Optional[bool]] = {"night_only": False, "active": None}
        for token in _PRECEDENCE:
            if token in present:
                name, value = FILTER_TOKENS[token]
                filters[name] = value

        term = self.token_regex.sub("", text).strip()

        return ParsedQuery(
            raw=raw,
            night_only=bool(filters["night_only"]),
            active=filters["active"],
            term=term,
            tokens=tokens,
        )
