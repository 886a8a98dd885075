from __future__ import annotations

"""
Classification Token Data Models.

Defines the immutable value objects exchanged between the masking,
classification and aggregation stages.
"""

from dataclasses import dataclass
from typing import Optional

from codespectrum.domain.constants import CATEGORY_BY_KIND, DisplayCategory, TokenKind

# -----------------------------------------------------------------------------
# TOKENS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class LineToken:
    """
    One classified occurrence on a line.

    Attributes:
        line_number: 1-based line on which the construct starts.
        kind: Lexical kind that produced the token.
        span: Number of lines the construct occupies (comments/strings only).
        length: Raw character length of the matched text (comments/strings only).
    """
    line_number: int
    kind: TokenKind
    span: int = 1
    length: Optional[int] = None

    @property
    def category(self) -> DisplayCategory:
        return CATEGORY_BY_KIND[self.kind]

# -----------------------------------------------------------------------------
# STATISTICS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class CategoryStats:
    """
    Aggregated statistics of one display category within a file or directory.

    Attributes:
        occurrences: Number of tokens of the category.
        dispersion: Population standard deviation of the tokens' line numbers.
    """
    occurrences: int = 0
    dispersion: float = 0.0
