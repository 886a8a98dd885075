from __future__ import annotations

"""
Comment and String Literal Masking.

Blanks out comments and string literals so that the structural patterns of
the classifier never see text living inside them. Every masked character is
replaced by a space while line breaks are kept, which leaves the length and
the line layout of the document untouched.

The masking passes are modelled as an ordered list of pure stages
``(text) -> (text, tokens)``: comments first, then string literals over the
comment-masked text.
"""

import logging
import re
from bisect import bisect_right
from typing import Callable, Final, List, NamedTuple, Tuple

from codespectrum.domain.constants import TokenKind
from codespectrum.domain.token_models import LineToken

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# MASKING PATTERNS
# -----------------------------------------------------------------------------

# Line comments stop before the line break; block comments run to the nearest
# "*/" or to the end of input when unterminated.
_COMMENT: Final[str] = r"//[^\n]*|/\*.*?(?:\*/|\Z)"

# Verbatim strings escape a quote by doubling it; regular and interpolated
# strings escape with a backslash. A missing closing quote extends the
# literal to the end of input.
_STRING: Final[str] = (
    r'(?P<vprefix>\$@"|@\$?")(?P<vbody>(?:[^"]|"")*)(?P<vclose>")?'
    r'|(?P<bprefix>\$?")(?P<bbody>(?:[^"\\]|\\(?:.|\Z))*)(?P<bclose>")?'
)

# Char literals: 'a', '"', '\'', 'A'. Never masked or reported.
_CHAR: Final[str] = r"'(?:[^'\\\n]|\\[^\n][^'\n]{0,8})'"

# Each scan walks the text left to right so that a delimiter is only honoured
# outside the other lexemes: "//" inside a string is not a comment, and a
# quote inside a comment or char literal does not open a string.
_COMMENT_SCAN: Final[re.Pattern] = re.compile(
    rf"(?P<char>{_CHAR})|(?P<string>{_STRING})|(?P<comment>{_COMMENT})",
    re.DOTALL,
)
_STRING_SCAN: Final[re.Pattern] = re.compile(
    rf"(?P<char>{_CHAR})|(?P<string>{_STRING})",
    re.DOTALL,
)

_MASK_CHAR: Final[str] = " "

Stage = Callable[[str], Tuple[str, List[LineToken]]]


class MaskResult(NamedTuple):
    """Masked text plus the comment and string tokens that were removed."""
    text: str
    tokens: List[LineToken]

# -----------------------------------------------------------------------------
# TEXT HELPERS
# -----------------------------------------------------------------------------

def normalize_newlines(text: str) -> str:
    """Convert CRLF and stray CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def line_number(text: str, index: int) -> int:
    """Return the 1-based line that contains ``index``."""
    return text.count("\n", 0, index) + 1


class LineLocator:
    """Resolve character offsets to 1-based line numbers by bisection."""

    def __init__(self, text: str) -> None:
        self._breaks = [m.start() for m in re.finditer("\n", text)]

    def line_of(self, index: int) -> int:
        return bisect_right(self._breaks, index - 1) + 1


def count_lines(text: str) -> int:
    """Number of physical lines; an empty text has none."""
    if not text:
        return 0
    return text.count("\n") + 1


def blank_spans(text: str, spans: List[Tuple[int, int]]) -> str:
    """
    Replace every character inside the given ``(start, end)`` spans by a space.

    Line breaks inside a span are preserved so the line layout never shifts.
    """
    if not spans:
        return text

    chars = list(text)
    for start, end in spans:
        for i in range(start, end):
            if chars[i] != "\n":
                chars[i] = _MASK_CHAR
    return "".join(chars)

# -----------------------------------------------------------------------------
# MASKING STAGES
# -----------------------------------------------------------------------------

def mask_comments(text: str) -> Tuple[str, List[LineToken]]:
    """
    Mask line and block comments.

    String and char literals are stepped over, not masked: comment markers
    inside them are plain text.

    Args:
        text: Newline-normalized source text.

    Returns:
        Tuple[str, List[LineToken]]: Masked text and one comment token per match.
    """
    spans: List[Tuple[int, int]] = []
    tokens: List[LineToken] = []
    locator = LineLocator(text)

    for m in _COMMENT_SCAN.finditer(text):
        matched = m.group("comment")
        if matched is None:
            continue
        spans.append((m.start(), m.end()))
        tokens.append(LineToken(
            line_number=locator.line_of(m.start()),
            kind=TokenKind.COMMENT,
            span=matched.count("\n") + 1,
            length=len(matched),
        ))

    return blank_spans(text, spans), tokens


def mask_string_literals(text: str) -> Tuple[str, List[LineToken]]:
    """
    Mask verbatim, interpolated and basic string literals.

    The reported length, span and line number describe the literal's content
    only; the prefix (``"``, ``$"``, ``@"``, ``$@"``) and the closing quote are
    excluded. The whole literal, delimiters included, is masked.

    Args:
        text: Comment-masked source text.

    Returns:
        Tuple[str, List[LineToken]]: Masked text and one string token per literal.
    """
    spans: List[Tuple[int, int]] = []
    tokens: List[LineToken] = []
    locator = LineLocator(text)

    for m in _STRING_SCAN.finditer(text):
        if m.group("string") is None:
            continue

        body_group = "vbody" if m.group("vprefix") is not None else "bbody"
        body = m.group(body_group)
        body_start = m.start(body_group)

        spans.append((m.start(), m.end()))
        tokens.append(LineToken(
            line_number=locator.line_of(body_start),
            kind=TokenKind.STRING_LITERAL,
            span=body.count("\n") + 1,
            length=len(body),
        ))

    return blank_spans(text, spans), tokens


MASKING_STAGES: Final[Tuple[Stage, ...]] = (mask_comments, mask_string_literals)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def mask(text: str) -> MaskResult:
    """
    Normalize line endings once, then run every masking stage in order.

    Args:
        text: Raw source text.

    Returns:
        MaskResult: Masked text with identical length and line breaks, and the
                    removed comment and string tokens (comments first).
    """
    current = normalize_newlines(text or "")
    removed: List[LineToken] = []

    for stage in MASKING_STAGES:
        current, tokens = stage(current)
        removed.extend(tokens)

    logger.debug(f"Masked {len(removed)} comment/string spans over {count_lines(current)} lines")
    return MaskResult(current, removed)
