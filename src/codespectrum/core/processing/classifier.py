from __future__ import annotations

"""
Regex-Based Line Classification.

Runs an ordered battery of independent patterns over masked source text and
emits one token per match at the line where the match starts. Lines that no
rule touches are reported as ``other`` so every line of a file is covered.

This is a heuristic lexer for C-family code (C# flavoured), not a parser:
unusual layouts or keywords used in odd places degrade to best-effort
coverage and never raise.
"""

import logging
import re
from typing import Final, Iterable, List, Optional, Set, Tuple

from codespectrum.core.processing.masker import LineLocator, count_lines, mask, normalize_newlines
from codespectrum.domain.constants import (
    ACCESS_MODIFIERS,
    BUILTIN_TYPE_KEYWORDS,
    DECLARATION_MODIFIERS,
    RESERVED_KEYWORDS,
    TokenKind,
)
from codespectrum.domain.token_models import LineToken

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# DECLARATION BUILDING BLOCKS
# -----------------------------------------------------------------------------

def _alternation(words: Iterable[str]) -> str:
    return "|".join(sorted(words, key=len, reverse=True))


_RESERVED: Final[str] = _alternation(RESERVED_KEYWORDS)
_ALL_KEYWORDS: Final[str] = _alternation(RESERVED_KEYWORDS + BUILTIN_TYPE_KEYWORDS)
_MODIFIERS: Final[str] = _alternation(DECLARATION_MODIFIERS)
_ACCESS: Final[str] = _alternation(ACCESS_MODIFIERS)

_IDENT: Final[str] = r"[A-Za-z_]\w*"
_GENERIC_BODY: Final[str] = r"[^<>;{}()=]*"

# Types may be built-in keywords (int, string, var); names may not.
_TYPE_NAME: Final[str] = (
    rf"(?!(?:{_RESERVED})\b){_IDENT}(?:\.{_IDENT})*"
    rf"(?:<{_GENERIC_BODY}(?:<{_GENERIC_BODY}>{_GENERIC_BODY})*>)?"
    r"\??(?:\[[ \t,]*\])*\??"
)
_NAME: Final[str] = rf"(?!(?:{_ALL_KEYWORDS})\b){_IDENT}"

_DECLARATION: Final[str] = (
    rf"(?<![\w.])(?:(?:{_MODIFIERS})[ \t]+)*{_TYPE_NAME}[ \t]+{_NAME}"
)

# -----------------------------------------------------------------------------
# CLASSIFICATION RULES
# -----------------------------------------------------------------------------

_PROPERTY_PATTERN: Final[str] = (
    rf"{_DECLARATION}\s*(?:=>|\{{\s*(?:(?:{_ACCESS})[ \t]+)?(?:get|set|init)\s*(?:;|\{{|=>))"
)
_FIELD_OR_LOCAL_PATTERN: Final[str] = rf"{_DECLARATION}[ \t]*(?:=(?![=>])|;)"
_METHOD_PATTERN: Final[str] = (
    rf"{_DECLARATION}[ \t]*(?:<[^<>()]*>)?[ \t]*\("
    rf"|(?<![\w.])(?:{_ACCESS})[ \t]+(?:(?:{_MODIFIERS})[ \t]+)*{_NAME}[ \t]*\("
)

# Compound operators are optional; comparisons and lambda arrows are excluded.
_ASSIGNMENT_PATTERN: Final[str] = r"(?<![=!<>+\-*/%&|^?])(?:<<|>>|\?\?|[+\-*/%&|^])?=(?![=>])"

CLASSIFICATION_RULES: Final[Tuple[Tuple[TokenKind, re.Pattern], ...]] = (
    (TokenKind.IF_ELSE, re.compile(r"\b(?:else\s+if|if|else)\b")),
    (TokenKind.DO_WHILE, re.compile(r"\b(?:do|while)\b")),
    (TokenKind.SWITCH_CASE, re.compile(r"\b(?:switch|case)\b")),
    (TokenKind.FOR_LOOP, re.compile(r"\bfor(?:each)?\b")),
    (TokenKind.CLASS_OR_STRUCT, re.compile(r"\b(?:class|struct)\b")),
    (TokenKind.INTERFACE, re.compile(r"\binterface\b")),
    (TokenKind.TRY_CATCH_FINALLY, re.compile(r"\b(?:try|catch|finally)\b")),
    (TokenKind.USING, re.compile(r"\b(?:using|import)\b")),
    (TokenKind.RETURN, re.compile(r"\breturn\b")),
    (TokenKind.INSTANTIATION, re.compile(r"\bnew\b")),
    (TokenKind.ASSIGNMENT, re.compile(_ASSIGNMENT_PATTERN)),
    (TokenKind.PROPERTY, re.compile(_PROPERTY_PATTERN)),
    (TokenKind.FIELD_OR_LOCAL, re.compile(_FIELD_OR_LOCAL_PATTERN)),
    (TokenKind.METHOD, re.compile(_METHOD_PATTERN)),
)

_WORD_CHAR: Final[re.Pattern] = re.compile(r"\w")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def classify(
        masked_text: str,
        removed_tokens: Iterable[LineToken] = (),
        line_count: Optional[int] = None,
) -> List[LineToken]:
    """
    Classify the lines of a masked text.

    Args:
        masked_text: Output text of the masking stages.
        removed_tokens: Comment and string tokens reported by the masker; their
                        start lines are never considered empty.
        line_count: Line count of the original, unmasked text. Defaults to the
                    masked text's own count.

    Returns:
        List[LineToken]: Flat, unsorted tokens of every rule, the corrected
                         empty-line tokens and the ``other`` fallback tokens.
                         Removed tokens are not included.
    """
    removed = list(removed_tokens)
    total_lines = count_lines(masked_text) if line_count is None else line_count
    locator = LineLocator(masked_text)

    tokens: List[LineToken] = []
    for kind, pattern in CLASSIFICATION_RULES:
        for m in pattern.finditer(masked_text):
            tokens.append(LineToken(locator.line_of(m.start()), kind))

    tokens.extend(find_empty_lines(masked_text, removed))
    tokens.extend(get_other_tokens(total_lines, tokens + removed))
    return tokens


def find_empty_lines(masked_text: str, removed_tokens: Iterable[LineToken] = ()) -> List[LineToken]:
    """
    Flag lines without any word character, minus comment/string start lines.

    A line holding only a masked comment or string looks blank after masking
    but is not empty.
    """
    if not masked_text:
        return []

    occupied: Set[int] = {t.line_number for t in removed_tokens}
    return [
        LineToken(num, TokenKind.EMPTY_LINE)
        for num, line in enumerate(masked_text.split("\n"), start=1)
        if num not in occupied and not _WORD_CHAR.search(line)
    ]


def get_other_tokens(line_count: int, tokens: Iterable[LineToken]) -> List[LineToken]:
    """
    Build ``other`` tokens for every line in ``[1, line_count]`` no token covers.

    Args:
        line_count: Number of lines of the original text.
        tokens: Every token produced for the text so far.

    Returns:
        List[LineToken]: One ``other`` token per uncovered line, in line order.
    """
    covered: Set[int] = {t.line_number for t in tokens}
    return [
        LineToken(num, TokenKind.OTHER)
        for num in range(1, line_count + 1)
        if num not in covered
    ]


def tokenize(text: str) -> List[LineToken]:
    """
    Run the whole per-file pipeline: normalize, mask, then classify.

    Args:
        text: Raw source text.

    Returns:
        List[LineToken]: Comment and string tokens followed by the classified
                         line tokens.
    """
    masked = mask(text)
    total_lines = count_lines(normalize_newlines(text or ""))
    line_tokens = classify(masked.text, masked.tokens, line_count=total_lines)

    logger.debug(
        f"Tokenized {total_lines} lines: "
        f"{len(masked.tokens)} removed spans, {len(line_tokens)} line tokens"
    )
    return masked.tokens + line_tokens
