from __future__ import annotations

"""
Domain Constants and Static Classification Tables.

Provides the stable display category enumeration consumed by renderers, the
lower-level lexical token kinds produced by the classifier, and the immutable
mapping that groups the latter into the former. Also centralizes the keyword
tables used by the declaration patterns.
"""

from enum import IntEnum
from types import MappingProxyType
from typing import Final, List, Mapping, Tuple

# -----------------------------------------------------------------------------
# DISPLAY CATEGORIES
# -----------------------------------------------------------------------------

class DisplayCategory(IntEnum):
    """
    Externally visible classification buckets.

    The ordinal order is part of the renderer contract (legend and colour
    assignment) and must never be reordered.
    """
    PROPERTY_METHOD = 0
    FIELD_OR_LOCAL = 1
    IF_SWITCH_CASE = 2
    WHILE_FOR_LOOP = 3
    CLASS_STRUCT_INTERFACE = 4
    EMPTY_LINE = 5
    COMMENT = 6
    STRING_LITERAL = 7
    TRY_CATCH_FINALLY = 8
    USING_IMPORT = 9
    ASSIGNMENT = 10
    INSTANTIATION = 11
    RETURN = 12
    OTHER = 13


DISPLAY_NAMES: Final[Tuple[str, ...]] = (
    "property/method",
    "field/local variable",
    "if/switch case",
    "while/for loop",
    "class/struct/interface",
    "empty line",
    "comment",
    "string literal",
    "try/catch/finally",
    "using",
    "assignment",
    "instantiation",
    "return",
    "other",
)


def display_name(category: DisplayCategory) -> str:
    """Return the legend label of a display category."""
    return DISPLAY_NAMES[int(category)]

# -----------------------------------------------------------------------------
# LEXICAL TOKEN KINDS
# -----------------------------------------------------------------------------

class TokenKind(IntEnum):
    """Fine-grained kinds emitted by the masking and classification passes."""
    PROPERTY = 0
    METHOD = 1
    FIELD_OR_LOCAL = 2
    IF_ELSE = 3
    DO_WHILE = 4
    SWITCH_CASE = 5
    FOR_LOOP = 6
    CLASS_OR_STRUCT = 7
    INTERFACE = 8
    EMPTY_LINE = 9
    COMMENT = 10
    STRING_LITERAL = 11
    TRY_CATCH_FINALLY = 12
    USING = 13
    ASSIGNMENT = 14
    INSTANTIATION = 15
    RETURN = 16
    OTHER = 17


# Read-only view, built once at import.
CATEGORY_BY_KIND: Final[Mapping[TokenKind, DisplayCategory]] = MappingProxyType({
    TokenKind.PROPERTY: DisplayCategory.PROPERTY_METHOD,
    TokenKind.METHOD: DisplayCategory.PROPERTY_METHOD,
    TokenKind.FIELD_OR_LOCAL: DisplayCategory.FIELD_OR_LOCAL,
    TokenKind.IF_ELSE: DisplayCategory.IF_SWITCH_CASE,
    TokenKind.SWITCH_CASE: DisplayCategory.IF_SWITCH_CASE,
    TokenKind.DO_WHILE: DisplayCategory.WHILE_FOR_LOOP,
    TokenKind.FOR_LOOP: DisplayCategory.WHILE_FOR_LOOP,
    TokenKind.CLASS_OR_STRUCT: DisplayCategory.CLASS_STRUCT_INTERFACE,
    TokenKind.INTERFACE: DisplayCategory.CLASS_STRUCT_INTERFACE,
    TokenKind.EMPTY_LINE: DisplayCategory.EMPTY_LINE,
    TokenKind.COMMENT: DisplayCategory.COMMENT,
    TokenKind.STRING_LITERAL: DisplayCategory.STRING_LITERAL,
    TokenKind.TRY_CATCH_FINALLY: DisplayCategory.TRY_CATCH_FINALLY,
    TokenKind.USING: DisplayCategory.USING_IMPORT,
    TokenKind.ASSIGNMENT: DisplayCategory.ASSIGNMENT,
    TokenKind.INSTANTIATION: DisplayCategory.INSTANTIATION,
    TokenKind.RETURN: DisplayCategory.RETURN,
    TokenKind.OTHER: DisplayCategory.OTHER,
})

# -----------------------------------------------------------------------------
# KEYWORD TABLES (C-family, C# flavoured)
# -----------------------------------------------------------------------------

# Predefined type names: valid as a declaration type, never as a declared name.
BUILTIN_TYPE_KEYWORDS: Final[Tuple[str, ...]] = (
    "bool", "byte", "char", "decimal", "double", "dynamic", "float", "int",
    "long", "nint", "nuint", "object", "sbyte", "short", "string", "uint",
    "ulong", "ushort", "var", "void",
)

# Everything else that can never be a type or a declared name.
RESERVED_KEYWORDS: Final[Tuple[str, ...]] = (
    "abstract", "as", "async", "await", "base", "break", "case", "catch",
    "checked", "class", "const", "continue", "default", "delegate", "do",
    "else", "enum", "event", "explicit", "extern", "false", "finally",
    "fixed", "for", "foreach", "goto", "if", "implicit", "in", "interface",
    "internal", "is", "lock", "namespace", "new", "null", "operator", "out",
    "override", "params", "partial", "private", "protected", "public",
    "readonly", "ref", "return", "sealed", "sizeof", "stackalloc", "static",
    "struct", "switch", "this", "throw", "true", "try", "typeof", "unchecked",
    "unsafe", "using", "virtual", "volatile", "while", "yield",
)

DECLARATION_MODIFIERS: Final[Tuple[str, ...]] = (
    "public", "private", "internal", "protected", "readonly", "const",
    "static", "abstract", "override", "virtual", "sealed", "async",
)

ACCESS_MODIFIERS: Final[Tuple[str, ...]] = (
    "public", "private", "internal", "protected",
)


def default_source_extensions() -> List[str]:
    """Source extensions analyzed when no configuration says otherwise."""
    return [".cs"]


DEFAULT_INCLUDE_PATTERNS: Final[Tuple[str, ...]] = (".*",)

# Build output, VCS metadata, IDE folders, generated sources and hidden entries.
DEFAULT_EXCLUDE_PATTERNS: Final[Tuple[str, ...]] = (
    r"^(bin|obj|packages|node_modules)$",
    r"^(\.git|\.vs|\.idea|\.vscode)$",
    r".*\.(g|designer|generated)\.cs$",
    r"^\.",
)
