"""Operation codes and classification enums.

Wire vocabularies for layout and pointer-patch operations, plus the
strictness levels and diagnostic codes used when binding values are
checked against their declared types.
"""

from __future__ import annotations

from enum import StrEnum


class PatchVerb(StrEnum):
    """Verbs accepted by a pointer patch."""

    ADD = "add"
    REPLACE = "replace"
    REMOVE = "remove"


class LayoutOpKind(StrEnum):
    """Layout operation codes understood by the layout patcher."""

    ADD = "add"
    REMOVE = "remove"
    REPLACE = "replace"


class TypeCheckMode(StrEnum):
    """How non-conforming binding output is treated."""

    WARN = "warn"
    COERCE = "coerce"
    REJECT = "reject"


class DiagnosticCode(StrEnum):
    """Codes for recoverable, apply-time issues."""

    UNRESOLVABLE_PATH = "UNRESOLVABLE_PATH"
    NOT_A_LIST = "NOT_A_LIST"
    MISSING_VALUE = "MISSING_VALUE"
    UNKNOWN_OPERATION = "UNKNOWN_OPERATION"
    MISSING_TARGET = "MISSING_TARGET"
    DANGLING_REFERENCE = "DANGLING_REFERENCE"
    TYPE_MISMATCH = "TYPE_MISMATCH"
