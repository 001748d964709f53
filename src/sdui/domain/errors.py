"""Engine exceptions and recoverable diagnostics.

Two failure classes exist:

- Exceptions (:class:`SduiError` subclasses) stop an operation before or
  instead of producing a result: malformed documents at parse time and
  structural integrity violations (cycles, missing root) at resolve time.
- :class:`Diagnostic` records describe apply-time mismatches that were
  skipped so the rest of a batch could still land.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SduiError(Exception):
    """Base class for all engine errors."""

    code: str = "SDUI_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


class MalformedDocumentError(SduiError):
    """A wire document failed strict parsing; nothing was mutated."""

    code = "MALFORMED_DOCUMENT"


class LayoutResolutionError(SduiError):
    """Resolution of the layout graph failed as a whole."""

    code = "RESOLUTION_FAILED"


class MissingRootError(LayoutResolutionError):
    """The requested root id is not present in the node map."""

    code = "MISSING_ROOT"

    def __init__(self, root_id: str) -> None:
        super().__init__(f"Root node '{root_id}' not found in layout", root_id=root_id)
        self.root_id = root_id


class CyclicalLayoutError(LayoutResolutionError):
    """A node id was reached again while already on the active path."""

    code = "CYCLICAL_LAYOUT"

    def __init__(self, node_id: str, path: list[str]) -> None:
        trail = " -> ".join([*path, node_id])
        super().__init__(
            f"Cyclical layout detected at node '{node_id}': {trail}",
            node_id=node_id,
            path=list(path),
        )
        self.node_id = node_id
        self.path = list(path)


class LayoutTooDeepError(LayoutResolutionError):
    """The active path grew past the resolver's depth limit."""

    code = "LAYOUT_TOO_DEEP"

    def __init__(self, node_id: str, max_depth: int) -> None:
        super().__init__(
            f"Layout exceeds maximum depth of {max_depth} at node '{node_id}'",
            node_id=node_id,
            max_depth=max_depth,
        )
        self.node_id = node_id
        self.max_depth = max_depth


class Diagnostic(BaseModel):
    """A recoverable issue recorded while applying an operation."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class PatchReport(BaseModel):
    """Outcome of one applied batch of state or layout operations.

    Attributes:
        applied: Operations that took effect.
        skipped: Operations that were skipped with a diagnostic.
        diagnostics: One entry per skipped operation or partial skip.
    """

    model_config = {"frozen": True}

    applied: int = 0
    skipped: int = 0
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [d.message for d in self.diagnostics]
