"""State and layout update documents.

``StateUpdate`` operations form a closed sum type discriminated on
``op``: an unknown discriminator fails the whole update at parse time,
before any mutation. ``LayoutUpdate`` operations are deliberately open:
their ``op`` code is checked at apply time, where an unknown code is a
recoverable diagnostic.

Adding a state operation kind means extending :data:`StateOperation`
and the two exhaustive matches over it (apply, serialize).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, ClassVar, Literal

from pydantic import Field

from sdui.domain.models import Node, WireModel
from sdui.domain.types import PatchVerb

# ---------------------------------------------------------------------------
# State operations
# ---------------------------------------------------------------------------


class PatchObject(WireModel):
    """Pointer-addressed ``add``/``replace``/``remove`` against state."""

    op: PatchVerb
    path: str
    value: Any = None


class PatchOperation(WireModel):
    op: Literal["patch"] = "patch"
    patch: PatchObject

    _wire_defaults: ClassVar[tuple[str, ...]] = ("op",)

    @property
    def path(self) -> str:
        return self.patch.path


class ListAppendOperation(WireModel):
    """Append items to a list (scalar lists take each item's ``value``)."""

    op: Literal["listAppend"] = "listAppend"
    path: str
    items: list[dict[str, Any]]

    _wire_defaults: ClassVar[tuple[str, ...]] = ("op",)


class ListRemoveOperation(WireModel):
    """Remove list elements whose ``item_key`` field is one of ``keys``."""

    op: Literal["listRemove"] = "listRemove"
    path: str
    item_key: str
    keys: list[Any]

    _wire_defaults: ClassVar[tuple[str, ...]] = ("op",)


class ListUpdateOperation(WireModel):
    """Replace list elements in place, matched on ``item_key``."""

    op: Literal["listUpdate"] = "listUpdate"
    path: str
    item_key: str
    items: list[dict[str, Any]]

    _wire_defaults: ClassVar[tuple[str, ...]] = ("op",)


StateOperation = Annotated[
    PatchOperation | ListAppendOperation | ListRemoveOperation | ListUpdateOperation,
    Field(discriminator="op"),
]


class StateUpdate(WireModel):
    """Ordered batch of state operations, applied atomically."""

    operations: list[StateOperation] = Field(default_factory=list)

    _wire_defaults: ClassVar[tuple[str, ...]] = ("operations",)


def parse_state_update(data: StateUpdate | Mapping[str, Any] | str | bytes) -> StateUpdate:
    """Coerce *data* to a :class:`StateUpdate`, failing fast when malformed."""
    if isinstance(data, StateUpdate):
        return data
    return StateUpdate.from_wire(data)


# ---------------------------------------------------------------------------
# Layout operations
# ---------------------------------------------------------------------------


class LayoutOperation(WireModel):
    """One structural change: ``add``, ``remove`` or ``replace``.

    ``op`` is kept as a plain string so that codes unknown to this
    client parse cleanly and are skipped when applied.
    """

    op: str
    nodes: list[Node] | None = None
    node_ids: list[str] | None = None
    target_node_id: str | None = None
    target_property: str | None = None


class LayoutUpdate(WireModel):
    """Ordered batch of layout operations, applied best-effort."""

    operations: list[LayoutOperation] = Field(default_factory=list)

    _wire_defaults: ClassVar[tuple[str, ...]] = ("operations",)


def parse_layout_update(
    data: LayoutUpdate | Mapping[str, Any] | str | bytes,
) -> LayoutUpdate:
    """Coerce *data* to a :class:`LayoutUpdate`, failing fast when malformed."""
    if isinstance(data, LayoutUpdate):
        return data
    return LayoutUpdate.from_wire(data)
