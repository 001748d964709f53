"""Wire document models — packets, layouts, nodes, bindings, events.

Every entity is a frozen pydantic model whose attribute names are the
snake_case spelling of the camelCase wire keys. Two invariants hold for
all of them:

- ``from_wire()`` is strict: any validation failure raises
  :class:`~sdui.domain.errors.MalformedDocumentError` before the caller
  can act on a half-parsed document.
- ``to_wire()`` is symmetric: only keys that were present on input (plus
  the few keys a document must always carry) are emitted, so parsing a
  document and serializing it unmodified reproduces it exactly. Unknown
  keys are preserved as extras.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, ClassVar, Self

from pydantic import BaseModel, Field, ValidationError
from pydantic.alias_generators import to_camel

from sdui.domain.errors import MalformedDocumentError

FORMAT_VERSION = "1.0.0"


def now_iso() -> str:
    """Current UTC time as ISO 8601."""
    return datetime.now(UTC).isoformat()


class WireModel(BaseModel):
    """Base for all JSON wire documents."""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "allow",
    }

    # Fields emitted even when they were filled from a default.
    _wire_defaults: ClassVar[tuple[str, ...]] = ()

    def model_post_init(self, __context: Any) -> None:
        self.__pydantic_fields_set__.update(self._wire_defaults)

    @classmethod
    def from_wire(cls, data: Mapping[str, Any] | str | bytes) -> Self:
        """Parse a wire document (a mapping or raw JSON text).

        Raises:
            MalformedDocumentError: If the document does not validate.
        """
        try:
            if isinstance(data, (str, bytes)):
                return cls.model_validate_json(data)
            return cls.model_validate(data)
        except ValidationError as exc:
            errors = [
                f"{'.'.join(str(p) for p in err['loc']) or 'root'}: {err['msg']}"
                for err in exc.errors()[:5]
            ]
            msg = f"Malformed {cls.__name__}: {'; '.join(errors)}"
            raise MalformedDocumentError(msg, errors=errors) from exc

    def to_wire(self) -> dict[str, Any]:
        """Serialize back to a JSON-compatible dict using wire keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    def to_json(self, *, indent: int | None = None) -> str:
        return json.dumps(self.to_wire(), indent=indent)


# ---------------------------------------------------------------------------
# Bindings
# ---------------------------------------------------------------------------


class Condition(WireModel):
    """Boolean branch transformer: ``ifValue`` when truthy, else ``elseValue``."""

    if_value: Any = None
    else_value: Any = None


class MapTransformer(WireModel):
    """Lookup-table transformer with an optional fallback."""

    mapping: dict[str, Any] = Field(default_factory=dict)
    fallback: Any = None

    @property
    def has_fallback(self) -> bool:
        """Whether a fallback was declared (a declared ``null`` counts)."""
        return "fallback" in self.model_fields_set


class Binding(WireModel):
    """Link from a node property to a dot path in state.

    At most one transformer is applied, checked in the order
    ``format``, ``condition``, ``map``.
    """

    path: str
    format: str | None = None
    condition: Condition | None = None
    map: MapTransformer | None = None


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


class Node(WireModel):
    """One widget instance in the flat layout graph."""

    id: str
    type: str
    properties: dict[str, Any] | None = None
    bindings: dict[str, Binding] | None = None
    item_template: Node | None = None

    def with_property(self, name: str, value: Any) -> Node:
        """Return a new node record with *name* set in its properties.

        The receiver is left untouched so that holders of the old record
        never observe the change.
        """
        properties = dict(self.properties or {})
        properties[name] = value
        return self.model_copy(update={"properties": properties})


class Layout(WireModel):
    """Root id plus an ordered, flat list of nodes."""

    root: str
    nodes: list[Node] = Field(default_factory=list)

    _wire_defaults: ClassVar[tuple[str, ...]] = ("nodes",)


class Packet(WireModel):
    """Self-contained UI description: layout, matching state, metadata."""

    format_version: str = FORMAT_VERSION
    layout: Layout
    state: dict[str, Any] = Field(default_factory=dict)
    metadata: dict[str, Any] | None = None

    _wire_defaults: ClassVar[tuple[str, ...]] = ("format_version", "state")


# ---------------------------------------------------------------------------
# Events (client -> server)
# ---------------------------------------------------------------------------


class EventPayload(WireModel):
    """User interaction reported by the client. Never mutated by the engine."""

    source_node_id: str
    event_name: str
    timestamp: str = Field(default_factory=now_iso)
    arguments: dict[str, Any] | None = None

    _wire_defaults: ClassVar[tuple[str, ...]] = ("timestamp",)
