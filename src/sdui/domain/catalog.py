"""Widget catalog and the type-check capability built on it.

The catalog is the client's contract with the server: which widget
types exist, which properties and events each accepts, and which custom
data types those properties may use. :class:`TypeChecker` answers "does
this value conform to that declared type?" for primitive aliases,
reference types, catalog ``dataTypes`` (JSON Schema) and plugin-supplied
predicates.

The checker never aborts anything. Callers decide what a mismatch
means via :class:`~sdui.domain.types.TypeCheckMode`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError
from pydantic import Field

from sdui.domain.errors import Diagnostic
from sdui.domain.models import FORMAT_VERSION, WireModel
from sdui.domain.paths import stringify
from sdui.domain.types import DiagnosticCode, TypeCheckMode

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_TYPES: tuple[str, ...] = ("WidgetId",)

type ValuePredicate = Callable[[Any], bool]

_ARRAY_TYPES = frozenset({"array", "list"})


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# Lower-cased alias -> predicate.
_PRIMITIVES: dict[str, ValuePredicate] = {
    "string": lambda v: isinstance(v, str),
    "int": _is_int,
    "integer": _is_int,
    "double": _is_number,
    "number": _is_number,
    "num": _is_number,
    "bool": lambda v: isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "list": lambda v: isinstance(v, list),
    "array": lambda v: isinstance(v, list),
    "map": lambda v: isinstance(v, dict),
    "object": lambda v: isinstance(v, dict),
    "any": lambda v: True,
    "dynamic": lambda v: True,
}


class WidgetDefinition(WireModel):
    """Properties and events accepted by one widget type.

    ``properties`` maps property name to a schema fragment carrying at
    least ``type``. A JSON-Schema object wrapper
    (``{"type": "object", "properties": {...}}``) is also accepted.
    """

    properties: dict[str, Any] = Field(default_factory=dict)
    events: dict[str, Any] | None = None

    def property_schemas(self) -> dict[str, dict[str, Any]]:
        props = self.properties
        inner = props.get("properties")
        if props.get("type") == "object" and isinstance(inner, dict):
            props = inner
        return {name: schema for name, schema in props.items() if isinstance(schema, dict)}

    def property_schema(self, name: str) -> dict[str, Any] | None:
        return self.property_schemas().get(name)


class Catalog(WireModel):
    """Type name -> definition map plus custom data type schemas."""

    catalog_version: str = FORMAT_VERSION
    data_types: dict[str, dict[str, Any]] = Field(default_factory=dict)
    items: dict[str, WidgetDefinition] = Field(default_factory=dict)
    reference_types: list[str] = Field(default_factory=lambda: list(DEFAULT_REFERENCE_TYPES))

    _wire_defaults: ClassVar[tuple[str, ...]] = ("catalog_version", "items")

    def definition(self, widget_type: str) -> WidgetDefinition | None:
        return self.items.get(widget_type)

    def is_reference_type(self, type_name: str | None) -> bool:
        return type_name is not None and type_name in self.reference_types

    def is_reference_schema(self, schema: Mapping[str, Any]) -> bool:
        """Whether *schema* declares a child id or a list of child ids."""
        type_name = schema.get("type")
        if self.is_reference_type(type_name):
            return True
        if type_name in _ARRAY_TYPES:
            items = schema.get("items")
            return isinstance(items, Mapping) and self.is_reference_type(items.get("type"))
        return False

    def reference_properties(self, widget_type: str) -> list[str] | None:
        """Property names of *widget_type* that hold child node ids.

        Returns None when the widget type is not in the catalog, which
        tells callers to fall back to heuristic detection.
        """
        definition = self.definition(widget_type)
        if definition is None:
            return None
        return [
            name
            for name, schema in definition.property_schemas().items()
            if self.is_reference_schema(schema)
        ]


class TypeChecker:
    """Conformance predicate over declared property types.

    Lookup order for a type name: plugin/registered predicates, catalog
    ``dataTypes`` (validated with a Draft 7 JSON Schema validator),
    reference types (a string id), primitive aliases. Unknown type names
    conform.
    """

    def __init__(
        self,
        catalog: Catalog | None = None,
        *,
        extra_types: Mapping[str, ValuePredicate] | None = None,
    ) -> None:
        self._catalog = catalog or Catalog()
        self._custom: dict[str, ValuePredicate] = dict(extra_types or {})
        self._validators: dict[str, Draft7Validator | None] = {}

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def register(self, type_name: str, predicate: ValuePredicate) -> None:
        """Register a custom type predicate (overrides catalog data types)."""
        self._custom[type_name] = predicate

    def conforms(self, type_name: str, value: Any) -> bool:
        """Decide whether *value* conforms to the declared *type_name*.

        Absent values (``None``) always conform.
        """
        if value is None:
            return True
        if type_name in self._custom:
            try:
                return bool(self._custom[type_name](value))
            except Exception:
                logger.warning(
                    "Value type predicate for %s failed; treating value as conforming",
                    type_name,
                    exc_info=True,
                )
                return True
        if type_name in self._catalog.data_types:
            validator = self._validator_for(type_name)
            return validator is None or validator.is_valid(value)
        if self._catalog.is_reference_type(type_name):
            return isinstance(value, str)
        predicate = _PRIMITIVES.get(type_name.lower())
        if predicate is None:
            return True
        return predicate(value)

    def conforms_schema(self, schema: Mapping[str, Any], value: Any) -> bool:
        """Check *value* against a property schema fragment.

        Array schemas with a typed ``items`` entry check every element.
        """
        type_name = schema.get("type")
        if not isinstance(type_name, str):
            return True
        if not self.conforms(type_name, value):
            return False
        items = schema.get("items")
        if type_name in _ARRAY_TYPES and isinstance(items, Mapping) and isinstance(value, list):
            return all(self.conforms_schema(items, element) for element in value)
        return True

    def check(
        self,
        schema: Mapping[str, Any],
        value: Any,
        *,
        mode: TypeCheckMode = TypeCheckMode.WARN,
        label: str = "value",
    ) -> tuple[Any, Diagnostic | None]:
        """Apply *mode* to a value that may not conform to *schema*.

        Returns ``(value_to_use, diagnostic)``; the diagnostic is None when
        the value conformed or was coerced cleanly.
        """
        if self.conforms_schema(schema, value):
            return value, None

        type_name = str(schema.get("type"))
        if mode is TypeCheckMode.COERCE:
            try:
                return coerce(type_name, value), None
            except (TypeError, ValueError):
                pass

        diagnostic = Diagnostic(
            code=DiagnosticCode.TYPE_MISMATCH,
            message=f"{label} does not conform to type '{type_name}'",
            detail={"type": type_name, "value": value, "mode": str(mode)},
        )
        if mode is TypeCheckMode.REJECT:
            return None, diagnostic
        return value, diagnostic

    def _validator_for(self, type_name: str) -> Draft7Validator | None:
        if type_name not in self._validators:
            schema = self._catalog.data_types[type_name]
            try:
                Draft7Validator.check_schema(schema)
            except SchemaError:
                logger.warning("Invalid JSON Schema for data type %s", type_name, exc_info=True)
                self._validators[type_name] = None
            else:
                self._validators[type_name] = Draft7Validator(schema)
        return self._validators[type_name]


def coerce(type_name: str, value: Any) -> Any:
    """Convert *value* to the primitive *type_name* where lossless.

    Raises:
        ValueError: If no lossless conversion exists.
    """
    kind = type_name.lower()
    if kind == "string" and not isinstance(value, (dict, list)):
        return stringify(value)
    if kind in ("int", "integer"):
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            return int(value.strip())
    if kind in ("double", "number", "num") and isinstance(value, str):
        return float(value.strip())
    if kind in ("bool", "boolean"):
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        if _is_int(value) and value in (0, 1):
            return bool(value)
    msg = f"Cannot coerce {value!r} to {type_name}"
    raise ValueError(msg)
