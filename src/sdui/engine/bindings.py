"""BindingResolver — turn a node's bindings into concrete property values.

For every ``property -> Binding`` on a node:

1. Read the binding path. Paths starting with the item prefix
   (``item.`` by default) read from the scoped item object when one is
   in context; every other path reads global state. Missing -> ``None``.
2. Apply at most one transformer, tried in the fixed order
   ``format -> condition -> map``; the first one that applies wins:

   - ``format`` applies only to a present value and substitutes it for
     the ``{}`` placeholder;
   - ``condition`` emits ``ifValue`` or ``elseValue`` by truthiness;
   - ``map`` looks the value up as a string key, else the declared
     ``fallback``, else ``None``.

3. With no applicable transformer, the raw value is emitted.

Values for properties the catalog declares are passed through the type
checker with the configured strictness. Nothing is cached: every call
recomputes from the current state.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sdui.domain.paths import get_path, stringify
from sdui.domain.types import TypeCheckMode

if TYPE_CHECKING:
    from sdui.domain.catalog import TypeChecker
    from sdui.domain.errors import Diagnostic
    from sdui.domain.models import Binding, Node
    from sdui.infrastructure.state_store import StateStore

logger = logging.getLogger(__name__)

DEFAULT_ITEM_PREFIX = "item."
PLACEHOLDER = "{}"


class BindingResolver:
    """Computes bound property values from global or item-scoped state.

    Args:
        store: Source of global state.
        type_checker: Optional checker for catalog-declared properties.
        mode: Strictness applied when a value does not conform.
        item_prefix: Path prefix that selects the item scope.
    """

    def __init__(
        self,
        store: StateStore,
        *,
        type_checker: TypeChecker | None = None,
        mode: TypeCheckMode = TypeCheckMode.WARN,
        item_prefix: str = DEFAULT_ITEM_PREFIX,
    ) -> None:
        self._store = store
        self._checker = type_checker
        self._mode = mode
        self._item_prefix = item_prefix

    def lookup(self, path: str, scope: Mapping[str, Any] | None = None) -> Any:
        """Resolve a binding path against the scope or global state."""
        if scope is not None and path.startswith(self._item_prefix):
            return get_path(scope, path[len(self._item_prefix) :])
        return self._store.get(path)

    def evaluate(self, binding: Binding, scope: Mapping[str, Any] | None = None) -> Any:
        """Resolve *binding* and apply its first applicable transformer."""
        value = self.lookup(binding.path, scope)

        if binding.format is not None and value is not None:
            return binding.format.replace(PLACEHOLDER, stringify(value), 1)
        if binding.condition is not None:
            return binding.condition.if_value if _truthy(value) else binding.condition.else_value
        if binding.map is not None:
            key = stringify(value)
            if key in binding.map.mapping:
                return binding.map.mapping[key]
            return binding.map.fallback if binding.map.has_fallback else None
        return value

    def process(self, node: Node, scope: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Return the flat ``property -> value`` map for *node*'s bindings."""
        values, _ = self.process_with_diagnostics(node, scope)
        return values

    def process_with_diagnostics(
        self,
        node: Node,
        scope: Mapping[str, Any] | None = None,
    ) -> tuple[dict[str, Any], list[Diagnostic]]:
        """Like :meth:`process`, also returning type-check diagnostics."""
        values: dict[str, Any] = {}
        diagnostics: list[Diagnostic] = []
        definition = self._checker.catalog.definition(node.type) if self._checker else None

        for prop, binding in (node.bindings or {}).items():
            value = self.evaluate(binding, scope)
            schema = definition.property_schema(prop) if definition else None
            if self._checker is not None and schema is not None:
                value, diagnostic = self._checker.check(
                    schema,
                    value,
                    mode=self._mode,
                    label=f"{node.id}.{prop}",
                )
                if diagnostic is not None:
                    logger.warning(diagnostic.message)
                    diagnostics.append(diagnostic)
            values[prop] = value
        return values, diagnostics


def _truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return bool(value)
