"""Surface — one live UI instance: state store, layout graph, catalog.

The Surface is the single dependency injected into every service. It is
built from a received :class:`Packet` and owns the mutable structures the
engine works on. The catalog and type checker are created once here and
handed explicitly to every collaborator that needs them; nothing looks
them up globally.

Plugins contribute extra value types to the type checker at
construction time, so a Surface built with a plugin manager checks
plugin-defined property types from its first resolve onwards.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sdui.config.models import SduiConfig
from sdui.domain.catalog import Catalog, TypeChecker
from sdui.domain.models import Packet
from sdui.engine.bindings import BindingResolver
from sdui.engine.layout_patcher import LayoutPatcher
from sdui.engine.resolver import LayoutResolver
from sdui.engine.state_patcher import StatePatcher
from sdui.infrastructure.graph.engine import LayoutGraph
from sdui.infrastructure.state_store import StateStore

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sdui.config.settings import SduiSettings
    from sdui.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Surface:
    """A packet turned into live, patchable engine state.

    Args:
        packet: The received packet. It is never mutated.
        catalog: Widget catalog; an empty catalog when omitted.
        config: Resolver and binding settings (``SduiConfig`` or the
            CLI's ``SduiSettings``, which carries the same sections).
        plugins: Loaded plugin manager, or None to run without plugins.
    """

    def __init__(
        self,
        packet: Packet,
        *,
        catalog: Catalog | None = None,
        config: SduiConfig | SduiSettings | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        self._packet = packet
        self._config = config or SduiConfig()
        self._plugins = plugins
        self._catalog = _with_reference_types(
            catalog or Catalog(), self._config.resolver.reference_types
        )
        self._type_checker = TypeChecker(
            self._catalog,
            extra_types=plugins.value_types() if plugins is not None else None,
        )
        self._store = StateStore(
            packet.state,
            catalog=self._catalog,
            type_checker=self._type_checker,
        )
        self._graph = LayoutGraph.from_layout(
            packet.layout,
            catalog=self._catalog,
            heuristic_references=self._config.resolver.heuristic_references,
        )
        self._state_patcher = StatePatcher()
        self._layout_patcher = LayoutPatcher()

    @classmethod
    def from_wire(
        cls,
        data: Mapping[str, Any] | str | bytes,
        **kwargs: Any,
    ) -> Surface:
        """Parse a packet document and build a Surface from it.

        Raises:
            MalformedDocumentError: If the packet does not validate.
        """
        return cls(Packet.from_wire(data), **kwargs)

    @classmethod
    def from_files(
        cls,
        packet_path: Path,
        *,
        catalog_path: Path | None = None,
        **kwargs: Any,
    ) -> Surface:
        """Load a packet (and optionally a catalog) from JSON files."""
        packet = Packet.from_wire(packet_path.read_bytes())
        catalog = Catalog.from_wire(catalog_path.read_bytes()) if catalog_path else None
        logger.debug("Loaded packet %s (%d nodes)", packet_path, len(packet.layout.nodes))
        return cls(packet, catalog=catalog, **kwargs)

    # ------------------------------------------------------------------
    # Owned structures
    # ------------------------------------------------------------------

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def type_checker(self) -> TypeChecker:
        return self._type_checker

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def graph(self) -> LayoutGraph:
        return self._graph

    @property
    def config(self) -> SduiConfig | SduiSettings:
        return self._config

    @property
    def plugins(self) -> PluginManager | None:
        """The plugin manager (None when running without plugins)."""
        return self._plugins

    @property
    def state_patcher(self) -> StatePatcher:
        return self._state_patcher

    @property
    def layout_patcher(self) -> LayoutPatcher:
        return self._layout_patcher

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def binding_resolver(self) -> BindingResolver:
        """A binding resolver reading this surface's current state."""
        return BindingResolver(
            self._store,
            type_checker=self._type_checker,
            mode=self._config.bindings.type_check,
            item_prefix=self._config.resolver.item_prefix,
        )

    def layout_resolver(self) -> LayoutResolver:
        """A layout resolver over this surface's current node map."""
        return LayoutResolver(
            self._graph,
            self.binding_resolver(),
            item_source_property=self._config.resolver.item_source_property,
            max_depth=self._config.resolver.max_depth,
        )

    def to_packet(self) -> Packet:
        """Snapshot the live layout and state as a new Packet.

        Keys that were present on the received packet (metadata, unknown
        extras) are carried over unchanged.
        """
        layout = self._packet.layout.model_copy(update={"nodes": list(self._graph.nodes.values())})
        return self._packet.model_copy(
            update={
                "layout": layout,
                "state": self._store.snapshot(),
            }
        )


def _with_reference_types(catalog: Catalog, extra: list[str]) -> Catalog:
    merged = list(dict.fromkeys([*catalog.reference_types, *extra]))
    if merged == catalog.reference_types:
        return catalog
    return catalog.model_copy(update={"reference_types": merged})
