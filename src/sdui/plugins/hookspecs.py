"""Pluggy hook specifications for sdui lifecycle events and setup extensions.

Three lifecycle events fire synchronously after an engine call completes.
One setup-time hook lets plugins contribute custom value types to the
type checker.
"""

from __future__ import annotations

from typing import Any

import pluggy

from sdui.domain.catalog import ValuePredicate

hookspec = pluggy.HookspecMarker("sdui")
hookimpl = pluggy.HookimplMarker("sdui")


class SduiHookSpec:
    """Hook specifications for the sdui plugin system."""

    @hookspec
    def post_state_update(
        self,
        applied: int,
        skipped: int,
        diagnostics: list[str],
        version: int,
    ) -> None:
        """Called after a state update batch has been installed."""

    @hookspec
    def post_layout_update(
        self,
        applied: int,
        skipped: int,
        diagnostics: list[str],
        node_count: int,
    ) -> None:
        """Called after a layout update batch has been applied."""

    @hookspec
    def post_resolve_failure(
        self,
        code: str,
        message: str,
        detail: dict[str, Any],
    ) -> None:
        """Called when resolving the layout fails as a whole."""

    @hookspec
    def register_value_types(self) -> dict[str, ValuePredicate] | None:
        """Return type name -> predicate mappings for the type checker."""
