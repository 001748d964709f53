"""PatchService — apply state and layout updates to a Surface.

A malformed update is rejected as a whole before anything changes and
comes back as an ``ok=False`` result. Apply-time mismatches are skipped
by the patchers; their diagnostic messages become result warnings.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sdui.domain.errors import MalformedDocumentError, PatchReport
from sdui.domain.operations import LayoutUpdate, StateUpdate
from sdui.services.base import BaseService
from sdui.services.result import ServiceResult


class PatchService(BaseService):
    """Applies incoming update batches."""

    def apply_state(self, update: StateUpdate | Mapping[str, Any] | str | bytes) -> ServiceResult:
        """Apply a StateUpdate; subscribers are notified once per call."""
        store = self._surface.store
        try:
            report = self._surface.state_patcher.apply(store, update)
        except MalformedDocumentError as exc:
            return ServiceResult.failure("apply_state", exc)

        warnings = report.messages
        self._dispatch_event(
            "post_state_update",
            {
                "applied": report.applied,
                "skipped": report.skipped,
                "diagnostics": report.messages,
                "version": store.version,
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op="apply_state",
            data={**_report_data(report), "version": store.version},
            warnings=warnings,
        )

    def apply_layout(
        self,
        update: LayoutUpdate | Mapping[str, Any] | str | bytes,
    ) -> ServiceResult:
        """Apply a LayoutUpdate directly to the live node map."""
        graph = self._surface.graph
        try:
            report = self._surface.layout_patcher.apply(graph, update)
        except MalformedDocumentError as exc:
            return ServiceResult.failure("apply_layout", exc)

        warnings = report.messages
        self._dispatch_event(
            "post_layout_update",
            {
                "applied": report.applied,
                "skipped": report.skipped,
                "diagnostics": report.messages,
                "node_count": len(graph),
            },
            warnings,
        )
        return ServiceResult(
            ok=True,
            op="apply_layout",
            data={**_report_data(report), "node_count": len(graph)},
            warnings=warnings,
        )


def _report_data(report: PatchReport) -> dict[str, Any]:
    return {
        "applied": report.applied,
        "skipped": report.skipped,
        "diagnostics": [d.model_dump(mode="json") for d in report.diagnostics],
    }
