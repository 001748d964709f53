"""RenderService — resolve the layout into a tree of concrete properties.

Resolution is all-or-nothing: any :class:`LayoutResolutionError`, such as
a cycle or a missing root, yields an ``ok=False`` result and no tree.
Plugins are told about the failure so an embedding renderer can
substitute an error view.
"""

from __future__ import annotations

from sdui.domain.errors import LayoutResolutionError
from sdui.services.base import BaseService
from sdui.services.result import ServiceResult


class RenderService(BaseService):
    """Resolves the surface's current layout and state."""

    def resolve(self, root_id: str | None = None) -> ServiceResult:
        resolver = self._surface.layout_resolver()
        try:
            tree = resolver.resolve(root_id)
        except LayoutResolutionError as exc:
            warnings: list[str] = []
            self._dispatch_event(
                "post_resolve_failure",
                {"code": exc.code, "message": exc.message, "detail": exc.detail},
                warnings,
            )
            return ServiceResult.failure("resolve", exc, warnings=warnings)

        return ServiceResult(
            ok=True,
            op="resolve",
            data={
                "root": tree.root.id,
                "tree": tree.root.to_dict(),
                "node_count": tree.node_count,
                "diagnostics": [d.model_dump(mode="json") for d in tree.diagnostics],
            },
            warnings=[d.message for d in tree.diagnostics],
            meta={"state_version": self._surface.store.version},
        )
