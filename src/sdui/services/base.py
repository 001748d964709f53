"""BaseService — foundation for all sdui services.

Every service receives a :class:`Surface` at construction time. The
Surface owns the state store, layout graph, catalog and plugin manager.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sdui.infrastructure.surface import Surface

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class PatchService(BaseService):
            def apply_state(self, update) -> ServiceResult:
                report = self._surface.state_patcher.apply(self._surface.store, update)
                ...
    """

    def __init__(self, surface: Surface) -> None:
        self._surface = surface

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call *hook_name* on every plugin. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        plugins = self._surface.plugins
        if plugins is None:
            return
        try:
            getattr(plugins.hook, hook_name)(**payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
