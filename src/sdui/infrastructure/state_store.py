"""StateStore — owner of the live state document.

The store is a publish/subscribe channel around one JSON document:

- ``get(path)`` reads a dot path (maps only, absent -> ``None``).
- ``replace(document)`` swaps the whole document and notifies every
  subscriber exactly once. Subscribers receive no payload; they re-read
  through ``get``.

INVARIANT: The installed document is never mutated in place. Patchers
work on a clone and install it via ``replace``, so a document obtained
before a batch still shows the pre-batch values afterwards.

Subscribers must not call ``replace`` from inside their own callback.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from sdui.domain.paths import get_path

if TYPE_CHECKING:
    from sdui.domain.catalog import Catalog, TypeChecker

logger = logging.getLogger(__name__)

type Listener = Callable[[], None]
type Unsubscribe = Callable[[], None]


class StateStore:
    """Path-addressable state document with change notification.

    The catalog and type checker are held for collaborators to reuse;
    the store itself enforces nothing.
    """

    def __init__(
        self,
        document: dict[str, Any] | None = None,
        *,
        catalog: Catalog | None = None,
        type_checker: TypeChecker | None = None,
    ) -> None:
        self._document: dict[str, Any] = copy.deepcopy(document) if document else {}
        self._listeners: list[Listener] = []
        self.catalog = catalog
        self.type_checker = type_checker
        self._version = 0

    @property
    def state(self) -> dict[str, Any]:
        """The current document. Treat as read-only."""
        return self._document

    @property
    def version(self) -> int:
        """Number of ``replace`` calls so far."""
        return self._version

    def snapshot(self) -> dict[str, Any]:
        """Return a deep copy of the current document."""
        return copy.deepcopy(self._document)

    def get(self, path: str) -> Any:
        """Read a dot path; ``None`` if any segment is missing."""
        return get_path(self._document, path)

    def replace(self, document: dict[str, Any]) -> None:
        """Install *document* and notify subscribers once."""
        self._document = document
        self._version += 1
        self._notify()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register *listener*; the returned callable removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        # Iterate a copy so listeners may unsubscribe while being notified.
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.warning("State listener %r failed", listener, exc_info=True)
