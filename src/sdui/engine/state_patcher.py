"""StatePatcher — apply a StateUpdate to a StateStore.

Algorithm:

1. Parse the update strictly. A malformed update raises before anything
   is touched.
2. Deep-copy the current document.
3. Apply each operation in order to the copy. An operation whose pointer
   does not resolve to a container of the right shape is skipped with a
   diagnostic; the remaining operations still run.
4. Install the copy with a single ``StateStore.replace`` call, so
   subscribers are notified exactly once per batch, skips or not.

Pointer resolution walks every segment but the last: into a map by key,
or into a list by a ``key:value`` selector (first element whose ``key``
field equals ``value``). It never creates missing containers.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sdui.domain.errors import Diagnostic, PatchReport
from sdui.domain.operations import (
    ListAppendOperation,
    ListRemoveOperation,
    ListUpdateOperation,
    PatchOperation,
    StateUpdate,
    parse_state_update,
)
from sdui.domain.paths import parse_keyed_segment, split_pointer, stringify
from sdui.domain.types import DiagnosticCode, PatchVerb

if TYPE_CHECKING:
    from sdui.infrastructure.state_store import StateStore

logger = logging.getLogger(__name__)

SCALAR_ITEM_FIELD = "value"

type Container = dict[str, Any] | list[Any]


def resolve_pointer(root: dict[str, Any], path: str) -> tuple[Container, str] | None:
    """Resolve *path* to ``(container, final_segment)``.

    Returns None when the path is empty, a segment is missing, a list is
    addressed without a matching ``key:value`` selector, or the parent of
    the final segment is not a container.
    """
    parts = split_pointer(path)
    if not parts:
        return None

    current: Any = root
    for part in parts[:-1]:
        if isinstance(current, dict):
            if part not in current:
                return None
            current = current[part]
        elif isinstance(current, list):
            selector = parse_keyed_segment(part)
            if selector is None:
                return None
            key, value = selector
            current = next(
                (
                    element
                    for element in current
                    if isinstance(element, dict)
                    and key in element
                    and stringify(element[key]) == value
                ),
                None,
            )
            if current is None:
                return None
        else:
            return None

    if not isinstance(current, (dict, list)):
        return None
    return current, parts[-1]


class StatePatcher:
    """Applies ordered state operations atomically to a store."""

    def apply(
        self,
        store: StateStore,
        update: StateUpdate | Mapping[str, Any] | str | bytes,
    ) -> PatchReport:
        """Apply *update* to *store* and return what happened.

        Raises:
            MalformedDocumentError: If *update* does not parse. The store is
                left untouched and no notification fires.
        """
        parsed = parse_state_update(update)
        document = copy.deepcopy(store.state)

        applied = 0
        skipped = 0
        diagnostics: list[Diagnostic] = []
        for operation in parsed.operations:
            if self._apply_operation(document, operation, diagnostics):
                applied += 1
            else:
                skipped += 1

        store.replace(document)
        return PatchReport(applied=applied, skipped=skipped, diagnostics=diagnostics)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _apply_operation(
        self,
        document: dict[str, Any],
        operation: PatchOperation | ListAppendOperation | ListRemoveOperation | ListUpdateOperation,
        diagnostics: list[Diagnostic],
    ) -> bool:
        resolved = resolve_pointer(document, operation.path)
        if resolved is None:
            diagnostics.append(
                _diagnostic(
                    DiagnosticCode.UNRESOLVABLE_PATH,
                    f"Could not find container for path {operation.path}",
                    operation,
                )
            )
            return False
        container, segment = resolved

        match operation:
            case PatchOperation():
                return self._patch(container, segment, operation, diagnostics)
            case ListAppendOperation():
                return self._list_append(container, segment, operation, diagnostics)
            case ListRemoveOperation():
                return self._list_remove(container, segment, operation, diagnostics)
            case ListUpdateOperation():
                return self._list_update(container, segment, operation, diagnostics)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _patch(
        self,
        container: Container,
        segment: str,
        operation: PatchOperation,
        diagnostics: list[Diagnostic],
    ) -> bool:
        if not isinstance(container, dict):
            diagnostics.append(
                _diagnostic(
                    DiagnosticCode.UNRESOLVABLE_PATH,
                    f"Container for path {operation.path} is not a map",
                    operation,
                )
            )
            return False

        if operation.patch.op is PatchVerb.REMOVE:
            container.pop(segment, None)
        else:
            container[segment] = copy.deepcopy(operation.patch.value)
        return True

    def _list_append(
        self,
        container: Container,
        segment: str,
        operation: ListAppendOperation,
        diagnostics: list[Diagnostic],
    ) -> bool:
        if isinstance(container, list):
            container.extend(copy.deepcopy(operation.items))
            return True

        target = _target_list(container, segment, operation, diagnostics)
        if target is None:
            return False

        if not _is_scalar_list(target, operation.items):
            target.extend(copy.deepcopy(operation.items))
            return True

        for item in operation.items:
            if SCALAR_ITEM_FIELD not in item:
                diagnostics.append(
                    _diagnostic(
                        DiagnosticCode.MISSING_VALUE,
                        f"listAppend item for scalar list {operation.path} has no "
                        f"'{SCALAR_ITEM_FIELD}' field",
                        operation,
                    )
                )
                continue
            target.append(copy.deepcopy(item[SCALAR_ITEM_FIELD]))
        return True

    def _list_remove(
        self,
        container: Container,
        segment: str,
        operation: ListRemoveOperation,
        diagnostics: list[Diagnostic],
    ) -> bool:
        target = container if isinstance(container, list) else None
        if target is None:
            target = _target_list(container, segment, operation, diagnostics)
        if target is None:
            return False

        key = operation.item_key
        target[:] = [
            element
            for element in target
            if not (isinstance(element, dict) and key in element and element[key] in operation.keys)
        ]
        return True

    def _list_update(
        self,
        container: Container,
        segment: str,
        operation: ListUpdateOperation,
        diagnostics: list[Diagnostic],
    ) -> bool:
        target = container if isinstance(container, list) else None
        if target is None:
            target = _target_list(container, segment, operation, diagnostics)
        if target is None:
            return False

        key = operation.item_key
        for item in operation.items:
            if key not in item:
                continue
            index = next(
                (
                    i
                    for i, element in enumerate(target)
                    if isinstance(element, dict) and key in element and element[key] == item[key]
                ),
                None,
            )
            if index is not None:
                target[index] = copy.deepcopy(item)
        return True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _target_list(
    container: Container,
    segment: str,
    operation: ListAppendOperation | ListRemoveOperation | ListUpdateOperation,
    diagnostics: list[Diagnostic],
) -> list[Any] | None:
    """Return ``container[segment]`` if it is a list, else record a diagnostic."""
    target = container.get(segment) if isinstance(container, dict) else None
    if isinstance(target, list):
        return target
    diagnostics.append(
        _diagnostic(
            DiagnosticCode.NOT_A_LIST,
            f"Target for {operation.op} at path {operation.path} is not a list",
            operation,
        )
    )
    return None


def _is_scalar_list(target: list[Any], items: list[dict[str, Any]]) -> bool:
    """Whether *target* follows the scalar-list convention.

    A non-empty list is scalar when none of its elements is a container.
    An empty list has no evidence, so the items decide: every item must
    be a bare ``{"value": ...}`` wrapper.
    """
    if target:
        return all(not isinstance(element, (dict, list)) for element in target)
    return bool(items) and all(set(item) == {SCALAR_ITEM_FIELD} for item in items)


def _diagnostic(code: DiagnosticCode, message: str, operation: Any) -> Diagnostic:
    logger.warning(message)
    return Diagnostic(code=code, message=message, detail={"op": operation.op, "path": operation.path})
