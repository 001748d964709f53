"""Protocol engine — patchers and resolvers.

Pure in-memory algorithms over the infrastructure structures. Every call
runs to completion synchronously; callers serialize mutating calls.
"""

from sdui.engine.bindings import BindingResolver
from sdui.engine.layout_patcher import LayoutPatcher
from sdui.engine.resolver import LayoutResolver, ResolvedNode, ResolvedTree
from sdui.engine.state_patcher import StatePatcher

__all__ = [
    "BindingResolver",
    "LayoutPatcher",
    "LayoutResolver",
    "ResolvedNode",
    "ResolvedTree",
    "StatePatcher",
]
