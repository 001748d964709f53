"""Infrastructure layer — live state store, layout graph, surface.

Owns the mutable structures the engine operates on. Depends on the
domain layer and on NetworkX for graph analysis. It must never import
from services, commands, or output.
"""
