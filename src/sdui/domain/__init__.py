"""Domain layer — wire models, operations, catalog, addressing.

This layer depends only on stdlib, pydantic and jsonschema.
It must never import from engine, services, infrastructure, commands, or config.
"""
