"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``sdui.toml`` only contains
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from sdui.domain.catalog import DEFAULT_REFERENCE_TYPES
from sdui.domain.types import TypeCheckMode

# --- sdui.toml sections ---


class ResolverConfig(BaseModel):
    """[resolver] section."""

    model_config = {"frozen": True}

    reference_types: list[str] = Field(default_factory=lambda: list(DEFAULT_REFERENCE_TYPES))
    heuristic_references: bool = True
    item_source_property: str = "data"
    item_prefix: str = "item."
    max_depth: int = Field(default=256, ge=1)


class BindingsConfig(BaseModel):
    """[bindings] section."""

    model_config = {"frozen": True}

    type_check: TypeCheckMode = TypeCheckMode.WARN


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str | None = None


class SduiConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    bindings: BindingsConfig = Field(default_factory=BindingsConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
