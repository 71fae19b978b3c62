"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``exprval.toml`` only carries
overrides::

    [engine]
    strict = false

    [plugins]
    local_dir = "tools/exprval-plugins"
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- exprval.toml sections ---


class EngineConfig(BaseModel):
    """[engine] section.

    Attributes:
        strict: Strict dialect. When False, unknown rule names are
            skipped, rules that cannot be applied to a value count as
            passing, a dangling dive operator is tolerated and dive
            expressions that do not fit the value's shape are ignored.
        metadata_key: Key read from ``dataclasses.field(metadata=...)`` and
            pydantic ``json_schema_extra`` for a field's expression.
    """

    model_config = {"frozen": True}

    strict: bool = True
    metadata_key: str = "validate"


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".exprval/plugins"


class ExprvalConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    engine: EngineConfig = Field(default_factory=EngineConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
