"""Exceptions raised while loading static engine configuration.

Classification itself never raises: uncertain or partial outcomes are
reported as warnings on the result objects. Only broken configuration
(schemas, pipeline tables, thresholds) is an error, and it is detected
when that configuration is loaded.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for engine configuration errors."""


class SchemaValidationError(EngineError, ValueError):
    """A slot or block schema references an unknown rule kind, carries an
    invalid weight, or is otherwise structurally broken."""


class PipelineConfigError(EngineError, ValueError):
    """A scorer order table names an unknown or duplicate scorer."""


class ConfigError(EngineError, ValueError):
    """Engine thresholds are out of range or inconsistent."""
