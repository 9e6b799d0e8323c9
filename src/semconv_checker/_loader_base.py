"""
Generic YAML loader with per-path caching and Pydantic validation.

Provides ``BaseYamlLoader[T]``, the base class for the catalog loader
and the rules loader.  Centralises:

- Per-path caching via class-level dict (each subclass gets its own)
- File existence checks
- Rejection of empty, non-YAML or non-mapping documents, reported as
  the subclass's own error type so the CLI can treat them as startup
  errors
- Pydantic ``model_validate`` dispatch

Usage::

    from semconv_checker._loader_base import BaseYamlLoader
    from semconv_checker.compliance.schema import RulesConfig

    class RulesLoader(BaseYamlLoader[RulesConfig]):
        _model_class = RulesConfig
        _kind = "rules"
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar, Generic, TypeVar

import yaml
from pydantic import BaseModel

from semconv_checker.errors import ConfigurationError, SemconvCheckerError

T = TypeVar("T", bound=BaseModel)


class BaseYamlLoader(Generic[T]):
    """Generic base for YAML-backed model loaders with per-path caching.

    Subclasses set ``_model_class`` and ``_kind`` (used in error text).
    Override ``_error()`` to raise a different error type and
    ``_log_loaded()`` for domain-specific debug messages.
    """

    _model_class: type[T]
    _kind: ClassVar[str] = "configuration"
    _cache: ClassVar[dict[str, BaseModel]] = {}
    _logger: ClassVar[logging.Logger]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._cache = {}
        cls._logger = logging.getLogger(cls.__module__)

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the cache (useful in tests)."""
        cls._cache.clear()

    def load(self, path: Path) -> T:
        """Load a model from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            SemconvCheckerError: If the file is empty, is not YAML, or
                its root is not a mapping.
            pydantic.ValidationError: If the YAML does not match the schema.
        """
        key = str(path.resolve())
        cached = self._cache.get(key)
        if cached is not None:
            self._logger.debug("%s cache hit: %s", type(self).__name__, key)
            return cached  # type: ignore[return-value]

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        model = self._validate(path.read_text(encoding="utf-8"), str(path))
        self._cache[key] = model
        self._log_loaded(model, key)
        return model

    def load_from_string(self, yaml_str: str) -> T:
        """Load a model from a YAML string (convenience for testing)."""
        return self._validate(yaml_str, "<string>")

    def _validate(self, text: str, source: str) -> T:
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise self._error(source, f"{self._kind} file is not valid YAML: {exc}") from exc
        if raw is None:
            raise self._error(source, f"{self._kind} file is empty")
        if not isinstance(raw, dict):
            raise self._error(
                source,
                f"{self._kind} file must be a YAML mapping, got {type(raw).__name__}",
            )
        return self._model_class.model_validate(raw)

    def _error(self, source: str, message: str) -> SemconvCheckerError:
        return ConfigurationError(source, message)

    def _log_loaded(self, model: T, key: str) -> None:
        """Hook for subclass-specific debug logging after a load."""
        self._logger.debug("Loaded %s from %s", type(self).__name__, key)
