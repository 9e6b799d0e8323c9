"""
YAML loader for rules files.

Usage::

    from semconv_checker.compliance.loader import RulesLoader

    config = RulesLoader().load(Path("semconv-checker.yaml"))
"""

from __future__ import annotations

from semconv_checker._loader_base import BaseYamlLoader
from semconv_checker.compliance.schema import RulesConfig


class RulesLoader(BaseYamlLoader[RulesConfig]):
    """Loads and caches rules files."""

    _model_class = RulesConfig
    _kind = "rules"

    def _log_loaded(self, config: RulesConfig, key: str) -> None:
        self._logger.debug(
            "Loaded rules: resource_groups=%d, metric_rules=%d, one_shot=%s",
            len(config.resource.groups),
            len(config.metrics),
            config.one_shot,
        )
