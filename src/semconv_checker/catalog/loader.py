"""
YAML loader for semantic convention catalogs.

Usage::

    from semconv_checker.catalog.loader import CatalogLoader

    contract = CatalogLoader().load(Path("semconv.yaml"))
"""

from __future__ import annotations

from semconv_checker._loader_base import BaseYamlLoader
from semconv_checker.catalog.schema import CatalogContract
from semconv_checker.errors import CatalogError


class CatalogLoader(BaseYamlLoader[CatalogContract]):
    """Loads and caches catalog contracts from YAML files."""

    _model_class = CatalogContract
    _kind = "catalog"

    def _error(self, source: str, message: str) -> CatalogError:
        return CatalogError(f"{source}: {message}")

    def _log_loaded(self, contract: CatalogContract, key: str) -> None:
        self._logger.debug(
            "Loaded semconv catalog: schema_url=%s, groups=%d",
            contract.schema_url,
            len(contract.groups),
        )
