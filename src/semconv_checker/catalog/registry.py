"""
Read-only registry of semantic convention groups.

Resolves group names to attribute key tuples, following ``extends``
chains.  Built once at startup and shared by every request.

Usage::

    from semconv_checker.catalog.registry import SchemaCatalog

    catalog = SchemaCatalog.default()
    keys = catalog.attributes("attributes.http.common", "attributes.http.server")
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from semconv_checker.catalog.loader import CatalogLoader
from semconv_checker.catalog.schema import CatalogContract, GroupDefinition
from semconv_checker.constants import BUNDLED_CATALOG
from semconv_checker.errors import CatalogError, UnknownGroupError

logger = logging.getLogger(__name__)


def _dedupe(keys) -> tuple[str, ...]:
    return tuple(dict.fromkeys(keys))


class SchemaCatalog:
    """Maps group names to attribute keys and exposes the schema version.

    Args:
        contract: Validated catalog contract.

    Raises:
        CatalogError: Duplicate group ids, or an ``extends`` chain that is
            cyclic or points at an unknown group.
    """

    def __init__(self, contract: CatalogContract) -> None:
        self._version = contract.schema_url

        definitions: dict[str, GroupDefinition] = {}
        for group in contract.groups:
            if group.id in definitions:
                raise CatalogError(f"Duplicate group id: '{group.id}'")
            definitions[group.id] = group

        resolved: dict[str, tuple[str, ...]] = {}
        for group_id in definitions:
            self._resolve(group_id, definitions, resolved, ())
        self._groups: Mapping[str, tuple[str, ...]] = MappingProxyType(resolved)

        logger.debug(
            "Schema catalog ready: version=%s groups=%d",
            self._version,
            len(self._groups),
        )

    @classmethod
    def _resolve(
        cls,
        group_id: str,
        definitions: dict[str, GroupDefinition],
        resolved: dict[str, tuple[str, ...]],
        chain: tuple[str, ...],
    ) -> tuple[str, ...]:
        if group_id in resolved:
            return resolved[group_id]
        if group_id in chain:
            cycle = " -> ".join(chain + (group_id,))
            raise CatalogError(f"Cyclic 'extends' chain: {cycle}")

        group = definitions.get(group_id)
        if group is None:
            raise CatalogError(
                f"Group '{chain[-1]}' extends unknown group '{group_id}'"
            )

        inherited: tuple[str, ...] = ()
        if group.extends:
            inherited = cls._resolve(
                group.extends, definitions, resolved, chain + (group_id,)
            )

        own = (attr.qualified_name(group.prefix) for attr in group.attributes)
        resolved[group_id] = _dedupe((*inherited, *own))
        return resolved[group_id]

    @property
    def version(self) -> str:
        """Schema URL accepted on resources and scopes."""
        return self._version

    def __contains__(self, name: object) -> bool:
        return name in self._groups

    def group(self, name: str) -> tuple[str, ...]:
        """Attribute keys of one group.

        Raises:
            UnknownGroupError: If the catalog has no such group.
        """
        try:
            return self._groups[name]
        except KeyError:
            raise UnknownGroupError(name) from None

    def attributes(self, *names: str) -> tuple[str, ...]:
        """Union of several groups, first-seen order, duplicates collapsed."""
        return _dedupe(key for name in names for key in self.group(name))

    @classmethod
    def from_file(cls, path: Path) -> "SchemaCatalog":
        return cls(CatalogLoader().load(path))

    @classmethod
    def from_string(cls, yaml_str: str) -> "SchemaCatalog":
        return cls(CatalogLoader().load_from_string(yaml_str))

    @classmethod
    def default(cls) -> "SchemaCatalog":
        """Catalog bundled with the package."""
        text = (
            resources.files("semconv_checker.catalog")
            .joinpath("data").joinpath(BUNDLED_CATALOG)
            .read_text(encoding="utf-8")
        )
        return cls.from_string(text)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "SchemaCatalog":
        """Catalog from ``path``, or the bundled one when ``path`` is None."""
        if path is None:
            return cls.default()
        return cls.from_file(path)
