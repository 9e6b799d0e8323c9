"""
Compiles rule configuration into an immutable match table.

Each configured metric rule becomes a ``MatchRule`` holding a compiled
name pattern, the union of its groups' attribute keys and its ignore
set.  The resource section becomes a ``ResourceSchema``.  Both are built
once before the service accepts calls and are only read afterwards.

Any error here is fatal: a pattern that does not compile or a group the
catalog does not know raises ``ConfigurationError``.

Usage::

    from semconv_checker.compliance.match_table import build_match_table

    table, resource_schema = build_match_table(config, catalog)
    for rule in table.matching("http.server.request.duration"):
        ...
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Sequence

from semconv_checker.catalog.registry import SchemaCatalog
from semconv_checker.compliance.schema import AttributeScopeConfig, RulesConfig
from semconv_checker.errors import ConfigurationError, UnknownGroupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchRule:
    """A compiled metric rule."""

    pattern: re.Pattern
    required: tuple[str, ...]
    ignore: frozenset[str]
    groups: tuple[str, ...] = ()

    def matches(self, name: str) -> bool:
        return self.pattern.search(name) is not None


@dataclass(frozen=True)
class ResourceSchema:
    """Requirements applied to every resource in an export call."""

    required: tuple[str, ...]
    ignore: frozenset[str]
    expected_version: str


@dataclass(frozen=True)
class MatchTable:
    """Ordered, read-only sequence of metric rules."""

    rules: tuple[MatchRule, ...] = ()

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[MatchRule]:
        return iter(self.rules)

    def matching(self, name: str) -> Iterator[MatchRule]:
        """Every rule whose pattern matches ``name``, in declaration order."""
        return (rule for rule in self.rules if rule.matches(name))


def _resolve_groups(
    catalog: SchemaCatalog, groups: Sequence[str], location: str
) -> tuple[str, ...]:
    try:
        return catalog.attributes(*groups)
    except UnknownGroupError as exc:
        raise ConfigurationError(location, str(exc)) from exc


def build_resource_schema(
    resource: AttributeScopeConfig, catalog: SchemaCatalog
) -> ResourceSchema:
    return ResourceSchema(
        required=_resolve_groups(catalog, resource.groups, "resource"),
        ignore=frozenset(resource.ignore),
        expected_version=catalog.version,
    )


def build_match_table(
    config: RulesConfig, catalog: SchemaCatalog
) -> tuple[MatchTable, ResourceSchema]:
    """Compile ``config`` against ``catalog``.

    Returns:
        The metric ``MatchTable`` and the ``ResourceSchema``.

    Raises:
        ConfigurationError: Invalid pattern or unknown group.
    """
    rules: list[MatchRule] = []
    for index, rule in enumerate(config.metrics):
        location = f"metrics[{index}]"
        try:
            pattern = re.compile(rule.match)
        except re.error as exc:
            raise ConfigurationError(
                location, f"invalid match pattern {rule.match!r}: {exc}"
            ) from exc

        rules.append(
            MatchRule(
                pattern=pattern,
                required=_resolve_groups(catalog, rule.groups, location),
                ignore=frozenset(rule.ignore),
                groups=tuple(rule.groups),
            )
        )

    resource_schema = build_resource_schema(config.resource, catalog)

    logger.info(
        "Match table built: rules=%d resource_required=%d expected_version=%s",
        len(rules),
        len(resource_schema.required),
        resource_schema.expected_version,
    )
    return MatchTable(rules=tuple(rules)), resource_schema
