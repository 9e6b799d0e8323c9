"""
Semantic convention catalog: named attribute groups and the accepted
schema version.

Public API::

    from semconv_checker.catalog import (
        CatalogContract,
        CatalogLoader,
        SchemaCatalog,
    )
"""

from semconv_checker.catalog.loader import CatalogLoader
from semconv_checker.catalog.registry import SchemaCatalog
from semconv_checker.catalog.schema import (
    AttributeRef,
    CatalogContract,
    GroupDefinition,
)

__all__ = [
    "AttributeRef",
    "CatalogContract",
    "CatalogLoader",
    "GroupDefinition",
    "SchemaCatalog",
]
