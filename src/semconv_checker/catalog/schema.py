"""
Pydantic v2 models for the semantic convention catalog YAML format.

The format is a trimmed-down version of the upstream OpenTelemetry
semantic convention model files: a list of groups, each with an
optional attribute ``prefix`` and a list of attributes declared either
by short ``id`` (qualified with the prefix) or by fully-qualified
``ref``.  ``schema_url`` is the single schema version accepted on
incoming resources and scopes.

All models use ``extra="forbid"`` to reject unknown keys at parse time.

Usage::

    from semconv_checker.catalog.schema import CatalogContract
    import yaml

    with open("semconv.yaml") as fh:
        catalog = CatalogContract.model_validate(yaml.safe_load(fh))
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AttributeRef(BaseModel):
    """One attribute of a group, declared by ``id`` or by ``ref``."""

    model_config = ConfigDict(extra="forbid")

    id: Optional[str] = Field(
        None, min_length=1, description="Short name, qualified with the group prefix"
    )
    ref: Optional[str] = Field(
        None, min_length=1, description="Fully-qualified attribute name"
    )
    brief: str = Field("", description="Human-readable description")

    @model_validator(mode="after")
    def _exactly_one_name(self) -> "AttributeRef":
        if (self.id is None) == (self.ref is None):
            raise ValueError("attribute must set exactly one of 'id' or 'ref'")
        return self

    def qualified_name(self, prefix: Optional[str]) -> str:
        if self.ref is not None:
            return self.ref
        if prefix:
            return f"{prefix}.{self.id}"
        return self.id  # type: ignore[return-value]


class GroupDefinition(BaseModel):
    """A named semantic convention group."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1, description="Group name referenced by rules")
    prefix: Optional[str] = Field(None, description="Prefix for short attribute ids")
    extends: Optional[str] = Field(
        None, description="Group whose attributes this group inherits"
    )
    brief: str = Field("", description="Human-readable description")
    attributes: list[AttributeRef] = Field(default_factory=list)


class CatalogContract(BaseModel):
    """Root model for a catalog YAML file."""

    model_config = ConfigDict(extra="forbid")

    schema_url: str = Field(
        ..., min_length=1,
        description="Schema URL expected on resources and scopes",
    )
    groups: list[GroupDefinition] = Field(default_factory=list)
