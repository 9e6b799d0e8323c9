"""
Pydantic v2 models for the rules YAML file.

The file says which semantic convention groups a resource must carry
and, per metric-name pattern, which groups a matching metric's data
points must carry::

    resource:
      groups: [resource.service, resource.telemetry.sdk]
      ignore: [service.version]
    metrics:
      - match: "^http\\.server\\."
        groups: [metric_attributes.http.server]
        ignore: [error.type]
    reportUnmatched: true
    oneShot: false

Unknown keys are rejected.  ``reportUnmatched`` and ``oneShot`` may also
be written in snake case.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AttributeScopeConfig(BaseModel):
    """Groups required on the resource, and keys never reported."""

    model_config = ConfigDict(extra="forbid")

    groups: list[str] = Field(
        default_factory=list, description="Semantic convention group names"
    )
    ignore: list[str] = Field(
        default_factory=list, description="Attribute keys excluded from reports"
    )


class MetricRuleConfig(AttributeScopeConfig):
    """One metric rule: a name pattern plus the groups it requires."""

    match: str = Field(
        ..., min_length=1, description="Regular expression searched in the metric name"
    )


class RulesConfig(BaseModel):
    """Root model for the rules YAML file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    resource: AttributeScopeConfig = Field(default_factory=AttributeScopeConfig)
    metrics: list[MetricRuleConfig] = Field(default_factory=list)
    report_unmatched: bool = Field(
        False,
        alias="reportUnmatched",
        description="Log metrics no rule matched",
    )
    one_shot: bool = Field(
        False,
        alias="oneShot",
        description="Exit after the first export call with a status reflecting compliance",
    )
