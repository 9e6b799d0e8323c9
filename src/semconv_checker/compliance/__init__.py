"""
Compliance engine: match table, comparator, traversal and verdicts.

Public API::

    from semconv_checker.compliance import (
        # Configuration
        RulesConfig,
        RulesLoader,
        # Match table
        MatchRule,
        MatchTable,
        ResourceSchema,
        build_match_table,
        # Comparator
        ComparisonResult,
        compare,
        # Traversal
        ComplianceChecker,
        build_checker,
        # Verdicts
        Verdict,
        ExportOutcome,
        build_response,
        exit_code,
    )
"""

from semconv_checker.compliance.comparator import (
    ComparisonResult,
    attribute_keys,
    compare,
)
from semconv_checker.compliance.loader import RulesLoader
from semconv_checker.compliance.match_table import (
    MatchRule,
    MatchTable,
    ResourceSchema,
    build_match_table,
)
from semconv_checker.compliance.schema import (
    AttributeScopeConfig,
    MetricRuleConfig,
    RulesConfig,
)
from semconv_checker.compliance.traversal import ComplianceChecker, build_checker
from semconv_checker.compliance.verdict import (
    ExportOutcome,
    Verdict,
    build_response,
    exit_code,
)

__all__ = [
    # Configuration
    "AttributeScopeConfig",
    "MetricRuleConfig",
    "RulesConfig",
    "RulesLoader",
    # Match table
    "MatchRule",
    "MatchTable",
    "ResourceSchema",
    "build_match_table",
    # Comparator
    "ComparisonResult",
    "attribute_keys",
    "compare",
    # Traversal
    "ComplianceChecker",
    "build_checker",
    # Verdicts
    "ExportOutcome",
    "Verdict",
    "build_response",
    "exit_code",
]
