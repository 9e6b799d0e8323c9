"""
otel-semconv-checker - OTLP metrics semantic convention compliance.

Runs as an OTLP/gRPC metrics endpoint that a collector pipeline forwards
export calls to.  Every resource and every metric matching a configured
rule is checked for the attribute keys its semantic convention groups
require; violations are logged and turned into a rejecting response, or
into a process exit code in one-shot mode.

Example usage:
    from semconv_checker import SchemaCatalog, build_checker
    from semconv_checker.compliance.loader import RulesLoader

    config = RulesLoader().load(Path("semconv-checker.yaml"))
    checker = build_checker(config, SchemaCatalog.default())
    verdict = checker.check(request)
    if not verdict.passed:
        print(verdict.implicated_scopes)
"""

__version__ = "0.1.0"
__all__ = [
    "ComplianceChecker",
    "SchemaCatalog",
    "Verdict",
    "build_checker",
    "__version__",
]


# Lazy imports keep grpc/protobuf off the import path for config-only use
def __getattr__(name: str):
    if name == "ComplianceChecker":
        from semconv_checker.compliance.traversal import ComplianceChecker
        return ComplianceChecker
    if name == "build_checker":
        from semconv_checker.compliance.traversal import build_checker
        return build_checker
    if name == "SchemaCatalog":
        from semconv_checker.catalog.registry import SchemaCatalog
        return SchemaCatalog
    if name == "Verdict":
        from semconv_checker.compliance.verdict import Verdict
        return Verdict
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
