"""
semconv-checker CLI - OTLP metrics semantic convention checks.

Commands:
    semconv-checker serve            Run the OTLP/gRPC checking endpoint
    semconv-checker check            Check export payloads stored on disk
    semconv-checker validate-config  Compile the rules and print them
"""

import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from semconv_checker import __version__
from semconv_checker.catalog.registry import SchemaCatalog
from semconv_checker.compliance.loader import RulesLoader
from semconv_checker.compliance.match_table import build_match_table
from semconv_checker.compliance.schema import RulesConfig
from semconv_checker.compliance.traversal import ComplianceChecker, build_checker
from semconv_checker.compliance.verdict import exit_code, fold
from semconv_checker.config import CheckerSettings, get_config
from semconv_checker.errors import SemconvCheckerError
from semconv_checker.logger import configure_logging

_config_option = click.option(
    "--config", "-c", "config_path",
    type=click.Path(dir_okay=False),
    help="Rules YAML (default: SEMCONV_CHECKER_CONFIG_PATH or semconv-checker.yaml)",
)
_catalog_option = click.option(
    "--catalog", "catalog_path",
    type=click.Path(dir_okay=False),
    help="Semantic convention catalog YAML (default: bundled catalog)",
)


def _settings(**overrides) -> CheckerSettings:
    settings = get_config(**{k: v for k, v in overrides.items() if v is not None})
    configure_logging(settings.log_level, settings.log_format)
    return settings


def _load_rules(settings: CheckerSettings) -> tuple[RulesConfig, SchemaCatalog]:
    """Load rules and catalog; any problem is a startup error."""
    try:
        rules = RulesLoader().load(settings.get_config_file())
        catalog = SchemaCatalog.load(settings.get_catalog_file())
    except (
        FileNotFoundError,
        ValidationError,
        SemconvCheckerError,
    ) as exc:
        raise click.ClickException(str(exc)) from exc
    return rules, catalog


def _build_checker(
    settings: CheckerSettings, report_unmatched: bool
) -> tuple[RulesConfig, ComplianceChecker]:
    rules, catalog = _load_rules(settings)
    try:
        checker = build_checker(
            rules, catalog, report_unmatched=report_unmatched or rules.report_unmatched
        )
    except SemconvCheckerError as exc:
        raise click.ClickException(str(exc)) from exc
    return rules, checker


@click.group()
@click.version_option(__version__)
def main():
    """semconv-checker - validate OTLP metrics against semantic conventions."""
    pass


@main.command()
@_config_option
@_catalog_option
@click.option("--address", "-a", help="host:port to listen on (default 0.0.0.0:4317)")
@click.option(
    "--one-shot/--no-one-shot", default=None,
    help="Exit after the first export call (overrides oneShot in the rules file)",
)
@click.option("--report-unmatched", is_flag=True, help="Log metrics no rule matches")
def serve(
    config_path: Optional[str],
    catalog_path: Optional[str],
    address: Optional[str],
    one_shot: Optional[bool],
    report_unmatched: bool,
):
    """Run the OTLP/gRPC metrics endpoint.

    Point a collector's otlp exporter at the listen address.  In one-shot
    mode the process exits 0 when the first export call is compliant and
    100 when any required attribute is missing.

    Example:
        semconv-checker serve --config rules.yaml --address 127.0.0.1:4317 --one-shot
    """
    from semconv_checker.server.app import serve as run_server

    settings = _settings(
        config_path=config_path, catalog_path=catalog_path, address=address
    )
    rules, checker = _build_checker(settings, report_unmatched)
    if one_shot is None:
        one_shot = rules.one_shot

    try:
        code = run_server(
            checker,
            settings.address,
            one_shot=one_shot,
            max_workers=settings.max_workers,
            shutdown_grace_s=settings.shutdown_grace_s,
        )
    except SemconvCheckerError as exc:
        raise click.ClickException(str(exc)) from exc
    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        sys.exit(130)

    if code is not None:
        sys.exit(int(code))


@main.command()
@click.argument("payloads", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@_config_option
@_catalog_option
@click.option("--report-unmatched", is_flag=True, help="Log metrics no rule matches")
def check(
    payloads: tuple[str, ...],
    config_path: Optional[str],
    catalog_path: Optional[str],
    report_unmatched: bool,
):
    """Check export requests saved as OTLP/JSON, JSON lines or protobuf.

    All requests in all files are checked; the exit code is 100 when any
    of them is missing a required attribute, 0 otherwise.

    Example:
        semconv-checker check --config rules.yaml metrics.json
    """
    from semconv_checker.server.payload import load_requests

    settings = _settings(config_path=config_path, catalog_path=catalog_path)
    _, checker = _build_checker(settings, report_unmatched)

    verdicts = []
    for payload in payloads:
        try:
            requests = load_requests(Path(payload))
        except SemconvCheckerError as exc:
            raise click.ClickException(str(exc)) from exc
        verdicts.extend(checker.check(request) for request in requests)

    verdict = fold(verdicts)
    if verdict.passed:
        click.echo(f"OK: {len(verdicts)} export request(s) compliant", err=True)
    else:
        scopes = ", ".join(verdict.implicated_scopes)
        click.echo(
            f"FAILED: {verdict.violation_count} missing attribute(s) in scopes [{scopes}]",
            err=True,
        )
    sys.exit(int(exit_code(verdict)))


@main.command("validate-config")
@_config_option
@_catalog_option
def validate_config(config_path: Optional[str], catalog_path: Optional[str]):
    """Compile the rules against the catalog and print the result."""
    settings = _settings(config_path=config_path, catalog_path=catalog_path)
    rules, catalog = _load_rules(settings)
    try:
        table, resource_schema = build_match_table(rules, catalog)
    except SemconvCheckerError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Schema version: {resource_schema.expected_version}")
    click.echo(f"Resource: requires {', '.join(resource_schema.required) or '(nothing)'}")
    if resource_schema.ignore:
        click.echo(f"  ignore: {', '.join(sorted(resource_schema.ignore))}")
    for index, rule in enumerate(table):
        click.echo(f"Rule {index}: /{rule.pattern.pattern}/ ({', '.join(rule.groups)})")
        click.echo(f"  requires: {', '.join(rule.required) or '(nothing)'}")
        if rule.ignore:
            click.echo(f"  ignore: {', '.join(sorted(rule.ignore))}")
    click.echo(
        f"\n{len(table)} metric rule(s); reportUnmatched={rules.report_unmatched} "
        f"oneShot={rules.one_shot}"
    )


if __name__ == "__main__":
    main()
