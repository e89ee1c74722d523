"""
Command-line interface for NPE Claims Analytics.

Provides commands for initializing the database, generating the seed
dataset, verifying it and printing the KPI reports.
"""

import json
import sys
from datetime import date
from typing import Any

import click
import structlog

from npe_claims.config import load_config, validate_config
from npe_claims.utils.logging import configure_logging


logger = structlog.get_logger()

REPORTS = ["monthly", "region", "provider"]

REPORT_VIEWS = {
    "monthly": "vw_monthly_kpi",
    "region": "vw_region_kpi",
    "provider": "vw_provider_summary",
}


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _format_cell(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, float):
        return f"{value:.4f}"
    return str(getattr(value, "value", value))


def _echo_rows(rows: list[dict[str, Any]], output_format: str = "table") -> None:
    """Print result rows as an aligned text table or as JSON."""
    if output_format == "json":
        click.echo(json.dumps(rows, indent=2, default=_json_default))
        return

    if not rows:
        click.echo("  (no rows)")
        return

    columns = list(rows[0].keys())
    cells = [[_format_cell(row.get(col)) for col in columns] for row in rows]
    widths = [
        max(len(col), *(len(line[i]) for line in cells))
        for i, col in enumerate(columns)
    ]
    click.echo("  ".join(col.ljust(w) for col, w in zip(columns, widths)))
    click.echo("  ".join("-" * w for w in widths))
    for line in cells:
        click.echo("  ".join(cell.ljust(w) for cell, w in zip(line, widths)))


def _echo_report(report) -> None:
    click.echo("\nRow counts:")
    for table, count in report.table_counts.items():
        click.echo(f"  {table}: {count:,}")

    click.echo("\nStatus mix:")
    for share in report.status_mix:
        click.echo(f"  {share.status}: {share.count:,} ({share.pct}%)")

    click.echo(f"\nDecisions on non-Closed claims: {report.decisions_when_not_closed}")
    click.echo(f"Received dates: {report.min_received_date} .. {report.max_received_date}")
    click.echo(
        f"Claim amount (NOK): min {report.min_amount}, "
        f"max {report.max_amount}, avg {report.avg_amount}"
    )


@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Output logs as JSON",
)
@click.pass_context
def main(ctx, config, verbose, json_logs):
    """NPE patient-injury claims analytics: seed data and KPI reports."""
    ctx.ensure_object(dict)

    log_level = "DEBUG" if verbose else "INFO"
    configure_logging(level=log_level, json_output=json_logs)

    ctx.obj["config_path"] = config
    ctx.obj["log_level"] = log_level


@main.command("init-db")
@click.option(
    "--drop-existing",
    is_flag=True,
    help="Drop existing tables and views before creating",
)
@click.pass_context
def init_db(ctx, drop_existing):
    """Create the claims tables, indexes and reporting views."""
    from npe_claims.db.initialize import init_database

    config_path = ctx.obj.get("config_path")

    try:
        config = load_config(config_path)

        click.echo(f"Initializing database: {config.database.database}")
        click.echo(f"  Host: {config.database.host}:{config.database.port}")

        if drop_existing:
            if not click.confirm("This will drop ALL claims tables. Continue?"):
                click.echo("Aborted.")
                return

        init_database(config, drop_existing=drop_existing)

        click.echo("Database initialized successfully.")

    except Exception as e:
        logger.exception("init_db_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Random seed (default: from config)",
)
@click.option(
    "--claims",
    "claim_count",
    type=int,
    default=None,
    help="Number of claims to generate (default: from config)",
)
@click.option(
    "--as-of",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Date treated as today (format: YYYY-MM-DD)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Generate and verify without writing to the database",
)
@click.pass_context
def generate(ctx, seed, claim_count, as_of, dry_run):
    """Regenerate the full seed dataset.

    Examples:

    \b
    # Default dataset
    npe-claims generate

    \b
    # Reproducible run against a fixed date, without touching the database
    npe-claims generate --seed 7 --as-of 2025-06-30 --dry-run
    """
    from npe_claims.config.validation import ConfigurationError
    from npe_claims.core.integrity import DatasetIntegrityError
    from npe_claims.core.seeder import SeedGenerator

    config_path = ctx.obj.get("config_path")

    try:
        overrides: dict[str, Any] = {}
        if seed is not None:
            overrides["seed"] = seed
        if claim_count is not None:
            overrides["scale"] = {"claim_count": claim_count}
        if as_of is not None:
            overrides["as_of_date"] = as_of.date()

        config = load_config(config_path, override_values=overrides)

        click.echo("Generating seed dataset...")
        click.echo(f"  Seed: {config.seed}")
        click.echo(f"  As of: {config.resolve_as_of_date()}")
        click.echo(f"  Claims: {config.scale.claim_count:,}")

        writer = None
        if not dry_run:
            from npe_claims.db.connection import create_engine_from_config
            from npe_claims.db.writer import DatasetWriter

            writer = DatasetWriter(create_engine_from_config(config.database))

        result = SeedGenerator(config).run(writer=writer)
        for warning in result.warnings:
            click.echo(f"Warning: {warning}", err=True)

        click.echo("\n=== Generation Complete ===")
        click.echo(f"Loaded: {'yes' if result.loaded else 'no (dry run)'}")
        click.echo(f"Elapsed time: {result.elapsed_seconds:.2f} seconds")
        _echo_report(result.report)

    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except DatasetIntegrityError as e:
        logger.error("generation_rejected", violation_count=len(e.violations))
        click.echo(f"Integrity error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.exception("generate_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.pass_context
def verify(ctx):
    """Read the tables back and print the verification tallies."""
    from npe_claims.core.integrity import find_generation_contract_violations
    from npe_claims.core.verification import verify_dataset
    from npe_claims.db.connection import create_engine_from_config
    from npe_claims.db.reader import load_dataset

    config_path = ctx.obj.get("config_path")

    try:
        config = load_config(config_path)
        dataset = load_dataset(create_engine_from_config(config.database))

        report = verify_dataset(dataset)
        _echo_report(report)

        violations = find_generation_contract_violations(dataset)
        click.echo(f"\nGeneration contract violations: {len(violations)}")
        for violation in violations[:20]:
            click.echo(f"  - {violation}")

        if not report.passed or violations:
            sys.exit(1)

    except Exception as e:
        logger.exception("verify_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("name", type=click.Choice(REPORTS))
@click.option(
    "--source",
    type=click.Choice(["generated", "tables", "views"]),
    default="tables",
    show_default=True,
    help="Compute from a fresh in-memory dataset, the stored tables, or the SQL views",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    show_default=True,
)
@click.pass_context
def report(ctx, name, source, output_format):
    """Print one of the KPI reports (monthly, region, provider)."""
    from npe_claims.reporting import kpi

    config_path = ctx.obj.get("config_path")

    try:
        config = load_config(config_path)

        if source == "views":
            from npe_claims.db.connection import create_engine_from_config
            from npe_claims.db.reader import read_view

            raw = read_view(create_engine_from_config(config.database), REPORT_VIEWS[name])
            converters = {
                "monthly": kpi.monthly_rows_from_view,
                "region": kpi.region_rows_from_view,
                "provider": kpi.provider_rows_from_view,
            }
            rows = converters[name](raw)
        else:
            if source == "generated":
                from npe_claims.core.seeder import SeedGenerator

                dataset = SeedGenerator(config).generate()
            else:
                from npe_claims.db.connection import create_engine_from_config
                from npe_claims.db.reader import load_dataset

                dataset = load_dataset(create_engine_from_config(config.database))

            if name == "monthly":
                rows = kpi.monthly_kpi(dataset.claims)
            elif name == "region":
                rows = kpi.region_kpi(dataset.claims)
            else:
                rows = kpi.provider_summary(dataset.providers, dataset.claims)

        _echo_rows([row.to_dict() for row in rows], output_format)

    except Exception as e:
        logger.exception("report_failed", report=name, source=source, error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.option(
    "--source",
    type=click.Choice(["generated", "tables"]),
    default="tables",
    show_default=True,
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    show_default=True,
)
@click.pass_context
def analyze(ctx, source, output_format):
    """Print the exploratory analytics queries."""
    from npe_claims.reporting import queries

    config_path = ctx.obj.get("config_path")

    try:
        config = load_config(config_path)

        if source == "generated":
            from npe_claims.core.seeder import SeedGenerator

            dataset = SeedGenerator(config).generate()
        else:
            from npe_claims.db.connection import create_engine_from_config
            from npe_claims.db.reader import load_dataset

            dataset = load_dataset(create_engine_from_config(config.database))

        claims = dataset.claims
        sections = [
            ("Status distribution", queries.status_distribution(claims)),
            ("Decision distribution (Closed)", queries.decision_distribution(claims)),
            ("Amount by decision", queries.amount_summary_by_decision(claims)),
            ("Claims by region", queries.claims_by(claims, "region")),
            ("Claims by care level", queries.claims_by(claims, "care_level")),
            ("Claims by patient sex", queries.claims_by(claims, "patient_sex")),
            ("Top providers", queries.top_providers(dataset)),
            ("Processing days", queries.processing_days_by(claims)),
            ("Processing days by region", queries.processing_days_by(claims, "region")),
            ("Processing days by care level", queries.processing_days_by(claims, "care_level")),
            ("Backlog by region", queries.backlog_by_region(claims)),
            ("Top provider per region", queries.top_provider_per_region(dataset)),
            ("Most common code per region", queries.most_common_code_per_region(dataset)),
            ("Rejection rate by care level", queries.rejection_rate_by_care_level(claims)),
            ("Top payouts", queries.top_payouts(dataset)),
            ("Top medical codes", queries.top_medical_codes(dataset)),
            ("Top injury types", queries.top_injury_types(dataset)),
            ("Data quality checks", [queries.data_quality_checks(claims)]),
        ]

        if output_format == "json":
            click.echo(json.dumps(
                {title: rows for title, rows in sections},
                indent=2,
                default=_json_default,
            ))
            return

        for title, rows in sections:
            click.echo(f"\n=== {title} ===")
            _echo_rows(rows)

    except Exception as e:
        logger.exception("analyze_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command("validate-config")
@click.pass_context
def validate_config_cmd(ctx):
    """Validate the configuration file."""
    from npe_claims.config.validation import ConfigurationError

    config_path = ctx.obj.get("config_path")

    try:
        config = load_config(config_path)
        warnings = validate_config(config)

        click.echo("Configuration is valid.")

        if warnings:
            click.echo("\nWarnings:")
            for warning in warnings:
                click.echo(f"  - {warning}")

    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.pass_context
def status(ctx):
    """Show configuration and database status."""
    from npe_claims.config.validation import validate_database_connection

    config_path = ctx.obj.get("config_path")

    try:
        config = load_config(config_path)

        click.echo("Configuration:")
        click.echo(f"  Config file: {config_path or 'default'}")
        click.echo(f"  Seed: {config.seed}")
        click.echo(f"  As of: {config.resolve_as_of_date()}")
        click.echo(f"  Claims: {config.scale.claim_count:,}")
        click.echo(f"  Providers per region: {config.scale.providers_per_region}")

        click.echo("\nDatabase:")
        click.echo(f"  Host: {config.database.host}:{config.database.port}")
        click.echo(f"  Database: {config.database.database}")

        try:
            validate_database_connection(config)
            click.echo("  Status: Connected")
        except Exception as e:
            click.echo(f"  Status: Not connected ({e})")
            return

        from npe_claims.db.connection import create_engine_from_config
        from npe_claims.db.reader import load_dataset

        try:
            dataset = load_dataset(create_engine_from_config(config.database))
        except Exception as e:
            click.echo(f"  Tables: not readable ({e})")
            return

        click.echo("\nTables:")
        for table, count in dataset.table_counts().items():
            click.echo(f"  {table}: {count:,}")

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
