"""CLI for the Environment Ranking Engine.

Provides command-line interface for ranking product configurations against
an infrastructure profile.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .catalog import default_catalog, load_catalog, validate_catalog
from .config import find_config_file, load_config, save_default_config
from .engine import RankingEngine
from .exceptions import RankingError
from .explainer import summarize
from .normalizer import load_profile, validate_profile
from .schema import ChatbotConfiguration, RankingReport, RankingResult

console = Console()

SAMPLE_PROFILE = {
    "id": "demo_profile",
    "name": "Demo Profile",
    "description": "Sample infrastructure profile for demonstration",
    "database": "firebase",
    "cloudProvider": "vercel",
    "integrations": ["webhook"],
    "scaleRequirement": "medium",
    "budgetRange": "professional",
    "technicalLevel": "intermediate",
    "constraints": {
        "maxLatencyMs": 300,
        "highAvailability": False,
        "realTimeRequired": True,
        "complianceRequired": [],
    },
}


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_catalog_option(catalog: Optional[str]):
    return load_catalog(catalog) if catalog else default_catalog()


@click.group()
@click.version_option(version="1.0.0", prog_name="environment-ranker")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    help="Path to ranker-config.yaml (default: auto-discovered)"
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity"
)
def main(config_path: Optional[str], log_level: str):
    """Environment Ranking Engine.

    Evaluates every product configuration against an infrastructure profile
    and returns a ranked list with reasoning, costs and a rollout plan.
    """
    _setup_logging(log_level)

    path = Path(config_path) if config_path else find_config_file()
    if path:
        try:
            load_config(path)
        except RankingError as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            sys.exit(1)


@main.command("rank")
@click.option(
    "--profile", "-p",
    required=True,
    type=click.Path(exists=True),
    help="Path to infrastructure profile JSON/YAML"
)
@click.option(
    "--catalog", "-c",
    type=click.Path(exists=True),
    help="Path to a configuration catalog (default: built-in catalog)"
)
@click.option(
    "--top", "-n",
    default=0,
    type=int,
    help="Show only the top N results (default: all)"
)
@click.option(
    "--out", "-o",
    type=click.Path(),
    help="Output file for JSON results"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show breakdown, reasons and plan for each result"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
def rank_cmd(
    profile: str,
    catalog: Optional[str],
    top: int,
    out: Optional[str],
    verbose: bool,
    json_output: bool,
):
    """Rank catalog configurations for an infrastructure profile.

    Examples:
        environment-ranker rank -p profile.json
        environment-ranker rank -p profile.json -c catalog.yaml -n 2 -v
        environment-ranker rank -p profile.json -j -o results.json
    """
    try:
        engine = RankingEngine(catalog=_load_catalog_option(catalog))
        report = engine.report(load_profile(profile))
    except RankingError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    if top > 0:
        report = report.model_copy(update={"results": report.results[:top]})

    if json_output:
        output_json(report, out)
        return

    display_report(report, verbose)
    if out:
        output_json(report, out)
        console.print(f"\n[green]Results saved to {out}[/green]")


@main.command("validate")
@click.option(
    "--profile", "-p",
    type=click.Path(),
    help="Path to infrastructure profile JSON/YAML"
)
@click.option(
    "--catalog", "-c",
    type=click.Path(),
    help="Path to configuration catalog JSON/YAML"
)
def validate_cmd(profile: Optional[str], catalog: Optional[str]):
    """Validate profile and/or catalog files.

    Examples:
        environment-ranker validate -p profile.json
        environment-ranker validate -c catalog.yaml
    """
    if not profile and not catalog:
        console.print("[yellow]Please specify --profile and/or --catalog to validate[/yellow]")
        return

    all_valid = True

    if profile:
        is_valid, issues = validate_profile(profile)
        if is_valid:
            console.print(f"[green]✓ Profile valid: {profile}[/green]")
        else:
            console.print(f"[red]✗ Profile invalid: {profile}[/red]")
            for issue in issues:
                console.print(f"  - {escape(issue)}")
            all_valid = False

    if catalog:
        is_valid, issues = validate_catalog(catalog)
        if is_valid:
            console.print(f"[green]✓ Catalog valid: {catalog}[/green]")
            for issue in issues:
                console.print(f"  [yellow]![/yellow] {escape(issue)}")
        else:
            console.print(f"[red]✗ Catalog invalid: {catalog}[/red]")
            for issue in issues:
                console.print(f"  - {escape(issue)}")
            all_valid = False

    sys.exit(0 if all_valid else 1)


@main.command("inspect")
@click.option(
    "--catalog", "-c",
    type=click.Path(exists=True),
    help="Path to configuration catalog (default: built-in catalog)"
)
@click.option(
    "--id", "config_id",
    help="Show details for a specific configuration ID"
)
def inspect_cmd(catalog: Optional[str], config_id: Optional[str]):
    """Inspect the configuration catalog."""
    try:
        cat = _load_catalog_option(catalog)
    except RankingError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print("\n[bold blue]Configuration Catalog[/bold blue]")
    console.print(f"Version: {cat.version}")
    console.print(f"Total Configurations: {len(cat)}")
    console.print()

    if config_id:
        entry = cat.get(config_id)
        if not entry:
            console.print(f"[red]Configuration not found: {config_id}[/red]")
            sys.exit(1)
        display_configuration_detail(entry)
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Tier")
    table.add_column("Monthly (USD)")
    table.add_column("Setup")
    table.add_column("Days")

    for entry in cat:
        cost = entry.pricing.monthly_cost
        table.add_row(
            entry.id,
            entry.name,
            entry.tier.value,
            f"{cost.min:.0f}-{cost.max:.0f}",
            str(entry.pricing.setup_complexity),
            str(entry.pricing.implementation_time_days),
        )

    console.print(table)


@main.command("init-config")
@click.option(
    "--out", "-o",
    type=click.Path(),
    default="ranker-config.yaml",
    help="Output path for the configuration file"
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing config file"
)
def init_config_cmd(out: str, force: bool):
    """Generate a default ranker configuration file.

    Example:
        environment-ranker init-config --out my-config.yaml
    """
    out_path = Path(out)
    if out_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    save_default_config(out_path)
    console.print(f"[green]✓[/green] Config file created: {out}")
    console.print("\nThis file configures:")
    console.print("  • scoring_weights - How much each dimension contributes to the overall score")
    console.print("  • technical/performance/cost/complexity - Scoring constants per dimension")
    console.print("  • insights, tags - Thresholds for reasons and labels")
    console.print("  • estimates - Cost and rollout plan parameters")
    console.print("\nThe ranker will look for config in this order:")
    console.print("  1. ENVIRONMENT_RANKER_CONFIG environment variable")
    console.print("  2. ./ranker-config.yaml (current directory)")
    console.print("  3. ~/.config/environment-ranker/config.yaml")


@main.command("sample-profile")
@click.option(
    "--out", "-o",
    type=click.Path(),
    default="sample-profile.json",
    help="Output file for the sample profile"
)
def sample_profile_cmd(out: str):
    """Generate a sample infrastructure profile.

    Example:
        environment-ranker sample-profile -o my-profile.json
    """
    with open(out, "w", encoding="utf-8") as f:
        json.dump(SAMPLE_PROFILE, f, indent=2)

    console.print(f"[green]✓[/green] Sample profile saved to: {out}")
    console.print("\nTo rank configurations for this profile:")
    console.print(f"  [cyan]environment-ranker rank -p {out}[/cyan]")


def _score_color(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 60:
        return "yellow"
    return "red"


def display_report(report: RankingReport, verbose: bool):
    """Display a ranking report in formatted text."""
    profile = report.profile
    top = report.top_recommendation

    console.print(Panel(
        f"[bold]{profile.name or profile.id or 'Infrastructure profile'}[/bold]\n\n"
        f"Stack: {profile.database.value} on {profile.cloud_provider.value} | "
        f"Scale: {profile.scale_requirement.value} | Budget: {profile.budget_range.value} | "
        f"Team: {profile.technical_level.value}\n"
        f"Top Recommendation: [bold cyan]{top.configuration.name if top else 'None'}[/bold cyan]\n"
        f"Catalog: {report.catalog_version} ({len(report.results)} ranked)",
        title="Ranking Summary",
    ))

    drivers = summarize(report.results)
    if drivers:
        console.print("\n[bold]Key Drivers:[/bold]")
        for driver in drivers:
            console.print(f"  [green]•[/green] {driver}")

    if not report.results:
        console.print("\n[yellow]No configurations to recommend.[/yellow]")
        return

    console.print("\n[bold]Rankings:[/bold]\n")
    for result in report.results:
        display_result(result, verbose)


def display_result(result: RankingResult, verbose: bool):
    """Display one ranked configuration."""
    score = result.score
    color = _score_color(score.overall)
    tags = f" [dim]{', '.join(result.tags)}[/dim]" if result.tags else ""

    console.print(
        f"  [bold cyan]{result.rank}. {result.configuration.name}[/bold cyan] "
        f"[bold {color}]{score.overall}%[/bold {color}] "
        f"(confidence {result.confidence}%){tags}"
    )

    if verbose:
        b = score.breakdown
        console.print(
            f"     Technical {b.technical} | Performance {b.performance} | Cost {b.cost} | "
            f"Complexity {b.complexity} | Features {b.features}"
        )
        reasons = score.reasons
        if reasons.strengths:
            console.print(f"     [green]Strengths:[/green] {'; '.join(reasons.strengths)}")
        if reasons.concerns:
            console.print(f"     [yellow]Concerns:[/yellow] {'; '.join(reasons.concerns)}")
        if reasons.recommendations:
            console.print(f"     [blue]Recommendations:[/blue] {'; '.join(reasons.recommendations)}")

        costs = score.estimated_costs
        console.print(
            f"     Costs: setup ${costs.setup:,.0f} | monthly ${costs.monthly:,.0f} | "
            f"annual ${costs.annual:,.0f}"
        )
        plan = score.implementation_plan
        phases = ", ".join(f"{p.name} ({p.duration_days}d)" for p in plan.phases)
        console.print(f"     Plan: {plan.total_duration} days, {plan.risk_level.value} risk - {phases}")

    console.print()


def display_configuration_detail(entry: ChatbotConfiguration):
    """Display detailed configuration information."""
    tree = Tree(f"[bold cyan]{entry.name}[/bold cyan]")

    identity = tree.add("[bold]Identity[/bold]")
    identity.add(f"ID: {entry.id}")
    identity.add(f"Tier: {entry.tier.value}")
    if entry.industry:
        identity.add(f"Industry: {entry.industry}")
    if entry.description:
        identity.add(entry.description)

    features = tree.add("[bold]Features[/bold]")
    for name, enabled in entry.features.model_dump().items():
        features.add(f"{'✓' if enabled else '✗'} {name}")

    req = entry.requirements
    requirements = tree.add("[bold]Requirements[/bold]")
    requirements.add(f"Estimated QPS: {req.estimated_qps}")
    requirements.add(f"Min DB connections: {req.min_database_connections}")
    requirements.add(
        f"Storage/Compute/Bandwidth: {req.storage_needs.value}/"
        f"{req.compute_intensity.value}/{req.bandwidth_usage.value}"
    )

    compat = entry.compatibility
    compatibility = tree.add("[bold]Compatibility[/bold]")
    compatibility.add(f"Databases: {', '.join(sorted(d.value for d in compat.supported_databases))}")
    compatibility.add(f"Clouds: {', '.join(sorted(c.value for c in compat.supported_clouds))}")
    compatibility.add(f"Integrations: {', '.join(sorted(i.value for i in compat.supported_integrations))}")
    compatibility.add(f"Min technical level: {compat.min_technical_level.value}")

    pricing = tree.add("[bold]Pricing[/bold]")
    pricing.add(f"Setup complexity: {entry.pricing.setup_complexity}/5")
    pricing.add(f"Monthly: ${entry.pricing.monthly_cost.min:,.0f}-${entry.pricing.monthly_cost.max:,.0f}")
    pricing.add(f"Implementation: {entry.pricing.implementation_time_days} days")

    console.print(tree)


def output_json(report: RankingReport, out_path: Optional[str]):
    """Output report as JSON (camelCase keys)."""
    json_str = report.model_dump_json(indent=2, by_alias=True)

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(json_str)
    else:
        print(json_str)


if __name__ == "__main__":
    main()
