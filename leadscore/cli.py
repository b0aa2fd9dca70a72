"""
Lead Score CLI

Examples:
    # Score a CSV export, results to stdout
    leadscore score prospects.csv

    # JSON output, piped to jq
    leadscore score prospects.json -f json -q | jq '.[:5]'

    # Only boring goldmines with a big marketing gap
    leadscore score prospects.csv --tag boring_goldmine --min-opportunity 60

    # Import into the database and score on the way in
    leadscore import prospects.csv

    # Rescore everything stored
    leadscore rescore --batch-size 100 --workers 4

    # Best lead-gen niches
    leadscore leadgen prospects.csv

    # Check configuration
    leadscore check
"""

import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .api import filter_scored, score_prospects
from .config import load_config
from .constants import OpportunityTag
from .database import ProspectRecord, create_session_factory, upsert_prospect
from .export import OUTPUT_FORMATS, export_prospects, format_prospects
from .importer import RecordLoadError, load_prospects
from .insights import ScoreStats, TopProspects, lead_gen_report
from .models import ScoredProspect
from .rescore import rescore_all
from .scoring import calculate_enhanced_scores

# Progress to stderr, data to stdout
console = Console(stderr=True)
logger = logging.getLogger(__name__)

TAG_CHOICES = [tag.value for tag in OpportunityTag]


def setup_logging(verbose: bool, quiet: bool, debug: bool = False) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Suppress noisy loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def _score_color(score: int) -> str:
    return "green" if score >= 70 else "yellow" if score >= 40 else "red"


def display_summary(prospects: list[ScoredProspect]) -> None:
    """Display a summary table of top prospects."""
    table = Table(title="Top Prospects", show_header=True, header_style="bold magenta")

    table.add_column("Company", style="cyan", max_width=30)
    table.add_column("HT", justify="right")
    table.add_column("Opp", justify="right")
    table.add_column("LG", justify="right")
    table.add_column("Tags", max_width=45)

    for r in prospects:
        s = r.scores
        table.add_row(
            (r.prospect.company_name or "-")[:30],
            f"[{_score_color(s.high_ticket_score)}]{s.high_ticket_score}[/{_score_color(s.high_ticket_score)}]",
            f"[{_score_color(s.opportunity_score)}]{s.opportunity_score}[/{_score_color(s.opportunity_score)}]",
            f"[{_score_color(s.lead_gen_score)}]{s.lead_gen_score}[/{_score_color(s.lead_gen_score)}]",
            ", ".join(tag.value for tag in s.opportunity_tags) or "-",
        )

    console.print(table)
    console.print("\n[dim]HT=High-Ticket, Opp=Opportunity, LG=Lead-Gen[/dim]")


def display_stats(stats: ScoreStats, top: int) -> None:
    """Display tag breakdown and the best lead-gen categories."""
    tags = Table(title="Opportunity Tags", show_header=True, header_style="bold magenta")
    tags.add_column("Tag", style="cyan")
    tags.add_column("Count", justify="right")
    tags.add_column("%", justify="right")
    for tag in (
        OpportunityTag.HIGH_TICKET,
        OpportunityTag.BORING_GOLDMINE,
        OpportunityTag.LEADGEN_OPPORTUNITY,
        OpportunityTag.QUICK_WIN,
    ):
        tags.add_row(tag.value, str(stats.tag_count(tag)), f"{stats.tag_percent(tag)}%")
    console.print(tags)

    categories = Table(title="Top Lead-Gen Categories", show_header=True, header_style="bold magenta")
    categories.add_column("#", justify="right")
    categories.add_column("Category", style="cyan")
    categories.add_column("Prospects", justify="right")
    categories.add_column("Avg Score", justify="right")
    categories.add_column("Est. Lead Value", justify="right")
    for i, (name, tally) in enumerate(stats.top_categories(top), start=1):
        categories.add_row(str(i), name.upper(), str(tally.count), str(tally.avg_score), f"${tally.avg_lead_value}")
    console.print(categories)

    display_top_prospects("Top High-Ticket Prospects", stats.top_high_ticket, "High-Ticket", "high_ticket_score")
    display_top_prospects("Top Boring Goldmines", stats.top_goldmines, "Opportunity", "opportunity_score")
    display_top_prospects("Top Lead-Gen Prospects", stats.top_lead_gen, "Lead-Gen", "lead_gen_score")


def display_top_prospects(title: str, top: TopProspects, score_label: str, score_field: str) -> None:
    """Display one ranked prospect list from a rescoring run."""
    if not len(top):
        return

    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Company", style="cyan", max_width=30)
    table.add_column("Type", max_width=25)
    table.add_column("City")
    table.add_column(score_label, justify="right")
    table.add_column("Website")
    for i, entry in enumerate(top.entries(), start=1):
        p = entry.prospect
        table.add_row(
            str(i),
            p.company_name or "-",
            p.business_type or p.categories or "-",
            p.city or "-",
            str(getattr(entry.scores, score_field)),
            "Yes" if p.website else "[red]No[/red]",
        )
    console.print(table)


# ============================================================================
# CLI Group
# ============================================================================

@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__)
def cli(ctx):
    """Score local-business prospects for high-ticket, opportunity and lead-gen value."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============================================================================
# Score Command
# ============================================================================

@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(), help="Output file (default: stdout)")
@click.option("-f", "--format", "output_format",
              type=click.Choice(list(OUTPUT_FORMATS)),
              default="csv", help="Output format")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress, only emit data")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--no-headers", is_flag=True, help="Omit headers in CSV/TSV")
@click.option("-l", "--limit", type=int, default=0, help="Max prospects to output (0 = all)")
# Filtering
@click.option("--min-high-ticket", type=int, default=0, help="Minimum high-ticket score")
@click.option("--min-opportunity", type=int, default=0, help="Minimum opportunity score")
@click.option("--min-lead-gen", type=int, default=0, help="Minimum lead-gen score")
@click.option("--tag", "tags", multiple=True, type=click.Choice(TAG_CHOICES),
              help="Require tag (repeatable)")
@click.option("--sort", "sort_by", default="opportunity",
              type=click.Choice(["high-ticket", "opportunity", "lead-gen"]),
              help="Score to sort by")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
def score(
    input_file: str,
    output: Optional[str],
    output_format: str,
    quiet: bool,
    verbose: bool,
    debug: bool,
    no_headers: bool,
    limit: int,
    min_high_ticket: int,
    min_opportunity: int,
    min_lead_gen: int,
    tags: tuple,
    sort_by: str,
    config: Optional[str],
):
    """
    Score prospects from a CSV, JSON or JSON-lines file.

    Output goes to stdout by default (use -o for file).
    Progress goes to stderr (use -q to suppress).

    Examples:

        leadscore score prospects.csv

        leadscore score prospects.json -f json -q | jq '.'

        leadscore score prospects.csv --tag quick_win --min-opportunity 70
    """
    setup_logging(verbose, quiet, debug)
    settings = load_config(config)

    try:
        loaded = load_prospects(input_file)
    except RecordLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if not quiet:
        console.print(
            f"[green]Loaded:[/green] {len(loaded.prospects)} prospects "
            f"[dim]({loaded.skipped} skipped, {loaded.duplicates} duplicates)[/dim]"
        )

    results = score_prospects(loaded.prospects, settings.scoring)
    results = filter_scored(results, min_high_ticket, min_opportunity, min_lead_gen, tags)

    sort_key = {
        "high-ticket": lambda r: r.scores.high_ticket_score,
        "opportunity": lambda r: r.scores.opportunity_score,
        "lead-gen": lambda r: r.scores.lead_gen_score,
    }[sort_by]
    results.sort(key=sort_key, reverse=True)

    if limit:
        results = results[:limit]

    if not quiet:
        console.print(f"[dim]{len(results)} prospects after filtering[/dim]")

    if output:
        output_path = export_prospects(results, output, output_format)
        if not quiet:
            console.print(f"\n[green]Saved:[/green] {output_path}")
            display_summary(results[:10])
    else:
        click.echo(format_prospects(results, output_format, no_headers))

    # Exit code: 0 if results, 1 if empty
    sys.exit(0 if results else 1)


# ============================================================================
# Import Command
# ============================================================================

@cli.command(name="import")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--database-url", help="SQLAlchemy database URL")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def import_(input_file: str, database_url: Optional[str], config: Optional[str], quiet: bool, verbose: bool):
    """
    Import prospects into the database and score them.

    Existing records are matched by external ID, or by company name and city,
    and updated in place.
    """
    setup_logging(verbose, quiet)
    settings = load_config(config)

    try:
        loaded = load_prospects(input_file)
    except RecordLoadError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    session_factory = create_session_factory(database_url or settings.database_url)
    created = updated = errors = 0

    for prospect in loaded.prospects:
        db = session_factory()
        try:
            record, is_new = upsert_prospect(db, prospect)
            record.apply_scores(calculate_enhanced_scores(record.to_prospect(), settings.scoring))
            db.commit()
            if is_new:
                created += 1
            else:
                updated += 1
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning("Failed to import %s: %s", prospect.company_name, e)
            errors += 1
        finally:
            db.close()

    if not quiet:
        console.print(
            f"[green]Imported:[/green] {created} new, {updated} updated, "
            f"{loaded.skipped} skipped, {errors} errors"
        )

    sys.exit(0 if not errors else 1)


# ============================================================================
# Rescore Command
# ============================================================================

@cli.command()
@click.option("--database-url", help="SQLAlchemy database URL")
@click.option("--batch-size", type=int, help="Prospects per batch")
@click.option("-j", "--workers", type=int, help="Parallel workers per batch")
@click.option("--unscored-only", is_flag=True, help="Only score prospects without scores")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def rescore(
    database_url: Optional[str],
    batch_size: Optional[int],
    workers: Optional[int],
    unscored_only: bool,
    config: Optional[str],
    quiet: bool,
    verbose: bool,
):
    """Recalculate scores and tags for every stored prospect."""
    setup_logging(verbose, quiet)
    settings = load_config(config)
    if database_url:
        settings.database_url = database_url
    if batch_size:
        settings.batch_size = batch_size
    if workers:
        settings.max_workers = workers

    session_factory = create_session_factory(settings.database_url)

    if quiet:
        summary = rescore_all(session_factory, settings, unscored_only)
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            task = progress.add_task("[cyan]Scoring prospects...", total=None)

            def on_progress(done: int, total: int) -> None:
                progress.update(task, completed=done, total=total)

            summary = rescore_all(session_factory, settings, unscored_only, on_progress)

        console.print(f"\n[green]Updated:[/green] {summary.updated}/{summary.total} prospects")
        if summary.errors:
            console.print(f"[red]Errors:[/red] {summary.errors}")
        if summary.updated:
            display_stats(summary.stats, settings.top_categories)

    sys.exit(0 if not summary.errors else 1)


# ============================================================================
# Lead-Gen Command
# ============================================================================

@cli.command()
@click.argument("input_file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--database-url", help="Read stored prospects instead of a file")
@click.option("-f", "--format", "output_format", type=click.Choice(["table", "json"]),
              default="table", help="Output format")
@click.option("-n", "--top", type=int, default=10, help="Categories to show")
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
def leadgen(
    input_file: Optional[str],
    database_url: Optional[str],
    output_format: str,
    top: int,
    config: Optional[str],
):
    """
    Rank service categories by lead-gen opportunity.

    Scores INPUT_FILE, or reads already-scored prospects from the database
    when no file is given.
    """
    setup_logging(False, output_format == "json")
    settings = load_config(config)

    if input_file:
        try:
            loaded = load_prospects(input_file)
        except RecordLoadError as e:
            console.print(f"[red]Error:[/red] {e}")
            sys.exit(1)
        entries = [
            (r.prospect, r.scores.lead_gen_score)
            for r in score_prospects(loaded.prospects, settings.scoring)
        ]
    else:
        session_factory = create_session_factory(database_url or settings.database_url)
        db = session_factory()
        try:
            entries = [(r.to_prospect(), r.lead_gen_score) for r in db.query(ProspectRecord)]
        finally:
            db.close()

    report = lead_gen_report(entries, top=top)
    opportunities = report["opportunities"]

    if output_format == "json":
        click.echo(json.dumps(report, indent=2))
    else:
        table = Table(title="Lead-Gen Opportunities", show_header=True, header_style="bold magenta")
        table.add_column("Category", style="cyan")
        table.add_column("Prospects", justify="right")
        table.add_column("Avg Score", justify="right")
        table.add_column("Avg Rating", justify="right")
        table.add_column("Lead Value", justify="right")
        table.add_column("No Website", justify="right")
        table.add_column("Top Cities", max_width=40)
        for o in opportunities:
            table.add_row(
                o["category"],
                str(o["count"]),
                str(o["avg_score"]),
                f"{o['avg_rating']}★" if o["avg_rating"] is not None else "-",
                f"${o['estimated_lead_value']}",
                f"{o['market_gap_percent']}%",
                ", ".join(f"{c['city']} ({c['count']})" for c in o["top_cities"]),
            )
        console.print(table)

        for category, prospects in report["category_prospects"].items():
            if not prospects:
                continue
            console.print(f"\n[bold]Top {category} prospects:[/bold]")
            for i, p in enumerate(prospects, start=1):
                website = "website" if p["website"] else "[red]no website[/red]"
                console.print(
                    f"  {i}. {p['company_name']} - {p['city'] or 'Unknown'} "
                    f"[dim](score {p['lead_gen_score']}, {website})[/dim]"
                )

    sys.exit(0 if opportunities else 1)


# ============================================================================
# Check Command
# ============================================================================

@cli.command()
@click.option("--config", type=click.Path(exists=True), help="YAML config file")
def check(config: Optional[str]):
    """Check configuration and database availability."""
    settings = load_config(config)

    click.echo(f"✓ Database URL: {settings.database_url}")
    click.echo(f"✓ Batch size: {settings.batch_size}, workers: {settings.max_workers}")
    s = settings.scoring
    click.echo(
        f"✓ Tag thresholds: high_ticket>={s.high_ticket_threshold}, "
        f"leadgen>={s.leadgen_threshold}, quick_win>={s.quick_win_min_opportunity}"
    )

    try:
        session_factory = create_session_factory(settings.database_url)
        db = session_factory()
        try:
            count = db.query(ProspectRecord).count()
        finally:
            db.close()
        click.echo(f"✓ Database: connection OK ({count} prospects)")
    except SQLAlchemyError as e:
        click.echo(f"✗ Database: {e}")
        sys.exit(1)


# ============================================================================
# Version Command
# ============================================================================

@cli.command()
def version():
    """Show version info."""
    from leadscore import get_version
    click.echo(f"leadscore {get_version()}")


def main():
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    cli()
