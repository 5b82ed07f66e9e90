"""CLI entry point — the `sitescope` command."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from sitescope.blocklist.trackers import category_for, is_tracker_domain, load_tracker_domains
from sitescope.core.classifier import ThirdPartyClassifier, Verdict
from sitescope.core.config import Settings, get_settings
from sitescope.core.errors import ConfigError, DomainResolutionError, SitescopeError
from sitescope.core.hierarchy import get_base_domain, iter_parent_domains
from sitescope.core.suffix import TldextractOracle

console = Console()
err_console = Console(stderr=True)


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _oracle(ctx: click.Context) -> TldextractOracle:
    if "oracle" not in ctx.obj:
        ctx.obj["oracle"] = TldextractOracle.from_settings(_settings(ctx))
    return ctx.obj["oracle"]


def _render_verdict(verdict: Verdict) -> None:
    color = "red" if verdict.third_party else "green"
    label = "third-party" if verdict.third_party else "first-party"
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Request", verdict.request_url)
    table.add_row("Document", verdict.document_url)
    if verdict.request_base_domain is not None:
        table.add_row("Request base domain", verdict.request_base_domain)
        table.add_row("Document base domain", verdict.document_base_domain or "")
    table.add_row("Reason", verdict.reason.value)
    console.print(table)
    console.print(f"\n[bold]Verdict:[/bold] [{color}]{label}[/{color}]\n")


@click.group()
@click.version_option(package_name="sitescope")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a sitescope TOML config file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """Base domains, parent domains and third-party checks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    try:
        settings = get_settings(config_path)
    except ConfigError as e:
        err_console.print(f"[red]{e}[/red]")
        sys.exit(2)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command("base-domain")
@click.argument("hosts", nargs=-1, required=True)
@click.pass_context
def base_domain(ctx: click.Context, hosts: tuple[str, ...]) -> None:
    """Show the public suffix and base domain (eTLD+1) of each host."""
    oracle = _oracle(ctx)
    table = Table(title="Base domains")
    table.add_column("Host", style="bold")
    table.add_column("Public suffix")
    table.add_column("Base domain", style="cyan")

    failed = False
    for host in hosts:
        try:
            suffix = oracle.public_suffix(host)
        except DomainResolutionError:
            suffix = "-"
        try:
            table.add_row(host, suffix, get_base_domain(host, oracle=oracle))
        except DomainResolutionError as e:
            table.add_row(host, suffix, f"[red]{e.reason}[/red]")
            failed = True

    console.print(table)
    if failed:
        sys.exit(1)


@cli.command()
@click.argument("host")
@click.option("--ignore-self", is_flag=True, help="Start at the parent instead of the host.")
@click.pass_context
def parents(ctx: click.Context, host: str, ignore_self: bool) -> None:
    """List the domains checked for HOST, most specific first."""
    try:
        chain = list(iter_parent_domains(host, ignore_self=ignore_self, oracle=_oracle(ctx)))
    except SitescopeError as e:
        err_console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if not chain:
        console.print(f"[dim]{host} has no parent domains above its public suffix.[/dim]")
        return
    for i, domain in enumerate(chain, 1):
        console.print(f"  {i}. {domain}")


@cli.command()
@click.argument("request_url")
@click.argument("document_url")
@click.option("--format", "output_format", type=click.Choice(["rich", "json"]), default="rich")
@click.pass_context
def check(ctx: click.Context, request_url: str, document_url: str, output_format: str) -> None:
    """Classify REQUEST_URL as first- or third-party relative to DOCUMENT_URL."""
    classifier = ThirdPartyClassifier(
        oracle=_oracle(ctx),
        test_fixture_urls=_settings(ctx).test_fixture_urls,
    )
    try:
        verdict = classifier.classify(request_url, document_url)
    except SitescopeError as e:
        err_console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(verdict.model_dump(mode="json"), indent=2))
    else:
        _render_verdict(verdict)


@cli.command()
@click.argument("hosts", nargs=-1, required=True)
@click.option("--format", "output_format", type=click.Choice(["rich", "json"]), default="rich")
@click.pass_context
def tracker(ctx: click.Context, hosts: tuple[str, ...], output_format: str) -> None:
    """Check hosts against the tracker blocklist (subdomains included)."""
    oracle = _oracle(ctx)
    domains = load_tracker_domains(extra=_settings(ctx).extra_tracker_domains)

    results = []
    for host in hosts:
        listed, match = is_tracker_domain(host, domains=domains, oracle=oracle)
        results.append(
            {
                "host": host,
                "tracker": listed,
                "match": match or None,
                "category": category_for(match) if listed else None,
            }
        )

    if output_format == "json":
        click.echo(json.dumps(results, indent=2))
        return

    table = Table(title="Tracker blocklist")
    table.add_column("Host", style="bold")
    table.add_column("Tracker")
    table.add_column("Matched domain")
    table.add_column("Category", style="dim")
    for row in results:
        status = "[red]yes[/red]" if row["tracker"] else "[green]no[/green]"
        table.add_row(row["host"], status, row["match"] or "", row["category"] or "")
    console.print(table)
