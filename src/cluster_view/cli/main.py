"""cluster-view CLI: command-line interface for the ECS cluster view.

Commands:
    list        Show cached cluster summaries
    describe    Describe cached clusters for an account and region
    validate    Validate config files (accounts, cache)
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from cluster_view import __version__
from cluster_view.aws.client_provider import AmazonClientProvider
from cluster_view.cache.client import EcsClusterCacheClient
from cluster_view.cache.store import CacheStoreError, FileCache
from cluster_view.config import LOG_LEVELS, ClusterViewConfig, load_config
from cluster_view.credentials.repository import (
    AccountsError,
    ConfigurationError,
    load_accounts,
)
from cluster_view.provider import EcsClusterProvider

# --- Defaults ---

DEFAULT_CACHE = "./cache.jsonl"
DEFAULT_ACCOUNTS = "./accounts.yaml"


def _resolve_cfg() -> ClusterViewConfig:
    """Load config from cluster-view.yaml (auto-discover, never error).

    A config file that cannot be used is reported on stderr and replaced
    by the defaults.
    """
    try:
        return load_config()
    except Exception as e:
        click.echo(f"Warning: ignoring config file: {e}", err=True)
        return ClusterViewConfig()


def _or(explicit: str | None, cfg_val: str | None, fallback: str) -> str:
    """Return first non-None value: explicit CLI flag > config > fallback."""
    return explicit or cfg_val or fallback


# --- Root group ---


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level", default=None,
    type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
    help="Logging level (default from config, else WARNING)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """cluster-view: cache-backed ECS cluster inventory."""
    cfg = _resolve_cfg()
    ctx.obj = cfg
    logging.basicConfig(
        level=(log_level or cfg.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# --- list command ---


@cli.command("list")
@click.option("--cache", default=None, help="Path to cache JSONL file")
@click.option("--account", default=None, help="Filter by account name")
@click.option("--region", default=None, help="Filter by region")
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_obj
def list_clusters(
    cfg: ClusterViewConfig,
    cache: str | None,
    account: str | None,
    region: str | None,
    json_output: bool,
) -> None:
    """Show cached cluster summaries."""
    cache = _or(cache, cfg.cache, DEFAULT_CACHE)
    try:
        clusters = EcsClusterCacheClient(FileCache(cache)).get_all()
    except CacheStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if account:
        clusters = [c for c in clusters if c.account == account]
    if region:
        clusters = [c for c in clusters if c.region == region]

    if json_output:
        data = [c.model_dump(mode="json") for c in clusters]
        click.echo(json.dumps(data, indent=2))
        return

    if not clusters:
        click.echo("No clusters found.")
        return
    for c in clusters:
        click.echo(f"  {c.account:<20} {c.region:<16} {c.name}")
    click.echo(f"\n{len(clusters)} cluster(s) cached.")


# --- describe command ---


@cli.command()
@click.argument("account")
@click.argument("region")
@click.option("--cache", default=None, help="Path to cache JSONL file")
@click.option("--accounts", default=None, help="Path to accounts YAML file")
@click.option("--endpoint-url", default=None, help="Override the ECS endpoint URL")
@click.option(
    "--include", "include", multiple=True,
    help="Extra DescribeClusters field (repeatable): ATTACHMENTS, "
         "CONFIGURATIONS, SETTINGS, STATISTICS, TAGS",
)
@click.option(
    "--max-workers", default=None, type=click.IntRange(min=1),
    help="Maximum concurrent describe calls (default 1)",
)
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.pass_obj
def describe(
    cfg: ClusterViewConfig,
    account: str,
    region: str,
    cache: str | None,
    accounts: str | None,
    endpoint_url: str | None,
    include: tuple[str, ...],
    max_workers: int | None,
    json_output: bool,
) -> None:
    """Describe every cached cluster for ACCOUNT in REGION."""
    cache = _or(cache, cfg.cache, DEFAULT_CACHE)
    accounts = _or(accounts, cfg.accounts, DEFAULT_ACCOUNTS)

    try:
        repository = load_accounts(accounts)
        provider = EcsClusterProvider(
            cache=FileCache(cache),
            credentials_repository=repository,
            client_provider=AmazonClientProvider(endpoint_url or cfg.endpoint_url),
            include=list(include) or cfg.include,
            max_workers=max_workers or cfg.max_workers,
        )
        details = provider.get_all_ecs_cluster_details(account, region)
    except (AccountsError, CacheStoreError, ConfigurationError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if json_output:
        data = [d.model_dump(mode="json", by_alias=True, exclude_none=True) for d in details]
        click.echo(json.dumps(data, indent=2))
        return

    if not details:
        click.echo(f"No clusters described for {account}/{region}.")
        return
    for d in details:
        status = d.status or "UNKNOWN"
        status_color = "green" if status == "ACTIVE" else "yellow"
        click.echo(
            f"  {d.cluster_name:<40} "
            + click.style(f"[{status}]", fg=status_color)
            + f"  services={d.active_services_count}"
            + f" running={d.running_tasks_count}"
            + f" pending={d.pending_tasks_count}"
            + f" instances={d.registered_container_instances_count}"
        )
    click.echo(f"\n{len(details)} cluster(s) described.")


# --- validate command ---


@cli.command()
@click.option("--cache", default=None, help="Path to cache JSONL file")
@click.option("--accounts", default=None, help="Path to accounts YAML file")
@click.pass_obj
def validate(cfg: ClusterViewConfig, cache: str | None, accounts: str | None) -> None:
    """Validate configuration files."""
    cache = cache or cfg.cache or DEFAULT_CACHE
    accounts = accounts or cfg.accounts or DEFAULT_ACCOUNTS

    errors: list[str] = []
    ok_count = 0

    if accounts and Path(accounts).exists():
        try:
            repo = load_accounts(accounts)
            click.echo(
                click.style("OK", fg="green")
                + f"  accounts: {len(repo)} account(s) loaded"
            )
            ok_count += 1
        except AccountsError as e:
            errors.append(f"accounts: {e}")
            click.echo(click.style("FAIL", fg="red") + f"  accounts: {e}")

    if cache and Path(cache).exists():
        try:
            clusters = EcsClusterCacheClient(FileCache(cache)).get_all()
            click.echo(
                click.style("OK", fg="green")
                + f"  cache: {len(clusters)} cluster(s) readable"
            )
            ok_count += 1
        except CacheStoreError as e:
            errors.append(f"cache: {e}")
            click.echo(click.style("FAIL", fg="red") + f"  cache: {e}")

    if errors:
        click.echo(f"\n{len(errors)} error(s) found.")
        sys.exit(1)
    elif ok_count > 0:
        click.echo(f"\nAll {ok_count} config(s) valid.")
    else:
        click.echo("No config files found to validate.")
