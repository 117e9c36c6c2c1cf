# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""NetQuota CLI - manage storage quotas of sites in a multi-tenant network"""

import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

# Force UTF-8 encoding for Windows
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from netquota import __version__
from netquota.backends import YamlNetwork
from netquota.core.config import get_config
from netquota.core.exceptions import QuotaError
from netquota.core.formatter import FORMATS, format_field, format_items
from netquota.core.logger import setup_logging
from netquota.core.models import ThresholdFilter
from netquota.core.service import QuotaService

logger = logging.getLogger("netquota.cli")


def fail(error: QuotaError):
    """Print an error the way every quota command reports it and exit 1"""
    logger.debug(f"{error.__class__.__name__}: {error.message}", extra={"error_details": error.to_dict()})
    click.echo(f"Error: {error.message}", err=True)
    sys.exit(1)


def open_network(ctx: click.Context) -> Tuple[YamlNetwork, QuotaService]:
    network = YamlNetwork.load(ctx.obj["network_file"])
    return network, QuotaService(network, network, network, network)


def site_id(value: str) -> int:
    """Site ID from an argument; a non-numeric ID becomes 0, which matches no site"""
    try:
        return int(value)
    except ValueError:
        return 0


def split_target(args: Tuple[str, ...], usage: str) -> Tuple[Optional[int], str]:
    """Split "[<id>] <quota>" arguments; a missing id means the current site"""
    if len(args) == 1:
        return None, args[0]
    if len(args) == 2:
        return site_id(args[0]), args[1]
    raise click.UsageError(usage)


def render(
    records, settings, fmt: Optional[str], fields: Optional[str], field: Optional[str]
) -> str:
    fmt = fmt or settings.output.default_format
    if field:
        return format_field(records, field, fmt)
    return format_items(records, fmt, fields or settings.output.default_fields)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--network",
    "network_file",
    type=click.Path(dir_okay=False),
    help="Network YAML file (default: paths.network_file from config)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Console log level",
)
@click.pass_context
def cli(ctx: click.Context, network_file: Optional[str], log_level: Optional[str]):
    """NetQuota - storage quotas for multi-tenant site networks.

    Quotas are given in megabytes, or in gigabytes with a "g" suffix:

        netquota list --min-used-pct 90
        netquota get 3
        netquota set 2 10g
        netquota add 2 3500
        netquota subtract 5g        # current site
    """
    settings = get_config()
    setup_logging(
        level=log_level or settings.observability.log_level,
        log_dir=settings.paths.log_dir,
        file_output=settings.observability.file_logging,
    )
    ctx.obj = {
        "settings": settings,
        "network_file": Path(network_file) if network_file else settings.paths.network_file,
    }


# =============================================================================
# Reporting
# =============================================================================

@cli.command("list")
@click.option("--field", help="Show only the value of this field, one per line")
@click.option("--fields", help="Comma-separated list of fields to show")
@click.option("--format", "fmt", type=click.Choice(FORMATS), help="Render output in a particular format")
@click.option("--min-used", type=click.FloatRange(min=0), help="List only sites using at least this many MB")
@click.option("--min-used-pct", type=click.FloatRange(0, 100), help="List only sites using at least this percentage")
@click.option("--blog_id", "blog_id", type=int, help="List only the site with this ID")
@click.pass_context
def list_(ctx, field, fields, fmt, min_used, min_used_pct, blog_id):
    """List all sites in the network with their quota.

    Default fields: blog_id, url, quota, quota_used, quota_used_percent

    Examples:
        netquota list --field=url
        netquota list --fields=blog_id,quota
        netquota list --min-used 1000 --format csv
    """
    settings = ctx.obj["settings"]
    try:
        _, service = open_network(ctx)
        where = {"blog_id": blog_id} if blog_id is not None else None
        records = service.list_quotas(
            ThresholdFilter(min_used_mb=min_used, min_used_percent=min_used_pct),
            where=where,
        )
        click.echo(render(records, settings, fmt, fields, field))
    except QuotaError as e:
        fail(e)


@cli.command()
@click.argument("blog_id", required=False)
@click.option("--field", help="Show only the value of this field")
@click.option("--fields", help="Comma-separated list of fields to show")
@click.option("--format", "fmt", type=click.Choice(FORMATS), help="Render output in a particular format")
@click.pass_context
def get(ctx, blog_id, field, fields, fmt):
    """Show the quota of one site (default: the current site).

    Example:
        netquota get 3
    """
    settings = ctx.obj["settings"]
    try:
        _, service = open_network(ctx)
        service.ensure_multitenant()
        records = service.get_quota(site_id(blog_id) if blog_id is not None else None)
        click.echo(render(records, settings, fmt, fields, field))
    except QuotaError as e:
        fail(e)


# =============================================================================
# Mutations
# =============================================================================

def _mutate(ctx: click.Context, operation: str, args: Tuple[str, ...], usage: str):
    try:
        network, service = open_network(ctx)
        service.ensure_multitenant()
        blog_id, token = split_target(args, usage)
        change = getattr(service, f"{operation}_quota")(token, blog_id)
        network.save()
    except QuotaError as e:
        fail(e)
    click.echo(f"Success: {change.message}")


@cli.command("set")
@click.argument("args", nargs=-1, required=True)
@click.pass_context
def set_(ctx, args):
    """Set the quota of a site: [<id>] <quota>.

    Setting the network default removes the site's own quota.

    Examples:
        netquota set 2 100000
        netquota set 2 10g
    """
    _mutate(ctx, "set", args, "Need to specify a blog id and quota.")


@cli.command()
@click.argument("args", nargs=-1, required=True)
@click.pass_context
def add(ctx, args):
    """Add quota to a site: [<id>] <quota-to-add>.

    Examples:
        netquota add 2 3500
        netquota add 5g
    """
    _mutate(
        ctx, "add", args,
        "Please specify [<blog_id> <quota-to-add>] or [<quota-to-add-to-current-site>]",
    )


@cli.command()
@click.argument("args", nargs=-1, required=True)
@click.pass_context
def subtract(ctx, args):
    """Subtract quota from a site: [<id>] <quota-to-subtract>.

    The result is not floored at zero.

    Examples:
        netquota subtract 2 2500
        netquota subtract 5g
    """
    _mutate(
        ctx, "subtract", args,
        "Please specify [<blog_id> <quota-to-subtract>] or [<quota-to-subtract-from-current-site>]",
    )


if __name__ == "__main__":
    cli()
