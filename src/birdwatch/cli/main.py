#!/usr/bin/env python3
"""Command-line client for browsing and recording birds and sightings.

Every listing command loads one page from the API and then renders it: a
table of rows, a "Page i of n" footer and a hint for the next page, or an
explicit line saying nothing matched.
"""

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

import click
from dateutil import parser as date_parser

from birdwatch.birds.models import BirdCreate, BirdRead
from birdwatch.client.api_client import (
    DEFAULT_BASE_URL,
    ApiNotFoundError,
    ApiRequestError,
    BirdwatchClient,
)
from birdwatch.queries.pagination import Page
from birdwatch.sightings.models import SightingCreate, SightingRead

logger = logging.getLogger(__name__)

R = TypeVar("R")


class DateTimeParam(click.ParamType):
    """Accept any date or date-time string dateutil understands."""

    name = "datetime"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None  # noqa: ANN401
    ) -> datetime:
        if isinstance(value, datetime):
            return value
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError):
            self.fail(f"{value!r} is not a recognizable date or time", param, ctx)


DATETIME = DateTimeParam()


def _run(obj: dict[str, Any], operation: Callable[[BirdwatchClient], Awaitable[R]]) -> R:
    """Open a client, run one API operation and close the client again.

    API failures are reported in red and end the command with exit status 1.
    """

    async def run() -> R:
        client: BirdwatchClient = obj["client_factory"]()
        try:
            return await operation(client)
        finally:
            await client.aclose()

    try:
        return asyncio.run(run())
    except ApiNotFoundError as e:
        click.echo(click.style(f"✗ Not found: {e}", fg="red"), err=True)
        sys.exit(1)
    except ApiRequestError as e:
        click.echo(click.style(f"✗ Request failed: {e}", fg="red"), err=True)
        sys.exit(1)


def print_page_footer(page: Page[Any]) -> None:
    """Print the page position and how to reach the next page."""
    click.echo(f"Page {page.page_index + 1} of {page.total_pages} ({page.total_count} total)")
    if page.has_next:
        click.echo(f"Next page: --page {page.page_index + 1}")


def print_birds(page: Page[BirdRead]) -> None:
    """Render a page of birds as a table."""
    if page.is_empty:
        click.echo("No birds found.")
        if page.total_count:
            print_page_footer(page)
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Color':<14} {'Weight':>8} {'Height':>8}")
    click.echo("-" * 64)
    for bird in page.items:
        click.echo(
            f"{bird.id:<6} {bird.name[:24]:<24} {bird.color[:14]:<14} "
            f"{bird.weight:>8.2f} {bird.height:>8.2f}"
        )
    click.echo()
    print_page_footer(page)


def print_sightings(page: Page[SightingRead]) -> None:
    """Render a page of sightings as a table; a deleted bird shows as its id."""
    if page.is_empty:
        click.echo("No sightings found.")
        if page.total_count:
            print_page_footer(page)
        return

    click.echo(f"{'ID':<6} {'Bird':<24} {'Location':<28} {'Observed at':<19}")
    click.echo("-" * 80)
    for sighting in page.items:
        bird = sighting.bird.name if sighting.bird else f"<bird {sighting.bird_id} missing>"
        observed = sighting.observed_at.strftime("%Y-%m-%d %H:%M:%S")
        click.echo(f"{sighting.id:<6} {bird[:24]:<24} {sighting.location[:28]:<28} {observed}")
    click.echo()
    print_page_footer(page)


def paging_options(f: Callable) -> Callable:
    """Attach the shared --page/--size/--sort options."""
    f = click.option(
        "--sort", default=None, help="Sort as 'field' or 'field,asc|desc' (default: id,asc)"
    )(f)
    f = click.option("--size", type=int, default=None, help="Rows per page (default: server's)")(f)
    f = click.option("--page", type=int, default=0, show_default=True, help="Zero-based page")(f)
    return f


@click.group()
@click.option(
    "--api-url",
    envvar="BIRDWATCH_API_URL",
    default=DEFAULT_BASE_URL,
    show_default=True,
    help="Base URL of the Birdwatch API",
)
@click.option("--timeout", type=float, default=10.0, show_default=True, help="Request timeout")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, api_url: str, timeout: float, verbose: bool) -> None:
    """Birdwatch: browse and record birds and sightings.

    Examples:
      # List the first page of birds
      birdwatch birds

      # Birds with "jay" in the name, largest first
      birdwatch birds --name jay --sort weight,desc

      # Sightings in Central Park during 2024
      birdwatch sightings --location "central park" --from 2024-01-01 --to 2024-12-31
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj.setdefault(
        "client_factory", lambda: BirdwatchClient(base_url=api_url, timeout=timeout)
    )


# ==================== Birds ====================


@cli.command("birds")
@click.option("--name", default=None, help="Part of the bird's name (any case)")
@click.option("--color", default=None, help="Exact color (any case)")
@paging_options
@click.pass_obj
def list_birds(
    obj: dict[str, Any],
    name: str | None,
    color: str | None,
    page: int,
    size: int | None,
    sort: str | None,
) -> None:
    """List birds, or search them when --name or --color is given."""
    if name or color:
        result = _run(obj, lambda c: c.search_birds(name, color, page, size, sort))
    else:
        result = _run(obj, lambda c: c.list_birds(page, size, sort))
    print_birds(result)


@cli.command("add-bird")
@click.option("--name", required=True, help="Species name")
@click.option("--color", required=True, help="Predominant color")
@click.option("--weight", type=float, required=True, help="Weight in grams")
@click.option("--height", type=float, required=True, help="Height in centimetres")
@click.pass_obj
def add_bird(obj: dict[str, Any], name: str, color: str, weight: float, height: float) -> None:
    """Add a bird species record."""
    try:
        payload = BirdCreate(name=name, color=color, weight=weight, height=height)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e
    bird = _run(obj, lambda c: c.create_bird(payload))
    click.echo(click.style(f"✓ Added bird {bird.id}: {bird.name}", fg="green"))


@cli.command("delete-bird")
@click.argument("bird_id", type=int)
@click.pass_obj
def delete_bird(obj: dict[str, Any], bird_id: int) -> None:
    """Delete a bird; its sightings are kept."""
    _run(obj, lambda c: c.delete_bird(bird_id))
    click.echo(click.style(f"✓ Deleted bird {bird_id}", fg="green"))


# ==================== Sightings ====================


@cli.command("sightings")
@click.option("--bird-name", default=None, help="Exact bird name (any case)")
@click.option("--location", default=None, help="Part of the location (any case)")
@click.option("--from", "from_date", type=DATETIME, default=None, help="Observed at or after")
@click.option("--to", "to_date", type=DATETIME, default=None, help="Observed at or before")
@paging_options
@click.pass_obj
def list_sightings(
    obj: dict[str, Any],
    bird_name: str | None,
    location: str | None,
    from_date: datetime | None,
    to_date: datetime | None,
    page: int,
    size: int | None,
    sort: str | None,
) -> None:
    """List sightings, or search them when any filter is given."""
    if bird_name or location or from_date or to_date:
        result = _run(
            obj,
            lambda c: c.search_sightings(
                bird_name, location, from_date, to_date, page, size, sort
            ),
        )
    else:
        result = _run(obj, lambda c: c.list_sightings(page, size, sort))
    print_sightings(result)


@cli.command("add-sighting")
@click.option("--bird-id", type=int, required=True, help="Id of the bird that was seen")
@click.option("--location", required=True, help="Where it was seen")
@click.option(
    "--observed-at", type=DATETIME, default=None, help="When it was seen (default: now)"
)
@click.pass_obj
def add_sighting(
    obj: dict[str, Any], bird_id: int, location: str, observed_at: datetime | None
) -> None:
    """Record a sighting of an existing bird."""
    try:
        payload = SightingCreate(
            bird_id=bird_id,
            location=location,
            observed_at=observed_at or datetime.now(UTC),
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e
    sighting = _run(obj, lambda c: c.create_sighting(payload))
    click.echo(
        click.style(f"✓ Added sighting {sighting.id} at {sighting.location}", fg="green")
    )


@cli.command("delete-sighting")
@click.argument("sighting_id", type=int)
@click.pass_obj
def delete_sighting(obj: dict[str, Any], sighting_id: int) -> None:
    """Delete a sighting."""
    _run(obj, lambda c: c.delete_sighting(sighting_id))
    click.echo(click.style(f"✓ Deleted sighting {sighting_id}", fg="green"))


def main() -> None:
    """Entry point for the birdwatch CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
