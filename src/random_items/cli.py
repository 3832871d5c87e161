"""Click CLI definition for random-items."""

from __future__ import annotations

import logging
import random
import sys
import time
from collections.abc import Callable
from typing import Any

import click
from pydantic import ValidationError
from rich.table import Table

from random_items import __version__
from random_items.catalog.categories import ALL_CATEGORIES
from random_items.catalog.source import FileCatalogSource
from random_items.config import AppConfig, load_config
from random_items.core.dispatcher import Dispatcher, LogDispatcher, WebhookDispatcher
from random_items.core.picker import ItemPicker
from random_items.core.trigger import TriggerLoop
from random_items.utils.helpers import format_duration
from random_items.utils.logging import LiveStatus, console, setup_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """random-items — hand out random repository items at an interval."""


def _pool_options(f: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that builds the item pool."""
    options = [
        click.option("--config", "config_path", type=str, help="Path to config YAML file"),
        click.option("--catalog", type=str, help="Path to repository JSON/YAML file"),
        click.option(
            "--include-titleless",
            is_flag=True,
            default=None,
            help="Include items without a title (slower rebuild, some may not spawn)",
        ),
        click.option(
            "--disable-category",
            "disabled_categories",
            multiple=True,
            type=click.Choice(ALL_CATEGORIES, case_sensitive=False),
            help="Exclude a category from the pool (repeatable)",
        ),
        click.option("--verbose", is_flag=True, help="Enable debug logging"),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _load(
    config_path: str | None,
    catalog: str | None,
    include_titleless: bool | None,
    disabled_categories: tuple[str, ...],
    seed: int | None = None,
    extra: dict | None = None,
) -> AppConfig:
    overrides: dict = extra or {}
    if catalog:
        overrides.setdefault("catalog", {})["path"] = catalog
    if include_titleless:
        overrides.setdefault("filter", {})["include_titleless"] = True
    if disabled_categories:
        overrides.setdefault("filter", {})["categories"] = {
            cat.lower(): False for cat in disabled_categories
        }
    if seed is not None:
        overrides.setdefault("trigger", {})["seed"] = seed

    try:
        return load_config(config_path, overrides)
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{e}")
        sys.exit(1)


def _build_picker(config: AppConfig) -> ItemPicker:
    source = FileCatalogSource(config.catalog.path)
    if not source.is_loaded():
        console.print(f"[red]Error:[/red] repository not available at {config.catalog.path}")
        sys.exit(1)
    return ItemPicker(source, config.filter)


def _build_dispatcher(config: AppConfig) -> Dispatcher:
    if config.dispatch.mode == "webhook":
        return WebhookDispatcher(
            url=config.dispatch.webhook_url,
            api_key=config.dispatch.api_key,
            timeout=config.dispatch.timeout,
        )
    return LogDispatcher()


@main.command()
@_pool_options
@click.option("--interval", type=float, help="Seconds between items")
@click.option(
    "--spawn-in-world/--add-to-inventory",
    "spawn_in_world",
    default=None,
    help="Spawn items in the world or add them to the inventory",
)
@click.option("--webhook-url", type=str, help="POST each item to this URL")
@click.option("--api-key", type=str, help="Bearer token for the webhook")
@click.option("--max-draws", type=click.IntRange(min=1), help="Stop after this many draws")
@click.option("--seed", type=int, help="Random seed for draws")
def run(
    config_path: str | None,
    catalog: str | None,
    include_titleless: bool | None,
    disabled_categories: tuple[str, ...],
    seed: int | None,
    verbose: bool,
    interval: float | None,
    spawn_in_world: bool | None,
    webhook_url: str | None,
    api_key: str | None,
    max_draws: int | None,
) -> None:
    """Hand out a random item every interval until interrupted."""
    setup_logging(verbose)

    overrides: dict = {}
    if interval is not None:
        overrides.setdefault("trigger", {})["interval_seconds"] = interval
    if spawn_in_world is not None:
        overrides.setdefault("trigger", {})["spawn_in_world"] = spawn_in_world
    if webhook_url:
        overrides["dispatch"] = {"mode": "webhook", "webhook_url": webhook_url}
    if api_key:
        overrides.setdefault("dispatch", {})["api_key"] = api_key

    config = _load(config_path, catalog, include_titleless, disabled_categories, seed, overrides)

    console.print(
        f"\n[bold magenta]random-items[/bold magenta] v{__version__}\n"
        f"  Repository:  {config.catalog.path}\n"
        f"  Interval:    {config.trigger.interval_seconds:g}s\n"
        f"  Mode:        {'spawn in world' if config.trigger.spawn_in_world else 'add to inventory'}\n"
        f"  Dispatch:    {config.dispatch.mode}\n"
        f"  Categories:  {', '.join(config.filter.enabled_categories()) or '(none)'}\n"
    )

    picker = _build_picker(config)
    dispatcher = _build_dispatcher(config)
    loop = TriggerLoop(picker, dispatcher, config.trigger)

    console.print("[dim]Building the item pool, this may take a few seconds...[/dim]")
    loop.start()
    console.print(f"  Pool:        {picker.pool.size():,} items\n")

    status = LiveStatus(config.trigger.interval_seconds)
    status.start()
    start_time = time.monotonic()
    last = start_time

    try:
        while True:
            time.sleep(config.trigger.tick_seconds)
            now = time.monotonic()
            loop.tick(now - last)
            last = now

            status.update(
                running=loop.running,
                pool_size=picker.pool.size(),
                draws=loop.draws,
                failures=loop.failures,
                elapsed=loop.state.elapsed,
                last_title=loop.last_item.title if loop.last_item else "",
            )
            if max_draws is not None and loop.draws + loop.failures >= max_draws:
                break
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted — stopping.[/yellow]")
    finally:
        loop.stop()
        status.stop()
        if isinstance(dispatcher, WebhookDispatcher):
            dispatcher.close()

    console.print(
        f"\n[green]Handed out {loop.draws:,} items in "
        f"{format_duration(time.monotonic() - start_time)}[/green]"
        f" ({loop.failures} failed)\n"
    )


@main.command()
@_pool_options
@click.option("--top", default=15, type=int, help="Number of most frequent titles to list")
def pool(
    config_path: str | None,
    catalog: str | None,
    include_titleless: bool | None,
    disabled_categories: tuple[str, ...],
    verbose: bool,
    top: int,
) -> None:
    """Build the item pool once and summarize it."""
    setup_logging(verbose)
    config = _load(config_path, catalog, include_titleless, disabled_categories)
    picker = _build_picker(config)
    picker.rebuild()

    console.print(f"\n  Pool size:     {picker.pool.size():,}")
    counts = picker.pool.title_counts()
    console.print(f"  Unique titles: {len(counts):,}\n")

    if counts:
        table = Table(title="Most frequent titles")
        table.add_column("Title")
        table.add_column("Count", justify="right")
        for title, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[:top]:
            table.add_row(title or "[dim](untitled)[/dim]", str(count))
        console.print(table)


@main.command()
@_pool_options
@click.option("-n", "--count", default=1, type=click.IntRange(min=1), help="Number of items to draw")
@click.option("--seed", type=int, help="Random seed for draws")
def draw(
    config_path: str | None,
    catalog: str | None,
    include_titleless: bool | None,
    disabled_categories: tuple[str, ...],
    seed: int | None,
    verbose: bool,
    count: int,
) -> None:
    """Draw items from the pool and print them without dispatching."""
    setup_logging(verbose)
    config = _load(config_path, catalog, include_titleless, disabled_categories, seed)
    picker = _build_picker(config)
    picker.rebuild()

    rng = random.Random(config.trigger.seed)
    for _ in range(count):
        item = picker.draw(rng)
        if item is None:
            console.print("[red]Item pool is empty — nothing to draw.[/red]")
            sys.exit(1)
        click.echo(f"{item.title}\t{item.identifier}")


if __name__ == "__main__":
    main()
