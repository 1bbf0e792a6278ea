#!/usr/bin/env python3
"""
PageFeed - RSS Feeds for Any Webpage
====================================

Main application entry point with CLI interface for serving and testing.

Usage:
    python main.py --help                        # Show all commands
    python main.py check-config                  # Validate configuration
    python main.py serve                         # Start the HTTP server
    python main.py generate https://example.com  # Generate a feed in-process
    python main.py request https://example.com   # Ask a running server for a feed
"""

import sys
import asyncio
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from pagefeed.ai.classifier import ERROR_PREFIX, extract_error_message
from pagefeed.client import FeedClient
from pagefeed.config.settings import get_settings
from pagefeed.delivery.feed_preview import FeedPreview, summarize_feed
from pagefeed.processing.pipeline import FeedPipeline
from pagefeed.utils.exceptions import FeedDomainError, PageFeedError
from pagefeed.utils.logging import configure_application_logging
from pagefeed.utils.validators import URLValidator

console = Console()
logger = logging.getLogger(__name__)


def _configure_logging(settings, debug: bool) -> None:
    configure_application_logging(
        log_level="DEBUG" if debug else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, debug):
    """PageFeed - AI-generated RSS feeds for any webpage."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.pass_context
def check_config(ctx):
    """Validate configuration and environment variables."""
    console.print("[bold blue]🔧 Checking PageFeed Configuration[/bold blue]")

    try:
        settings = get_settings()

        table = Table(title="Configuration Status")
        table.add_column("Component", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Details")

        checks = [
            ("Server", _check_server_config),
            ("Page Fetching", _check_fetch_config),
            ("AI Provider", _check_ai_config),
            ("Cache", _check_cache_config),
            ("Logging", _check_logging_config),
        ]

        all_passed = True
        for name, check_func in checks:
            status, details = check_func(settings)
            table.add_row(name, "✅ Valid" if status else "❌ Invalid", details)
            if not status:
                all_passed = False

        console.print(table)

        if all_passed:
            console.print("[bold green]✅ All configuration checks passed![/bold green]")
            sys.exit(0)
        else:
            console.print("[bold red]❌ Configuration validation failed[/bold red]")
            sys.exit(1)

    except PageFeedError as e:
        console.print(f"[bold red]❌ Configuration error: {e}[/bold red]")
        sys.exit(1)


@cli.command()
@click.option('--host', default=None, help='Interface to bind (overrides settings)')
@click.option('--port', default=None, type=int, help='Port to listen on (overrides settings)')
@click.pass_context
def serve(ctx, host, port):
    """Start the HTTP feed server."""
    from pagefeed.server.app import run_server

    settings = get_settings()
    _configure_logging(settings, ctx.obj.get('debug'))

    if host:
        settings.server.host = host
    if port:
        settings.server.port = port

    console.print(
        f"[bold blue]🚀 Serving PageFeed on http://{settings.server.host}:{settings.server.port}/generate-rss[/bold blue]"
    )
    run_server(settings)


@cli.command()
@click.argument('url')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write the feed XML to this file')
@click.option('--raw', is_flag=True, help='Print only the XML, without preview table')
@click.pass_context
def generate(ctx, url, output, raw):
    """Generate a feed for URL in-process (no server needed)."""
    settings = get_settings()
    _configure_logging(settings, ctx.obj.get('debug'))

    async def run():
        pipeline = FeedPipeline.from_settings(settings)
        return await pipeline.generate(url)

    if not raw:
        console.print(f"[bold blue]📰 Generating feed for {url}[/bold blue]")

    result = asyncio.run(run())

    if not result.ok:
        console.print(f"[bold red]❌ HTTP {result.status_code}: {result.body}[/bold red]")
        sys.exit(1)

    if result.body.startswith(ERROR_PREFIX):
        message = extract_error_message(result.body) or "Unknown error"
        console.print(f"[bold yellow]⚠️ {message}[/bold yellow]")
        sys.exit(1)

    _emit_feed(result.body, output, raw)


@cli.command()
@click.argument('url')
@click.option('--server', '-s', default='http://localhost:8080', show_default=True, help='PageFeed server base URL')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write the feed XML to this file')
@click.option('--timeout', default=120.0, show_default=True, help='Request timeout in seconds')
def request(url, server, output, timeout):
    """Ask a running PageFeed server for the feed of URL."""
    if not URLValidator.is_valid_page_url(url):
        console.print("[bold red]❌ Invalid URL. Check the format (e.g. https://example.com).[/bold red]")
        sys.exit(2)

    client = FeedClient(server, timeout=timeout)

    try:
        feed = asyncio.run(client.generate_rss_from_url(url))
    except FeedDomainError as e:
        console.print(f"[bold yellow]⚠️ {e.message}[/bold yellow]")
        sys.exit(1)
    except PageFeedError as e:
        console.print(f"[bold red]❌ Could not generate feed: {e.message}[/bold red]")
        sys.exit(1)

    console.print(f"[cyan]Feed URL:[/cyan] {client.build_feed_url(url)}")
    _emit_feed(feed, output, raw=False)


def _emit_feed(xml: str, output: Optional[str], raw: bool) -> None:
    """Write feed XML to a file or the console."""
    if output:
        Path(output).write_text(xml, encoding='utf-8')
        console.print(f"[green]✅ Feed written to {output}[/green]")
    elif raw:
        click.echo(xml)
        return
    else:
        console.print(Syntax(xml, "xml", word_wrap=True))

    _print_preview(summarize_feed(xml))


def _print_preview(preview: FeedPreview) -> None:
    table = Table(title=f"{preview.title} ({preview.item_count} items)")
    table.add_column("#", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Link")
    table.add_column("Published", style="green")

    for index, item in enumerate(preview.items, start=1):
        table.add_row(str(index), item.title, item.link, item.published or "-")

    console.print(table)

    if preview.parse_warning:
        console.print(f"[yellow]⚠️ Feed parser warning: {preview.parse_warning}[/yellow]")


def _check_server_config(settings) -> tuple[bool, str]:
    """Check server configuration."""
    return True, f"{settings.server.host}:{settings.server.port}"


def _check_fetch_config(settings) -> tuple[bool, str]:
    """Check page fetching configuration."""
    return True, f"Timeout: {settings.fetch.timeout_seconds}s"


def _check_ai_config(settings) -> tuple[bool, str]:
    """Check AI provider configuration."""
    timeout = settings.ai.request_timeout
    deadline = f"{timeout}s" if timeout else "unbounded"
    if not settings.ai.has_credentials():
        return False, "; ".join(settings.configuration_warnings())
    return True, f"Model: {settings.ai.gemini_model}, Deadline: {deadline}"


def _check_cache_config(settings) -> tuple[bool, str]:
    """Check cache configuration."""
    return True, f"TTL: {settings.cache.ttl_seconds:.0f}s"


def _check_logging_config(settings) -> tuple[bool, str]:
    """Check logging configuration."""
    return True, f"Level: {settings.get_effective_log_level()}, File: {settings.logging.file_path or '-'}"


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 PageFeed interrupted by user[/yellow]")
        sys.exit(130)
