"""
Command-line interface for yt-news-feed.

This module provides the CLI entry point for scraping the news feed, enriching
it, cleaning captions and serving the web feed, with configuration management
and verbose/debug logging options.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .caption_cleaner import extract_clean_captions
from .config import Configuration
from .error_handling import InvalidCategoryError, MissingCredentialError, NewsFeedError
from .pipeline import PipelineContext, process_category, run_enrichment
from .storage import load_json_file, save_clean_captions, save_enhanced_data, save_scraped_data
from .models import dataset_from_json


console = Console()
logger = logging.getLogger(__name__)


def setup_cli_logging(log_level: str, log_file: Optional[Path] = None, verbose: bool = False):
    """
    Set up logging with rich console output and optional file output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        verbose: Enable verbose console output
    """
    logging.getLogger().handlers.clear()

    console_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True
    )
    console_handler.setLevel(logging.DEBUG if verbose else getattr(logging, log_level))

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[console_handler]
    )

    # googleapiclient logs every discovery lookup at INFO
    logging.getLogger('googleapiclient').setLevel(logging.WARNING)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        logging.getLogger().addHandler(file_handler)


def display_config_table(config: Configuration):
    """Display configuration in a formatted table."""
    table = Table(title="YouTube News Feed Configuration")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")

    for key, value in config.to_dict().items():
        if isinstance(value, list):
            value = ', '.join(str(v) for v in value)
        table.add_row(key, str(value))

    console.print(table)


def load_config(ctx) -> Configuration:
    """Load configuration once per invocation and set up logging."""
    if 'config' in ctx.obj:
        return ctx.obj['config']

    debug = ctx.obj.get('debug', False)
    try:
        config = Configuration.load_config(ctx.obj.get('config_file'))
        if debug:
            config.log_level = 'DEBUG'
    except Exception as e:
        console.print(f"[red]✗[/red] Configuration error: {e}")
        console.print("\n[blue]ℹ[/blue] Try running 'yt-news-feed init-config-file' to create a configuration template")
        sys.exit(1)

    setup_cli_logging(config.log_level, ctx.obj.get('log_file') or config.log_file, ctx.obj.get('verbose', False))
    ctx.obj['config'] = config
    return config


def parse_category_selector(value: str):
    """Digits select a category by index; anything else by name."""
    return int(value) if value.isdigit() else value


@click.group()
@click.option('--config-file', '-c', type=click.Path(exists=True, path_type=Path),
              help='Path to configuration file (.env format)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.option('--log-file', type=click.Path(path_type=Path),
              help='Path to log file (overrides config)')
@click.pass_context
def main(ctx, config_file: Optional[Path], verbose: bool, debug: bool, log_file: Optional[Path]):
    """
    YouTube News Feed - scrape, enrich and serve YouTube's news feed.
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['debug'] = debug
    ctx.obj['config_file'] = config_file
    ctx.obj['log_file'] = log_file


@main.command()
@click.option('--feed', type=click.Choice(['general', 'business']), help='News feed to scrape')
@click.option('--output-file', '-o', type=click.Path(path_type=Path), help='Output file (overrides config)')
@click.pass_context
def scrape(ctx, feed: Optional[str], output_file: Optional[Path]):
    """Scrape the YouTube news feed into categorized videos."""
    from .scraper import NewsScraper

    config = load_config(ctx)
    if feed:
        config.news_feed = feed
    output_file = output_file or config.input_file

    async def _scrape():
        async with NewsScraper(config) as scraper:
            return await scraper.scrape()

    try:
        categories = asyncio.run(_scrape())
        save_scraped_data(categories, output_file)
    except NewsFeedError as e:
        console.print(f"[red]✗[/red] Failed to fetch videos: {e}")
        sys.exit(1)

    total = sum(len(videos) for videos in categories.values())
    console.print(f"[green]✓[/green] Saved {total} videos in {len(categories)} categories to {output_file}")


@main.command()
@click.option('--category', type=str, help='Only process this category (index or name)')
@click.pass_context
def enhance(ctx, category: Optional[str]):
    """Enrich scraped videos with statistics and captions."""
    config = load_config(ctx)

    try:
        context = PipelineContext.from_config(config)
        if category is None:
            enhanced = asyncio.run(run_enrichment(context))
        else:
            fragment = asyncio.run(process_category(context, parse_category_selector(category)))
            enhanced = {}
            if config.output_file.exists():
                enhanced = dataset_from_json(load_json_file(config.output_file))
            enhanced.update(fragment)
            save_enhanced_data(enhanced, config.output_file)
    except MissingCredentialError as e:
        console.print(f"[red]✗[/red] {e}")
        sys.exit(1)
    except InvalidCategoryError as e:
        console.print(f"[red]✗[/red] {e}")
        sys.exit(2)
    except Exception as e:
        console.print(f"[red]✗[/red] Enrichment failed: {e}")
        if ctx.obj['debug']:
            console.print_exception()
        sys.exit(1)

    table = Table(title="Enhanced Videos")
    table.add_column("Category", style="cyan")
    table.add_column("Videos", style="green")
    for name, videos in enhanced.items():
        table.add_row(name, str(len(videos)))
    console.print(table)
    console.print(f"[green]✓[/green] Enhanced data saved to {config.output_file}")


@main.command(name='clean-captions')
@click.pass_context
def clean_captions(ctx):
    """Extract cleaned captions from the enhanced dataset."""
    config = load_config(ctx)

    try:
        captions = extract_clean_captions(load_json_file(config.output_file))
        save_clean_captions(captions, config.captions_file)
    except Exception as e:
        console.print(f"[red]✗[/red] Error processing captions: {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] Cleaned captions saved to: {config.captions_file}")


@main.command()
@click.option('--host', type=str, help='Bind address (overrides config)')
@click.option('--port', type=int, help='Port (overrides config)')
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int]):
    """Serve the enhanced dataset and the feed UI."""
    import uvicorn
    from .server import create_app

    config = load_config(ctx)
    host = host or config.host
    port = port or config.port

    console.print(Panel.fit(f"Server running on http://{host}:{port}", style="bold green"))
    uvicorn.run(create_app(config), host=host, port=port, log_level=config.log_level.lower())


@main.command()
@click.pass_context
def config(ctx):
    """Display current configuration settings."""
    cfg = load_config(ctx)
    display_config_table(cfg)

    if cfg.youtube_api_key:
        console.print("[green]✓[/green] YouTube API key is configured")
    else:
        console.print("[red]✗[/red] YouTube API key is missing (required for 'enhance')")


@main.command(name='init-config-file')
@click.option('--output-file', '-o', type=click.Path(path_type=Path),
              help='Output file for configuration template')
def init_config_file(output_file: Optional[Path]):
    """Generate a configuration file template with all available options."""
    output_file = output_file or Path('.env')

    template = """# YouTube News Feed Configuration

# Required for enrichment
YOUTUBE_API_KEY=your_youtube_api_key_here

# Enrichment Settings
BATCH_SIZE=5
ITEM_DELAY_MS=2000
CAPTION_LANGUAGES=en,en-US,en-GB

# Files
INPUT_FILE=youtube_news_videos.json
OUTPUT_FILE=enhanced_youtube_news_videos.json
PROCESSED_FILE=processed_videos.json
CAPTIONS_FILE=cleaned_captions.json

# Scraper Settings
NEWS_FEED=general
HEADLESS=true
SCROLL_ITERATIONS=3
SCRAPE_MAX_ATTEMPTS=3
SCRAPE_RETRY_DELAY_MS=5000
NAVIGATION_TIMEOUT_MS=60000

# Server Settings
STATIC_DIR=public
HOST=127.0.0.1
PORT=3001

# Optional caption proxy (Webshare)
# PROXY_USERNAME=
# PROXY_PASSWORD=

# Logging Configuration
LOG_LEVEL=INFO
# LOG_FILE=./logs/yt-news-feed.log
"""

    output_file.write_text(template, encoding='utf-8')
    console.print(f"[green]✓[/green] Configuration template created: {output_file}")


if __name__ == '__main__':
    main()
