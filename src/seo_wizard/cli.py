"""
Command-line interface for SEO Wizard.

Provides commands for keyword research, multi-locale article generation
and managing saved articles.
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

from .config import WizardConfig
from .docx_writer import write_article_docx
from .errors import SeoWizardError
from .export import to_markdown, to_plain_text
from .filename_generator import article_output_path
from .generator import find_image_placeholders
from .keyword_loader import (
    deduplicate_keywords,
    load_keyword_research,
    load_keywords,
    parse_keyword_list,
    save_keyword_research,
)
from .keyword_research import SORTABLE_FIELDS, filter_and_sort
from .models import (
    ARTICLE_LENGTHS,
    SEARCH_INTENTS,
    Article,
    GenerationSettings,
    KeywordSuggestion,
    SeoAnalysisData,
)
from .wizard import SeoWizard

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


def _get_wizard(ctx: click.Context) -> SeoWizard:
    """Return the wizard stored on the context, creating it from the environment."""
    if "wizard" not in ctx.obj:
        config = WizardConfig.from_env(api_url=ctx.obj.get("api_url"))
        ctx.obj["wizard"] = SeoWizard(config)
    return ctx.obj["wizard"]


def _run(ctx: click.Context, coro_factory) -> None:
    """Run an async command body, turning wizard errors into exit status 1."""
    verbose = ctx.obj.get("verbose", False)

    async def runner():
        wizard = _get_wizard(ctx)
        try:
            await coro_factory(wizard)
        finally:
            await wizard.aclose()

    try:
        asyncio.run(runner())
    except SeoWizardError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        sys.exit(1)


@click.group()
@click.option(
    "--api-url",
    type=str,
    default=None,
    help="Storage backend URL. Can also be set via SEO_WIZARD_API_URL env var.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
@click.pass_context
def main(ctx: click.Context, api_url: Optional[str], verbose: bool) -> None:
    """
    SEO Wizard - Research keywords and generate SEO articles.

    Examples:

        seo-wizard research "electric vehicles" --export keywords.csv

        seo-wizard generate "electric vehicles" -k "charging, battery range" -l en-US -l fr-FR
    """
    ctx.ensure_object(dict)
    ctx.obj.setdefault("api_url", api_url)
    ctx.obj["verbose"] = verbose
    _setup_logging(verbose)


@main.command()
@click.argument("topic")
@click.option("--filter", "filter_text", default="", help="Only show keywords containing this text.")
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice(SORTABLE_FIELDS),
    default="relevance",
    help="Column to sort by (default: relevance).",
)
@click.option("--asc", is_flag=True, default=False, help="Sort ascending.")
@click.option(
    "--export",
    "export_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the results to a CSV file.",
)
@click.pass_context
def research(
    ctx: click.Context,
    topic: str,
    filter_text: str,
    sort_key: str,
    asc: bool,
    export_path: Optional[Path],
) -> None:
    """Research related, LSI and long-tail keywords for TOPIC."""

    async def body(wizard: SeoWizard) -> None:
        with console.status("[bold green]Researching keywords..."):
            suggestions = await wizard.research(topic)

        shown = filter_and_sort(suggestions, filter_text, sort_key, descending=not asc)
        _display_research(topic, shown)

        if export_path:
            save_keyword_research(suggestions, export_path)
            console.print(f"\n[bold green]Saved[/bold green] {len(suggestions)} keywords to: {export_path}")

    _run(ctx, body)


@main.command()
@click.argument("topic")
@click.option(
    "--length",
    type=click.Choice(ARTICLE_LENGTHS),
    default="medium",
    help="Article length (default: medium).",
)
@click.option("--keywords", "-k", type=str, help="Comma-separated LSI keywords to include.")
@click.option(
    "--keywords-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Keyword file (CSV, Excel or one-per-line text).",
)
@click.option(
    "--research-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="CSV written by 'research --export'; stored with the article when saving.",
)
@click.option(
    "--locale",
    "-l",
    "locales",
    multiple=True,
    help="Target locale (repeatable). Defaults to SEO_WIZARD_ARTICLE_LOCALES or en-US.",
)
@click.option("--table", is_flag=True, default=False, help="Ask for a comparison table.")
@click.option("--images", is_flag=True, default=False, help="Ask for in-article image placeholders.")
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory for the exported articles.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["md", "txt", "docx"]),
    default="md",
    help="Export format (default: md).",
)
@click.option("--highlight", is_flag=True, default=False, help="Highlight keywords (docx only).")
@click.option("--thumbnail", is_flag=True, default=False, help="Generate and upload a header image.")
@click.option("--save", is_flag=True, default=False, help="Save the article set to the backend.")
@click.option(
    "--intent",
    type=click.Choice(SEARCH_INTENTS),
    help="Search intent of the topic, stored when saving.",
)
@click.pass_context
def generate(
    ctx: click.Context,
    topic: str,
    length: str,
    keywords: Optional[str],
    keywords_file: Optional[Path],
    research_file: Optional[Path],
    locales: tuple[str, ...],
    table: bool,
    images: bool,
    output_dir: Path,
    fmt: str,
    highlight: bool,
    thumbnail: bool,
    save: bool,
    intent: Optional[str],
) -> None:
    """Generate an SEO article about TOPIC in one or more locales."""
    user_keywords = parse_keyword_list(keywords)
    research_data: list[KeywordSuggestion] = []

    try:
        if keywords_file:
            user_keywords = deduplicate_keywords(user_keywords + load_keywords(keywords_file))
        if research_file:
            research_data = load_keyword_research(research_file)
    except SeoWizardError as e:
        console.print(f"[red]Keyword loading error:[/red] {e}")
        sys.exit(1)

    if intent is None:
        match = next((s for s in research_data if s.keyword.lower() == topic.strip().lower()), None)
        intent = match.intent if match else None

    async def body(wizard: SeoWizard) -> None:
        console.print(Panel.fit(
            f"[bold blue]SEO Wizard[/bold blue]\nGenerating '{topic}' ({length})",
            border_style="blue",
        ))

        with console.status("[bold green]Generating articles..."):
            articles = await wizard.generate(
                topic,
                length,
                user_keywords,
                locales=list(locales) or None,
                include_table=table,
                include_in_article_images=images,
            )

        output_dir.mkdir(parents=True, exist_ok=True)
        for locale, article in articles.items():
            analysis = wizard.analyze(article, topic, user_keywords)
            _display_analysis(locale, article, analysis)

            path = article_output_path(
                article,
                fmt,
                output_dir,
                locale=locale if len(articles) > 1 else None,
            )
            _write_article(article, path, fmt, topic, highlight)
            console.print(f"[bold green]Wrote[/bold green] {path}")

        thumbnail_url = None
        if thumbnail:
            with console.status("[bold green]Generating header image..."):
                thumbnail_url = await wizard.create_thumbnail(articles, topic)
            console.print(f"[cyan]Header image:[/cyan] {thumbnail_url}")

        if save:
            settings = GenerationSettings(
                length=length,
                include_table=table,
                include_in_article_images=images,
                locales=list(articles.keys()),
            )
            payload = wizard.prepare_save(
                topic,
                user_keywords,
                articles,
                settings,
                thumbnail_url=thumbnail_url,
                search_intent=intent,
                keyword_research_data=research_data,
            )
            with console.status("[bold green]Saving article..."):
                saved = await wizard.save(payload)
            console.print(f"\n[bold green]Saved![/bold green] Article id: {saved.id}")

    _run(ctx, body)


@main.command()
@click.pass_context
def saved(ctx: click.Context) -> None:
    """List saved articles."""

    async def body(wizard: SeoWizard) -> None:
        articles = await wizard.list_saved()
        if not articles:
            console.print("No saved articles.")
            return

        saved_table = Table(title="Saved Articles", show_header=True)
        saved_table.add_column("ID", style="dim")
        saved_table.add_column("Primary Keyword", style="green")
        saved_table.add_column("Locales", style="cyan")
        saved_table.add_column("Saved At")

        for item in articles:
            saved_table.add_row(
                item.id,
                item.primary_keyword,
                ", ".join(item.articles.keys()),
                item.saved_at,
            )
        console.print(saved_table)

    _run(ctx, body)


@main.command()
@click.argument("article_id")
@click.pass_context
def delete(ctx: click.Context, article_id: str) -> None:
    """Delete the saved article ARTICLE_ID."""

    async def body(wizard: SeoWizard) -> None:
        await wizard.delete_saved(article_id)
        console.print(f"[bold green]Deleted[/bold green] {article_id}")

    _run(ctx, body)


def _write_article(article: Article, path: Path, fmt: str, topic: str, highlight: bool) -> None:
    if fmt == "docx":
        write_article_docx(article, path, primary_keyword=topic, highlight=highlight)
    elif fmt == "txt":
        path.write_text(to_plain_text(article), encoding="utf-8")
    else:
        path.write_text(to_markdown(article), encoding="utf-8")


def _display_research(topic: str, suggestions: list[KeywordSuggestion]) -> None:
    """Display keyword research results."""
    kw_table = Table(title=f"Keyword Research: {topic}", show_header=True)
    kw_table.add_column("Keyword", style="green")
    kw_table.add_column("Type", style="cyan")
    kw_table.add_column("Intent", style="magenta")
    kw_table.add_column("Relevance", justify="right")

    for s in suggestions:
        kw_table.add_row(s.keyword, s.type, s.intent, str(s.relevance))

    console.print(kw_table)


def _display_analysis(locale: str, article: Article, analysis: SeoAnalysisData) -> None:
    """Display the keyword stats for one locale."""
    console.print(f"\n[bold]{locale}[/bold]: {article.title}")
    console.print(f"[cyan]Word count:[/cyan] {analysis.word_count}")

    placeholders = [p for section in article.sections for p in find_image_placeholders(section.content)]
    if placeholders:
        console.print(f"[cyan]Image placeholders:[/cyan] {len(placeholders)}")

    stats_table = Table(show_header=True)
    stats_table.add_column("Keyword", style="green")
    stats_table.add_column("Type", style="cyan")
    stats_table.add_column("Count", justify="right")
    stats_table.add_column("Density", justify="right")

    for stat in analysis.keyword_stats:
        if stat.is_primary:
            kind = "Primary"
        elif stat.is_user_provided:
            kind = "LSI (yours)"
        else:
            kind = "LSI"
        stats_table.add_row(stat.keyword, kind, str(stat.frequency), f"{stat.density:.2f}%")

    console.print(stats_table)


def run_cli() -> None:
    """Entry point for the CLI."""
    main()


if __name__ == "__main__":
    run_cli()
