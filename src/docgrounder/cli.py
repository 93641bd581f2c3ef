"""Command line interface for DocGrounder."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from docgrounder.config import AppConfig
from docgrounder.index.indexer import KnowledgeBase
from docgrounder.index.search import format_context


console = Console()
app = typer.Typer(help="DocGrounder - TF-IDF grounding context from local text files")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_knowledge_base(config: AppConfig) -> KnowledgeBase:
    knowledge_base = KnowledgeBase(config)
    try:
        knowledge_base.load()
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Failed to load documents from {escape(str(config.documents_dir))}: {escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc
    return knowledge_base


@app.command()
def index(
    docs: Path = typer.Option(AppConfig().documents_dir, "--docs", help="Documents directory"),
    background: bool = typer.Option(
        False, "--background/--inline", help="Build the index in a worker process"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Load the documents directory and report what was indexed."""
    _setup_logging(verbose)
    config = AppConfig(documents_dir=docs, background_build=background)
    config.documents_dir = config.resolve_documents_dir(Path.cwd())

    console.print(f"Indexing [bold]{config.documents_dir}[/bold]...")
    knowledge_base = _load_knowledge_base(config)
    snapshot = knowledge_base.snapshot
    if not snapshot.documents:
        console.print("[yellow]No documents found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Document")
    table.add_column("Modified")
    table.add_column("Characters")
    for document in snapshot.documents:
        table.add_row(
            document.file_name,
            document.last_modified.isoformat(timespec="seconds"),
            str(len(document.content)),
        )
    console.print(table)
    console.print(
        f"Documents: {snapshot.stats.documents}, terms: {snapshot.stats.terms}, "
        f"elapsed: {snapshot.stats.elapsed:.3f}s"
    )


@app.command()
def query(
    text: str = typer.Argument(..., help="Query text"),
    docs: Path = typer.Option(AppConfig().documents_dir, "--docs", help="Documents directory"),
    top_n: int = typer.Option(AppConfig().top_n, "--top-n", min=1, help="Maximum documents to return"),
    scores: bool = typer.Option(False, "--scores", help="Show ranked scores instead of the context"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the grounding context retrieved for a query."""
    _setup_logging(verbose)
    config = AppConfig(documents_dir=docs, top_n=top_n)
    config.documents_dir = config.resolve_documents_dir(Path.cwd())
    knowledge_base = _load_knowledge_base(config)

    results = knowledge_base.search(text)
    if scores:
        if not results:
            console.print("[yellow]No matches found.[/yellow]")
            return
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Score")
        table.add_column("Document")
        table.add_column("Snippet")
        for result in results:
            snippet = result.content.replace("\n", " ")
            table.add_row(f"{result.score:.4f}", result.file_name, snippet[:180])
        console.print(table)
        return

    context = format_context(results)
    if not results:
        console.print(f"[yellow]{context}[/yellow]")
        return
    console.print(context, markup=False)


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    docs: Path = typer.Option(AppConfig().documents_dir, "--docs", help="Documents directory"),
    background: bool = typer.Option(
        False, "--background/--inline", help="Build the index in a worker process"
    ),
) -> None:
    """Start the HTTP retrieval API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - optional extra
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    from docgrounder.web.app import create_app

    config = AppConfig(documents_dir=docs, background_build=background)
    config.documents_dir = config.resolve_documents_dir(Path.cwd())
    console.print(
        f"Starting retrieval API on http://{host}:{port} (documents: {config.documents_dir})"
    )
    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
