"""Main CLI application using Typer."""
import asyncio
import os
from collections.abc import Callable
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..conversation import ChangeKind, ChatSession, ConversationEvent, MessageStatus, Source
from ..service import ProjectIndexer, create_answer_service
from .providers import (
    llm_key_variable,
    llm_provider_name,
    load_index,
    open_providers,
)

# Load environment variables
load_dotenv()

app = typer.Typer(
    name="repochat",
    help="Ask questions about a codebase and get streamed, cited answers",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()


def _debug_printer(enabled: bool) -> Callable[[str, str, str], None] | None:
    """Debug callback printing to the console, or None when disabled."""
    if not enabled:
        return None

    level_colors = {"debug": "dim", "info": "cyan", "warning": "yellow", "error": "red"}

    def _print(level: str, component: str, message: str) -> None:
        color = level_colors.get(level, "white")
        console.print(f"[{color}]{level.upper():<7}[/] [dim]\\[{component}][/dim] {escape(message)}")

    return _print


def _citations_table(sources: tuple[Source, ...]) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=3)
    table.add_column("File", style="cyan")
    table.add_column("Similarity", style="green", width=10)
    table.add_column("Summary", style="dim")
    for i, source in enumerate(sources, 1):
        summary = source.summary if len(source.summary) <= 80 else source.summary[:80] + "..."
        table.add_row(str(i), source.file_name, f"{source.similarity:.3f}", summary)
    return table


@app.command()
def index(
    directory: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=False,
        dir_okay=True,
        help="Project directory to index"
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="File to write the index to (JSON)"
    ),
    project: str | None = typer.Option(
        None,
        "--project",
        help="Project ID stored in the index (default: directory name)"
    ),
    pattern: str = typer.Option(
        "**/*",
        "--pattern",
        "-p",
        help="File pattern to match"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed log messages"
    ),
):
    """Summarize and embed the files of a project."""
    async def _index():
        llm, embedder = await open_providers(console)

        try:
            indexer = ProjectIndexer(llm, embedder)
            indexer.set_debug_callback(_debug_printer(verbose))

            console.print(f"[dim]Indexing {directory} (pattern: {pattern})[/dim]")

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console
            ) as progress:
                task = progress.add_task("Summarizing files...", total=None)

                def _on_progress(done: int, total: int) -> None:
                    progress.update(
                        task,
                        total=total,
                        completed=done,
                        description=f"Summarized {done}/{total} files"
                    )

                result = await indexer.index_directory(
                    directory,
                    project_id=project,
                    pattern=pattern,
                    on_progress=_on_progress,
                )

            path = result.index.save(output)

            console.print("\n[bold green]Indexing Complete![/bold green]")
            console.print(f"  Project: {result.index.project_id}")
            console.print(f"  Files indexed: {len(result.index.entries)}")
            console.print(f"  Files skipped: {len(result.skipped_files)}")
            console.print(f"  Processing time: {result.processing_time_seconds:.2f}s")
            console.print(f"  Index written to: {path}")

            if result.failed_files:
                console.print(f"  [yellow]Failed files: {len(result.failed_files)}[/yellow]")
                for failed in result.failed_files[:10]:
                    console.print(f"    - {escape(failed)}")

        except Exception as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)
        finally:
            await embedder.close()
            await llm.close()

    asyncio.run(_index())


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question about the project"),
    index_file: Path = typer.Option(
        ...,
        "--index",
        "-i",
        help="Index file written by 'repochat index'"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed log messages"
    ),
):
    """Ask one question and stream the answer."""
    async def _ask():
        project_index = load_index(index_file, console)
        llm, embedder = await open_providers(console)

        service = create_answer_service(
            "retrieval", llm=llm, embedder=embedder, indexes=[project_index]
        )
        debug = _debug_printer(verbose)
        service.set_debug_callback(debug)

        failures: list[str] = []
        session = ChatSession(
            service,
            project_index.project_id,
            notify_failure=failures.append,
        )
        session.set_debug_callback(debug)

        printed = 0

        def _render(event: ConversationEvent) -> None:
            nonlocal printed
            message = event.message
            if message is None:
                return
            if event.kind is ChangeKind.SOURCES_SET:
                if message.sources:
                    console.print(_citations_table(message.sources))
                else:
                    console.print("[yellow]No matching files found[/yellow]")
                console.print()
            elif event.kind is ChangeKind.FRAGMENT_APPENDED:
                console.print(message.answer[printed:], end="", markup=False, highlight=False)
                printed = len(message.answer)
            elif event.kind is ChangeKind.CLOSED:
                console.print()

        session.subscribe(_render)

        try:
            await session.submit(question)
        except Exception as e:
            console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(code=1)
        finally:
            await service.close()
            await embedder.close()

        if session.messages[-1].status is MessageStatus.FAILED:
            console.print(f"[red]Error: {failures[0] if failures else 'request failed'}[/red]")
            raise typer.Exit(code=1)

    asyncio.run(_ask())


@app.command()
def chat(
    index_file: Path = typer.Option(
        ...,
        "--index",
        "-i",
        help="Index file written by 'repochat index'"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive chat interface."""
    async def _chat():
        from ..ui import run_textual_tui

        project_index = load_index(index_file, console)
        llm, embedder = await open_providers(console)

        service = create_answer_service(
            "retrieval", llm=llm, embedder=embedder, indexes=[project_index]
        )
        try:
            await run_textual_tui(
                service,
                project_index.project_id,
                log_level=log_level,
                model_name=llm.model,
            )
        finally:
            await embedder.close()
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_chat())
    except KeyboardInterrupt:
        pass


@app.command()
def health():
    """Report which providers are configured."""
    provider = llm_provider_name()
    console.print(f"[dim]LLM provider: {provider}[/dim]")

    all_healthy = True
    for name, var in (
        ("OpenAI API key (embeddings)", "OPENAI_API_KEY"),
        ("DeepSeek API key", "DEEPSEEK_API_KEY"),
        ("Anthropic API key", "ANTHROPIC_API_KEY"),
        ("Gemini API key", "GEMINI_API_KEY"),
    ):
        if os.getenv(var):
            console.print(f"[green]+[/green] {name}: SET")
        else:
            console.print(f"[yellow]![/yellow] {name}: NOT SET")

    if not os.getenv("OPENAI_API_KEY"):
        all_healthy = False

    key_var = llm_key_variable(provider)
    if key_var is None:
        console.print(f"[red]x[/red] Unknown LLM provider: {provider}")
        all_healthy = False
    elif not os.getenv(key_var):
        console.print(f"[red]x[/red] {key_var} required for LLM provider '{provider}'")
        all_healthy = False

    if not all_healthy:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
