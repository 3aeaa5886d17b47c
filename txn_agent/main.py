"""CLI interface for the transaction rule engine"""

import json
import logging

import typer
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

import config
from txn_agent.backends import TextBackend, get_backend
from txn_agent.service import RuleEngineService
from txn_agent.types import QuerySuccess
from txn_agent.utils.formatting import format_date, format_usd

app = typer.Typer(help="Natural-language queries over credit card transactions")
console = Console()

MAX_ROWS = 20


def _setup_logging() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _make_backend(provider: str | None, model: str | None = None) -> TextBackend:
    backend = get_backend(provider)
    if model:
        backend.set_model(model)
    return backend


def _start_service(
    csv: str | None,
    provider: str | None,
    offline: bool,
    model: str | None = None,
) -> RuleEngineService:
    service = RuleEngineService(csv_path=csv, backend=_make_backend(provider, model))

    with console.status("[bold green]Loading transactions...", spinner="dots"):
        init = service.initialize(require_backend=not offline)

    if not init.success:
        console.print(f"[red]Error: {init.error}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Loaded {init.transaction_count:,} transactions[/green]")
    return service


def _print_result(result: QuerySuccess) -> None:
    console.print(Panel(
        Syntax(json.dumps(result.rule.to_wire(), indent=2), "json"),
        title="Generated Rule",
    ))

    console.print(
        f"Matched [bold]{result.match_count:,}[/bold] of {result.total:,} "
        f"transactions ({result.match_percentage}%)"
    )
    if result.skipped_count:
        console.print(f"[yellow]{result.skipped_count:,} transactions could not be evaluated[/yellow]")

    if result.matched:
        table = Table(title="Matched Transactions")
        table.add_column("ID")
        table.add_column("Amount", justify="right")
        table.add_column("Merchant")
        table.add_column("Category")
        table.add_column("Date")
        table.add_column("Location")
        table.add_column("Fraud")

        for t in result.matched[:MAX_ROWS]:
            table.add_row(
                str(t.get("transactionId", "")),
                format_usd(t.get("amt")),
                str(t.get("merchant", "")),
                str(t.get("category", "")),
                format_date(t.get("timestamp")),
                ", ".join(str(p) for p in (t.get("city"), t.get("state")) if p),
                "[red]⚠[/red]" if t.get("isFraud") == 1 else "",
            )

        console.print(table)
        if len(result.matched) > MAX_ROWS:
            console.print(f"[dim]... and {len(result.matched) - MAX_ROWS:,} more[/dim]")

    console.print(Panel(result.summary, title=f"Summary ({result.source})"))


def _print_stats(stats: dict) -> None:
    if "error" in stats:
        console.print(f"[yellow]{stats['error']}[/yellow]")
        return

    table = Table(title="Dataset", show_header=False)
    table.add_column("Metric")
    table.add_column("Value")

    table.add_row("Transactions", f"{stats['total_transactions']:,}")
    amounts = stats.get("amount_stats")
    if amounts:
        table.add_row("Amount range", f"{format_usd(amounts['min'])} - {format_usd(amounts['max'])}")
        table.add_row("Average amount", format_usd(amounts["average"]))
    table.add_row("Categories", f"{stats['unique_categories']:,}: {', '.join(stats['categories'])}")
    table.add_row("Merchants", f"{stats['unique_merchants']:,}")
    table.add_row("Fraud flagged", f"{stats['fraud_count']:,}")
    table.add_row("Backend", f"{stats['backend']} ({stats['model']})")
    table.add_row("Backend available", "yes" if stats["backend_available"] else "no")

    console.print(table)


def _ask(service: RuleEngineService, query: str, offline: bool) -> None:
    with console.status("[bold green]Generating rule and analyzing data...", spinner="dots"):
        result = service.process_query(query, offline=offline)

    if isinstance(result, QuerySuccess):
        _print_result(result)
    else:
        console.print(f"[red]Error: {result.error}[/red]")
        if result.help_message:
            console.print(f"[yellow]{result.help_message}[/yellow]")


@app.command()
def ask(
    query: str = typer.Argument(..., help="Question in plain English"),
    offline: bool = typer.Option(False, "--offline", help="Build the rule from patterns, no LLM calls"),
    csv: str = typer.Option(None, "--csv", help="Transactions CSV (defaults to config)"),
    provider: str = typer.Option(None, "--provider", "-p", help="ollama or gemini"),
    model: str = typer.Option(None, "--model", "-m", help="Model name (defaults to config)"),
    as_json: bool = typer.Option(False, "--json", help="Print raw result JSON"),
):
    """Answer one question about the transactions."""
    _setup_logging()
    service = _start_service(csv, provider, offline, model=model)

    if as_json:
        result = service.process_query(query, offline=offline)
        console.print_json(json.dumps(result.to_dict(), default=str))
        if not result.success:
            raise typer.Exit(1)
        return

    _ask(service, query, offline)


@app.command()
def chat(
    offline: bool = typer.Option(False, "--offline", help="Build rules from patterns, no LLM calls"),
    csv: str = typer.Option(None, "--csv", help="Transactions CSV (defaults to config)"),
    provider: str = typer.Option(None, "--provider", "-p", help="ollama or gemini"),
    model: str = typer.Option(None, "--model", "-m", help="Model name (defaults to config)"),
):
    """Start interactive question loop."""
    _setup_logging()
    service = _start_service(csv, provider, offline, model=model)

    console.print(Panel(
        "[bold]Transaction Rule Engine[/bold]\n"
        "Ask questions about the transactions in plain English.\n"
        "Type 'help' for examples, 'stats' for data info, 'exit' to stop.",
        title="Welcome"
    ))

    while True:
        try:
            user_input = console.input("\n[bold cyan]Ask:[/bold cyan] ").strip()

            if user_input.lower() in ("quit", "exit", "q"):
                console.print("[yellow]Goodbye![/yellow]")
                break

            if not user_input:
                continue

            if user_input.lower() == "help":
                for i, example in enumerate(service.get_example_queries(), 1):
                    console.print(f"  {i}. {example}")
                continue

            if user_input.lower() == "stats":
                _print_stats(service.get_statistics())
                continue

            _ask(service, user_input, offline)

        except KeyboardInterrupt:
            console.print("\n[yellow]Interrupted. Type 'exit' to stop.[/yellow]")
        except EOFError:
            break


@app.command()
def stats(
    csv: str = typer.Option(None, "--csv", help="Transactions CSV (defaults to config)"),
    provider: str = typer.Option(None, "--provider", "-p", help="ollama or gemini"),
    model: str = typer.Option(None, "--model", "-m", help="Model name (defaults to config)"),
):
    """Show dataset statistics."""
    _setup_logging()
    service = _start_service(csv, provider, offline=True, model=model)
    _print_stats(service.get_statistics())


@app.command()
def models(
    provider: str = typer.Option(None, "--provider", "-p", help="ollama or gemini"),
    model: str = typer.Option(None, "--model", "-m", help="Model name (defaults to config)"),
):
    """List models available on the backend."""
    _setup_logging()
    backend = _make_backend(provider, model)
    names = backend.list_models()

    if not names:
        console.print(f"[yellow]No models found. {backend.setup_hint}[/yellow]")
        raise typer.Exit(1)

    table = Table(title=f"{backend.name} models")
    table.add_column("Model")
    table.add_column("Configured")
    for name in names:
        table.add_row(name, "✓" if name == backend.model else "")
    console.print(table)


if __name__ == "__main__":
    app()
