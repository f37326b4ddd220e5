from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from stockbrief.config import config
from stockbrief.core.errors import PromptError, ValidationError
from stockbrief.prompts import PromptGenerator
from stockbrief.scrapers.zerodha import EXAMPLE_STOCKS, StockDataReport, ZerodhaService
from stockbrief.utils.logger import configure_logging, get_logger
from stockbrief.utils.metrics import start_metrics_server
from stockbrief.validation import validate_exchange, validate_stock_request

# Main CLI app
app = typer.Typer(
    name="stockbrief",
    help="Stockbrief CLI: Zerodha Markets stock data and investment analysis prompts",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

# Command groups
admin_app = typer.Typer(
    name="admin",
    help="Administration and configuration",
    no_args_is_help=True,
)
api_app = typer.Typer(
    name="api",
    help="REST API server commands",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(admin_app, name="admin")
app.add_typer(api_app, name="api")

# Rich console for better output
console = Console()
logger = get_logger(__name__)


def _fetch_report(symbol: str, exchange: str) -> StockDataReport:
    """Run one complete fetch on a fresh service."""

    async def run() -> StockDataReport:
        async with ZerodhaService() as service:
            return await service.fetch_complete_stock_data(symbol, exchange)

    logger.info("Fetching stock data", symbol=symbol, exchange=exchange)
    return asyncio.run(run())


def _print_validation_error(exc: ValidationError) -> None:
    console.print(f"[red]✗ {exc.message}[/red]")
    for detail in exc.details:
        console.print(f"  - {detail}")


def _print_summary(report: StockDataReport) -> None:
    table = Table(title=f"{report.symbol} ({report.exchange})")
    table.add_column("Endpoint")
    table.add_column("Result")
    table.add_column("Status")
    table.add_column("Attempts", justify="right")

    results = [report.stock_page] if report.stock_page else []
    if report.api_data:
        results += [*report.api_data.successful, *report.api_data.failed]

    for result in results:
        if result.success:
            outcome = "[green]✓ ok[/green]"
        else:
            outcome = f"[red]✗ {result.error_kind}[/red]"
        table.add_row(
            result.endpoint_name,
            outcome,
            str(result.status_code or "-"),
            str(result.attempts),
        )

    console.print(table)


@app.command("fetch")
def fetch(
    symbol: str = typer.Argument(..., help="Ticker symbol (e.g., RELIANCE)"),
    exchange: str = typer.Option("NSE", "--exchange", "-e", help="BSE or NSE"),
    as_json: bool = typer.Option(False, "--json", help="Print the full report as JSON"),
) -> None:
    """Fetch the landing page and all JSON endpoints for a stock.

    [bold]Examples:[/bold]
        stockbrief fetch RELIANCE
        stockbrief fetch DEEPAKNTR --exchange BSE --json
    """
    try:
        symbol, exchange, _ = validate_stock_request(symbol, exchange)
    except ValidationError as e:
        _print_validation_error(e)
        raise typer.Exit(2) from e

    report = _fetch_report(symbol, exchange)

    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2, ensure_ascii=False, default=str))
    else:
        _print_summary(report)

    if not report.success:
        if not as_json:
            console.print(f"[red]✗ {report.error['message']}[/red]")
        raise typer.Exit(1)


@app.command("prompt")
def prompt(
    symbol: str = typer.Argument(..., help="Ticker symbol (e.g., RELIANCE)"),
    exchange: str = typer.Option("NSE", "--exchange", "-e", help="BSE or NSE"),
    investor_type: str = typer.Option(
        "new_graduate",
        "--investor-type",
        "-t",
        help="new_graduate, experienced, conservative, or aggressive",
    ),
    salary: int | None = typer.Option(None, "--salary", min=1, help="Monthly salary in rupees"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the prompt to a file"),
) -> None:
    """Fetch a stock and print an investment analysis prompt for it.

    [bold]Examples:[/bold]
        stockbrief prompt TCS
        stockbrief prompt INFY --investor-type experienced --salary 100000 -o infy.md
    """
    try:
        symbol, exchange, _ = validate_stock_request(symbol, exchange)
    except ValidationError as e:
        _print_validation_error(e)
        raise typer.Exit(2) from e

    generator = PromptGenerator()
    report = _fetch_report(symbol, exchange)

    errors = generator.validate_stock_data(report)
    if errors:
        for error in errors:
            console.print(f"[red]✗ {error}[/red]")
        raise typer.Exit(1)

    options: dict[str, object] = {"investor_type": investor_type}
    if salary is not None:
        options["salary"] = salary

    try:
        result = generator.generate_prompt(symbol, report, options)
    except PromptError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(1) from e

    if output:
        output.write_text(result.prompt, encoding="utf-8")
        console.print(f"[green]✓[/green] Prompt written to {output}")
    else:
        typer.echo(result.prompt)


@app.command("examples")
def examples(
    exchange: str | None = typer.Option(None, "--exchange", "-e", help="Only this exchange"),
) -> None:
    """List example ticker symbols.

    [bold]Example:[/bold]
        stockbrief examples --exchange BSE
    """
    exchanges = list(EXAMPLE_STOCKS)
    if exchange:
        try:
            exchanges = [validate_exchange(exchange)]
        except ValidationError as e:
            _print_validation_error(e)
            raise typer.Exit(2) from e

    for name in exchanges:
        table = Table(title=name)
        table.add_column("Symbol", style="bold")
        table.add_column("Company")
        for stock in EXAMPLE_STOCKS[name]:
            table.add_row(stock["symbol"], stock["name"])
        console.print(table)


@admin_app.command("config")
def show_config() -> None:
    """Print current configuration values.

    [bold]Example:[/bold]
        stockbrief admin config
    """
    typer.echo(f"Environment: {config.environment.value}")
    typer.echo(f"Source: {config.zerodha.base_url}")
    typer.echo(f"Timeout: {config.scraper.timeout}s")
    typer.echo(f"Max redirects: {config.scraper.max_redirects}")
    typer.echo(f"Verify TLS: {config.scraper.verify_tls}")
    typer.echo(f"Rate limit retries: {config.scraper.max_rate_limit_retries}")
    typer.echo(f"Log level: {config.logging.level}")


@api_app.command("serve")
def api_serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind the API server"),
    port: int = typer.Option(5000, help="Port to bind the API server"),
    reload: bool = typer.Option(False, help="Enable auto-reload for development"),
):
    """Start the REST API server.

    Runs a single worker: rate limits and identity rotation live in process memory.

    [bold]Examples:[/bold]
        stockbrief api serve
        stockbrief api serve --port 8080 --reload
    """
    import uvicorn

    console.print(f"[green]Starting Stockbrief API server on {host}:{port}[/green]")

    try:
        uvicorn.run(
            "stockbrief.api.main:app",
            host=host,
            port=port,
            reload=reload,
            log_level="info",
        )
    except Exception as e:
        console.print(f"[red]Failed to start API server: {e}[/red]")
        raise typer.Exit(1) from None


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Command line arguments (optional)

    Returns:
        Exit code (0 for success, 1 for error)
    """
    # Initialize logging
    configure_logging(config.logging.level, config.logging.format)

    if config.metrics.enabled:
        start_metrics_server(config.metrics.port)

    try:
        app(args=argv)
        return 0
    except typer.Exit as e:
        # typer.Exit is expected for normal exit with custom codes
        return e.exit_code
    except KeyboardInterrupt:
        typer.secho("\nOperation cancelled by user", fg=typer.colors.YELLOW)
        return 130  # Standard exit code for SIGINT
    except Exception as e:
        typer.secho(f"Unexpected error: {e}", fg=typer.colors.RED)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
