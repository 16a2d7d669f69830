"""Kargo CLI application using Typer.

Runs batch HS code classification from the command line against the
classifier service configured in settings.
"""

import asyncio
import dataclasses
import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from kargo.application.services import BatchClassificationRunner, BatchJobStore
from kargo.domain.batch import BatchJob, ResultStatus
from kargo.domain.orders import Order
from kargo.infrastructure.integration.classifier import (
    ClassifierServiceAdapter,
    ClassifierServiceClient,
)
from kargo.presentation.api.schemas.batches import BatchSubmitRequest, OrderRequest
from kargo_config.settings import Settings, get_settings

app = typer.Typer(
    name="kargo",
    help="Kargo - customs assistant CLI",
    no_args_is_help=True,
)
console = Console()


batch_app = typer.Typer(
    name="batch",
    help="Batch HS code classification",
    no_args_is_help=True,
)
app.add_typer(batch_app)


@batch_app.command("run")
def run_batch(
    orders_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help='JSON file with {"orders": [...]} or a bare list of orders',
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the orders with applied HS codes to this file",
    ),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Job name"),
    no_delay: bool = typer.Option(
        False,
        "--no-delay",
        help="Skip the pickup and pacing delays between classifier calls",
    ),
) -> None:
    """Classify all unclassified items of the given orders.

    Orders are processed one at a time; items that already carry an HS
    code are skipped, so re-running on the --output file only retries
    what failed.
    """
    request = _load_request(orders_file, name)
    orders = request.to_domain()
    settings = get_settings()

    console.print(f"\n[bold]Batch classification of {len(orders)} order(s)[/bold]")
    console.print(f"[dim]Classifier: {settings.classifier_service_url}[/dim]\n")

    job = asyncio.run(_run_batch(orders, request.name, settings, no_delay))

    _print_results(job)

    if output is not None:
        _write_orders(output, orders)
        console.print(f"[dim]Updated orders written to {output}[/dim]")

    if job.failed:
        raise typer.Exit(1)


def _load_request(orders_file: Path, name: str | None) -> BatchSubmitRequest:
    try:
        data = json.loads(orders_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(
            f"[red]Error: orders file is not valid JSON: {escape(str(e))}[/red]"
        )
        raise typer.Exit(1) from e

    if isinstance(data, list):
        data = {"orders": data}
    if name is not None and isinstance(data, dict):
        data["name"] = name

    try:
        return BatchSubmitRequest.model_validate(data)
    except ValidationError as e:
        console.print(f"[red]Error: invalid orders file: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e


async def _run_batch(
    orders: list[Order],
    name: str | None,
    settings: Settings,
    no_delay: bool,
) -> BatchJob:
    client = ClassifierServiceClient.from_settings(settings)
    store = BatchJobStore(max_retained_jobs=settings.batch_max_retained_jobs)
    runner = BatchClassificationRunner(
        job_store=store,
        classifier=ClassifierServiceAdapter(client),
        pickup_delay=0.0 if no_delay else settings.batch_pickup_delay_seconds,
        inter_call_delay=0.0 if no_delay else settings.batch_inter_call_delay_seconds,
    )

    try:
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("[red]{task.fields[failed]} failed"),
            console=console,
        ) as progress:
            task_id = progress.add_task("Classifying", total=len(orders), failed=0)
            job_id = runner.submit(orders, name=name)

            def on_snapshot(jobs: list[BatchJob]) -> None:
                job = next((j for j in jobs if j.id == job_id), None)
                if job is not None:
                    progress.update(
                        task_id,
                        completed=job.processed,
                        failed=job.failed,
                        description=f"{escape(job.name)} ({job.status.value})",
                    )

            unsubscribe = store.subscribe(on_snapshot)
            try:
                return await runner.wait_for(job_id)
            finally:
                unsubscribe()
    finally:
        await client.close()


def _print_results(job: BatchJob) -> None:
    table = Table(title=f"{escape(job.name)} - {job.status.value}")
    table.add_column("Order", style="cyan")
    table.add_column("Status")
    table.add_column("HS codes", justify="right")
    table.add_column("Message")

    for result in job.results:
        status = (
            "[green]success[/green]"
            if result.status == ResultStatus.SUCCESS
            else "[red]failed[/red]"
        )
        table.add_row(
            escape(result.order_number),
            status,
            str(result.hs_codes_generated),
            escape(result.message),
        )

    console.print(table)
    console.print(
        f"[bold]{job.processed}/{job.total} processed, "
        f"{job.succeeded} succeeded, {job.failed} failed[/bold]\n"
    )


def _write_orders(output: Path, orders: list[Order]) -> None:
    payload = {
        "orders": [
            OrderRequest.model_validate(dataclasses.asdict(order)).model_dump(
                mode="json"
            )
            for order in orders
        ]
    }
    output.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
