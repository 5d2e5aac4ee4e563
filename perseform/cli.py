"""CLI for perseform form value synchronization."""

import asyncio
import logging
from collections.abc import Coroutine
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from perseform import __version__
from perseform.config import (
    ENV_STORE_PATH,
    Settings,
    get_config_path,
    get_perseform_home,
    load_settings,
    write_config_file,
)
from perseform.core.errors import PerseformError
from perseform.engine import FormEngine, create_store
from perseform.io import load_documents, parse_form_state_document, validate_form_config_document

T = TypeVar("T")

app = typer.Typer(
    name="perseform",
    help="Shared values and input dependencies across independent forms.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"perseform version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


def _run(coro: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coro)
    except PerseformError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _engine(ctx: typer.Context) -> FormEngine:
    try:
        settings = load_settings(store_path=ctx.obj.get("store_path"))
    except PerseformError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    if settings.store_backend == "memory":
        console.print("[yellow]Warning:[/yellow] memory store does not persist between commands")
    return FormEngine.from_settings(settings)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log store reads and writes"),
    ] = False,
    store_path: Annotated[
        Path | None,
        typer.Option("--store", "-s", envvar=ENV_STORE_PATH, help="Path to the JSON value store"),
    ] = None,
) -> None:
    """perseform: shared values and input dependencies across independent forms."""
    configure_logging(verbose)
    ctx.obj = {"store_path": store_path}


@app.command()
def init(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing config file",
    ),
) -> None:
    """Create the perseform config file and value store.

    Creates:
      ~/.config/perseform/config.yaml
      ~/.config/perseform/store/{config,state,global}/

    Set PERSEFORM_HOME to use another directory.
    """
    config_path = get_config_path()
    if config_path.exists() and not force:
        console.print(f"[yellow]Warning:[/yellow] Config already exists at {config_path}")
        console.print("Use --force to overwrite")
        raise typer.Exit(1)

    settings = Settings(store_backend="json", store_path=ctx.obj.get("store_path"))
    store_path = settings.resolved_store_path()
    settings.store_path = store_path

    console.print(f"[bold]Initializing perseform at {get_perseform_home()}[/bold]")
    create_store(settings)
    console.print(f"  [green]✓[/green] Value store at {store_path}")
    write_config_file(settings, config_path)
    console.print(f"  [green]✓[/green] Created config at {config_path}")


@app.command("save-config")
def save_config(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="JSON or JSONL file of form configs")],
) -> None:
    """Validate and save form configs, seeding unset global values."""
    engine = _engine(ctx)

    async def save() -> list[str]:
        saved = []
        for document in load_documents(path):
            config = validate_form_config_document(document)
            saved.append(await engine.save_form_config(config))
        return saved

    for form_id in _run(save()):
        console.print(f"[green]Saved config:[/green] {form_id}")


@app.command("save-state")
def save_state(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="JSON or JSONL file of form states")],
) -> None:
    """Save form states, propagating global-scoped values."""
    engine = _engine(ctx)

    async def save() -> list[str]:
        saved = []
        for document in load_documents(path):
            saved.append(await engine.save_form_state(parse_form_state_document(document)))
        return saved

    for form_id in _run(save()):
        console.print(f"[green]Saved state:[/green] {form_id}")


@app.command("show-state")
def show_state(
    ctx: typer.Context,
    form_id: Annotated[str, typer.Argument(help="Form id")],
) -> None:
    """Print the current state of a form."""
    engine = _engine(ctx)
    state = _run(engine.get_form_state(form_id))
    if state is None:
        console.print(f"[red]Error:[/red] No config for form {form_id!r}")
        raise typer.Exit(1)
    console.print_json(data=state.model_dump(mode="json"))


@app.command()
def value(
    ctx: typer.Context,
    form_id: Annotated[str, typer.Argument(help="Form id")],
    input_id: Annotated[str, typer.Argument(help="Input id")],
) -> None:
    """Print the current value of one input."""
    engine = _engine(ctx)
    console.print_json(data=_run(engine.get_input_value(form_id, input_id)))


@app.command("global")
def global_value(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Global key")],
) -> None:
    """Print the current value of a global key."""
    engine = _engine(ctx)
    console.print_json(data=_run(engine.get_global_value(key)))


@app.command()
def enabled(
    ctx: typer.Context,
    form_id: Annotated[str, typer.Argument(help="Form id")],
    input_id: Annotated[str, typer.Argument(help="Input id")],
    cascade: Annotated[
        bool,
        typer.Option("--cascade", help="Also require every dependency to be enabled"),
    ] = False,
) -> None:
    """Show whether an input is enabled and which dependencies decide it."""
    engine = _engine(ctx)

    async def check():
        return (
            await engine.is_enabled(form_id, input_id, cascade=cascade),
            await engine.explain_enablement(form_id, input_id),
        )

    is_enabled, report = _run(check())

    status = "[green]enabled[/green]" if is_enabled else "[red]disabled[/red]"
    console.print(f"{form_id}.{input_id}: {status}")
    if not report.dependencies:
        console.print("  No dependencies")
        return

    table = Table("Dependency", "Form", "Value", "Triggering values", "Satisfied")
    for dep in report.dependencies:
        table.add_row(
            dep.id,
            dep.form_id,
            repr(dep.value),
            "-" if dep.triggering_values is None else repr(dep.triggering_values),
            "[green]yes[/green]" if dep.satisfied else "[red]no[/red]",
        )
    console.print(table)


@app.command()
def deps(
    ctx: typer.Context,
    form_id: Annotated[str, typer.Argument(help="Form id")],
    input_id: Annotated[str, typer.Argument(help="Input id")],
    closure: Annotated[
        bool,
        typer.Option("--closure", help="List transitive dependencies instead of values"),
    ] = False,
) -> None:
    """Print the current values of an input's dependencies."""
    engine = _engine(ctx)
    if closure:
        pairs = _run(engine.dependency_resolver.dependency_closure(form_id, input_id))
        for dep_form_id, dep_input_id in pairs:
            console.print(f"{dep_form_id}.{dep_input_id}")
        return
    console.print_json(data=_run(engine.get_input_dependencies_state(form_id, input_id)))


@app.command()
def options(
    ctx: typer.Context,
    form_id: Annotated[str, typer.Argument(help="Form id")],
    input_id: Annotated[str, typer.Argument(help="Input id")],
) -> None:
    """Print the options of an input."""
    engine = _engine(ctx)
    result = _run(engine.get_input_options(form_id, input_id))
    console.print_json(data=[option.model_dump(mode="json") for option in result])


@app.command()
def validate(
    path: Annotated[Path, typer.Argument(help="JSON or JSONL file of form configs")],
) -> None:
    """Validate form config documents without saving them."""
    try:
        documents = load_documents(path)
        for document in documents:
            config = validate_form_config_document(document)
            console.print(f"[green]Valid:[/green] {config.id}")
    except PerseformError as e:
        console.print(f"[red]Invalid:[/red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
