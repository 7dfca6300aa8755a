import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.syntax import Syntax

from trpcgen.config import load_options
from trpcgen.core.generate import run_generate
from trpcgen.core.router import RouterLookupError

console = Console()


def generate(
    root: Annotated[Path, typer.Argument(help="Root directory of the TypeScript project.")] = Path("."),
    output: Annotated[
        Path | None, typer.Option(help="Generated module path (default: <root>/@generated/server.ts).")
    ] = None,
    auto_output: Annotated[
        bool | None,
        typer.Option(
            "--auto-output/--no-auto-output",
            help="Synthesize missing output schemas from return types (env: TRPCGEN_AUTO_OUTPUT).",
        ),
    ] = None,
    namespace: Annotated[
        str | None, typer.Option(help="Schema builder namespace (env: TRPCGEN_SCHEMA_NAMESPACE).")
    ] = None,
    stdout: Annotated[bool, typer.Option("--stdout", help="Print the module instead of writing it.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """Generate the tRPC app router module."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    options = load_options(root=root, output=output, auto_output_generation=auto_output, schema_namespace=namespace)

    try:
        result = run_generate(options, write=not stdout)
    except (RouterLookupError, FileNotFoundError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None

    if stdout:
        console.print(Syntax(result.source, "typescript"))
        return
    console.print(
        f"[green]Generated[/green] {result.router_count} router(s), "
        f"{result.procedure_count} procedure(s) -> {result.output_path}"
    )
