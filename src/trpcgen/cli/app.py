import typer

from trpcgen.cli.generate import generate

app = typer.Typer(
    name="trpcgen",
    help="trpcgen: generate a tRPC app router with Zod schemas from NestJS-style routers.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("generate")(generate)


@app.callback()
def callback() -> None:
    """Generate tRPC route tables from TypeScript routers."""


def main() -> None:
    app()
