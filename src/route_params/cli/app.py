import typer

from route_params.cli.check import check
from route_params.cli.serve import serve_app
from route_params.cli.watch import watch

app = typer.Typer(
    name="route-params",
    help="Route params CLI: check that file-routed modules type their params after the route path.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("check")(check)
app.command("watch")(watch)
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
