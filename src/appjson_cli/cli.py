from __future__ import annotations

import typer

from .util import LOG_LEVELS, configure_logging, configure_stdio

app = typer.Typer(help="appjson: expand spring.application.json into configuration properties")


@app.callback()
def _init(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help=f"Logging level ({', '.join(LOG_LEVELS)})",
    ),
):
    configure_stdio()
    configure_logging(log_level)


from .commands.flatten_cmd import flatten_command  # noqa: E402
from .commands.env_cmd import env_command  # noqa: E402

app.command(name="flatten")(flatten_command)
app.command(name="env")(env_command)


def main():
    app()
