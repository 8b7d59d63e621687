"""CLI entrypoint: Typer app definition and command registration"""

import typer

from freedocs.cli.commands import copy_cmd, main_callback, parse_cmd, snapshot_cmd, universal_cmd


app = typer.Typer(name="freedocs", no_args_is_help=True, help="Google Docs HTML to structured blocks")

app.callback()(main_callback)
app.command(name="parse")(parse_cmd)
app.command(name="universal")(universal_cmd)
app.command(name="copy")(copy_cmd)
app.command(name="snapshot")(snapshot_cmd)
