"""CLI entrypoint: Typer app definition and command registration"""

import typer

from notiondocx.cli.commands import export_cmd, list_cmd


app = typer.Typer(name="notiondocx", no_args_is_help=True, help="Export Notion database pages to .docx records")

app.command(name="export")(export_cmd)
app.command(name="list")(list_cmd)
