from bkzulip.cli import cli

cli()
