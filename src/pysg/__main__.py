from pysg.cli.main import cli

cli()
