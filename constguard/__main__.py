from constguard.cli import cli

cli()
