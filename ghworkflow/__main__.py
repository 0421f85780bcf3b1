"""Allow ``python -m ghworkflow``."""

from ghworkflow.main import cli

cli()
