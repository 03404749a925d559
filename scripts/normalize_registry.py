#!/usr/bin/python3
from pathlib import Path

import click

from rentor_deployment.errors import CorruptRegistry
from rentor_deployment.registry import normalize_registry


@click.command()
@click.option(
    "--registry",
    help="Filepath to registry file",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)
def cli(registry):
    """Normalize registry file"""
    try:
        normalize_registry(registry)
    except CorruptRegistry as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    cli()
