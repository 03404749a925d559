#!/usr/bin/python3

from pathlib import Path
from typing import List, Optional, Tuple

import click

from rentor_deployment.constants import ARTIFACTS_DIR
from rentor_deployment.registry import Registry, load_registry


def _get_registries(
    artifacts_dir: Path, network_id: Optional[str] = None
) -> List[Tuple[str, Registry]]:
    """Parse the registry files for the given network or all known networks."""
    registries = list()
    for registry_filepath in sorted(artifacts_dir.glob("*.json")):
        network = registry_filepath.stem
        if network_id and network_id != network:
            continue
        registries.append((network, load_registry(registry_filepath)))
    return registries


def _display_registries(registries: List[Tuple[str, Registry]]) -> None:
    for network, registry in registries:
        click.secho(f"\n{network.capitalize()} Network", fg="green")
        if not registry:
            click.secho("    (empty)", fg="yellow")
        for index, role in enumerate(sorted(registry), start=1):
            record = registry[role]
            details = ", ".join(
                f"{field}={value}"
                for field, value in record._asdict().items()
                if field != "address" and value is not None
            )
            line = f"    {index}. {role} {record.address}"
            if details:
                line = f"{line} ({details})"
            click.secho(line, fg="cyan")


@click.command(name="list-contracts")
@click.option(
    "--network-id",
    "-n",
    help="Only list the registry of this network",
    type=click.STRING,
)
@click.option(
    "--artifacts-dir",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=ARTIFACTS_DIR,
    show_default=True,
)
def cli(network_id, artifacts_dir):
    """List all recorded contracts. Optionally filter by network."""
    registries = _get_registries(artifacts_dir, network_id)
    _display_registries(registries)


if __name__ == "__main__":
    cli()
