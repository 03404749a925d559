#!/usr/bin/python3

import click

from rentor_deployment.errors import RentorDeploymentError
from rentor_deployment.options import (
    address_option,
    network_id_option,
    registry_filepath_option,
    role_argument,
    roles_filepath_option,
)
from rentor_deployment.registry import (
    RegistryRecord,
    load_registry,
    merge_registry,
    registry_filepath_from_network,
    save_registry,
)
from rentor_deployment.roles import RoleTable


@click.command()
@role_argument
@address_option
@network_id_option
@registry_filepath_option
@roles_filepath_option
@click.option("--tx-hash", help="Deployment transaction hash", type=click.STRING)
def cli(role, address, network_id, registry_filepath, roles_filepath, tx_hash):
    """
    Record an address that was deployed but never written to the registry,
    e.g. after an interrupted deployment.
    """
    registry_filepath = registry_filepath or registry_filepath_from_network(network_id)
    try:
        RoleTable.from_yaml(roles_filepath).get(role)
        registry = load_registry(registry_filepath)
    except RentorDeploymentError as e:
        raise click.ClickException(str(e))

    if role in registry:
        click.secho(
            f"Replacing {role} at {registry[role].address} with {address}", fg="yellow"
        )
    record = RegistryRecord(address=address, network=network_id, tx_hash=tx_hash)
    save_registry(merge_registry(registry, role, record), registry_filepath)
    click.secho(f"Recorded {role} at {address} in {registry_filepath}", fg="green")


if __name__ == "__main__":
    cli()
