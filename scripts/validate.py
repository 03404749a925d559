#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, network_option

from rentor_deployment.errors import RentorDeploymentError
from rentor_deployment.external import ExternalConfig
from rentor_deployment.networks import active_network_identifier
from rentor_deployment.options import (
    external_config_option,
    registry_filepath_option,
    role_argument,
    roles_filepath_option,
)
from rentor_deployment.params import resolve_parameters
from rentor_deployment.registry import load_registry, registry_filepath_from_network
from rentor_deployment.roles import RoleTable, mode_for


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@role_argument
@registry_filepath_option
@roles_filepath_option
@external_config_option
def cli(network, role, registry_filepath, roles_filepath, external_config):
    """Resolve the arguments of a role without deploying it."""
    network_id = active_network_identifier()
    registry_filepath = registry_filepath or registry_filepath_from_network(network_id)

    try:
        descriptor = RoleTable.from_yaml(roles_filepath).get(role)
        params = resolve_parameters(
            descriptor=descriptor,
            registry=load_registry(registry_filepath),
            external_config=ExternalConfig.from_json(external_config),
            network=network_id,
        )
    except RentorDeploymentError as e:
        click.secho("Validation Failed ❌", fg="red")
        raise click.ClickException(str(e))

    click.secho(f"{descriptor.contract} ({mode_for(descriptor).value}) on {network_id}", fg="green")
    if not params:
        print("\t(no parameters)")
    for name, value in params.items():
        print(f"\t{name}={value}")


if __name__ == "__main__":
    cli()
