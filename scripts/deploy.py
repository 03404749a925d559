#!/usr/bin/python3

from pathlib import Path

import click
from ape.cli import ConnectedProviderCommand, network_option

from rentor_deployment.chain import ChainDeployer
from rentor_deployment.constants import LOGO
from rentor_deployment.deployer import ApeChainDeployer
from rentor_deployment.errors import RentorDeploymentError
from rentor_deployment.external import ExternalConfig
from rentor_deployment.networks import active_network_identifier, is_local_network
from rentor_deployment.options import (
    autosign_option,
    external_config_option,
    registry_filepath_option,
    retries_option,
    role_argument,
    roles_filepath_option,
    skip_if_deployed_option,
    verify_option,
)
from rentor_deployment.orchestrator import Orchestrator
from rentor_deployment.registry import registry_filepath_from_network
from rentor_deployment.roles import RoleTable


def _deploy(
    role: str,
    network_id: str,
    chain_deployer: ChainDeployer,
    registry_filepath: Path,
    roles_filepath: Path,
    external_config: Path,
    autosign: bool,
    retries: int,
    skip_if_deployed: bool,
) -> None:
    try:
        orchestrator = Orchestrator(
            roles=RoleTable.from_yaml(roles_filepath),
            chain_deployer=chain_deployer,
            external_config=ExternalConfig.from_json(external_config),
            network=network_id,
            registry_filepath=registry_filepath,
            autosign=autosign,
            retries=retries,
            skip_if_deployed=skip_if_deployed,
        )
        print(
            f"Role: {role}",
            f"Network: {network_id}",
            f"Registry: {registry_filepath}",
            sep="\n",
        )
        orchestrator.deploy_role(role)
    except RentorDeploymentError as e:
        click.secho("Deployment Failed ❌", fg="red")
        raise click.ClickException(str(e))

    click.secho("Deployment Successful ✅", fg="green")


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@role_argument
@registry_filepath_option
@roles_filepath_option
@external_config_option
@skip_if_deployed_option
@retries_option
@verify_option
@autosign_option
def cli(
    network,
    role,
    registry_filepath,
    roles_filepath,
    external_config,
    skip_if_deployed,
    retries,
    verify,
    autosign,
):
    """Deploy a single contract role and record its address."""
    click.secho(LOGO, fg="cyan")
    network_id = active_network_identifier()
    registry_filepath = registry_filepath or registry_filepath_from_network(network_id)

    if verify and is_local_network():
        print(f"(i) Skipping explorer verification on local network '{network_id}'.")
        verify = False

    _deploy(
        role=role,
        network_id=network_id,
        chain_deployer=ApeChainDeployer(autosign=autosign, verify=verify),
        registry_filepath=registry_filepath,
        roles_filepath=roles_filepath,
        external_config=external_config,
        autosign=autosign,
        retries=retries,
        skip_if_deployed=skip_if_deployed,
    )


if __name__ == "__main__":
    cli()
