from pathlib import Path

import click

from rentor_deployment.constants import EXTERNAL_CONFIG_FILEPATH, ROLES_FILEPATH
from rentor_deployment.types import ContractAddress

role_argument = click.argument("role", type=click.STRING)

registry_filepath_option = click.option(
    "--registry-filepath",
    "-f",
    help="Registry filepath; defaults to the artifacts registry of the active network",
    type=click.Path(dir_okay=False, path_type=Path),
    required=False,
)

roles_filepath_option = click.option(
    "--roles-filepath",
    help="Role descriptors YAML",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=ROLES_FILEPATH,
    show_default=True,
)

external_config_option = click.option(
    "--external-config",
    help="External protocol configuration JSON, keyed by network",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=EXTERNAL_CONFIG_FILEPATH,
    show_default=True,
)

network_id_option = click.option(
    "--network-id",
    "-n",
    help="Deployment network identifier (e.g. polytest)",
    type=click.STRING,
    required=True,
)

address_option = click.option(
    "--address",
    "-a",
    help="Deployed contract address",
    type=ContractAddress(),
    required=True,
)

skip_if_deployed_option = click.option(
    "--skip-if-deployed",
    help="Do not redeploy a role that already has an address on this network",
    is_flag=True,
    default=False,
)

retries_option = click.option(
    "--retries",
    help="Retries for transient (non-revert) deployment failures",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
)

verify_option = click.option(
    "--verify",
    help="Publish contract source to the block explorer",
    is_flag=True,
    default=False,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions without prompting",
    is_flag=True,
    default=False,
)
