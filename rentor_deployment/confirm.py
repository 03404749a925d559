from collections import OrderedDict

from eth_utils import is_address, is_same_address

from rentor_deployment.constants import ZERO_ADDRESS
from rentor_deployment.roles import DeploymentMode


def _abort() -> None:
    print("Aborting deployment!")
    exit(-1)


def _confirm_deployment(role: str, network: str) -> None:
    """Asks the user to confirm the deployment of a single role."""
    answer = input(f"Deploy {role} to {network} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_zero_address() -> None:
    answer = input("Zero Address detected for deployment parameter; Continue? Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _is_zero_address(value) -> bool:
    return isinstance(value, str) and is_address(value) and is_same_address(value, ZERO_ADDRESS)


def _confirm_resolution(
    resolved_params: OrderedDict,
    role: str,
    network: str,
    mode: DeploymentMode = DeploymentMode.PLAIN,
) -> None:
    """Asks the user to confirm the resolved arguments for a single role."""
    # proxied roles pass their arguments to the initializer
    label = "initializer" if mode == DeploymentMode.PROXY else "constructor"
    if len(resolved_params) == 0:
        print(f"\n(i) No {label} parameters for {role}")
        _confirm_deployment(role, network)
        return

    print(f"\n{label.capitalize()} parameters for {role}")
    contains_zero_address = False
    for name, resolved_value in resolved_params.items():
        print(f"\t{name}={resolved_value}")
        if not contains_zero_address:
            contains_zero_address = _is_zero_address(resolved_value)
    _confirm_deployment(role, network)
    if contains_zero_address:
        _confirm_zero_address()
