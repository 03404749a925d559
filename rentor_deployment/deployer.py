import typing
from typing import Any, List, Optional, Sequence

from ape import project
from ape.api import AccountAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance
from ape.exceptions import ApeException, ContractLogicError, VirtualMachineError
from ethpm_types import MethodABI
from web3.auto import w3

from rentor_deployment.chain import ChainDeployer, DeploymentResult
from rentor_deployment.constants import (
    OZ_DEPENDENCY_NAME,
    OZ_DEPENDENCY_VERSION,
    PROXY_CONTRACT_NAME,
)
from rentor_deployment.errors import DeploymentConfigError, DeploymentError
from rentor_deployment.roles import DeploymentMode


def _get_dependency_contract_container(contract: str) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise DeploymentConfigError(f"Ambiguous {dependency_name} dependency for {contract}")
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, contract)
            return contract_container
        except AttributeError:
            continue
    raise DeploymentConfigError(f"No contract found with name '{contract}'.")


def get_contract_container(contract: str) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(contract)

    return contract_container


def get_proxy_container() -> ContractContainer:
    oz_dependency = project.dependencies[OZ_DEPENDENCY_NAME][OZ_DEPENDENCY_VERSION]
    return getattr(oz_dependency, PROXY_CONTRACT_NAME)


def _validate_method_args(
    method_abis: List[MethodABI], args: Sequence[Any]
) -> typing.Dict[str, Any]:
    """Validates the call arguments against the function ABI."""
    if len(method_abis) == 0:
        raise DeploymentConfigError("No method abis provided for validation of args")

    abis_matching_args_length = [abi for abi in method_abis if len(abi.inputs) == len(args)]
    for abi in abis_matching_args_length:
        named_args = {}
        for arg, abi_input in zip(args, abi.inputs):
            if not w3.is_encodable(abi_input.type, arg):
                break
            named_args[abi_input.name] = arg
        else:
            return named_args
    raise DeploymentConfigError(
        f"Could not find ABI for '{method_abis[0].name}' with {len(args)} arg(s) and given type(s)"
    )


def _validate_constructor_args(container: ContractContainer, args: Sequence[Any]) -> None:
    """Validates the constructor arguments against the constructor ABI."""
    contract_name = container.contract_type.name
    abi_inputs = container.constructor.abi.inputs
    if len(args) != len(abi_inputs):
        raise DeploymentConfigError(
            f"Constructor parameters length mismatch - "
            f"{contract_name} ABI requires {len(abi_inputs)}, Got {len(args)}."
        )
    for position, (abi_input, value) in enumerate(zip(abi_inputs, args)):
        if not w3.is_encodable(abi_input.type, value):
            raise DeploymentConfigError(
                f"{contract_name} constructor param '{abi_input.name}' at position {position} "
                f"has a value '{value}' whose type does not match expected ABI type "
                f"'{abi_input.type}'"
            )


class ApeChainDeployer(ChainDeployer):
    """
    Represents an ape account plus confirmed contract deployment,
    either directly or behind an OpenZeppelin transparent upgradeable proxy.
    """

    def __init__(
        self,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
        verify: bool = False,
    ):
        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._account.set_autosign(autosign)
        self.verify = verify

    def get_account(self) -> AccountAPI:
        """Returns the deployer account."""
        return self._account

    def _get_kwargs(self) -> typing.Dict[str, Any]:
        """Returns the deployment kwargs."""
        return {"publish": self.verify}

    def _deploy_contract(
        self, role: str, container: ContractContainer, args: Sequence[Any]
    ) -> ContractInstance:
        try:
            instance = self._account.deploy(container, *args, **self._get_kwargs())
            instance.receipt.await_confirmations()
        except (ContractLogicError, VirtualMachineError) as e:
            raise DeploymentError(role=role, cause=e, reverted=True) from e
        except (ApeException, OSError) as e:
            raise DeploymentError(role=role, cause=e) from e
        return instance

    def deploy_plain(self, role: str, contract: str, args: Sequence[Any]) -> DeploymentResult:
        container = get_contract_container(contract)
        _validate_constructor_args(container, args)

        instance = self._deploy_contract(role, container, args)
        return DeploymentResult(
            role=role,
            address=instance.address,
            tx_hash=instance.receipt.txn_hash,
            mode=DeploymentMode.PLAIN,
        )

    def deploy_proxy(
        self, role: str, contract: str, initializer: str, init_args: Sequence[Any]
    ) -> DeploymentResult:
        container = get_contract_container(contract)
        initializer_abis = [
            abi for abi in container.contract_type.methods if abi.name == initializer
        ]
        if init_args or initializer_abis:
            _validate_method_args(method_abis=initializer_abis, args=init_args)

        implementation = self._deploy_contract(role, container, [])
        if initializer_abis:
            method_handler = getattr(implementation, initializer)
            data = method_handler.encode_input(*init_args)
        else:
            data = b""

        proxy_container = get_proxy_container()
        print(
            f"\nDeploying {proxy_container.contract_type.name} "
            f"contract to proxy {contract} at {implementation.address}."
        )
        proxy = self._deploy_contract(
            role,
            proxy_container,
            [implementation.address, self._account.address, data],
        )
        print(
            f"\nWrapping {contract} into {proxy.contract_type.name} "
            f"(as type {contract}) at {proxy.address}."
        )
        return DeploymentResult(
            role=role,
            address=proxy.address,
            tx_hash=proxy.receipt.txn_hash,
            mode=DeploymentMode.PROXY,
        )
