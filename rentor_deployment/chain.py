from abc import ABC, abstractmethod
from typing import Any, NamedTuple, Sequence

from eth_typing import ChecksumAddress

from rentor_deployment.roles import DeploymentMode


class DeploymentResult(NamedTuple):
    role: str
    address: ChecksumAddress
    tx_hash: str
    mode: DeploymentMode


class ChainDeployer(ABC):
    """
    Submits deployments to a chain. Implementations only return once the
    deployment transaction is confirmed and raise DeploymentError otherwise.
    """

    @abstractmethod
    def deploy_plain(self, role: str, contract: str, args: Sequence[Any]) -> DeploymentResult:
        """Deploys `contract` with `args` as constructor arguments."""
        raise NotImplementedError

    @abstractmethod
    def deploy_proxy(
        self, role: str, contract: str, initializer: str, init_args: Sequence[Any]
    ) -> DeploymentResult:
        """
        Deploys an implementation of `contract` behind an upgradeable proxy,
        initialized by calling `initializer` with `init_args`.
        """
        raise NotImplementedError
