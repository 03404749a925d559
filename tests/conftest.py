import pytest
from eth_utils import to_checksum_address

from rentor_deployment.chain import ChainDeployer, DeploymentResult
from rentor_deployment.constants import POLYTEST, ROLES_FILEPATH
from rentor_deployment.errors import DeploymentError
from rentor_deployment.external import ExternalConfig
from rentor_deployment.orchestrator import Orchestrator
from rentor_deployment.registry import RegistryRecord
from rentor_deployment.roles import DeploymentMode, RoleTable

HOST = to_checksum_address("0xeb796bdb90ffa0f28255275e16936d25d3418603")
CFA = to_checksum_address("0x49e565ed1bdc17f3d220f72df0857c26fa83f873")
ACCEPTED_TOKEN = to_checksum_address("0x5d8b4c2554aeb7e86f387b4d6c00ac33499ed01f")

PROFILE_ADDRESS = to_checksum_address("0x" + "a" * 40)


def make_address(n: int) -> str:
    return to_checksum_address("0x" + f"{n:040x}")


class RecordingChainDeployer(ChainDeployer):
    """Chain deployer double that records calls and hands out fresh addresses."""

    def __init__(self, addresses=None, failures=None):
        self.calls = list()
        self.addresses = list(addresses or [])
        self.failures = list(failures or [])
        self._counter = 0

    def _next_result(self, role, mode):
        if self.failures:
            failure = self.failures.pop(0)
            if failure is not None:
                raise failure
        self._counter += 1
        address = self.addresses.pop(0) if self.addresses else make_address(self._counter)
        return DeploymentResult(
            role=role,
            address=address,
            tx_hash="0x" + f"{self._counter:064x}",
            mode=mode,
        )

    def deploy_plain(self, role, contract, args):
        self.calls.append(("deploy_plain", role, contract, list(args)))
        return self._next_result(role, DeploymentMode.PLAIN)

    def deploy_proxy(self, role, contract, initializer, init_args):
        self.calls.append(("deploy_proxy", role, contract, initializer, list(init_args)))
        return self._next_result(role, DeploymentMode.PROXY)


def transient_failure(role="profile"):
    return DeploymentError(role=role, cause=TimeoutError("receipt not found"))


def revert_failure(role="profile"):
    return DeploymentError(role=role, cause=RuntimeError("execution reverted"), reverted=True)


@pytest.fixture(scope="session")
def roles():
    return RoleTable.from_yaml(ROLES_FILEPATH)


@pytest.fixture()
def external_config():
    return ExternalConfig(
        {POLYTEST: {"host": HOST, "cfa": CFA, "acceptedToken": ACCEPTED_TOKEN}}
    )


@pytest.fixture()
def registry_filepath(tmp_path):
    return tmp_path / "artifacts" / f"{POLYTEST}.json"


@pytest.fixture()
def chain_deployer():
    return RecordingChainDeployer()


@pytest.fixture()
def orchestrator(roles, chain_deployer, external_config, registry_filepath):
    return Orchestrator(
        roles=roles,
        chain_deployer=chain_deployer,
        external_config=external_config,
        network=POLYTEST,
        registry_filepath=registry_filepath,
    )


@pytest.fixture()
def profile_record():
    return RegistryRecord(address=PROFILE_ADDRESS, network=POLYTEST)
