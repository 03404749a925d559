from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from rentor_deployment.chain import ChainDeployer, DeploymentResult
from rentor_deployment.confirm import _confirm_resolution
from rentor_deployment.errors import DeploymentError, RegistryWriteError, RentorDeploymentError
from rentor_deployment.external import ExternalConfig
from rentor_deployment.params import resolve_parameters
from rentor_deployment.registry import (
    Registry,
    RegistryRecord,
    load_registry,
    merge_registry,
    save_registry,
)
from rentor_deployment.roles import DeploymentMode, RoleDescriptor, RoleTable, mode_for


class RoleState(Enum):
    PENDING = "Pending"
    ARGS_RESOLVED = "ArgsResolved"
    DEPLOYING = "Deploying"
    DEPLOYED = "Deployed"
    FAILED = "Failed"


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class Orchestrator:
    """
    Deploys one role at a time: resolves its arguments, picks the deployment
    mode, hands it to the chain deployer and records the confirmed address.
    """

    def __init__(
        self,
        roles: RoleTable,
        chain_deployer: ChainDeployer,
        external_config: ExternalConfig,
        network: str,
        registry_filepath: Path,
        autosign: bool = True,
        retries: int = 0,
        skip_if_deployed: bool = False,
    ):
        if retries < 0:
            raise ValueError("retries cannot be negative")
        self.roles = roles
        self.chain_deployer = chain_deployer
        self.external_config = external_config
        self.network = network
        self.registry_filepath = registry_filepath
        self.autosign = autosign
        self.retries = retries
        self.skip_if_deployed = skip_if_deployed
        self.states: Dict[str, List[RoleState]] = dict()

    def _transition(self, role: str, state: RoleState) -> None:
        self.states.setdefault(role, list()).append(state)

    def state_of(self, role: str) -> Optional[RoleState]:
        trail = self.states.get(role)
        return trail[-1] if trail else None

    def load_registry(self) -> Registry:
        return load_registry(self.registry_filepath)

    def _already_deployed(self, registry: Registry, role: str) -> bool:
        record = registry.get(role)
        return record is not None and record.network in (None, self.network)

    def _deploy(self, descriptor: RoleDescriptor, args: list) -> DeploymentResult:
        mode = mode_for(descriptor)
        if mode == DeploymentMode.PROXY:
            return self.chain_deployer.deploy_proxy(
                role=descriptor.role,
                contract=descriptor.contract,
                initializer=descriptor.initializer,
                init_args=args,
            )
        return self.chain_deployer.deploy_plain(
            role=descriptor.role,
            contract=descriptor.contract,
            args=args,
        )

    def _deploy_with_retries(self, descriptor: RoleDescriptor, args: list) -> DeploymentResult:
        attempt = 0
        while True:
            try:
                return self._deploy(descriptor, args)
            except DeploymentError as e:
                if e.reverted or attempt >= self.retries:
                    raise
                attempt += 1
                print(f"(i) {e}; retrying ({attempt}/{self.retries})")

    def deploy_role(self, role: str, registry: Optional[Registry] = None) -> Registry:
        """
        Deploys a single role and persists its address.
        On any error the persisted registry is left untouched.
        """
        if registry is None:
            registry = self.load_registry()
        self._transition(role, RoleState.PENDING)

        try:
            descriptor = self.roles.get(role)
        except RentorDeploymentError:
            self._transition(role, RoleState.FAILED)
            raise

        # a recorded role needs no arguments
        if self.skip_if_deployed and self._already_deployed(registry, role):
            print(f"{descriptor.contract} already deployed at {registry[role].address}; skipping.")
            self._transition(role, RoleState.DEPLOYED)
            return registry

        try:
            params = resolve_parameters(descriptor, registry, self.external_config, self.network)
        except RentorDeploymentError:
            self._transition(role, RoleState.FAILED)
            raise
        self._transition(role, RoleState.ARGS_RESOLVED)

        print(f"Starting {descriptor.contract} Deployment")
        if not self.autosign:
            _confirm_resolution(params, role, self.network, mode_for(descriptor))

        self._transition(role, RoleState.DEPLOYING)
        try:
            result = self._deploy_with_retries(descriptor, list(params.values()))
        except RentorDeploymentError:
            self._transition(role, RoleState.FAILED)
            raise
        except Exception as e:
            self._transition(role, RoleState.FAILED)
            raise DeploymentError(role=role, cause=e) from e

        print(f"{descriptor.contract} deployed to : {result.address}")
        record = RegistryRecord(
            address=result.address,
            network=self.network,
            deployed_at=_utc_timestamp(),
            tx_hash=result.tx_hash,
            mode=result.mode.value,
        )
        updated = merge_registry(registry, role, record)
        try:
            save_registry(updated, self.registry_filepath)
        except OSError as e:
            self._transition(role, RoleState.FAILED)
            raise RegistryWriteError(
                role=role, address=result.address, filepath=self.registry_filepath, cause=e
            ) from e
        self._transition(role, RoleState.DEPLOYED)
        return updated
