from pathlib import Path
from typing import Optional


class RentorDeploymentError(Exception):
    """Base class for every error reported by a deployment run."""


class DeploymentConfigError(RentorDeploymentError, ValueError):
    """Raised when static deployment configuration is malformed."""


class RoleConfigError(DeploymentConfigError):
    pass


class ExternalConfigError(DeploymentConfigError):
    pass


class CorruptRegistry(RentorDeploymentError):
    def __init__(self, filepath: Path, reason: str):
        self.filepath = filepath
        self.reason = reason
        super().__init__(f"Registry at {filepath} is corrupt: {reason}")


class UnknownRole(RentorDeploymentError):
    def __init__(self, role: str, known_roles):
        self.role = role
        self.known_roles = list(known_roles)
        super().__init__(
            f"Unknown role '{role}'; expected one of: {', '.join(self.known_roles)}"
        )


class ResolutionError(RentorDeploymentError):
    """Raised when a role's constructor arguments cannot be resolved."""


class MissingDependency(ResolutionError):
    def __init__(self, role: str, key: str):
        self.role = role
        self.key = key
        super().__init__(
            f"Cannot deploy '{role}': dependency '{key}' is not in the registry; "
            f"deploy '{key}' first"
        )


class MissingNetworkConfig(ResolutionError):
    def __init__(self, network: str, key: Optional[str] = None, network_known: bool = True):
        self.network = network
        self.key = key
        if key is None:
            message = f"No external configuration for network '{network}'"
        elif not network_known:
            message = f"No external configuration for network '{network}'; '{key}' is required"
        else:
            message = f"External configuration for network '{network}' has no '{key}' entry"
        super().__init__(message)


class DeploymentError(RentorDeploymentError):
    """
    Raised when the chain deployer fails to deploy a role.
    A reverted deployment is final; anything else (transport, timeout) is transient.
    """

    def __init__(self, role: str, cause: Exception, reverted: bool = False):
        self.role = role
        self.cause = cause
        self.reverted = reverted
        kind = "reverted" if reverted else "failed"
        super().__init__(f"Deployment of '{role}' {kind}: {type(cause).__name__}: {cause}")


class RegistryWriteError(RentorDeploymentError):
    """Raised when a confirmed deployment could not be written to the registry."""

    def __init__(self, role: str, address: str, filepath: Path, cause: Exception):
        self.role = role
        self.address = address
        self.filepath = filepath
        self.cause = cause
        super().__init__(
            f"'{role}' is deployed at {address} but {filepath} could not be written "
            f"({type(cause).__name__}: {cause}); record it with record_address"
        )
