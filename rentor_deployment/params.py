from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any, List, NamedTuple

from eth_utils import is_address, to_checksum_address

from rentor_deployment.errors import MissingDependency
from rentor_deployment.external import ExternalConfig
from rentor_deployment.registry import Registry
from rentor_deployment.roles import Dependency, DependencySource, RoleDescriptor


class VariableContext(NamedTuple):
    role: str
    registry: Registry
    external_config: ExternalConfig
    network: str


# Variables


class Variable(ABC):
    def __init__(self, key: str, context: VariableContext):
        self.key = key
        self.context = context

    @abstractmethod
    def resolve(self) -> Any:
        raise NotImplementedError


class RegistryAddress(Variable):
    """Address of another, already deployed role."""

    def resolve(self) -> Any:
        record = self.context.registry.get(self.key)
        if record is None:
            raise MissingDependency(role=self.context.role, key=self.key)
        return record.address


class ExternalParameter(Variable):
    """Network-scoped value from the external configuration."""

    def resolve(self) -> Any:
        value = self.context.external_config.lookup(self.context.network, self.key)
        if isinstance(value, str) and is_address(value):
            return to_checksum_address(value)
        return value


VARIABLES = {
    DependencySource.REGISTRY: RegistryAddress,
    DependencySource.EXTERNAL_CONFIG: ExternalParameter,
}


def _variable_from_dependency(dependency: Dependency, context: VariableContext) -> Variable:
    variable_class = VARIABLES[dependency.source]
    return variable_class(dependency.key, context)


def resolve_parameters(
    descriptor: RoleDescriptor,
    registry: Registry,
    external_config: ExternalConfig,
    network: str,
) -> OrderedDict:
    """
    Resolves the named arguments of a role in declaration order.
    Has no side effects, so it is safe to call for validation only.
    """
    context = VariableContext(
        role=descriptor.role,
        registry=registry,
        external_config=external_config,
        network=network,
    )
    resolved_params = OrderedDict()
    for dependency in descriptor.dependencies:
        variable = _variable_from_dependency(dependency, context)
        resolved_params[dependency.name] = variable.resolve()
    return resolved_params


def resolve(
    descriptor: RoleDescriptor,
    registry: Registry,
    external_config: ExternalConfig,
    network: str,
) -> List[Any]:
    """Returns the positional constructor (or initializer) arguments of a role."""
    resolved_params = resolve_parameters(descriptor, registry, external_config, network)
    return list(resolved_params.values())
