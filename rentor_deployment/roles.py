import typing
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Tuple

import yaml

from rentor_deployment.constants import DEFAULT_INITIALIZER
from rentor_deployment.errors import RoleConfigError, UnknownRole
from rentor_deployment.utils import _load_yaml

CONTRACT_KEY = "contract"
MODE_KEY = "mode"
CONSTRUCTOR_KEY = "constructor"
INITIALIZER_KEY = "initializer"
INITIALIZER_METHOD_KEY = "method"
INITIALIZER_ARGS_KEY = "args"

VARIABLE_PREFIX = "$"
EXTERNAL_PREFIX = "external:"


class DeploymentMode(Enum):
    PLAIN = "plain"
    PROXY = "proxy"


class DependencySource(Enum):
    REGISTRY = "registry"
    EXTERNAL_CONFIG = "external"


class Dependency(NamedTuple):
    """A single named constructor (or initializer) argument of a role."""

    name: str
    source: DependencySource
    key: str


class RoleDescriptor(NamedTuple):
    role: str
    contract: str
    mode: DeploymentMode
    dependencies: Tuple[Dependency, ...] = ()
    initializer: str = DEFAULT_INITIALIZER

    def registry_dependencies(self) -> List[str]:
        return [d.key for d in self.dependencies if d.source == DependencySource.REGISTRY]


def mode_for(descriptor: RoleDescriptor) -> DeploymentMode:
    return descriptor.mode


def is_variable(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(VARIABLE_PREFIX)


def _parse_dependency(role: str, name: str, value: Any) -> Dependency:
    if not is_variable(value):
        raise RoleConfigError(
            f"Parameter '{name}' of role '{role}' must be a '$role' or "
            f"'$external:key' variable, got {value!r}"
        )
    variable = value[len(VARIABLE_PREFIX):]
    if variable.startswith(EXTERNAL_PREFIX):
        key = variable[len(EXTERNAL_PREFIX):]
        source = DependencySource.EXTERNAL_CONFIG
    else:
        key = variable
        source = DependencySource.REGISTRY
    if not key:
        raise RoleConfigError(f"Parameter '{name}' of role '{role}' has an empty variable")
    return Dependency(name=name, source=source, key=key)


def _parse_parameters(role: str, parameters: Any) -> Tuple[Dependency, ...]:
    if parameters is None:
        return tuple()
    if not isinstance(parameters, dict):
        raise RoleConfigError(f"Malformed parameters for role '{role}'.")
    return tuple(_parse_dependency(role, name, value) for name, value in parameters.items())


def _parse_descriptor(role: str, data: Any) -> RoleDescriptor:
    data = data or dict()
    if not isinstance(data, dict):
        raise RoleConfigError(f"Malformed role descriptor for '{role}'.")

    try:
        mode = DeploymentMode(data.get(MODE_KEY, DeploymentMode.PLAIN.value))
    except ValueError:
        raise RoleConfigError(f"Unknown deployment mode {data.get(MODE_KEY)!r} for '{role}'")

    contract = data.get(CONTRACT_KEY) or role[:1].upper() + role[1:]
    initializer = DEFAULT_INITIALIZER

    if mode == DeploymentMode.PROXY:
        # proxied contracts are initialized by an explicit call, not a constructor
        if CONSTRUCTOR_KEY in data:
            raise RoleConfigError(
                f"Proxied role '{role}' cannot have constructor parameters; use '{INITIALIZER_KEY}'"
            )
        initializer_data = data.get(INITIALIZER_KEY) or dict()
        if not isinstance(initializer_data, dict):
            raise RoleConfigError(f"Malformed initializer for role '{role}'.")
        initializer = initializer_data.get(INITIALIZER_METHOD_KEY, DEFAULT_INITIALIZER)
        dependencies = _parse_parameters(role, initializer_data.get(INITIALIZER_ARGS_KEY))
    else:
        if INITIALIZER_KEY in data:
            raise RoleConfigError(f"Role '{role}' is not proxied and cannot have an initializer")
        dependencies = _parse_parameters(role, data.get(CONSTRUCTOR_KEY))

    return RoleDescriptor(
        role=role,
        contract=contract,
        mode=mode,
        dependencies=dependencies,
        initializer=initializer,
    )


def deployment_order(descriptors: typing.Mapping[str, RoleDescriptor]) -> List[str]:
    """
    Returns the roles sorted so that every role comes after the roles it depends on.
    Raises RoleConfigError on unknown dependencies and cycles.
    """
    order = list()
    done = set()
    visiting = list()

    def visit(role: str):
        if role in done:
            return
        if role in visiting:
            cycle = " -> ".join(visiting[visiting.index(role):] + [role])
            raise RoleConfigError(f"Dependency cycle between roles: {cycle}")
        visiting.append(role)
        for dependency in descriptors[role].registry_dependencies():
            if dependency not in descriptors:
                raise RoleConfigError(
                    f"Role '{role}' depends on undeclared role '{dependency}'"
                )
            visit(dependency)
        visiting.pop()
        done.add(role)
        order.append(role)

    for role in descriptors:
        visit(role)
    return order


class RoleTable:
    """The fixed, validated set of deployable roles."""

    def __init__(self, descriptors: Dict[str, RoleDescriptor]):
        self.order = deployment_order(descriptors)
        self.descriptors = dict(descriptors)

    def __contains__(self, role: str) -> bool:
        return role in self.descriptors

    def __iter__(self):
        return iter(self.order)

    def get(self, role: str) -> RoleDescriptor:
        try:
            return self.descriptors[role]
        except KeyError:
            raise UnknownRole(role, self.order)

    @classmethod
    def from_config(cls, config: Dict) -> "RoleTable":
        roles = (config or dict()).get("roles")
        if not roles or not isinstance(roles, dict):
            raise RoleConfigError("Roles file missing 'roles' field.")
        descriptors = {role: _parse_descriptor(role, data) for role, data in roles.items()}
        return cls(descriptors)

    @classmethod
    def from_yaml(cls, filepath: Path) -> "RoleTable":
        try:
            config = _load_yaml(filepath)
        except yaml.YAMLError as e:
            raise RoleConfigError(f"Roles file {filepath} is not valid YAML: {e}") from e
        return cls.from_config(config)
