import json
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from rentor_deployment.errors import ExternalConfigError, MissingNetworkConfig
from rentor_deployment.utils import _load_json


class ExternalConfig:
    """
    Read-only table of third-party protocol addresses (e.g. superfluid host,
    agreement and token addresses) keyed by network identifier.
    """

    def __init__(self, networks: Mapping[str, Mapping[str, Any]]):
        if not isinstance(networks, Mapping):
            raise ExternalConfigError("External configuration must be a mapping of networks.")
        table = dict()
        for network, parameters in networks.items():
            if not isinstance(parameters, Mapping):
                raise ExternalConfigError(
                    f"External configuration for network '{network}' must be a mapping."
                )
            table[network] = MappingProxyType(dict(parameters))
        self._networks = MappingProxyType(table)

    @property
    def networks(self) -> Mapping[str, Mapping[str, Any]]:
        return self._networks

    def __contains__(self, network: str) -> bool:
        return network in self._networks

    def for_network(self, network: str) -> Mapping[str, Any]:
        try:
            return self._networks[network]
        except KeyError:
            raise MissingNetworkConfig(network)

    def lookup(self, network: str, key: str) -> Any:
        if network not in self._networks:
            raise MissingNetworkConfig(network, key, network_known=False)
        try:
            return self._networks[network][key]
        except KeyError:
            raise MissingNetworkConfig(network, key)

    @classmethod
    def from_json(cls, filepath: Path) -> "ExternalConfig":
        try:
            data = _load_json(filepath)
        except FileNotFoundError:
            raise ExternalConfigError(f"No external configuration found at {filepath}")
        except json.JSONDecodeError as e:
            raise ExternalConfigError(f"External configuration at {filepath} is invalid: {e}")
        return cls(data)
