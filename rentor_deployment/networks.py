from ape import networks

from rentor_deployment.constants import LOCAL_NETWORKS, NETWORK_IDENTIFIERS


def network_identifier(ecosystem_name: str, network_name: str) -> str:
    """Maps an ape ecosystem/network pair onto the identifier used by registries."""
    return NETWORK_IDENTIFIERS.get(f"{ecosystem_name}:{network_name}", network_name)


def active_network_identifier() -> str:
    network = networks.provider.network
    return network_identifier(network.ecosystem.name, network.name)


def is_local_network() -> bool:
    return active_network_identifier() in LOCAL_NETWORKS
