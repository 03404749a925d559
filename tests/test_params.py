import pytest

from rentor_deployment.constants import POLYTEST
from rentor_deployment.errors import MissingDependency, MissingNetworkConfig
from rentor_deployment.external import ExternalConfig
from rentor_deployment.params import resolve, resolve_parameters
from rentor_deployment.registry import RegistryRecord
from rentor_deployment.roles import RoleTable
from tests.conftest import ACCEPTED_TOKEN, CFA, HOST, PROFILE_ADDRESS, make_address


@pytest.fixture()
def market_roles():
    config = {
        "roles": {
            "profile": None,
            "publisher": None,
            "market": {
                "constructor": {
                    "publisher": "$publisher",
                    "host": "$external:host",
                    "profile": "$profile",
                }
            },
        }
    }
    return RoleTable.from_config(config)


def test_resolve_without_dependencies(roles, external_config):
    assert resolve(roles.get("profile"), {}, external_config, POLYTEST) == []


def test_resolve_external_parameters_in_declared_order(roles, external_config, profile_record):
    registry = {"profile": profile_record}
    args = resolve(roles.get("rentor"), registry, external_config, POLYTEST)
    assert args == [HOST, CFA, ACCEPTED_TOKEN]


def test_resolve_mixed_sources(market_roles, external_config, profile_record):
    publisher = RegistryRecord(address=make_address(2), network=POLYTEST)
    registry = {"profile": profile_record, "publisher": publisher}

    params = resolve_parameters(market_roles.get("market"), registry, external_config, POLYTEST)

    assert list(params.items()) == [
        ("publisher", publisher.address),
        ("host", HOST),
        ("profile", PROFILE_ADDRESS),
    ]


def test_resolve_is_deterministic(market_roles, external_config, profile_record):
    registry = {"profile": profile_record, "publisher": RegistryRecord(make_address(2))}
    descriptor = market_roles.get("market")

    first = resolve(descriptor, registry, external_config, POLYTEST)
    for _ in range(3):
        assert resolve(descriptor, registry, external_config, POLYTEST) == first
    assert registry == {"profile": profile_record, "publisher": RegistryRecord(make_address(2))}


def test_missing_registry_dependency(market_roles, external_config, profile_record):
    with pytest.raises(MissingDependency) as error:
        resolve(market_roles.get("market"), {"profile": profile_record}, external_config, POLYTEST)
    assert error.value.role == "market"
    assert error.value.key == "publisher"
    assert "deploy 'publisher' first" in str(error.value)


def test_missing_network_config(roles, external_config):
    with pytest.raises(MissingNetworkConfig) as error:
        resolve(roles.get("rentor"), {}, external_config, "ganache")
    assert error.value.network == "ganache"
    assert error.value.key == "host"


def test_missing_network_config_key(roles):
    external_config = ExternalConfig({POLYTEST: {"host": HOST, "cfa": CFA}})
    with pytest.raises(MissingNetworkConfig) as error:
        resolve(roles.get("rentor"), {}, external_config, POLYTEST)
    assert error.value.key == "acceptedToken"
