import json

import click
import pytest
from click.testing import CliRunner

from rentor_deployment.constants import (
    EXTERNAL_CONFIG_FILEPATH,
    POLYTEST,
    ROLES_FILEPATH,
    ZERO_ADDRESS,
)
from rentor_deployment.options import retries_option
from rentor_deployment.registry import RegistryRecord, load_registry, save_registry
from scripts.deploy import _deploy
from scripts.list_contracts import cli as list_contracts
from scripts.normalize_registry import cli as normalize
from scripts.record_address import cli as record_address
from tests.conftest import PROFILE_ADDRESS, RecordingChainDeployer, make_address


def test_record_address(tmp_path, profile_record):
    registry_filepath = tmp_path / "polytest.json"
    save_registry({"profile": profile_record}, registry_filepath)
    address = make_address(42)

    result = CliRunner().invoke(
        record_address,
        [
            "rentor",
            "--address",
            address.lower(),
            "--network-id",
            POLYTEST,
            "--registry-filepath",
            str(registry_filepath),
        ],
    )

    assert result.exit_code == 0, result.output
    assert load_registry(registry_filepath) == {
        "profile": profile_record,
        "rentor": RegistryRecord(address=address, network=POLYTEST),
    }


def test_record_address_unknown_role(tmp_path):
    registry_filepath = tmp_path / "polytest.json"
    result = CliRunner().invoke(
        record_address,
        [
            "bogus",
            "--address",
            PROFILE_ADDRESS,
            "--network-id",
            POLYTEST,
            "--registry-filepath",
            str(registry_filepath),
        ],
    )

    assert result.exit_code != 0
    assert "Unknown role 'bogus'" in result.output
    assert not registry_filepath.exists()


def test_record_address_invalid_address(tmp_path):
    result = CliRunner().invoke(
        record_address,
        ["profile", "--address", "0x1234", "--network-id", POLYTEST],
    )
    assert result.exit_code != 0
    assert "'0x1234' is not a contract address" in result.output


def test_record_address_zero_address(tmp_path):
    registry_filepath = tmp_path / "polytest.json"
    result = CliRunner().invoke(
        record_address,
        [
            "profile",
            "--address",
            ZERO_ADDRESS,
            "--network-id",
            POLYTEST,
            "--registry-filepath",
            str(registry_filepath),
        ],
    )
    assert result.exit_code != 0
    assert "zero address cannot be recorded" in result.output
    assert not registry_filepath.exists()


def test_normalize_registry(tmp_path):
    registry_filepath = tmp_path / "contract_addresses.json"
    registry_filepath.write_text(json.dumps({"profile": PROFILE_ADDRESS.lower()}))

    result = CliRunner().invoke(normalize, ["--registry", str(registry_filepath)])

    assert result.exit_code == 0, result.output
    assert json.loads(registry_filepath.read_text()) == {"profile": PROFILE_ADDRESS}


def test_normalize_corrupt_registry(tmp_path):
    registry_filepath = tmp_path / "contract_addresses.json"
    registry_filepath.write_text("[1, 2]")

    result = CliRunner().invoke(normalize, ["--registry", str(registry_filepath)])

    assert result.exit_code != 0
    assert "is corrupt" in result.output
    assert registry_filepath.read_text() == "[1, 2]"


def test_list_contracts(tmp_path, profile_record):
    save_registry({"profile": profile_record}, tmp_path / "polytest.json")
    save_registry({"publisher": RegistryRecord(make_address(3))}, tmp_path / "ganache.json")

    result = CliRunner().invoke(list_contracts, ["--artifacts-dir", str(tmp_path)])
    assert result.exit_code == 0, result.output
    assert "Polytest Network" in result.output
    assert f"1. profile {PROFILE_ADDRESS} (network=polytest)" in result.output
    assert "Ganache Network" in result.output

    result = CliRunner().invoke(
        list_contracts, ["--artifacts-dir", str(tmp_path), "--network-id", "ganache"]
    )
    assert "Polytest" not in result.output
    assert f"1. publisher {make_address(3)}" in result.output


def test_negative_retries_rejected():
    @click.command()
    @retries_option
    def cli(retries):
        click.echo(f"retries={retries}")

    result = CliRunner().invoke(cli, ["--retries", "-1"])
    assert result.exit_code != 0
    assert "--retries" in result.output

    result = CliRunner().invoke(cli, ["--retries", "2"])
    assert result.exit_code == 0, result.output
    assert "retries=2" in result.output


def test_deploy_reports_registry_write_failure(tmp_path, monkeypatch, capsys):
    registry_filepath = tmp_path / "polytest.json"

    def broken_replace(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("rentor_deployment.registry.os.replace", broken_replace)

    with pytest.raises(click.ClickException) as error:
        _deploy(
            role="publisher",
            network_id=POLYTEST,
            chain_deployer=RecordingChainDeployer(),
            registry_filepath=registry_filepath,
            roles_filepath=ROLES_FILEPATH,
            external_config=EXTERNAL_CONFIG_FILEPATH,
            autosign=True,
            retries=0,
            skip_if_deployed=False,
        )

    assert make_address(1) in error.value.message
    assert "record_address" in error.value.message
    output = capsys.readouterr().out
    assert "Deployment Failed" in output
    assert "Deployment Successful" not in output
    assert not registry_filepath.exists()


def test_deploy_success_banner(tmp_path, capsys):
    registry_filepath = tmp_path / "polytest.json"

    _deploy(
        role="profile",
        network_id=POLYTEST,
        chain_deployer=RecordingChainDeployer(addresses=[PROFILE_ADDRESS]),
        registry_filepath=registry_filepath,
        roles_filepath=ROLES_FILEPATH,
        external_config=EXTERNAL_CONFIG_FILEPATH,
        autosign=True,
        retries=0,
        skip_if_deployed=False,
    )

    assert "Deployment Successful" in capsys.readouterr().out
    assert load_registry(registry_filepath)["profile"].address == PROFILE_ADDRESS
