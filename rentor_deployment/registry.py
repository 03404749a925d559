import json
import os
import tempfile
from pathlib import Path
from typing import Dict, NamedTuple, Optional

from eth_typing import ChecksumAddress
from eth_utils import is_address, to_checksum_address

from rentor_deployment.constants import ARTIFACTS_DIR, STANDARD_REGISTRY_JSON_FORMAT
from rentor_deployment.errors import CorruptRegistry

RoleName = str

RECORD_FIELDS = ("address", "network", "deployed_at", "tx_hash", "mode")


class RegistryRecord(NamedTuple):
    """Where a single role is deployed."""

    address: ChecksumAddress
    network: Optional[str] = None
    deployed_at: Optional[str] = None
    tx_hash: Optional[str] = None
    mode: Optional[str] = None

    def is_minimal(self) -> bool:
        """True for records that only know their address (legacy registries)."""
        return all(getattr(self, field) is None for field in RECORD_FIELDS[1:])


Registry = Dict[RoleName, RegistryRecord]


def registry_filepath_from_network(network: str) -> Path:
    return ARTIFACTS_DIR / f"{network}.json"


def _record_from_json(filepath: Path, role: RoleName, value) -> RegistryRecord:
    if isinstance(value, str):
        # minimal form: role -> address
        value = {"address": value}
    if not isinstance(value, dict):
        raise CorruptRegistry(filepath, f"entry for '{role}' is not an address or a record")

    unexpected = set(value) - set(RECORD_FIELDS)
    if unexpected:
        raise CorruptRegistry(
            filepath, f"entry for '{role}' has unexpected fields {sorted(unexpected)}"
        )

    address = value.get("address")
    if not isinstance(address, str) or not is_address(address):
        raise CorruptRegistry(filepath, f"entry for '{role}' has invalid address {address!r}")

    return RegistryRecord(
        address=to_checksum_address(address),
        network=value.get("network"),
        deployed_at=value.get("deployed_at"),
        tx_hash=value.get("tx_hash"),
        mode=value.get("mode"),
    )


def _record_to_json(record: RegistryRecord):
    if record.is_minimal():
        return record.address
    return {field: value for field, value in record._asdict().items() if value is not None}


def load_registry(filepath: Path) -> Registry:
    """
    Reads the persisted registry. A missing file is an empty registry;
    anything that is not a role -> address/record mapping raises CorruptRegistry.
    """
    if not filepath.exists():
        return dict()

    try:
        with open(filepath, "r", encoding="utf-8") as file:
            data = json.load(file)
    except UnicodeDecodeError as e:
        raise CorruptRegistry(filepath, f"not UTF-8 text ({e})") from e
    except json.JSONDecodeError as e:
        raise CorruptRegistry(filepath, f"invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise CorruptRegistry(filepath, f"expected a JSON object, got {type(data).__name__}")

    registry = dict()
    for role, value in data.items():
        registry[role] = _record_from_json(filepath, role, value)
    return registry


def merge_registry(existing: Registry, role: RoleName, record: RegistryRecord) -> Registry:
    """Returns a copy of `existing` with `role` set to `record`."""
    merged = dict(existing)
    merged[role] = record._replace(address=to_checksum_address(record.address))
    return merged


def dump_registry(registry: Registry) -> str:
    data = {role: _record_to_json(record) for role, record in registry.items()}
    return json.dumps(data, **STANDARD_REGISTRY_JSON_FORMAT) + "\n"


def save_registry(registry: Registry, filepath: Path) -> Path:
    """
    Persists the registry atomically: the content is written to a temporary
    file next to `filepath` and then moved over it.
    """
    content = dump_registry(registry)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    fd, temp_filepath = tempfile.mkstemp(
        dir=filepath.parent, prefix=f".{filepath.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as file:
            file.write(content)
            file.flush()
            os.fsync(file.fileno())
        os.replace(temp_filepath, filepath)
    except BaseException:
        Path(temp_filepath).unlink(missing_ok=True)
        raise

    return filepath


def normalize_registry(filepath: Path) -> Path:
    """Rewrites a registry file in canonical form."""
    try:
        registry = load_registry(filepath=filepath)
    except CorruptRegistry:
        print(f"Error when reading registry at {filepath}.")
        raise

    save_registry(registry, filepath)
    print(f"Successfully normalized registry at {filepath}.")
    return filepath
