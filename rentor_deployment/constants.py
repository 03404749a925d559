from pathlib import Path

import rentor_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(rentor_deployment.__file__).parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"

ROLES_FILEPATH = CONSTRUCTOR_PARAMS_DIR / "roles.yml"
EXTERNAL_CONFIG_FILEPATH = CONSTRUCTOR_PARAMS_DIR / "external.json"

#
# Networks
#

LOCAL = "local"
GANACHE = "ganache"
POLYTEST = "polytest"

LOCAL_NETWORKS = [LOCAL, GANACHE]

NETWORK_IDENTIFIERS = {
    # ape "ecosystem:network" -> deployment network identifier
    "ethereum:local": LOCAL,
    "ethereum:ganache": GANACHE,
    "polygon:mumbai": POLYTEST,  # deprecated by polygon in favour of amoy
    "polygon:amoy": POLYTEST,
}

#
# Registry
#

STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": "), "sort_keys": True}

#
# Contracts
#

OZ_DEPENDENCY_NAME = "openzeppelin"
OZ_DEPENDENCY_VERSION = "5.0.0"
PROXY_CONTRACT_NAME = "TransparentUpgradeableProxy"

ZERO_ADDRESS = "0x" + "0" * 40

DEFAULT_INITIALIZER = "initialize"

#
# Console
#

LOGO = r"""
    ____             __
   / __ \___  ____  / /_____  _____
  / /_/ / _ \/ __ \/ __/ __ \/ ___/
 / _, _/  __/ / / / /_/ /_/ / /
/_/ |_|\___/_/ /_/\__/\____/_/
"""
