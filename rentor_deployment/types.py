import click
from eth_utils import is_same_address, to_checksum_address

from rentor_deployment.constants import ZERO_ADDRESS


class ContractAddress(click.ParamType):
    """A checksummed, non-zero contract address."""

    name = "contract_address"

    def convert(self, value, param, ctx):
        try:
            address = to_checksum_address(value)
        except ValueError:
            self.fail(f"'{value}' is not a contract address", param, ctx)
        if is_same_address(address, ZERO_ADDRESS):
            self.fail("the zero address cannot be recorded for a role", param, ctx)
        return address
