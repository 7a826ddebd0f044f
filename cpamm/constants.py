"""Well-known addresses and defaults for the bundled pool service."""

from cpamm.models.types import is_valid_address


def _validate_asset_address(name: str, address: str) -> str:
    """Validate and return an asset address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Default pair served by the API (lowercase for consistency)
# Validated at import time to catch typos early
WETH = _validate_asset_address("WETH", "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2")
USDC = _validate_asset_address("USDC", "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48")

DEFAULT_SYMBOLS = {WETH: "WETH", USDC: "USDC"}
