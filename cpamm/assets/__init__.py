"""Asset collaborators and the transfer-and-verify adapter."""

from cpamm.assets.adapter import AssetAdapter
from cpamm.assets.base import AssetToken, ClaimLedgerLike
from cpamm.assets.token import InMemoryAsset

__all__ = ["AssetAdapter", "AssetToken", "ClaimLedgerLike", "InMemoryAsset"]
