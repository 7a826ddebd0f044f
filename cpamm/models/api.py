"""Pydantic models for the pool HTTP API.

Field names are snake_case in Python and camelCase on the wire. Amounts
are Uint256 (decimal strings in JSON).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cpamm.events import PoolEvent
from cpamm.models.types import Address, Uint256


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class ApiModel(BaseModel):
    """Base model: camelCase aliases, populate by either name."""

    model_config = ConfigDict(alias_generator=_to_camel, populate_by_name=True)


class SwapRequest(ApiModel):
    """Exact-input swap."""

    caller: Address = Field(description="Party paying in and receiving out.")
    asset_in: Address
    asset_out: Address
    amount_in: Uint256


class SwapResponse(ApiModel):
    amount_out: Uint256


class QuoteResponse(ApiModel):
    asset_in: Address
    asset_out: Address
    amount_in: Uint256
    amount_out: Uint256


class AddLiquidityRequest(ApiModel):
    """Deposit up to the wanted amounts of both assets."""

    caller: Address
    amount_a: Uint256 = Field(description="Wanted amount of the pool's asset A.")
    amount_b: Uint256 = Field(description="Wanted amount of the pool's asset B.")


class AddLiquidityResponse(ApiModel):
    amount_a: Uint256
    amount_b: Uint256
    claims_issued: Uint256


class RemoveLiquidityRequest(ApiModel):
    caller: Address
    claims: Uint256


class RemoveLiquidityResponse(ApiModel):
    amount_a: Uint256
    amount_b: Uint256


class AssetAmountRequest(ApiModel):
    """Approval or faucet request for one holder."""

    holder: Address
    amount: Uint256


class BalanceResponse(ApiModel):
    asset: Address
    holder: Address
    balance: Uint256


class ClaimsResponse(ApiModel):
    holder: Address
    claims: Uint256


class PoolResponse(ApiModel):
    """Current pool view."""

    address: Address
    asset_a: Address
    asset_b: Address
    reserve_a: Uint256
    reserve_b: Uint256
    total_claims: Uint256


class EventModel(ApiModel):
    """An emitted event with its fields and ABI-encoded data."""

    index: int
    event: str
    signature: str
    fields: dict[str, Any]
    data: str

    @classmethod
    def from_event(cls, index: int, event: PoolEvent) -> "EventModel":
        fields = {k: (str(v) if isinstance(v, int) else v) for k, v in event.to_dict().items() if k != "event"}
        return cls(
            index=index,
            event=event.NAME,
            signature=event.signature,
            fields=fields,
            data=event.encode_data(),
        )


class ErrorResponse(ApiModel):
    error: str
    detail: str


__all__ = [
    "AddLiquidityRequest",
    "AddLiquidityResponse",
    "AssetAmountRequest",
    "BalanceResponse",
    "ClaimsResponse",
    "ErrorResponse",
    "EventModel",
    "PoolResponse",
    "QuoteResponse",
    "RemoveLiquidityRequest",
    "RemoveLiquidityResponse",
    "SwapRequest",
    "SwapResponse",
]
