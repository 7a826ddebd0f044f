"""Pydantic models for the pool API."""

from cpamm.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    ErrorResponse,
    EventModel,
    PoolResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapRequest,
    SwapResponse,
)
from cpamm.models.types import Address, Uint256

__all__ = [
    # Types
    "Address",
    "Uint256",
    # Requests / responses
    "SwapRequest",
    "SwapResponse",
    "AddLiquidityRequest",
    "AddLiquidityResponse",
    "RemoveLiquidityRequest",
    "RemoveLiquidityResponse",
    "PoolResponse",
    "EventModel",
    "ErrorResponse",
]
