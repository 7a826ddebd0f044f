"""API endpoints for the pool service."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, Query

from cpamm.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    AssetAmountRequest,
    BalanceResponse,
    ClaimsResponse,
    EventModel,
    PoolResponse,
    QuoteResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapRequest,
    SwapResponse,
)
from cpamm.models.types import ADDRESS_PATTERN, normalize_address
from cpamm.service import FaucetDisabled, PoolService, get_default_service

logger = structlog.get_logger()

router = APIRouter()


def get_service() -> PoolService:
    """Dependency provider for the pool service.

    Override this in tests to inject a fresh service:
        app.dependency_overrides[get_service] = lambda: service

    Returns:
        The service whose pool the endpoints operate on.
    """
    return get_default_service()


@router.get("/pool", response_model=PoolResponse)
def get_pool(service: PoolService = Depends(get_service)) -> PoolResponse:
    """Assets, reserves and claims of the pool."""
    return PoolResponse(**service.snapshot())


@router.get("/pool/claims/{holder}", response_model=ClaimsResponse)
def get_claims(
    holder: str = Path(pattern=ADDRESS_PATTERN),
    service: PoolService = Depends(get_service),
) -> ClaimsResponse:
    holder = normalize_address(holder)
    return ClaimsResponse(holder=holder, claims=service.claims_of(holder))


@router.get("/quote/swap", response_model=QuoteResponse)
def quote_swap(
    asset_in: str = Query(alias="assetIn", pattern=ADDRESS_PATTERN),
    asset_out: str = Query(alias="assetOut", pattern=ADDRESS_PATTERN),
    amount_in: int = Query(alias="amountIn", ge=0),
    service: PoolService = Depends(get_service),
) -> QuoteResponse:
    """Output a swap would yield at the current reserves.

    Read-only: nothing moves and no event is emitted. Zero when the pool
    cannot produce any output for ``amountIn``.
    """
    amount_out = service.quote_swap(asset_in, asset_out, amount_in)
    return QuoteResponse(asset_in=asset_in, asset_out=asset_out, amount_in=amount_in, amount_out=amount_out)


@router.post("/swap", response_model=SwapResponse)
def swap(request: SwapRequest, service: PoolService = Depends(get_service)) -> SwapResponse:
    """Exact-input swap.

    The caller must have approved the pool for ``amountIn`` of ``assetIn``.

    Error Handling:
        - Invalid request schema: 422 (Pydantic)
        - Pool precondition failed: 400 with the error code
    """
    logger.info(
        "received_swap",
        caller=request.caller,
        asset_in=request.asset_in,
        asset_out=request.asset_out,
        amount_in=request.amount_in,
    )
    amount_out = service.swap(request.caller, request.asset_in, request.asset_out, request.amount_in)
    return SwapResponse(amount_out=amount_out)


@router.post("/liquidity/add", response_model=AddLiquidityResponse)
def add_liquidity(request: AddLiquidityRequest, service: PoolService = Depends(get_service)) -> AddLiquidityResponse:
    logger.info("received_add_liquidity", caller=request.caller, amount_a=request.amount_a, amount_b=request.amount_b)
    amount_a, amount_b, claims = service.add_liquidity(request.caller, request.amount_a, request.amount_b)
    return AddLiquidityResponse(amount_a=amount_a, amount_b=amount_b, claims_issued=claims)


@router.post("/liquidity/remove", response_model=RemoveLiquidityResponse)
def remove_liquidity(
    request: RemoveLiquidityRequest, service: PoolService = Depends(get_service)
) -> RemoveLiquidityResponse:
    logger.info("received_remove_liquidity", caller=request.caller, claims=request.claims)
    amount_a, amount_b = service.remove_liquidity(request.caller, request.claims)
    return RemoveLiquidityResponse(amount_a=amount_a, amount_b=amount_b)


@router.post("/assets/{asset}/approve", status_code=204)
def approve(
    request: AssetAmountRequest,
    asset: str = Path(pattern=ADDRESS_PATTERN),
    service: PoolService = Depends(get_service),
) -> None:
    """Let the pool pull up to ``amount`` of ``asset`` from ``holder``."""
    service.approve(request.holder, asset, request.amount)


@router.post("/assets/{asset}/mint", response_model=BalanceResponse)
def mint(
    request: AssetAmountRequest,
    asset: str = Path(pattern=ADDRESS_PATTERN),
    service: PoolService = Depends(get_service),
) -> BalanceResponse:
    """Faucet for local deployments; 403 unless CPAMM_FAUCET_ENABLED is set."""
    try:
        service.mint(request.holder, asset, request.amount)
    except FaucetDisabled as err:
        raise HTTPException(status_code=403, detail=str(err)) from err
    return BalanceResponse(asset=asset, holder=request.holder, balance=service.balance_of(request.holder, asset))


@router.get("/assets/{asset}/balance/{holder}", response_model=BalanceResponse)
def get_balance(
    asset: str = Path(pattern=ADDRESS_PATTERN),
    holder: str = Path(pattern=ADDRESS_PATTERN),
    service: PoolService = Depends(get_service),
) -> BalanceResponse:
    return BalanceResponse(asset=asset, holder=holder, balance=service.balance_of(holder, asset))


@router.get("/events", response_model=list[EventModel])
def get_events(
    since: int = Query(default=0, ge=0),
    service: PoolService = Depends(get_service),
) -> list[EventModel]:
    """Events emitted by the pool, oldest first, starting at ``since``."""
    events = service.events_since(since)
    return [EventModel.from_event(since + i, event) for i, event in enumerate(events)]
