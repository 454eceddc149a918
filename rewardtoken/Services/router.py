"""
Token API. The caller is whatever the `X-Caller` header names; nothing here
authenticates it, so owner-only routes must sit behind an authenticating proxy.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import BaseModel, Field

from rewardtoken.LedgerEngine.errors import LedgerError
from rewardtoken.LedgerEngine.models import ClaimResult, EventType, LedgerEvent, LedgerState, WagerResult
from rewardtoken.WagerEngine.calculator import OddsQuote

from .token_service import TokenService, get_token_service

router = APIRouter(prefix="/token", tags=["Token"])

def get_service():
    return get_token_service()

def _reject(e: LedgerError):
    headers = None
    if getattr(e, "retry_after", 0):
        headers = {"Retry-After": str(e.retry_after)}
    return HTTPException(status_code=e.status_code, detail=e.to_dict(), headers=headers)

class RouletteRequest(BaseModel):
    stake: int
    risk_level: int = Field(..., description="Loaded chambers (1-5)")

class TransferRequest(BaseModel):
    to: str
    amount: int

class GrantRequest(BaseModel):
    target: str
    amount: int

class BurnRequest(BaseModel):
    amount: int

@router.get("/state", response_model=LedgerState)
def get_state(service: TokenService = Depends(get_service)):
    return service.get_state()

@router.get("/balance/{account}")
def get_balance(account: str, service: TokenService = Depends(get_service)):
    try:
        return {"account": account, "balance": service.get_token_balance(account)}
    except LedgerError as e:
        raise _reject(e)

@router.get("/available")
def get_available(service: TokenService = Depends(get_service)):
    return {"available": service.get_available_tokens()}

@router.get("/claim/{account}/cooldown")
def get_cooldown(account: str, service: TokenService = Depends(get_service)):
    try:
        return {"account": account, "seconds_remaining": service.get_time_until_next_claim(account)}
    except LedgerError as e:
        raise _reject(e)

@router.post("/claim", response_model=ClaimResult)
def claim(x_caller: str = Header(...), service: TokenService = Depends(get_service)):
    try:
        return service.claim_tokens(x_caller)
    except LedgerError as e:
        raise _reject(e)

@router.post("/roulette", response_model=WagerResult)
def play_roulette(req: RouletteRequest, x_caller: str = Header(...), service: TokenService = Depends(get_service)):
    try:
        return service.play_russian_roulette(x_caller, req.stake, req.risk_level)
    except LedgerError as e:
        raise _reject(e)

@router.get("/roulette/quote", response_model=OddsQuote)
def roulette_quote(stake: int, risk_level: int, service: TokenService = Depends(get_service)):
    try:
        return service.quote_roulette(stake, risk_level)
    except LedgerError as e:
        raise _reject(e)

@router.post("/transfer")
def transfer(req: TransferRequest, x_caller: str = Header(...), service: TokenService = Depends(get_service)):
    try:
        balance = service.transfer_tokens(x_caller, req.to, req.amount)
        return {"status": "success", "balance": balance}
    except LedgerError as e:
        raise _reject(e)

# Owner-only (X-Caller is not authenticated here)
@router.post("/admin/grant")
def grant(req: GrantRequest, x_caller: str = Header(...), service: TokenService = Depends(get_service)):
    try:
        balance = service.add_tokens_to_address(x_caller, req.target, req.amount)
        return {"status": "success", "target": req.target, "balance": balance}
    except LedgerError as e:
        raise _reject(e)

@router.post("/admin/burn", response_model=LedgerState)
def burn(req: BurnRequest, x_caller: str = Header(...), service: TokenService = Depends(get_service)):
    try:
        return service.burn_tokens(x_caller, req.amount)
    except LedgerError as e:
        raise _reject(e)

@router.get("/events", response_model=List[LedgerEvent])
def get_events(
    account: Optional[str] = None,
    event_type: Optional[EventType] = None,
    limit: int = Query(50, ge=1, le=1000),
    service: TokenService = Depends(get_service),
):
    try:
        return service.events(account=account, event_type=event_type, limit=limit)
    except LedgerError as e:
        raise _reject(e)
