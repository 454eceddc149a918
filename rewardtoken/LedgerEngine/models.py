from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

class EventType(str, Enum):
    GENESIS = "GENESIS"
    CLAIM = "CLAIM"
    TRANSFER = "TRANSFER"
    GRANT = "GRANT"
    WAGER_WIN = "WAGER_WIN"
    WAGER_LOSS = "WAGER_LOSS"
    BURN = "BURN"

class LedgerState(BaseModel):
    """Snapshot of the ledger counters."""
    address: str
    owner: str
    name: str
    symbol: str
    total_supply: int
    available_pool: int
    ledger_balance: int = Field(..., description="Balance entry of the ledger's own account")
    created_at: int

    model_config = ConfigDict(from_attributes=True)

    @property
    def pool_drift(self) -> int:
        return self.ledger_balance - self.available_pool

class LedgerEvent(BaseModel):
    """Record of a token movement."""
    id: int
    timestamp: int
    event_type: EventType
    sender: str
    recipient: str
    amount: int
    details: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class ClaimResult(BaseModel):
    account: str
    amount: int
    claimed_at: int
    next_claim_at: int
    balance_after: int

class WagerResult(BaseModel):
    account: str
    stake: int
    risk_level: int = Field(..., ge=1, le=5)
    roll: int = Field(..., description="Outcome slot in [0, 5]; below risk_level loses")
    won: bool
    reward: int = Field(default=0, description="Units drawn from the pool on a win")
    balance_after: int
    pool_after: int

    @property
    def net_change(self) -> int:
        return self.reward if self.won else -self.stake
