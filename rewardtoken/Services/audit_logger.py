"""
Audit Logger Service
====================
Read side of the append-only event log written by the Ledger.
Every movement (genesis, claim, transfer, grant, wager, burn) is one row.
"""
from typing import List, Optional

from rewardtoken.LedgerEngine.ledger import Ledger
from rewardtoken.LedgerEngine.models import EventType, LedgerEvent

class AuditLogger:
    """Queries over the ledger's event history."""

    def __init__(self, ledger: Ledger):
        self.ledger = ledger

    def history(self, account: Optional[str] = None, event_type: Optional[EventType] = None, limit: Optional[int] = 50) -> List[LedgerEvent]:
        return self.ledger.events(account=account, event_type=event_type, limit=limit)

    def burned_total(self) -> int:
        return sum(e.amount for e in self.ledger.events(event_type=EventType.BURN))

    def wager_summary(self, account: Optional[str] = None) -> dict:
        """
        Wager flows from the pool's perspective.

        net_pool_change = stakes_returned - payouts_drawn, so for any window
        pool_before - pool_after == payouts_drawn - stakes_returned when only
        wagers ran.
        """
        wins = self.ledger.events(account=account, event_type=EventType.WAGER_WIN)
        losses = self.ledger.events(account=account, event_type=EventType.WAGER_LOSS)

        payouts_drawn = sum(e.amount for e in wins)
        stakes_returned = sum(e.amount for e in losses)

        return {
            "wins": len(wins),
            "losses": len(losses),
            "payouts_drawn": payouts_drawn,
            "stakes_returned": stakes_returned,
            "net_pool_change": stakes_returned - payouts_drawn,
        }