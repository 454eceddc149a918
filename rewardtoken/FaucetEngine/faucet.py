import logging
from typing import Optional

from rewardtoken.LedgerEngine.errors import CooldownActive
from rewardtoken.LedgerEngine.ledger import Ledger, normalize_account, require_amount
from rewardtoken.LedgerEngine.models import ClaimResult, EventType

from . import config

logger = logging.getLogger("Faucet")

CLAIMS_SCHEMA = """
    CREATE TABLE IF NOT EXISTS claims (
        account TEXT PRIMARY KEY,
        last_claim INTEGER NOT NULL
    )
"""

class Faucet:
    """
    Rate-limited token faucet.
    Grants a fixed amount from the pool once per cooldown window per account.
    """

    def __init__(
        self,
        ledger: Ledger,
        claim_amount: int = config.CLAIM_AMOUNT,
        cooldown_seconds: int = config.COOLDOWN_SECONDS,
    ):
        if cooldown_seconds < 0:
            raise ValueError(f"Cooldown must be non-negative. Got {cooldown_seconds}")

        self.ledger = ledger
        self.claim_amount = require_amount(claim_amount)
        self.cooldown_seconds = cooldown_seconds

        with self.ledger.atomic() as con:
            con.execute(CLAIMS_SCHEMA)

    def last_claim(self, account: str) -> Optional[int]:
        """Timestamp of the last successful claim, None if never claimed."""
        account = normalize_account(account)
        with self.ledger._lock:
            row = self.ledger._con.execute("SELECT last_claim FROM claims WHERE account = ?", (account,)).fetchone()
            return row["last_claim"] if row else None

    def _remaining(self, last: Optional[int], now: int) -> int:
        if last is None:
            return 0
        return max(0, self.cooldown_seconds - (now - last))

    def _cooldown_text(self) -> str:
        minutes, seconds = divmod(self.cooldown_seconds, 60)
        if seconds or not minutes:
            return f"{self.cooldown_seconds} seconds"
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"

    def time_until_next_claim(self, account: str) -> int:
        return self._remaining(self.last_claim(account), self.ledger.now())

    def claim(self, account: str) -> ClaimResult:
        """
        Move CLAIM_AMOUNT from the pool to `account`.

        The cooldown timestamp is written in the same transaction as the pool
        transfer, so a failed transfer (PoolExhausted) leaves it untouched.
        """
        account = normalize_account(account)
        with self.ledger.atomic() as con:
            now = self.ledger.now()
            row = con.execute("SELECT last_claim FROM claims WHERE account = ?", (account,)).fetchone()
            last = row["last_claim"] if row else None

            remaining = self._remaining(last, now)
            if remaining > 0:
                raise CooldownActive(
                    f"Must wait {self._cooldown_text()} between claims ({remaining}s remaining)",
                    retry_after=remaining,
                    account=account,
                )

            balance = self.ledger.move_from_pool(account, self.claim_amount, EventType.CLAIM)
            con.execute("""
                INSERT INTO claims (account, last_claim) VALUES (?, ?)
                ON CONFLICT(account) DO UPDATE SET last_claim = excluded.last_claim
            """, (account, now))

        logger.info(f"Claim: {account} +{self.claim_amount} (balance {balance})")
        return ClaimResult(
            account=account,
            amount=self.claim_amount,
            claimed_at=now,
            next_claim_at=now + self.cooldown_seconds,
            balance_after=balance,
        )
