import logging
import threading
from typing import List, Optional

from rewardtoken.AdminEngine.admin import AdminSurface
from rewardtoken.FaucetEngine import config as faucet_config
from rewardtoken.FaucetEngine.faucet import Faucet
from rewardtoken.LedgerEngine.ledger import Ledger
from rewardtoken.LedgerEngine.models import ClaimResult, EventType, LedgerEvent, LedgerState, WagerResult
from rewardtoken.WagerEngine.calculator import OddsQuote, quote
from rewardtoken.WagerEngine.engine import EntropySource, WagerEngine

from .audit_logger import AuditLogger

logger = logging.getLogger("TokenService")

class TokenService:
    """
    Public operation surface of the RewardToken ledger.

    Faucet, Wager Engine and Admin Surface share one Ledger and never call
    each other. The caller identity is explicit on every state-changing call.
    """

    def __init__(
        self,
        ledger: Optional[Ledger] = None,
        entropy: Optional[EntropySource] = None,
        claim_amount: int = faucet_config.CLAIM_AMOUNT,
        cooldown_seconds: int = faucet_config.COOLDOWN_SECONDS,
    ):
        self.ledger = ledger or Ledger()
        self.faucet = Faucet(self.ledger, claim_amount=claim_amount, cooldown_seconds=cooldown_seconds)
        self.wager_engine = WagerEngine(self.ledger, entropy=entropy)
        self.admin = AdminSurface(self.ledger)
        self.audit = AuditLogger(self.ledger)
        logger.info(f"TokenService initialized for ledger {self.ledger.address}")

    # Metadata
    @property
    def name(self) -> str:
        return self.ledger.name

    @property
    def symbol(self) -> str:
        return self.ledger.symbol

    @property
    def owner(self) -> str:
        return self.ledger.owner

    @property
    def address(self) -> str:
        return self.ledger.address

    # State-changing operations
    def claim_tokens(self, caller: str) -> ClaimResult:
        return self.faucet.claim(caller)

    def play_russian_roulette(self, caller: str, stake: int, risk_level: int) -> WagerResult:
        return self.wager_engine.play(caller, stake, risk_level)

    def transfer_tokens(self, caller: str, to: str, amount: int) -> int:
        return self.ledger.transfer(caller, to, amount)

    def add_tokens_to_address(self, caller: str, target: str, amount: int) -> int:
        return self.admin.grant(caller, target, amount)

    def burn_tokens(self, caller: str, amount: int) -> LedgerState:
        return self.admin.burn_tokens(caller, amount)

    # Reads
    def get_token_balance(self, account: str) -> int:
        return self.ledger.balance_of(account)

    def balance_of(self, account: str) -> int:
        return self.ledger.balance_of(account)

    def get_available_tokens(self) -> int:
        return self.ledger.available_pool()

    def get_time_until_next_claim(self, account: str) -> int:
        return self.faucet.time_until_next_claim(account)

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def get_state(self) -> LedgerState:
        return self.ledger.get_state()

    def check_invariants(self) -> LedgerState:
        return self.ledger.check_invariants()

    def quote_roulette(self, stake: int, risk_level: int) -> OddsQuote:
        return quote(stake, risk_level)

    def events(self, account: Optional[str] = None, event_type: Optional[EventType] = None, limit: Optional[int] = 50) -> List[LedgerEvent]:
        return self.audit.history(account=account, event_type=event_type, limit=limit)

# Global Accessor
_service: Optional[TokenService] = None
_service_lock = threading.Lock()

def get_token_service() -> TokenService:
    global _service
    with _service_lock:
        if _service is None:
            _service = TokenService()
        return _service
