import logging

from rewardtoken.LedgerEngine import config as ledger_config
from rewardtoken.LedgerEngine.errors import InvalidRecipient, NotOwner
from rewardtoken.LedgerEngine.ledger import Ledger, normalize_account, require_amount
from rewardtoken.LedgerEngine.models import EventType, LedgerState

logger = logging.getLogger("AdminSurface")

def require_owner(ledger: Ledger, caller: str) -> str:
    """Single guard for every privileged call."""
    caller = normalize_account(caller)
    if caller != ledger.owner:
        logger.warning(f"Rejected privileged call from {caller}")
        raise NotOwner(f"OwnableUnauthorizedAccount({caller})", account=caller)
    return caller

class AdminSurface:
    """Owner-only supply control: direct grants and burns."""

    def __init__(self, ledger: Ledger):
        self.ledger = ledger

    def grant(self, caller: str, target: str, amount: int) -> int:
        """Move `amount` from the pool to `target`. Returns the target's new balance."""
        require_owner(self.ledger, caller)

        target = normalize_account(target)
        if target == ledger_config.NULL_ADDRESS:
            raise InvalidRecipient("Cannot add tokens to zero address", account=target)
        if target == self.ledger.address:
            raise InvalidRecipient("Cannot add tokens to contract address", account=target)
        amount = require_amount(amount)

        balance = self.ledger.move_from_pool(target, amount, EventType.GRANT, f"granted by {caller}")
        logger.info(f"Grant: {target} +{amount} (balance {balance})")
        return balance

    def burn_tokens(self, caller: str, amount: int) -> LedgerState:
        """Irreversibly destroy `amount` of the undistributed pool."""
        caller = require_owner(self.ledger, caller)
        return self.ledger.burn(amount, f"burned by {caller}")
