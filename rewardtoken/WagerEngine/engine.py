import logging
from typing import Callable, Optional

from rewardtoken.LedgerEngine.errors import InsufficientBalance, InvariantViolation
from rewardtoken.LedgerEngine.ledger import Ledger, normalize_account, require_amount
from rewardtoken.LedgerEngine.models import EventType, WagerResult

from . import config
from .calculator import calculate_reward, validate_risk_level
from .entropy import environment_roll

logger = logging.getLogger("WagerEngine")

# (timestamp, ledger_address, account, nonce) -> slot in [0, CHAMBERS)
EntropySource = Callable[[int, str, str, int], int]

class WagerEngine:
    """
    Russian roulette resolver.
    Order: Risk Level -> Stake -> Balance -> Roll -> Settlement.
    Holds no state of its own; every movement goes through the Ledger.
    """

    def __init__(self, ledger: Ledger, entropy: Optional[EntropySource] = None):
        self.ledger = ledger
        self.entropy = entropy or environment_roll

    def _roll(self, account: str, nonce: int) -> int:
        roll = self.entropy(self.ledger.now(), self.ledger.address, account, nonce)
        if isinstance(roll, bool) or not isinstance(roll, int) or not (0 <= roll < config.CHAMBERS):
            raise InvariantViolation(f"Entropy source returned {roll!r}, expected slot in [0, {config.CHAMBERS})")
        return roll

    def play(self, account: str, stake: int, risk_level: int) -> WagerResult:
        """
        Stake `stake` units against `risk_level` loaded chambers.

        Loss (roll < risk_level): the stake returns to the pool.
        Win: the caller keeps the stake and is paid the reward from the pool;
        if the pool cannot cover it the whole wager is rejected (PoolExhausted)
        and nothing changes, nonce included.
        """
        account = normalize_account(account)
        risk_level = validate_risk_level(risk_level)
        stake = require_amount(stake)

        with self.ledger.atomic() as con:
            balance = self.ledger.balance_of(account)
            if balance < stake:
                raise InsufficientBalance(
                    f"Insufficient balance: {account} holds {balance}, stake {stake}",
                    account=account, balance=balance, required=stake,
                )

            nonce = self.ledger.next_nonce()
            roll = self._roll(account, nonce)
            details = f"stake={stake} risk={risk_level} roll={roll} nonce={nonce}"

            if roll < risk_level:
                won = False
                reward = 0
                balance = self.ledger.return_to_pool(account, stake, EventType.WAGER_LOSS, details)
            else:
                won = True
                reward = calculate_reward(stake, risk_level)
                balance = self.ledger.move_from_pool(account, reward, EventType.WAGER_WIN, details)

            pool = self.ledger.available_pool()

        outcome = f"WIN +{reward}" if won else f"LOSS -{stake}"
        logger.info(f"Roulette {account}: risk {risk_level}, roll {roll} -> {outcome} (balance {balance}, pool {pool})")
        return WagerResult(
            account=account,
            stake=stake,
            risk_level=risk_level,
            roll=roll,
            won=won,
            reward=reward,
            balance_after=balance,
            pool_after=pool,
        )
