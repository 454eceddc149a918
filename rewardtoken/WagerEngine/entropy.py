"""
Environment entropy for roulette outcomes.

The roll is a hash of values visible before execution (time, ledger address,
caller, nonce). Whoever controls call timing and ordering can predict it, so
this source is only suitable for non-adversarial play. Swap in another
callable with the same signature for verifiable randomness.
"""
import hashlib

from . import config


def environment_roll(timestamp: int, ledger_address: str, account: str, nonce: int, chambers: int = config.CHAMBERS) -> int:
    """Outcome slot in [0, chambers)."""
    combined = f"{timestamp}:{ledger_address}:{account}:{nonce}"
    digest = hashlib.sha256(combined.encode()).hexdigest()
    return int(digest, 16) % chambers
