"""
RewardToken - Faucet, Roulette and Supply Ledger
================================================
A self-contained token ledger that:
1. Grants a fixed amount per account per cooldown window (FaucetEngine)
2. Resolves Russian roulette wagers against the undistributed pool (WagerEngine)
3. Lets a single owner grant and burn supply (AdminEngine)
All three sit on one transactional Ledger (LedgerEngine).
"""

from .Services.token_service import TokenService, get_token_service

__all__ = [
    "TokenService",
    "get_token_service",
]

__version__ = "1.0.0"
