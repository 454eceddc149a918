"""
Roulette Monte Carlo
====================
Simulates many rounds per risk level to check the payout table:
- Measured return-to-player vs the theoretical value
- Hit rate (share of surviving rounds)
Pure arithmetic over the calculator; no ledger involved.
"""
from typing import List

import numpy as np
from pydantic import BaseModel

from . import config
from .calculator import calculate_reward, loss_probability

class SimulationResult(BaseModel):
    risk_level: int
    rounds: int
    stake: int
    reward: int
    hit_rate: float
    rtp_measured: float
    rtp_theoretical: float
    house_edge_theoretical: float
    total_wagered: int
    total_returned: int

def simulate_risk_level(
    risk_level: int,
    rounds: int = config.SIM_ROUNDS,
    stake: int = config.SIM_STAKE,
    seed: int = config.SIM_SEED,
) -> SimulationResult:
    """Run `rounds` independent rounds at one risk level."""
    if rounds <= 0:
        raise ValueError(f"Rounds must be positive. Got {rounds}")

    reward = calculate_reward(stake, risk_level)
    rng = np.random.default_rng(seed)
    rolls = rng.integers(0, config.CHAMBERS, size=rounds)
    wins = int(np.count_nonzero(rolls >= risk_level))

    # A win returns stake + reward, a loss returns nothing
    total_wagered = stake * rounds
    total_returned = wins * (stake + reward)

    p_win = 1.0 - loss_probability(risk_level)
    rtp_theoretical = p_win * (stake + reward) / stake

    return SimulationResult(
        risk_level=risk_level,
        rounds=rounds,
        stake=stake,
        reward=reward,
        hit_rate=round(wins / rounds, 6),
        rtp_measured=round(total_returned / total_wagered, 6),
        rtp_theoretical=round(rtp_theoretical, 6),
        house_edge_theoretical=round(1.0 - rtp_theoretical, 6),
        total_wagered=total_wagered,
        total_returned=total_returned,
    )

def simulate_table(
    rounds: int = config.SIM_ROUNDS,
    stake: int = config.SIM_STAKE,
    seed: int = config.SIM_SEED,
) -> List[SimulationResult]:
    return [
        simulate_risk_level(level, rounds=rounds, stake=stake, seed=seed + level)
        for level in range(config.MIN_RISK_LEVEL, config.MAX_RISK_LEVEL + 1)
    ]
