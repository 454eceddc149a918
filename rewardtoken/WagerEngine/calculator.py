from pydantic import BaseModel, Field

from rewardtoken.LedgerEngine.errors import InvalidAmount, InvalidRiskLevel

from . import config

class OddsQuote(BaseModel):
    risk_level: int = Field(..., ge=1, le=5, description="Loaded chambers out of 6")
    stake: int = Field(..., gt=0)
    loss_probability: float = Field(..., description="risk_level / 6")
    win_probability: float = Field(..., description="(6 - risk_level) / 6")
    reward: int = Field(..., description="Units paid from the pool on a win (stake is kept)")
    reward_multiplier: float = Field(..., description="Fair-odds profit multiple of the stake")
    expected_value: float = Field(..., description="Expected net units per round for the player")

def validate_risk_level(risk_level) -> int:
    if isinstance(risk_level, bool) or not isinstance(risk_level, int) or not (
        config.MIN_RISK_LEVEL <= risk_level <= config.MAX_RISK_LEVEL
    ):
        raise InvalidRiskLevel(
            f"Number of bullets must be between {config.MIN_RISK_LEVEL} and {config.MAX_RISK_LEVEL}. Got {risk_level!r}"
        )
    return risk_level

def loss_probability(risk_level: int) -> float:
    return validate_risk_level(risk_level) / config.CHAMBERS

def win_probability(risk_level: int) -> float:
    return 1.0 - loss_probability(risk_level)

def reward_multiplier(risk_level: int) -> float:
    """
    Fair-odds profit multiple.

    Formula: m = risk_level / (6 - risk_level)

    With this multiple a win pays exactly what the loss probability
    is worth: P(win) * m - P(loss) = 0.
    """
    risk_level = validate_risk_level(risk_level)
    return risk_level / (config.CHAMBERS - risk_level)

def calculate_reward(stake: int, risk_level: int) -> int:
    """
    Units drawn from the pool when the caller survives.
    Integer floor of stake * m, never less than 1 unit so every win pays.
    """
    risk_level = validate_risk_level(risk_level)
    if isinstance(stake, bool) or not isinstance(stake, int) or stake <= 0:
        raise InvalidAmount(f"Amount must be greater than 0. Got {stake!r}")
    return max(1, (stake * risk_level) // (config.CHAMBERS - risk_level))

def quote(stake: int, risk_level: int) -> OddsQuote:
    reward = calculate_reward(stake, risk_level)
    p_loss = loss_probability(risk_level)
    p_win = 1.0 - p_loss
    return OddsQuote(
        risk_level=risk_level,
        stake=stake,
        loss_probability=round(p_loss, 6),
        win_probability=round(p_win, 6),
        reward=reward,
        reward_multiplier=round(reward_multiplier(risk_level), 6),
        expected_value=round(p_win * reward - p_loss * stake, 6),
    )
