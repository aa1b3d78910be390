"""Pure scoring functions: risk, activity level and portfolio health."""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

from ..models import (
    ActivityLevel,
    Allocation,
    PortfolioHealth,
    RiskLevel,
    TokenHolding,
)

MEME_WEIGHT = 80.0
MEME_CAP = 40.0
CONCENTRATION_WEIGHT = 30.0
CONCENTRATION_EPSILON = 0.01
VOLATILITY_THRESHOLD = 20.0
VOLATILITY_POINTS = 10.0

HIGH_RISK_SCORE = 60
MEDIUM_RISK_SCORE = 30

WHALE_VALUE_USD = 100_000


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def to_fixed(value: float, places: int) -> str:
    """Fixed-point string with exact halves rounded away from zero.

    The float is rounded by its exact binary value, so ``-1.25`` gives
    ``"-1.3"`` at one place while ``1.005`` gives ``"1.00"`` at two.
    """
    with localcontext() as ctx:
        # Wide enough for the integer digits of any finite float.
        ctx.prec = 400
        quantum = Decimal(1).scaleb(-places)
        return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def meme_component(allocation: Allocation) -> float:
    return min(allocation.meme * MEME_WEIGHT, MEME_CAP)


def concentration_component(tokens: list[TokenHolding]) -> float:
    """Largest token share of summed token value, scaled to 0-30."""
    if not tokens:
        return 0.0
    largest = max(t.value_usd for t in tokens)
    total = sum(t.value_usd for t in tokens) + CONCENTRATION_EPSILON
    return largest / total * CONCENTRATION_WEIGHT


def diversification_component(tokens: list[TokenHolding]) -> float:
    """+20 for one or two tokens, +10 for three to five; nothing without tokens."""
    if not tokens:
        return 0.0
    if len(tokens) <= 2:
        return 20.0
    if len(tokens) <= 5:
        return 10.0
    return 0.0


def volatility_component(tokens: list[TokenHolding]) -> float:
    """+10 when the mean absolute 24h change exceeds 20%."""
    avg_change = sum(abs(t.change_24h or 0.0) for t in tokens) / (len(tokens) or 1)
    return VOLATILITY_POINTS if avg_change > VOLATILITY_THRESHOLD else 0.0


def risk_level_for(score: int) -> RiskLevel:
    if score >= HIGH_RISK_SCORE:
        return "high"
    if score >= MEDIUM_RISK_SCORE:
        return "medium"
    return "low"


def calc_risk_score(
    tokens: list[TokenHolding], allocation: Allocation
) -> tuple[int, RiskLevel]:
    """Return ``(score, level)``; score is an integer clamped to [0, 100]."""
    raw = (
        meme_component(allocation)
        + concentration_component(tokens)
        + diversification_component(tokens)
        + volatility_component(tokens)
    )
    score = max(0, min(round_half_up(raw), 100))
    return score, risk_level_for(score)


def calc_activity_level(tx_count_30d: int, total_value_usd: float) -> ActivityLevel:
    """Whale status overrides transaction-count buckets."""
    if total_value_usd > WHALE_VALUE_USD:
        return "whale"
    if tx_count_30d == 0:
        return "inactive"
    if tx_count_30d < 5:
        return "low"
    if tx_count_30d < 20:
        return "moderate"
    return "high"


def calc_portfolio_health(
    allocation: Allocation, tokens: list[TokenHolding]
) -> PortfolioHealth:
    checks = (
        len(tokens) >= 5,
        allocation.meme < 0.2,
        allocation.blue_chip > 0.3,
        allocation.stx > 0.1,
    )
    passed = sum(checks)

    if passed >= 4:
        return "excellent"
    if passed == 3:
        return "good"
    if passed == 2:
        return "fair"
    return "poor"
