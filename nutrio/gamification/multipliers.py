"""
XP Multipliers

Multiplier sources:
- Premium: 1.5x
- Weekend: 2.0x
- First action of the day: 2.0x
- Streak: +10% per full week of streak, max 2.0x

At most one multiplier applies per grant. The caller picks which one;
nothing here stacks bonuses. Effective XP is floor(base * multiplier).
"""

from decimal import Decimal
from typing import Dict, Union
import logging
import math

from nutrio.exceptions import InvalidAmountError, ValidationError
from nutrio.models.progression import MultiplierKind, RewardContext

logger = logging.getLogger(__name__)

PREMIUM_MULTIPLIER = 1.5
WEEKEND_MULTIPLIER = 2.0
FIRST_ACTION_MULTIPLIER = 2.0
STREAK_STEP_DAYS = 7
STREAK_STEP_BONUS = 0.1
MAX_STREAK_MULTIPLIER = 2.0


def get_streak_multiplier(streak_days: int) -> float:
    """1 + 0.1 per completed week of streak, capped at 2.0"""
    if streak_days < 0:
        raise ValidationError(message="Streak days must be >= 0", field="streak_days", value=streak_days)
    multiplier = 1 + (streak_days // STREAK_STEP_DAYS) * STREAK_STEP_BONUS
    # Round away float noise (1 + 3 * 0.1 == 1.3000000000000003)
    return min(round(multiplier, 2), MAX_STREAK_MULTIPLIER)


def resolve_multiplier(
    context: RewardContext,
    kind: Union[MultiplierKind, str] = MultiplierKind.NONE
) -> float:
    """
    Effective multiplier for the single kind the caller requested

    Returns 1.0 when the requested kind's condition does not hold.
    """
    try:
        kind = MultiplierKind(kind)
    except ValueError:
        raise ValidationError(message=f"Unknown multiplier kind: {kind!r}", field="multiplier", value=kind)

    if kind == MultiplierKind.PREMIUM:
        return PREMIUM_MULTIPLIER if context.is_premium else 1.0
    if kind == MultiplierKind.WEEKEND:
        return WEEKEND_MULTIPLIER if context.is_weekend else 1.0
    if kind == MultiplierKind.FIRST_ACTION:
        return FIRST_ACTION_MULTIPLIER if context.is_first_action_today else 1.0
    if kind == MultiplierKind.STREAK:
        return get_streak_multiplier(context.streak_days)
    return 1.0


def available_multipliers(context: RewardContext) -> Dict[MultiplierKind, float]:
    """Every multiplier whose condition currently holds (factor > 1.0)"""
    available = {}
    for kind in MultiplierKind:
        factor = resolve_multiplier(context, kind)
        if factor > 1.0:
            available[kind] = factor
    return available


def apply_multiplier(base_amount: int, multiplier: float) -> int:
    """
    floor(base_amount * multiplier)

    Computed in Decimal so 100 * 1.15 floors to 115, not 114.
    """
    if not math.isfinite(multiplier) or multiplier < 1.0:
        raise ValidationError(message="Multiplier must be finite and >= 1.0", field="multiplier", value=multiplier)
    if isinstance(base_amount, bool) or not isinstance(base_amount, int) or base_amount < 0:
        raise InvalidAmountError(base_amount, field="base_amount")

    return math.floor(Decimal(base_amount) * Decimal(str(multiplier)))
