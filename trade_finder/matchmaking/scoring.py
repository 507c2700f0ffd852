from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..models import PricedAsset, clamp, round_half_up
from .types import GoalConfig, ManagerProfile, ManagerTendencyProfile, MatchmakingConfig

# (score 0..100, human-readable reasons)
SubScore = Tuple[int, List[str]]

NEUTRAL_BIAS_REASON = "Limited trade history, using neutral bias"
NO_OVERPAY_DATA_REASON = "No overpay data available"


def _fmt_value(v: float) -> str:
    return f"{int(round_half_up(v)):,}"


def _has_history(tendency: Optional[ManagerTendencyProfile], cfg: MatchmakingConfig) -> bool:
    return tendency is not None and int(tendency.sample_size) >= int(cfg.min_tendency_sample)


# =============================================================================
# Sub-scores
# =============================================================================


def score_need_overlap(user: ManagerProfile, partner: ManagerProfile) -> SubScore:
    reasons: List[str] = []
    s = 0
    they_need = [p for p in user.surplus if p in partner.needs]
    if they_need:
        s += 30 * len(they_need)
        reasons.append(f"Needs {'/'.join(they_need)} (your surplus)")
    we_need = [p for p in user.needs if p in partner.surplus]
    if we_need:
        s += 20 * len(we_need)
        reasons.append(f"Has surplus {'/'.join(we_need)} (your need)")
    return int(clamp(s, 0, 100)), reasons


def score_target_availability(
    partner_id: str,
    partner_assets: Sequence[PricedAsset],
    goal: GoalConfig,
    cfg: MatchmakingConfig,
    target: Optional[PricedAsset] = None,
    target_owner_id: Optional[str] = None,
) -> SubScore:
    if target is not None and target_owner_id == partner_id:
        return 100, [f"Owns {target.name} ({_fmt_value(target.value)} value)"]

    reasons: List[str] = []
    s = 0
    if goal.pick_focus:
        picks = [a for a in partner_assets if a.is_pick and a.value >= goal.min_value]
        if picks:
            s += min(20 * len(picks), 80)
            reasons.append(f"Has {len(picks)} draft pick{'s' if len(picks) > 1 else ''}")

    for pos in goal.target_positions:
        at_pos = [a for a in partner_assets if not a.is_pick and a.position == pos and a.value >= goal.min_value]
        if not at_pos:
            continue
        top = max(float(a.value) for a in at_pos)
        s += min(15 * len(at_pos), 60)
        if top >= cfg.star_value:
            s += 20
        reasons.append(f"Has {len(at_pos)} {pos}{'s' if len(at_pos) > 1 else ''} (top: {_fmt_value(top)})")

    return int(clamp(s, 0, 100)), reasons


def score_bias_alignment(
    tendency: Optional[ManagerTendencyProfile],
    user_surplus: Sequence[str],
    goal: GoalConfig,
    cfg: MatchmakingConfig,
    target: Optional[PricedAsset] = None,
) -> SubScore:
    if tendency is None or not _has_history(tendency, cfg):
        return 50, [NEUTRAL_BIAS_REASON]

    reasons: List[str] = []
    s = 50.0
    offer_positions = list(user_surplus) if user_surplus else list(goal.target_positions)
    for pos in offer_positions:
        bias = tendency.bias(pos)
        if bias > 0.2:
            s += bias * 30
            reasons.append(f"Historically overpays for {pos}")
        elif bias < -0.2:
            s -= abs(bias) * 15

    if target is not None and not target.is_pick:
        target_bias = tendency.bias(target.position)
        if target_bias < -0.15:
            s += abs(target_bias) * 20
            reasons.append(f"Undervalues {target.position} (more willing to trade)")

    pick_bias = tendency.bias("PICK")
    if goal.pick_focus and pick_bias < -0.15:
        s += abs(pick_bias) * 25
        reasons.append("Willing to trade away picks")

    if tendency.consolidation_bias > 0.4 and len(user_surplus) >= 2:
        s += 10
        reasons.append("Prefers consolidation (your depth for their star)")

    return round_half_up(clamp(s, 0, 100)), reasons


def score_trade_frequency(
    partner: ManagerProfile,
    tendency: Optional[ManagerTendencyProfile],
    cfg: MatchmakingConfig,
) -> SubScore:
    aggression = str(partner.trade_aggression).lower()
    if aggression == "high":
        s, reasons = 90, ["Very active trader"]
    elif aggression == "medium":
        s, reasons = 60, ["Moderately active trader"]
    else:
        s, reasons = 20, ["Rarely trades"]

    if tendency is not None:
        if tendency.sample_size >= int(cfg.rich_tendency_sample):
            s += 10
        elif tendency.sample_size <= int(cfg.thin_tendency_sample):
            s -= 15
    return int(clamp(s, 0, 100)), reasons


def score_overpay_willingness(
    tendency: Optional[ManagerTendencyProfile],
    cfg: MatchmakingConfig,
) -> SubScore:
    if tendency is None or not _has_history(tendency, cfg):
        return 50, [NO_OVERPAY_DATA_REASON]

    reasons: List[str] = []
    s = 50
    if tendency.overpay_threshold < -0.3:
        s += 30
        reasons.append("Has accepted unfavorable trades before")
    elif tendency.overpay_threshold < -0.15:
        s += 15
        reasons.append("Somewhat willing to overpay")

    if tendency.fairness_tolerance > 0.4:
        s += 20
        reasons.append("Accepts lopsided trades more readily")
    elif tendency.fairness_tolerance < 0.15:
        s -= 10
        reasons.append("Insists on even deals")

    if tendency.starter_premium > 0.3:
        s += 10
        reasons.append("Pays a premium for starters")
    return int(clamp(s, 0, 100)), reasons


# =============================================================================
# Insights / acceptance
# =============================================================================


def build_tendency_insights(
    tendency: Optional[ManagerTendencyProfile],
    cfg: Optional[MatchmakingConfig] = None,
) -> List[str]:
    cfg = cfg or MatchmakingConfig()
    if tendency is None or not _has_history(tendency, cfg):
        return ["Limited trade history"]

    insights: List[str] = []
    if tendency.starter_premium > 0.3:
        insights.append("Pays a premium for starters")
    elif tendency.starter_premium < -0.3:
        insights.append("Gets starters below market")

    strong = [(pos, float(b)) for pos, b in tendency.position_bias.items() if abs(float(b)) > 0.2]
    strong = sorted(strong, key=lambda kv: -abs(kv[1]))[:2]
    for pos, b in strong:
        insights.append(f"{'Overpays' if b > 0 else 'Underpays'} for {pos}")

    if tendency.consolidation_bias > 0.5:
        insights.append("Prefers fewer, better pieces")

    if tendency.risk_tolerance > 0.3:
        insights.append("Risk-tolerant, buys upside")
    elif tendency.risk_tolerance < -0.3:
        insights.append("Risk-averse, wants proven players")

    if tendency.fairness_tolerance > 0.4:
        insights.append("Accepts uneven trades")

    return insights or [f"{tendency.sample_size} trades analyzed"]


def estimate_accept_probability(
    match_score: int,
    fairness_pct: int,
    cfg: Optional[MatchmakingConfig] = None,
) -> Tuple[float, str]:
    cfg = cfg or MatchmakingConfig()
    base = float(match_score) / 100.0
    gap = abs(int(fairness_pct))
    if gap <= 5:
        base += 0.10
    elif gap <= 10:
        base += 0.05
    elif gap <= 20:
        base -= 0.05
    else:
        base -= 0.15

    prob = clamp(round_half_up(base * 100) / 100.0, cfg.accept_min, cfg.accept_max)
    if prob >= 0.60:
        return prob, "Strong"
    if prob >= 0.40:
        return prob, "Moderate"
    if prob >= 0.20:
        return prob, "Low"
    return prob, "Long Shot"
