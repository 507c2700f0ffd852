from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models import _to_float, round_half_up

FAAB_BASE_STEPS = (3, 5, 8, 12)
MAX_SCARCITY_NOTES = 3


def build_faab_steps(faab_remaining: Optional[float]) -> List[int]:
    """Sweetener FAAB increments the user can actually afford."""
    if not faab_remaining or float(faab_remaining) <= 0:
        return []
    return [n for n in FAAB_BASE_STEPS if n <= float(faab_remaining)]


def build_scarcity_notes(scarcity: Optional[Mapping[str, Any]]) -> List[str]:
    """Short market notes, e.g. "RB scarce (+30%)".

    Values are multipliers around 1.0; values above 20 are treated as
    already-expressed percentages.
    """
    if not scarcity:
        return []
    notes: List[str] = []
    for pos, raw in scarcity.items():
        n = _to_float(raw, what="scarcity", fallback=0.0)
        if n > 20:
            pct = int(n) if float(n).is_integer() else n
            notes.append(f"{pos} scarce (+{pct}%)")
        elif n >= 1.25:
            notes.append(f"{pos} scarce (+{round_half_up((n - 1) * 100)}%)")
    return notes[:MAX_SCARCITY_NOTES]


def build_label_to_id_map(allowed: Iterable[Any]) -> Dict[str, str]:
    """label -> id for allow-list entries whose label differs from their id.

    Accepts AllowedAsset objects or {"id", "label"} dicts.
    """
    out: Dict[str, str] = {}
    for a in allowed:
        if isinstance(a, Mapping):
            asset_id, label = a.get("id"), a.get("label")
        else:
            asset_id, label = getattr(a, "asset_id", None), getattr(a, "label", None)
        if label and asset_id is not None and label != asset_id:
            out[str(label)] = str(asset_id)
    return out


def resolve_asset_id(raw: str, allowed_ids: Iterable[str], label_to_id: Mapping[str, str]) -> Optional[str]:
    """Map a free-form reference (id, exact label, or case-insensitive label) onto an allowed id."""
    ids = set(allowed_ids)
    if raw in ids:
        return raw
    mapped = label_to_id.get(raw)
    if mapped is not None and mapped in ids:
        return mapped
    lower = str(raw).lower()
    for label, asset_id in label_to_id.items():
        if label.lower() == lower and asset_id in ids:
            return asset_id
    return None
