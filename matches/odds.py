# matches/odds.py
"""
Odds normalizer: raw `market -> selection -> odd` maps from the bookmaker
feed become the ten fixed keys the match board renders.
"""
from __future__ import annotations

import math
from typing import Any, Mapping

CANONICAL_KEYS = ("1", "X", "2", "1X", "X2", "12", "GG", "NG", "O", "U")

# (market, selection) -> canonical key; synonyms map to the same key
ODDS_MAP: dict[str, dict[str, str]] = {
    "Match Winner": {
        "Home": "1",
        "Draw": "X",
        "Away": "2",
    },
    "Double Chance": {
        "Home/Draw": "1X",
        "Draw/Away": "X2",
        "Home/Away": "12",
        "Home or Draw": "1X",
        "Draw or Away": "X2",
        "Home or Away": "12",
    },
    "Goals Over/Under": {
        "Over 2.5": "O",
        "Under 2.5": "U",
    },
    "Over/Under": {
        "Over 2.5": "O",
        "Under 2.5": "U",
    },
    "Over/Under 2.5": {
        "Over 2.5": "O",
        "Under 2.5": "U",
    },
    "Both Teams Score": {
        "Yes": "GG",
        "No": "NG",
    },
}


def _to_float(v: Any) -> float | None:
    if v is None or isinstance(v, bool):
        return None
    try:
        f = float(str(v).strip())
    except ValueError:
        return None
    return f if math.isfinite(f) else None


def empty_odds() -> dict[str, float | None]:
    return {k: None for k in CANONICAL_KEYS}


def normalize_odds(raw: Mapping[str, Mapping[str, Any]] | None) -> dict[str, float | None]:
    """
    Unknown pairs are ignored, unparseable odds are skipped, and the first
    usable value for a key wins. Never raises on missing data.
    """
    out = empty_odds()
    if not raw:
        return out

    for market, selections in ODDS_MAP.items():
        quotes = raw.get(market)
        if not quotes:
            continue
        for selection, key in selections.items():
            if out[key] is not None:
                continue
            value = _to_float(quotes.get(selection))
            if value is not None:
                out[key] = value
    return out
