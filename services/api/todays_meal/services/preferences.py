"""Per-user preference profile mined from chat text.

Signals are detected with keyword tables (see data/catalog.py) and stored
as counters keyed by (user, type, key). Repeat observations bump the
frequency and refresh last_used; rows are never deleted here.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.text import contains_any, dedupe
from ..data.catalog import CUISINE_RULES, PREFERENCE_RULES
from ..models import UserPreference, utcnow

logger = logging.getLogger("todays_meal.preferences")

_DISLIKE_PATTERN = re.compile(r"([^\s、。,，!！?？はが]+)(?:が|は)(?:苦手|嫌い|食べられない)")


@dataclass(frozen=True)
class PreferenceSignal:
    type: str
    key: str
    value: str


def extract_signals(text: str, ingredients: Iterable[str] = ()) -> list[PreferenceSignal]:
    """Detect preference signals in a user message.

    `ingredients` are the ingredients newly mentioned in this message; each
    becomes a favorite_ingredient signal.
    """
    signals = []

    for keywords, cuisine in CUISINE_RULES:
        if contains_any(text, keywords):
            signals.append(PreferenceSignal("cuisine_type", cuisine, cuisine))

    for ingredient in dedupe(ingredients):
        signals.append(PreferenceSignal("favorite_ingredient", ingredient, ingredient))

    for pref_type, key, value, keywords in PREFERENCE_RULES:
        if contains_any(text, keywords):
            signals.append(PreferenceSignal(pref_type, key, value))

    for disliked in dedupe(_DISLIKE_PATTERN.findall(text or "")):
        signals.append(PreferenceSignal("dislike_ingredient", disliked, disliked))

    return signals


def upsert_preference(db: Session, user_id: str, pref_type: str, key: str, value: str) -> UserPreference:
    """Insert a preference row, or bump frequency if (user, type, key) exists."""
    existing = db.scalar(
        select(UserPreference).where(
            UserPreference.user_id == user_id,
            UserPreference.preference_type == pref_type,
            UserPreference.preference_key == key,
        )
    )
    if existing:
        existing.frequency = UserPreference.frequency + 1
        existing.last_used = utcnow()
        db.commit()
        db.refresh(existing)
        return existing

    pref = UserPreference(
        user_id=user_id,
        preference_type=pref_type,
        preference_key=key,
        preference_value=value,
        frequency=1,
    )
    db.add(pref)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same key first
        db.rollback()
        return upsert_preference(db, user_id, pref_type, key, value)
    db.refresh(pref)
    return pref


def record_signals(db: Session, user_id: str, signals: Sequence[PreferenceSignal]) -> None:
    for signal in signals:
        upsert_preference(db, user_id, signal.type, signal.key, signal.value)
    if signals:
        logger.info(f"Recorded {len(signals)} preference signals for user {user_id}")


def get_preferences(db: Session, user_id: str) -> list[UserPreference]:
    stmt = (
        select(UserPreference)
        .where(UserPreference.user_id == user_id)
        .order_by(UserPreference.frequency.desc(), UserPreference.last_used.desc())
    )
    return list(db.scalars(stmt).all())


def format_preferences_for_prompt(preferences: Sequence[UserPreference]) -> str:
    """Render stored preferences as a short prompt block.

    Expects rows already ordered by get_preferences.
    """
    if not preferences:
        return ""

    grouped: dict[str, list[UserPreference]] = {}
    for pref in preferences:
        grouped.setdefault(pref.preference_type, []).append(pref)

    parts = []
    if "favorite_ingredient" in grouped:
        top5 = grouped["favorite_ingredient"][:5]
        parts.append(f"よく使う食材: {'、'.join(p.preference_value for p in top5)}")
    if "cuisine_type" in grouped:
        parts.append(f"好きな料理ジャンル: {grouped['cuisine_type'][0].preference_value}")
    if "cooking_time" in grouped:
        parts.append(f"調理時間の好み: {grouped['cooking_time'][0].preference_value}")
    if "dietary_restriction" in grouped:
        parts.append(f"食事の好み: {grouped['dietary_restriction'][0].preference_value}")
    if "dislike_ingredient" in grouped:
        dislikes = grouped["dislike_ingredient"][:3]
        parts.append(f"苦手な食材: {'、'.join(p.preference_value for p in dislikes)}")

    return "\n".join(parts)
