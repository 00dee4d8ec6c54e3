"""Reference recipe retrieval.

The knowledge base is a small seeded corpus. Retrieved entries are handed
to the recipe prompt as inspiration, never as hard constraints.
"""

import logging
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.text import contains_any, first_match
from ..data.catalog import CUISINE_RULES, TAG_RULES
from ..data.seed_recipes import SEED_RECIPES
from ..models import RecipeKnowledgeEntry

logger = logging.getLogger("todays_meal.knowledge")

INGREDIENT_MATCH_SCORE = 10
NAME_MATCH_SCORE = 5
DESCRIPTION_MATCH_SCORE = 3
TAG_MATCH_SCORE = 5


def score_entry(entry: RecipeKnowledgeEntry, ingredients: Sequence[str], tags: Sequence[str]) -> int:
    """Additive relevance score of one candidate."""
    score = 0
    entry_ingredients = [str(i.get("name", "")).lower() for i in entry.ingredients or []]
    name = (entry.name or "").lower()
    description = (entry.description or "").lower()

    for ingredient in ingredients:
        needle = ingredient.lower()
        if any(needle in ri for ri in entry_ingredients):
            score += INGREDIENT_MATCH_SCORE
        if needle in name:
            score += NAME_MATCH_SCORE
        if needle in description:
            score += DESCRIPTION_MATCH_SCORE

    entry_tags = [str(t).lower() for t in entry.tags or []]
    for tag in tags:
        needle = tag.lower()
        if any(needle in t for t in entry_tags):
            score += TAG_MATCH_SCORE

    return score


def search_knowledge_base(
    db: Session,
    ingredients: Sequence[str] = (),
    cuisine_type: Optional[str] = None,
    max_cooking_time: Optional[int] = None,
    tags: Sequence[str] = (),
    limit: int = 5,
) -> list[RecipeKnowledgeEntry]:
    """Filter by cuisine/time in SQL, then rank by ingredient and tag overlap.

    Without ingredients or tags the filter order (fastest first) is kept.
    """
    stmt = select(RecipeKnowledgeEntry)
    if cuisine_type:
        stmt = stmt.where(RecipeKnowledgeEntry.cuisine_type == cuisine_type)
    if max_cooking_time:
        stmt = stmt.where(RecipeKnowledgeEntry.cooking_time <= max_cooking_time)
    stmt = stmt.order_by(RecipeKnowledgeEntry.cooking_time.asc(), RecipeKnowledgeEntry.name.asc())

    if not ingredients and not tags:
        return list(db.scalars(stmt.limit(limit)).all())

    candidates = db.scalars(stmt).all()
    scored = [(entry, score_entry(entry, ingredients, tags)) for entry in candidates]
    scored = [item for item in scored if item[1] > 0]
    # sorted() is stable: ties keep the cooking-time order
    scored = sorted(scored, key=lambda item: item[1], reverse=True)
    return [entry for entry, _ in scored[:limit]]


def find_by_name(db: Session, dish: str) -> Optional[RecipeKnowledgeEntry]:
    """Closest name match for a requested dish (either name contains the other)."""
    needle = (dish or "").strip().lower()
    if not needle:
        return None
    entries = db.scalars(select(RecipeKnowledgeEntry).order_by(RecipeKnowledgeEntry.name)).all()
    for entry in entries:
        if entry.name.lower() == needle:
            return entry
    for entry in entries:
        name = entry.name.lower()
        if needle in name or name in needle:
            return entry
    return None


def detect_cuisine(text: str) -> Optional[str]:
    return first_match(text, CUISINE_RULES)


def extract_tags_from_message(message: str) -> list[str]:
    tags = []
    for keywords, rule_tags in TAG_RULES:
        if contains_any(message, keywords):
            tags.extend(t for t in rule_tags if t not in tags)
    return tags


def format_recipes_for_prompt(entries: Sequence[RecipeKnowledgeEntry]) -> str:
    if not entries:
        return ""

    blocks = []
    for idx, entry in enumerate(entries, start=1):
        ingredients = ", ".join(f"{i.get('name', '')} {i.get('amount', '')}".strip() for i in entry.ingredients or [])
        blocks.append(
            f"【参考レシピ{idx}】\n"
            f"名前: {entry.name}\n"
            f"説明: {entry.description or ''}\n"
            f"材料: {ingredients}\n"
            f"手順: {' → '.join(entry.steps or [])}\n"
            f"調理時間: {entry.cooking_time}分\n"
            f"カロリー: {entry.calories}kcal\n"
            f"料理ジャンル: {entry.cuisine_type or ''}\n"
            f"難易度: {entry.difficulty or ''}"
        )
    return "\n\n".join(blocks)


def seed_knowledge_base(db: Session) -> int:
    """Insert seed recipes that are not stored yet. Returns the number added."""
    existing = set(db.scalars(select(RecipeKnowledgeEntry.name)).all())
    added = 0
    for seed in SEED_RECIPES:
        if seed["name"] in existing:
            continue
        db.add(RecipeKnowledgeEntry(source="seed", **seed))
        added += 1
    if added:
        db.commit()
        logger.info(f"Seeded {added} knowledge base recipes")
    return added
