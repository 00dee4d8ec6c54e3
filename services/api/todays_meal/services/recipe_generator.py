"""Incremental multi-recipe generation.

Recipes are produced one LLM call at a time. Attempts run sequentially so
that every prompt sees the names already accepted in this call, and each
accepted recipe is yielded as soon as it passes validation.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Sequence

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..core.ai_client import ChatTurn, LLMError
from ..core.text import clean_md, clean_step, contains_any, extract_json_object
from ..data.catalog import QUICK_COOKING_KEYWORDS
from ..schemas import Recipe
from ..settings import settings as app_settings
from .dish_classifier import decorate_recipe
from .knowledge import (
    detect_cuisine,
    extract_tags_from_message,
    format_recipes_for_prompt,
    search_knowledge_base,
)
from .prompts import (
    INGREDIENTS_HINT,
    PREFERENCES_HINT,
    RECIPE_PROMPT,
    REFERENCES_HINT,
    SYSTEM_PROMPT,
    TIME_HINT,
    USED_NAMES_HINT,
)

logger = logging.getLogger("todays_meal.recipes")


@dataclass
class GenerationStats:
    attempts: int = 0
    failures: int = 0
    duplicates: int = 0


class RecipeParseError(ValueError):
    """LLM reply did not contain one usable recipe."""


def effective_max_cooking_time(user_text: str, max_cooking_time: Optional[int], quick_limit: int = 20) -> Optional[int]:
    """Clamp the time limit when the user asks for something quick."""
    if contains_any(user_text, QUICK_COOKING_KEYWORDS):
        return min(max_cooking_time, quick_limit) if max_cooking_time else quick_limit
    return max_cooking_time


def parse_recipe(reply: str) -> Recipe:
    """Extract and validate the single recipe in an LLM reply."""
    data = extract_json_object(reply)
    if data is None:
        raise RecipeParseError("no JSON object in recipe reply")

    raw = data.get("recipe", data)
    if isinstance(raw, list):
        raw = raw[0] if raw else None
    if not isinstance(raw, dict):
        raise RecipeParseError("recipe payload is not an object")

    steps = [clean_step(s) for s in raw.get("steps") or []]
    payload = {
        **raw,
        "id": f"recipe_{uuid.uuid4().hex}",
        "name": clean_md(str(raw.get("name") or "")),
        "steps": [s for s in steps if s],
        "nutrition": raw.get("nutrition") or {},
    }
    try:
        return Recipe.model_validate(payload)
    except ValidationError as e:
        raise RecipeParseError(f"invalid recipe: {e.error_count()} validation errors") from e


class RecipeGenerator:
    def __init__(
        self,
        llm,
        max_attempts: int = 6,
        target_count: int = 3,
        quick_cooking_max_minutes: int = 20,
        reference_limit: int = 3,
        image_base_url: str = app_settings.recipe_image_base_url,
    ):
        self.llm = llm
        self.max_attempts = max_attempts
        self.target_count = target_count
        self.quick_cooking_max_minutes = quick_cooking_max_minutes
        self.reference_limit = reference_limit
        self.image_base_url = image_base_url

    def build_prompt(
        self,
        user_text: str,
        ingredients: Sequence[str],
        preferences_text: str,
        max_cooking_time: Optional[int],
        references: str,
        used_names: Sequence[str],
    ) -> str:
        return RECIPE_PROMPT.format(
            text=user_text,
            ingredients_block=INGREDIENTS_HINT.format(ingredients=", ".join(ingredients)) if ingredients else "",
            time_block=TIME_HINT.format(minutes=max_cooking_time) if max_cooking_time else "",
            preferences_block=PREFERENCES_HINT.format(preferences=preferences_text) if preferences_text else "",
            references_block=REFERENCES_HINT.format(references=references) if references else "",
            used_block=USED_NAMES_HINT.format(names="、".join(used_names)) if used_names else "",
        )

    async def generate(
        self,
        db: Session,
        user_text: str,
        ingredients: Sequence[str],
        history: Sequence[ChatTurn] = (),
        preferences_text: str = "",
        max_cooking_time: Optional[int] = None,
        target_count: Optional[int] = None,
        stats: Optional[GenerationStats] = None,
    ) -> AsyncIterator[Recipe]:
        """Yield up to target_count uniquely named recipes.

        Stops after max_attempts calls even if the target was not reached;
        the shortfall is logged, never raised. Pass `stats` to observe the
        attempt counters of this call.
        """
        target = target_count or self.target_count
        time_limit = effective_max_cooking_time(user_text, max_cooking_time, self.quick_cooking_max_minutes)
        cuisine = detect_cuisine(user_text)
        tags = extract_tags_from_message(user_text)

        stats = stats if stats is not None else GenerationStats()
        used_names: list[str] = []
        attempts = 0

        while attempts < self.max_attempts and len(used_names) < target:
            attempts += 1
            stats.attempts = attempts

            references = search_knowledge_base(
                db,
                ingredients=list(ingredients),
                cuisine_type=cuisine,
                max_cooking_time=time_limit,
                tags=tags,
                limit=self.reference_limit,
            )
            prompt = self.build_prompt(
                user_text,
                ingredients,
                preferences_text,
                time_limit,
                format_recipes_for_prompt(references),
                used_names,
            )

            try:
                reply = await self.llm.complete(
                    prompt, system_prompt=SYSTEM_PROMPT, history=history, purpose="recipe"
                )
                recipe = parse_recipe(reply)
            except (LLMError, RecipeParseError) as e:
                stats.failures += 1
                logger.error(f"Recipe attempt {attempts}/{self.max_attempts} failed: {e}")
                continue

            if recipe.name in used_names:
                stats.duplicates += 1
                logger.info(f"Recipe attempt {attempts} duplicated '{recipe.name}', discarding")
                continue

            used_names.append(recipe.name)
            yield decorate_recipe(recipe, self.image_base_url)

        if len(used_names) < target:
            logger.warning(
                f"Generated {len(used_names)}/{target} recipes after {attempts} attempts"
            )
