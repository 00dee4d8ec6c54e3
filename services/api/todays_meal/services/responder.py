import logging
from typing import Sequence

from ..core.ai_client import ChatTurn, LLMError
from ..models import RecipeKnowledgeEntry
from ..schemas import Recipe
from .prompts import (
    CLARIFY_PROMPT,
    FALLBACK_GREETING,
    GREETING_PROMPT,
    MISSING_INGREDIENTS_PROMPT,
    NO_RECIPE_PROMPT,
    SUBSTITUTE_PROMPT,
    SUMMARY_PROMPT,
    SYSTEM_PROMPT,
)

logger = logging.getLogger("todays_meal.responder")


def _known_block(known: Sequence[str]) -> str:
    return f"ユーザーが持っている食材: {', '.join(known)}\n" if known else ""


def acknowledgement(ingredients: Sequence[str]) -> str:
    """Short status line shown while recipes are being generated."""
    if ingredients:
        return f"「{'、'.join(ingredients)}」を使ったレシピを考えています..."
    return "あなたにぴったりのレシピを考えています..."


class ConversationalResponder:
    """Free-text replies for the non-recipe parts of a turn.

    LLMError propagates from every method except greeting(), which falls
    back to a fixed message so a conversation can always start.
    """

    def __init__(self, llm):
        self.llm = llm

    async def _reply(self, prompt: str, history: Sequence[ChatTurn], purpose: str) -> str:
        reply = await self.llm.complete(
            prompt, system_prompt=SYSTEM_PROMPT, history=history, purpose=purpose
        )
        return reply.strip()

    async def greeting(self) -> str:
        try:
            return await self._reply(GREETING_PROMPT, (), "greeting")
        except LLMError as e:
            logger.warning(f"Greeting generation failed, using fallback: {e}")
            return FALLBACK_GREETING

    async def clarify(self, user_text: str, history: Sequence[ChatTurn] = ()) -> str:
        return await self._reply(CLARIFY_PROMPT.format(text=user_text), history, "clarify")

    async def substitution_advice(
        self,
        user_text: str,
        missing: str,
        known: Sequence[str],
        history: Sequence[ChatTurn] = (),
    ) -> str:
        prompt = SUBSTITUTE_PROMPT.format(text=user_text, missing=missing, known_block=_known_block(known))
        return await self._reply(prompt, history, "substitute")

    async def missing_ingredients(
        self,
        dish: str,
        entry: RecipeKnowledgeEntry,
        missing: Sequence[str],
        known: Sequence[str],
        history: Sequence[ChatTurn] = (),
    ) -> str:
        prompt = MISSING_INGREDIENTS_PROMPT.format(
            dish=dish,
            recipe=entry.name,
            missing="、".join(missing),
            known_block=_known_block(known),
        )
        return await self._reply(prompt, history, "missing_ingredients")

    async def summarize(
        self,
        user_text: str,
        ingredients: Sequence[str],
        recipes: Sequence[Recipe],
        history: Sequence[ChatTurn] = (),
    ) -> str:
        """Introduce the generated recipes, or apologize when there are none."""
        if not recipes:
            return await self._reply(NO_RECIPE_PROMPT.format(text=user_text), history, "no_recipe")

        recipe_lines = "\n".join(
            f"{idx}. {r.name}（{r.cooking_time}分、{r.calories}kcal）"
            for idx, r in enumerate(recipes, start=1)
        )
        prompt = SUMMARY_PROMPT.format(
            text=user_text,
            known_block=_known_block(ingredients),
            recipe_lines=recipe_lines,
            intro=f"これら{len(recipes)}つの",
        )
        return await self._reply(prompt, history, "summary")
