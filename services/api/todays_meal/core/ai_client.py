import asyncio
import itertools
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Sequence

from google import genai
from google.genai import types

from ..settings import Settings

logger = logging.getLogger("todays_meal.ai")


@dataclass(frozen=True)
class ChatTurn:
    role: str  # user | assistant
    content: str


class LLMError(RuntimeError):
    """Provider call failed, timed out, or returned nothing."""


class LLMClient:
    """Chat-completion handle around one Gemini model.

    Constructed once at startup and passed to the services that need it.
    """

    def __init__(
        self,
        model: str,
        api_key: Optional[str],
        temperature: float = 0.7,
        timeout: Optional[float] = 60.0,
        client: Optional[genai.Client] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._client = client or genai.Client(api_key=api_key)
        self.last_error: Optional[str] = None
        self.last_error_at: Optional[datetime] = None

    def _contents(self, instruction: str, history: Sequence[ChatTurn]) -> list[types.Content]:
        contents = []
        for turn in history:
            role = "model" if turn.role == "assistant" else "user"
            contents.append(types.Content(role=role, parts=[types.Part(text=turn.content)]))
        contents.append(types.Content(role="user", parts=[types.Part(text=instruction)]))
        return contents

    async def complete(
        self,
        instruction: str,
        *,
        system_prompt: Optional[str] = None,
        history: Sequence[ChatTurn] = (),
        purpose: str = "reply",
    ) -> str:
        """Send history + instruction and return the reply text.

        Raises LLMError on provider failure, timeout, or an empty reply.
        """
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=self.temperature,
        )
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self.model,
                    contents=self._contents(instruction, history),
                    config=config,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            self._record_error(f"timeout after {self.timeout}s")
            logger.error(f"Gemini {purpose} call timed out (model={self.model})")
            raise LLMError(f"{purpose} call timed out") from e
        except Exception as e:
            self._record_error(f"{e.__class__.__name__}: {e}")
            logger.error(f"Gemini {purpose} call failed (model={self.model}): {e}")
            raise LLMError(str(e)) from e

        if not response.text:
            self._record_error("empty response")
            logger.warning(f"Gemini returned empty {purpose} response (model={self.model})")
            raise LLMError(f"empty {purpose} response")

        return response.text

    def _record_error(self, message: str) -> None:
        self.last_error = message
        self.last_error_at = datetime.now(timezone.utc)


_MOCK_RECIPES = [
    {
        "name": "豚肉とキャベツの味噌炒め",
        "ingredients": [
            {"name": "豚こま肉", "amount": "200g"},
            {"name": "キャベツ", "amount": "1/4個"},
            {"name": "味噌", "amount": "大さじ1.5"},
            {"name": "みりん", "amount": "大さじ1"},
            {"name": "ごま油", "amount": "大さじ1"},
        ],
        "steps": [
            "キャベツをざく切りにし、豚肉は食べやすい大きさに切る。",
            "味噌とみりんを混ぜ合わせておく。",
            "フライパンにごま油を熱し、豚肉を中火で炒める。",
            "肉の色が変わったらキャベツを加えて強火で2分炒める。",
            "合わせ調味料を回し入れ、全体に絡めて完成。",
        ],
        "cookingTime": 15,
        "calories": 420,
        "nutrition": {"protein": 20, "fat": 28, "carbs": 14},
    },
    {
        "name": "鶏肉のトマト煮込み",
        "ingredients": [
            {"name": "鶏もも肉", "amount": "300g"},
            {"name": "トマト缶", "amount": "1缶"},
            {"name": "玉ねぎ", "amount": "1個"},
            {"name": "にんにく", "amount": "1片"},
            {"name": "オリーブオイル", "amount": "大さじ1"},
        ],
        "steps": [
            "鶏肉を一口大に切り、塩こしょうをふる。",
            "玉ねぎは薄切り、にんにくはみじん切りにする。",
            "鍋にオリーブオイルとにんにくを入れて弱火で香りを出す。",
            "鶏肉を皮目から焼き、玉ねぎを加えて炒める。",
            "トマト缶を加えて蓋をし、弱火で15分煮込む。",
            "塩で味を調えて完成。",
        ],
        "cookingTime": 30,
        "calories": 480,
        "nutrition": {"protein": 32, "fat": 24, "carbs": 18},
    },
    {
        "name": "野菜たっぷり中華スープ",
        "ingredients": [
            {"name": "白菜", "amount": "2枚"},
            {"name": "にんじん", "amount": "1/3本"},
            {"name": "卵", "amount": "1個"},
            {"name": "鶏がらスープの素", "amount": "小さじ2"},
            {"name": "水", "amount": "600ml"},
        ],
        "steps": [
            "白菜はざく切り、にんじんは短冊切りにする。",
            "鍋に水と鶏がらスープの素を入れて沸かす。",
            "にんじんを入れて3分煮る。",
            "白菜を加えてしんなりするまで煮る。",
            "溶き卵を回し入れ、ふんわり固まったら火を止める。",
        ],
        "cookingTime": 12,
        "calories": 120,
        "nutrition": {"protein": 8, "fat": 4, "carbs": 10},
    },
    {
        "name": "さっぱり冷しゃぶサラダ",
        "ingredients": [
            {"name": "豚しゃぶしゃぶ用肉", "amount": "150g"},
            {"name": "レタス", "amount": "4枚"},
            {"name": "きゅうり", "amount": "1本"},
            {"name": "ポン酢", "amount": "大さじ3"},
            {"name": "ごま", "amount": "少々"},
        ],
        "steps": [
            "レタスはちぎり、きゅうりは細切りにする。",
            "鍋に湯を沸かし、沸騰直前で火を弱める。",
            "豚肉を1枚ずつ入れ、色が変わったら取り出す。",
            "豚肉を冷水にとって水気を切る。",
            "野菜と豚肉を盛り付け、ポン酢とごまをかけて完成。",
        ],
        "cookingTime": 15,
        "calories": 280,
        "nutrition": {"protein": 18, "fat": 16, "carbs": 8},
    },
]


class MockLLMClient:
    """Offline stand-in used when ai_mode is "mock".

    Replies are chosen by call purpose; recipe calls rotate through a fixed
    menu so consecutive calls never repeat a dish.
    """

    def __init__(self, model: str = "mock"):
        self.model = model
        self.last_error: Optional[str] = None
        self.last_error_at: Optional[datetime] = None
        self._recipes = itertools.cycle(_MOCK_RECIPES)

    async def complete(
        self,
        instruction: str,
        *,
        system_prompt: Optional[str] = None,
        history: Sequence[ChatTurn] = (),
        purpose: str = "reply",
    ) -> str:
        if purpose == "intent":
            payload = {"isValid": True, "newIngredients": [], "requestType": "ingredients"}
            return json.dumps(payload, ensure_ascii=False)
        if purpose == "recipe":
            return json.dumps({"recipe": next(self._recipes)}, ensure_ascii=False)
        return "こんにちは！今日は何を食べたいですか？冷蔵庫にある食材を教えてくださいね。"


def build_clients(settings: Settings):
    """Create the (conversation, recipe) client pair for this process."""
    if settings.ai_mode == "gemini" and settings.gemini_api_key:
        logger.info(
            f"Initializing Gemini clients: conversation={settings.conversation_model} "
            f"recipe={settings.recipe_model}"
        )
        shared = genai.Client(api_key=settings.gemini_api_key)
        conversation = LLMClient(
            settings.conversation_model,
            settings.gemini_api_key,
            temperature=settings.conversation_temperature,
            timeout=settings.llm_timeout_seconds,
            client=shared,
        )
        recipe = LLMClient(
            settings.recipe_model,
            settings.gemini_api_key,
            temperature=settings.recipe_temperature,
            timeout=settings.llm_timeout_seconds,
            client=shared,
        )
        return conversation, recipe

    if settings.ai_mode == "gemini":
        logger.warning("AI mode is gemini but GEMINI_API_KEY is missing; using mock clients")
    mock = MockLLMClient()
    return mock, mock
