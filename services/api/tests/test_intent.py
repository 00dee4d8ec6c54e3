import pytest

from conftest import FakeLLM, intent_reply
from todays_meal.core.ai_client import LLMError
from todays_meal.services.intent import IntentClassifier


async def _classify(reply, text="豚肉とキャベツがあります", known=()):
    llm = FakeLLM({"intent": [reply]})
    return await IntentClassifier(llm).classify(text, list(known)), llm


@pytest.mark.asyncio
async def test_classify_parses_embedded_json():
    reply = "分析結果です:\n" + intent_reply(newIngredients=["豚肉", "キャベツ"])
    intent, llm = await _classify(reply)

    assert intent.is_valid is True
    assert intent.new_ingredients == ["豚肉", "キャベツ"]
    assert intent.request_type == "ingredients"
    assert intent.specific_dish is None
    assert len(llm.calls_for("intent")) == 1
    assert "豚肉とキャベツがあります" in llm.calls[0]["instruction"]


@pytest.mark.asyncio
async def test_new_ingredients_exclude_known_and_duplicates():
    reply = intent_reply(newIngredients=["豚肉", "卵", "卵"])
    intent, _ = await _classify(reply, text="卵もあります", known=["豚肉"])
    assert intent.new_ingredients == ["卵"]


@pytest.mark.asyncio
async def test_substitute_request():
    reply = intent_reply(requestType="substitute", missingIngredient="味噌")
    intent, _ = await _classify(reply, text="味噌がないけど代わりは？")
    assert intent.request_type == "substitute"
    assert intent.missing_ingredient == "味噌"


@pytest.mark.asyncio
async def test_legacy_request_type_and_keys_are_normalized():
    reply = '{"isValidInput": true, "ingredients": ["鶏肉"], "requestType": "specific", "specificDish": "親子丼"}'
    intent, _ = await _classify(reply, text="親子丼が作りたい")
    assert intent.request_type == "specific_dish"
    assert intent.specific_dish == "親子丼"
    assert intent.new_ingredients == ["鶏肉"]


@pytest.mark.asyncio
async def test_unknown_request_type_becomes_other():
    intent, _ = await _classify(intent_reply(requestType="weather"))
    assert intent.request_type == "other"


@pytest.mark.asyncio
async def test_invalid_input_is_reported():
    intent, _ = await _classify(intent_reply(isValid=False), text="今日の天気は？")
    assert intent.is_valid is False


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [
    "JSONを返せませんでした",
    '{"isValid": ',
    '{"newIngredients": 5}',
    LLMError("upstream down"),
])
async def test_failures_fail_open(reply):
    intent, _ = await _classify(reply)
    assert intent.is_valid is True
    assert intent.new_ingredients == []
