import pytest
from sqlalchemy import select

from conftest import FakeLLM, intent_reply, recipe_reply
from todays_meal.core.ai_client import LLMError
from todays_meal.main import build_pipeline
from todays_meal.models import User, UserPreference
from todays_meal.services.chat_pipeline import (
    GenerationSession,
    PipelineState,
    missing_required_ingredients,
)
from todays_meal.services.knowledge import find_by_name


def _session(db, message, ingredients=()):
    db.add(User(id="u1", name="u1"))
    db.commit()
    return GenerationSession(user_id="u1", message=message, ingredients=list(ingredients))


async def _run(db, llm, session):
    pipeline = build_pipeline(llm, llm)
    return [e async for e in pipeline.stream(db, session)]


@pytest.mark.asyncio
async def test_ingredients_turn_streams_status_recipes_then_summary(seeded_db):
    llm = FakeLLM({
        "intent": [intent_reply(newIngredients=["豚肉", "キャベツ"])],
        "recipe": [recipe_reply("回鍋肉"), recipe_reply("豚キャベツ炒め"), recipe_reply("お好み焼き")],
        "summary": ["3つのレシピをご提案します！"],
    })
    session = _session(seeded_db, "豚肉とキャベツがあります")
    events = await _run(seeded_db, llm, session)

    assert [e.type for e in events] == ["status", "recipe", "recipe", "recipe", "response"]
    assert events[0].data == "「豚肉、キャベツ」を使ったレシピを考えています..."
    assert [e.data["name"] for e in events[1:4]] == ["回鍋肉", "豚キャベツ炒め", "お好み焼き"]
    assert "cookingTime" in events[1].data
    assert events[-1].data == "3つのレシピをご提案します！"

    assert session.state == PipelineState.DONE
    assert session.ingredients == ["豚肉", "キャベツ"]
    assert session.used_names == ["回鍋肉", "豚キャベツ炒め", "お好み焼き"]
    assert session.reply == "3つのレシピをご提案します！"
    assert session.stats.attempts == 3

    summary_prompt = llm.calls_for("summary")[0]["instruction"]
    assert "回鍋肉（15分、400kcal）" in summary_prompt
    assert "これら3つの" in summary_prompt


@pytest.mark.asyncio
async def test_generation_path_records_preferences(seeded_db):
    llm = FakeLLM({
        "intent": [intent_reply(newIngredients=["鶏肉"])],
        "recipe": [recipe_reply("親子丼")],
    })
    session = _session(seeded_db, "鶏肉で和食が食べたい")
    await _run(seeded_db, llm, session)

    prefs = {
        (p.preference_type, p.preference_key)
        for p in seeded_db.scalars(select(UserPreference).where(UserPreference.user_id == "u1"))
    }
    assert ("favorite_ingredient", "鶏肉") in prefs
    assert ("cuisine_type", "和食") in prefs


@pytest.mark.asyncio
async def test_substitute_turn_is_a_single_response(seeded_db):
    llm = FakeLLM({
        "intent": [intent_reply(requestType="substitute", missingIngredient="味噌")],
        "substitute": ["味噌の代わりには醤油と砂糖がおすすめです。"],
    })
    session = _session(seeded_db, "味噌がないけど代わりは？", ingredients=["豚肉", "ナス"])
    events = await _run(seeded_db, llm, session)

    assert [e.type for e in events] == ["response"]
    assert events[0].data == "味噌の代わりには醤油と砂糖がおすすめです。"
    assert llm.calls_for("recipe") == []
    assert session.state == PipelineState.DONE
    assert seeded_db.scalars(select(UserPreference)).all() == []


@pytest.mark.asyncio
async def test_specific_dish_with_missing_ingredients_asks_for_them(seeded_db):
    llm = FakeLLM({
        "intent": [intent_reply(requestType="specific_dish", specificDish="麻婆豆腐")],
        "missing_ingredients": ["豆腐と豚ひき肉はありますか？"],
    })
    session = _session(seeded_db, "麻婆豆腐が作りたい", ingredients=["長ネギ"])
    events = await _run(seeded_db, llm, session)

    assert [e.type for e in events] == ["response"]
    prompt = llm.calls_for("missing_ingredients")[0]["instruction"]
    assert "豚ひき肉" in prompt
    assert "長ネギ、" not in prompt
    assert llm.calls_for("recipe") == []


@pytest.mark.asyncio
async def test_specific_dish_without_match_falls_through_to_generation(seeded_db):
    llm = FakeLLM({
        "intent": [intent_reply(requestType="specific_dish", specificDish="ビーフストロガノフ")],
        "recipe": [recipe_reply("ビーフストロガノフ")],
    })
    session = _session(seeded_db, "ビーフストロガノフが作りたい")
    events = await _run(seeded_db, llm, session)

    assert events[0].type == "status"
    assert "recipe" in [e.type for e in events]
    assert events[-1].type == "response"


@pytest.mark.asyncio
async def test_invalid_input_gets_clarification(seeded_db):
    llm = FakeLLM({
        "intent": [intent_reply(isValid=False, requestType="other")],
        "clarify": ["すみません、どんな食材をお持ちですか？"],
    })
    session = _session(seeded_db, "今日の天気は？")
    events = await _run(seeded_db, llm, session)

    assert [(e.type, e.data) for e in events] == [("response", "すみません、どんな食材をお持ちですか？")]
    assert llm.calls_for("recipe") == []


@pytest.mark.asyncio
async def test_no_recipes_still_ends_with_response(seeded_db):
    llm = FakeLLM({
        "intent": [intent_reply(newIngredients=["豆腐"])],
        "recipe": [LLMError("down")] * 6,
        "no_recipe": ["もう少し詳しく教えてください。"],
    })
    session = _session(seeded_db, "豆腐があります")
    events = await _run(seeded_db, llm, session)

    assert [e.type for e in events] == ["status", "response"]
    assert events[-1].data == "もう少し詳しく教えてください。"


@pytest.mark.asyncio
async def test_summary_failure_propagates_after_recipes(seeded_db):
    llm = FakeLLM({
        "intent": [intent_reply()],
        "recipe": [recipe_reply("回鍋肉")],
        "summary": [LLMError("down")],
    })
    session = _session(seeded_db, "豚肉があります")
    pipeline = build_pipeline(llm, llm)

    seen = []
    with pytest.raises(LLMError):
        async for event in pipeline.stream(seeded_db, session):
            seen.append(event.type)
    assert seen == ["status", "recipe"]


def test_missing_required_ingredients_skips_staples_and_known(seeded_db):
    entry = find_by_name(seeded_db, "豚バラとネギの塩炒め")
    assert missing_required_ingredients(entry, ["豚バラ肉"]) == ["長ネギ", "鶏がらスープの素"]
    assert missing_required_ingredients(entry, ["豚バラ", "ネギ", "鶏がらスープ"]) == []
