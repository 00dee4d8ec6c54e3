import json

import pytest
from pydantic import ValidationError

from todays_meal.schemas import ChatRequest, Recipe, StreamEvent


def _recipe(**overrides):
    data = {
        "id": "recipe_abc",
        "name": "鶏の照り焼き",
        "ingredients": [{"name": "鶏もも肉", "amount": "300g"}, {"name": "醤油", "amount": 2}],
        "steps": ["切る", "焼く", "タレを作る", "絡める", "盛る"],
        "cookingTime": 20,
        "calories": 450,
        "nutrition": {"protein": 30, "fat": 20, "carbs": 12},
        "imageUrl": "/images/recipes/grilled.jpg",
        "sideDishes": [{"name": "味噌汁", "category": "スープ", "description": "定番"}],
    }
    data.update(overrides)
    return data


def test_recipe_wire_round_trip():
    recipe = Recipe.model_validate(_recipe())
    wire = recipe.to_wire()

    assert wire["cookingTime"] == 20
    assert wire["imageUrl"] == "/images/recipes/grilled.jpg"
    assert wire["sideDishes"][0]["name"] == "味噌汁"
    assert "cooking_time" not in wire
    assert Recipe.model_validate(json.loads(json.dumps(wire))) == recipe


def test_ingredient_amount_is_free_text():
    recipe = Recipe.model_validate(_recipe())
    assert recipe.ingredients[1].amount == "2"


@pytest.mark.parametrize("overrides", [
    {"steps": ["a", "b", "c", "d"]},
    {"steps": ["s"] * 9},
    {"cookingTime": 0},
    {"calories": -10},
    {"nutrition": {"protein": -1, "fat": 0, "carbs": 0}},
])
def test_recipe_bounds(overrides):
    with pytest.raises(ValidationError):
        Recipe.model_validate(_recipe(**overrides))


def test_stream_event_frames():
    assert StreamEvent(type="done").to_sse() == 'data: {"type": "done"}\n\n'
    frame = StreamEvent(type="response", data="こんにちは").to_sse()
    assert frame == 'data: {"type": "response", "data": "こんにちは"}\n\n'


def test_chat_request_accepts_camel_case():
    req = ChatRequest.model_validate({"message": "豚肉", "conversationId": "c1", "filters": {"maxCookingTime": 15}})
    assert req.conversation_id == "c1"
    assert req.filters.max_cooking_time == 15
    assert req.stream is False
