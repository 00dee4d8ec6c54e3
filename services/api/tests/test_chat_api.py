from sqlalchemy import select

from conftest import intent_reply, parse_sse, recipe_reply
from todays_meal.core.ai_client import LLMError
from todays_meal.models import Conversation, Message, SavedRecipe

HEADERS = {"X-User-Id": "user-1"}


def _script_three_recipes(fake_llm):
    fake_llm.replies.update({
        "intent": [intent_reply(newIngredients=["豚肉", "キャベツ"])],
        "recipe": [recipe_reply("回鍋肉"), recipe_reply("豚キャベツ炒め"), recipe_reply("お好み焼き")],
        "summary": ["3つのレシピをご提案します！"],
    })


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["db_ok"] is True
    assert data["model"] == "fake"


def test_start_chat_returns_greeting(client, fake_llm, db_session):
    fake_llm.replies["greeting"] = ["こんにちは！今日は何を食べたいですか？"]
    response = client.post("/api/chat/start", headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "こんにちは！今日は何を食べたいですか？"
    assert data["recipes"] == []
    conv = db_session.get(Conversation, data["conversationId"])
    assert conv.user_id == "user-1"
    assert conv.title is None


def test_start_chat_falls_back_when_llm_fails(client, fake_llm):
    fake_llm.replies["greeting"] = [LLMError("down")]
    response = client.post("/api/chat/start", headers=HEADERS)
    assert response.status_code == 200
    assert response.json()["message"].startswith("こんにちは")


def test_empty_message_is_rejected(client):
    response = client.post("/api/chat", json={"message": "   "}, headers=HEADERS)
    assert response.status_code == 400


def test_unknown_conversation_is_404(client):
    response = client.post("/api/chat", json={"message": "豚肉", "conversationId": "nope"}, headers=HEADERS)
    assert response.status_code == 404


def test_chat_json_mode(client, fake_llm, db_session):
    _script_three_recipes(fake_llm)
    response = client.post("/api/chat", json={"message": "豚肉とキャベツがあります"}, headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "3つのレシピをご提案します！"
    assert [r["name"] for r in data["recipes"]] == ["回鍋肉", "豚キャベツ炒め", "お好み焼き"]
    assert "cookingTime" in data["recipes"][0]

    conv = db_session.get(Conversation, data["conversationId"])
    assert conv.ingredients == ["豚肉", "キャベツ"]
    assert conv.title == "豚肉とキャベツがあります"
    messages = db_session.scalars(
        select(Message).where(Message.conversation_id == conv.id).order_by(Message.created_at)
    ).all()
    assert [m.role for m in messages] == ["user", "assistant"]
    assert messages[1].recipe_ids == [r["id"] for r in data["recipes"]]
    assert db_session.query(SavedRecipe).count() == 3


def test_chat_stream_event_order(client, fake_llm):
    _script_three_recipes(fake_llm)
    response = client.post(
        "/api/chat",
        json={"message": "豚肉とキャベツがあります", "stream": True},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    frames = parse_sse(response.text)
    assert [f["type"] for f in frames] == [
        "conversationId", "status", "recipe", "recipe", "recipe", "response", "done",
    ]
    names = [f["data"]["name"] for f in frames if f["type"] == "recipe"]
    assert len(set(names)) == 3
    assert frames[-2]["data"] == "3つのレシピをご提案します！"


def test_chat_stream_substitute(client, fake_llm):
    fake_llm.replies.update({
        "intent": [intent_reply(requestType="substitute", missingIngredient="味噌")],
        "substitute": ["醤油と砂糖で代用できます。"],
    })
    response = client.post(
        "/api/chat",
        json={"message": "味噌がないけど代わりは？", "stream": True},
        headers=HEADERS,
    )
    frames = parse_sse(response.text)
    assert [f["type"] for f in frames] == ["conversationId", "response", "done"]
    assert frames[1]["data"] == "醤油と砂糖で代用できます。"


def test_chat_stream_error_is_terminal(client, fake_llm):
    fake_llm.replies.update({
        "intent": [intent_reply()],
        "recipe": [recipe_reply("回鍋肉")],
        "summary": [LLMError("down")],
    })
    response = client.post(
        "/api/chat",
        json={"message": "豚肉があります", "stream": True},
        headers=HEADERS,
    )
    frames = parse_sse(response.text)
    assert [f["type"] for f in frames] == ["conversationId", "status", "recipe", "error"]


def test_recipes_streamed_before_a_failure_are_kept(client, fake_llm, db_session):
    fake_llm.replies.update({
        "intent": [intent_reply(newIngredients=["豚肉", "キャベツ"])],
        "recipe": [recipe_reply("回鍋肉"), recipe_reply("豚キャベツ炒め"), recipe_reply("お好み焼き")],
        "summary": [LLMError("down")],
    })
    response = client.post(
        "/api/chat",
        json={"message": "豚肉とキャベツがあります", "stream": True},
        headers=HEADERS,
    )
    frames = parse_sse(response.text)
    assert frames[-1]["type"] == "error"
    conv_id = frames[0]["data"]
    streamed = [f["data"]["id"] for f in frames if f["type"] == "recipe"]
    assert len(streamed) == 3

    favorite = client.post("/api/favorites", json={"recipeId": streamed[0]}, headers=HEADERS)
    assert favorite.status_code == 201

    db_session.expire_all()
    assert db_session.get(Conversation, conv_id).ingredients == ["豚肉", "キャベツ"]
    detail = client.get(f"/api/chat/conversations/{conv_id}", headers=HEADERS).json()
    assistant = detail["messages"][-1]
    assert assistant["role"] == "assistant"
    assert [r["id"] for r in assistant["recipes"]] == streamed


def test_chat_json_error_is_500(client, fake_llm):
    fake_llm.replies.update({
        "intent": [intent_reply(isValid=False)],
        "clarify": [LLMError("down")],
    })
    response = client.post("/api/chat", json={"message": "天気は？"}, headers=HEADERS)
    assert response.status_code == 500


def test_ingredients_accumulate_across_turns(client, fake_llm, db_session):
    fake_llm.replies.update({
        "intent": [
            intent_reply(newIngredients=["豚肉"]),
            intent_reply(newIngredients=["豚肉", "卵"]),
        ],
        "recipe": [recipe_reply("豚丼"), recipe_reply("豚玉炒め")],
    })
    first = client.post("/api/chat", json={"message": "豚肉があります"}, headers=HEADERS).json()
    client.post(
        "/api/chat",
        json={"message": "卵もあります", "conversationId": first["conversationId"]},
        headers=HEADERS,
    )

    conv = db_session.get(Conversation, first["conversationId"])
    assert conv.ingredients == ["豚肉", "卵"]

    # second intent call saw the first turn in its prompt context
    intent_prompts = [c["instruction"] for c in fake_llm.calls_for("intent")]
    assert "現在までにユーザーが教えてくれた食材: 豚肉" in intent_prompts[1]
    recipe_histories = [c["history"] for c in fake_llm.calls_for("recipe")]
    assert recipe_histories[-1][0].content == "豚肉があります"


def test_conversations_are_per_user_and_capped(client, db_session):
    for _ in range(12):
        client.post("/api/chat/start", headers=HEADERS)
    client.post("/api/chat/start", headers={"X-User-Id": "someone-else"})

    response = client.get("/api/chat/conversations", headers=HEADERS)
    assert response.status_code == 200
    assert len(response.json()) == 10
    assert db_session.query(Conversation).filter_by(user_id="someone-else").count() == 1


def test_conversation_detail_includes_recipes(client, fake_llm):
    _script_three_recipes(fake_llm)
    conv_id = client.post("/api/chat", json={"message": "豚肉とキャベツがあります"}, headers=HEADERS).json()["conversationId"]

    response = client.get(f"/api/chat/conversations/{conv_id}", headers=HEADERS)
    assert response.status_code == 200
    data = response.json()
    assert data["conversation"]["message_count"] == 2
    assert [m["role"] for m in data["messages"]] == ["user", "assistant"]
    assert len(data["messages"][1]["recipes"]) == 3

    other = client.get(f"/api/chat/conversations/{conv_id}", headers={"X-User-Id": "someone-else"})
    assert other.status_code == 404


def test_blank_user_header_is_rejected(client):
    response = client.get("/api/history", headers={"X-User-Id": "  "})
    assert response.status_code == 400
