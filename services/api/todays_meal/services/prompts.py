"""Prompt templates shared by the chat services."""

SYSTEM_PROMPT = """あなたは「今日のご飯アシスタント」です。ユーザーが今日何を食べるか決める手助けをします。

役割:
1. ユーザーに今日の食事について質問して会話を開始
2. ユーザーが食材を教えてくれたら、その食材を使ったレシピを提案
3. ユーザーが気分や好みを伝えてくれたら、それに合ったレシピを提案
4. レシピには調理時間、カロリー、栄養素の概算を含める

会話の文脈:
- 会話履歴から、ユーザーが教えてくれた食材を全て覚えておくこと
- 新しい食材が追加されたら、以前の食材と合わせて考えること
- 食材リストは会話の最初から累積的に増えていく

応答ルール:
- 自然で丁寧な日本語を使う
- 親しみやすいが、過度にカジュアルすぎない口調
- 絵文字は1メッセージに1〜2個程度
- 日本の家庭料理を中心に、簡単に作れるレシピを優先
- 「〜ですね」「〜いかがですか？」のような自然な敬語を使う"""

INTENT_PROMPT = """ユーザーの入力を分析してください。

現在までにユーザーが教えてくれた食材: {known}
新しい入力: "{text}"

以下のJSON形式で回答してください:
{{
  "isValid": true または false (食材や料理に関する入力かどうか),
  "newIngredients": ["食材1", "食材2"] (今回の入力から新たに分かった食材。なければ空配列),
  "requestType": "ingredients" | "mood" | "specific_dish" | "substitute" | "other",
  "specificDish": "料理名" (特定の料理を作りたい場合のみ、それ以外は null),
  "missingIngredient": "食材名" (食材が足りず代わりを聞いている場合のみ、それ以外は null)
}}

重要:
- 既存の食材は含めず、今回の入力から新たに追加される食材のみを返してください
- 「他に何か作れる？」のような質問の場合、newIngredientsは空配列にしてください
- 「〇〇がない、代わりは？」のような質問は requestType を "substitute" にしてください

JSONのみを返してください。"""

RECIPE_PROMPT = """ユーザーの要望に基づいて、1つのレシピを提案してください。

ユーザーの入力: "{text}"
{ingredients_block}{time_block}{preferences_block}{references_block}{used_block}
調理手順は必ず5〜8ステップの詳細な手順で記載してください。
各ステップは具体的で分かりやすく、初心者でも作れるように詳しく書いてください。

以下のJSON形式で1つのレシピを返してください:
{{
  "recipe": {{
    "name": "料理名",
    "ingredients": [
      {{"name": "材料名", "amount": "分量"}}
    ],
    "steps": ["手順の内容", "..."],
    "cookingTime": 調理時間(分, 整数),
    "calories": カロリー(kcal, 整数),
    "nutrition": {{
      "protein": タンパク質(g),
      "fat": 脂質(g),
      "carbs": 炭水化物(g)
    }}
  }}
}}

重要事項:
- stepsは必ず5〜8個の手順を含めてください
- 火加減、時間、目安となる状態なども含めてください
- 手順には「手順1:」などの番号を付けず、内容のみを記載してください

JSONのみを返してください。"""

INGREDIENTS_HINT = (
    "手元にある食材: {ingredients}\n"
    "（これらは参考です。全部を使う必要はなく、使わない食材があっても構いません）\n"
)

TIME_HINT = "調理時間制限: {minutes}分以内\n"

PREFERENCES_HINT = "ユーザーの好み:\n{preferences}\n"

REFERENCES_HINT = (
    "\n以下は参考レシピです。アイデアの参考にし、そのまま写さないでください。\n{references}\n"
)

USED_NAMES_HINT = (
    "\n既に提案したレシピ: {names}\n"
    "これらと料理名・調理法・味付けが重ならない、別のレシピを提案してください。\n"
)

CLARIFY_PROMPT = """ユーザーが「{text}」と言いました。
これは食材や料理に関する入力ではないようです。
自然な日本語で、丁寧に再度質問してください。例: 「すみません、よく分かりませんでした。どんな食材をお持ちですか？または、どんな料理が食べたいか教えていただけますか？」"""

SUBSTITUTE_PROMPT = """ユーザーが「{text}」と言いました。
ユーザーは「{missing}」を持っていないようです。
{known_block}「{missing}」の代わりに使える食材や調味料を2〜3個、使い方のコツと一緒に、自然な日本語で簡潔に教えてください。"""

MISSING_INGREDIENTS_PROMPT = """ユーザーは「{dish}」を作りたいようです。
参考レシピ「{recipe}」に必要で、まだ教えてもらっていない食材: {missing}
{known_block}足りない食材を分かりやすく伝え、手元にあるか、または用意できるか自然な日本語で聞いてください。"""

SUMMARY_PROMPT = """ユーザーが「{text}」と言いました。
{known_block}
以下のレシピを提案します:
{recipe_lines}

{intro}レシピを、自然で親しみやすい口調で紹介してください。
詳細を見たい場合はレシピ名をタップするよう促してください。
絵文字は控えめに（1〜2個程度）使ってください。"""

NO_RECIPE_PROMPT = """ユーザーが「{text}」と言いました。
レシピを提案できませんでした。
自然な日本語で、もう少し詳しく教えてもらうよう丁寧にお願いしてください。"""

GREETING_PROMPT = (
    "会話を開始してください。ユーザーに今日の食事について自然で親しみやすく質問してください。"
    "例：「こんにちは！今日は何を食べたいですか？」のような自然な表現で。"
)

FALLBACK_GREETING = "こんにちは！今日は何を食べたいですか？冷蔵庫にある食材や、食べたい気分を教えてくださいね。"
