"""Keyword tables driving the text heuristics.

Every table is evaluated top to bottom and the first match wins, so entry
order is the precedence. Keywords are matched as lowercase substrings.
"""

# Display category derived from a dish name. Specific dish types come
# before cooking methods, which come before the generic main-ingredient
# fallbacks (e.g. "カレーシチュー" is a curry, "焼きそば" is a noodle dish).
CATEGORY_RULES = (
    (("丼", "チャーハン", "炒飯", "ご飯", "ごはん", "オムライス", "リゾット", "ピラフ", "おにぎり", "rice"), "rice"),
    (("うどん", "そば", "ラーメン", "麺", "noodle", "ramen", "udon"), "noodle"),
    (("パスタ", "スパゲッティ", "スパゲティ", "ペンネ", "ペペロンチーノ", "カルボナーラ", "pasta", "spaghetti"), "pasta"),
    (("カレー", "curry"), "curry"),
    (("シチュー", "ポトフ", "stew"), "stew"),
    (("鍋", "すき焼き", "しゃぶしゃぶ", "hot pot"), "hot_pot"),
    (("サラダ", "salad"), "salad"),
    (("スープ", "味噌汁", "汁", "soup"), "soup"),
    (("唐揚げ", "から揚げ", "揚げ", "フライ", "天ぷら", "カツ", "fried"), "fried"),
    (("蒸し", "steamed"), "steamed"),
    (("煮", "simmered"), "simmered"),
    (("焼き", "ソテー", "グリル", "ステーキ", "grilled"), "grilled"),
    (("炒め", "stir-fry", "stir fry"), "stir_fry"),
    (("肉", "豚", "牛", "鶏", "チキン", "ポーク", "ビーフ", "meat", "chicken", "pork", "beef"), "meat"),
    (("魚", "鮭", "サーモン", "サバ", "さば", "ぶり", "ブリ", "えび", "エビ", "fish", "salmon"), "fish"),
    (("野菜", "キャベツ", "なす", "ナス", "豆腐", "ほうれん草", "vegetable", "tofu"), "vegetable"),
)
DEFAULT_CATEGORY = "other"

# Cuisine family of a generated dish, used to pick side dishes. Checked
# against the dish name first, then against its ingredient names.
DISH_CUISINE_RULES = (
    (("中華", "麻婆", "豆板醤", "甜麺醤", "オイスター", "鶏がら", "チンジャオ", "回鍋肉", "ホイコーロー",
      "餃子", "炒飯", "チャーハン", "春巻", "八宝菜", "エビチリ", "酢豚", "chinese"), "chinese"),
    (("パスタ", "スパゲッティ", "トマト", "チーズ", "バター", "オリーブオイル", "コンソメ", "ワイン",
      "クリーム", "シチュー", "グラタン", "ソテー", "ハンバーグ", "カレー", "ポトフ", "バジル", "洋風",
      "pasta", "cheese", "tomato"), "western"),
    (("味噌", "醤油", "しょうゆ", "みりん", "だし", "和風", "照り焼き", "生姜焼き", "肉じゃが", "ポン酢",
      "丼", "japanese"), "japanese"),
)
DEFAULT_DISH_CUISINE = "other"

# Two fixed side-dish suggestions per cuisine family: (name, category, description).
SIDE_DISHES = {
    "japanese": (
        ("味噌汁", "スープ", "豆腐とわかめの定番の汁物"),
        ("ほうれん草のおひたし", "副菜", "だしが香るさっぱりした青菜"),
    ),
    "western": (
        ("コーンスープ", "スープ", "まろやかで甘いクリームスープ"),
        ("シーザーサラダ", "サラダ", "チーズとクルトンのサラダ"),
    ),
    "chinese": (
        ("中華スープ", "スープ", "卵とねぎのふんわりスープ"),
        ("春雨サラダ", "サラダ", "酢の効いたさっぱりサラダ"),
    ),
    "other": (
        ("コンソメスープ", "スープ", "野菜の旨みが溶けた澄んだスープ"),
        ("グリーンサラダ", "サラダ", "シンプルなドレッシングで食べるサラダ"),
    ),
}

# Cuisine named in user text -> knowledge-base / preference cuisine label.
CUISINE_RULES = (
    (("和食", "和風", "日本料理", "japanese"), "和食"),
    (("中華", "中国料理", "chinese"), "中華"),
    (("洋食", "洋風", "イタリアン", "フレンチ", "western", "italian", "french"), "洋食"),
    (("韓国", "韓国料理", "korean"), "韓国料理"),
)

# Words that ask for a fast dish; these clamp the cooking-time limit.
QUICK_COOKING_KEYWORDS = ("簡単", "時短", "手軽", "早く", "すぐ", "さっと", "quick", "easy", "simple")

# (preference_type, preference_key, preference_value, keywords)
PREFERENCE_RULES = (
    ("cooking_time", "short", "30分以内", ("時短", "早く", "簡単", "quick", "easy")),
    ("dietary_restriction", "healthy", "低カロリー", ("健康", "ヘルシー", "低カロリー", "healthy", "low calorie", "low-calorie")),
    ("other", "spicy", "辛いもの好き", ("辛い", "スパイシー", "spicy")),
)

# User text keywords -> knowledge-base tags used for retrieval scoring.
TAG_RULES = (
    (("簡単", "時短", "手軽", "早く", "すぐ", "さっと", "quick", "easy"), ("簡単", "時短")),
    (("ヘルシー", "健康", "低カロリー", "healthy"), ("ヘルシー",)),
    (("辛い", "スパイシー", "ピリ辛", "spicy"), ("辛い", "スパイシー")),
    (("ご飯", "白米", "おかず"), ("ご飯に合う",)),
    (("野菜",), ("野菜たっぷり",)),
    (("本格",), ("本格的",)),
)

# Seasonings and basics assumed to be on hand when checking what a dish needs.
PANTRY_STAPLES = frozenset({
    "塩", "こしょう", "胡椒", "塩こしょう", "黒こしょう", "砂糖", "醤油", "しょうゆ", "みりん", "酒",
    "酢", "油", "サラダ油", "ごま油", "オリーブオイル", "水", "片栗粉", "水溶き片栗粉", "小麦粉",
})
