from typing import Sequence


SYSTEM_PROMPT = (
    "Sen bir profesyonel şefsin ve kullanıcıya verilen malzemelerle "
    "lezzetli tarifler sunuyorsun."
)

INSTRUCTIONS = (
    "Elimdeki malzemeleri, alerjilerimi ve diyet tercihlerimi veriyorum. "
    "Bu bilgilere göre bana uygun, lezzetli ve pratik bir yemek tarifi öner. "
    "Tüm malzemeleri kullanmak zorunda değilsin, ama elimdeki malzemelerden "
    "olabildiğince faydalanmaya çalış. "
    "Diyet tercihlerime ve alerjilerime kesinlikle uymalısın. "
    "Tarif başlığı kısa ve öz olmalı, maksimum 20 karakter uzunluğunda olsun. "
    "Tarifin adım adım yapılışını ve varsa ekstra ipuçlarını da yaz. "
)

# The parser looks for these labels in this order.
FORMAT = (
    'Yanıtı şu formatta ver: "Başlık: [Tarif Adı], '
    'Malzemeler: [malzeme listesi], Tarif: [tarif adımları]"'
)


def build_prompt(
    ingredients: str,
    query: str = "",
    allergies: Sequence[str] = (),
    diet_preferences: Sequence[str] = (),
) -> str:
    s = f"Buzdolabımda şu malzemeler var: {ingredients}. "

    if query:
        s += f"{query}. "

    if allergies:
        s += f"Alerjilerim: {', '.join(allergies)}. "

    if diet_preferences:
        s += f"Diyet tercihlerim: {', '.join(diet_preferences)}. "

    return s + INSTRUCTIONS + FORMAT
