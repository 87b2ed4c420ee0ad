from domain.models import (
    DEFAULT_TITLE,
    FridgeItem,
    GenerationRequest,
    Profile,
    Recipe,
    StoredRecipe,
    flatten_ingredients,
)


def item(name: str, quantity: str) -> FridgeItem:
    return FridgeItem(
        id=name,
        user_id="u1",
        name=name,
        quantity=quantity,
        created_at="2026-01-01T00:00:00+00:00",
        updated_at="2026-01-01T00:00:00+00:00",
    )


def test_recipe_defaults() -> None:
    recipe = Recipe()
    assert recipe.title == DEFAULT_TITLE
    assert recipe.ingredients == []
    assert recipe.instructions == ""


def test_recipe_equality() -> None:
    assert Recipe(title="A", ingredients=("x",), instructions="y") == Recipe(
        title="A", ingredients=["x"], instructions="y"
    )
    assert Recipe(title="A") != Recipe(title="B")


def test_recipe_html() -> None:
    recipe = Recipe(instructions="1. **Soğanı** kavur\n2. Pişir")
    assert "<strong>Soğanı</strong>" in recipe.html
    assert "<ol>" in recipe.html


def test_stored_recipe_to_dict() -> None:
    recipe = StoredRecipe(
        id="r1",
        user_id="u1",
        created_at="2026-01-01T00:00:00+00:00",
        title="Menemen",
        ingredients=["yumurta"],
        instructions="Pişir.",
    )
    assert recipe.to_dict() == {
        "id": "r1",
        "userId": "u1",
        "title": "Menemen",
        "ingredients": ["yumurta"],
        "instructions": "Pişir.",
        "createdAt": "2026-01-01T00:00:00+00:00",
    }
    assert recipe == Recipe(title="Menemen", ingredients=["yumurta"], instructions="Pişir.")


def test_profile_all_allergies() -> None:
    profile = Profile(user_id="u1", allergies=["eggs"], other_allergies=" kivi, , çilek ,")
    assert profile.all_allergies == ["eggs", "kivi", "çilek"]


def test_profile_all_allergies_empty() -> None:
    assert Profile(user_id="u1").all_allergies == []


def test_flatten_ingredients() -> None:
    got = flatten_ingredients([item("tavuk", "500 g"), item("soğan", "2 adet")])
    assert got == "tavuk (500 g), soğan (2 adet)"


def test_generation_request_from_fridge() -> None:
    profile = Profile(
        user_id="u1",
        diet_preferences=["keto"],
        allergies=["fish"],
        other_allergies="kivi",
    )
    request = GenerationRequest.from_fridge(
        [item("yumurta", "6")], query="Kahvaltı", profile=profile
    )
    assert request.ingredients == "yumurta (6)"
    assert request.query == "Kahvaltı"
    assert request.allergies == ["fish", "kivi"]
    assert request.diet_preferences == ["keto"]
