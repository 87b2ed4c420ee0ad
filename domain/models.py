from typing import Any, Iterable, Self, Sequence

import markdown2  # pyright: ignore[reportMissingTypeStubs]


DEFAULT_TITLE = "Önerilen Tarif"


class Recipe:
    """What the parser makes of a completion. Compared field by field."""

    def __init__(
        self,
        *,
        title: str = DEFAULT_TITLE,
        ingredients: Sequence[str] = (),
        instructions: str = "",
    ) -> None:
        self.title = title
        self.ingredients = list(ingredients)
        self.instructions = instructions

    def __repr__(self) -> str:
        return f"<Recipe(title={self.title!r}, ingredients={len(self.ingredients)})>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Recipe):
            return NotImplemented
        return (
            self.title == other.title
            and self.ingredients == other.ingredients
            and self.instructions == other.instructions
        )

    @property
    def html(self) -> str:
        return markdown2.markdown(  # pyright: ignore[reportUnknownVariableType, reportUnknownMemberType]
            self.instructions
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "ingredients": list(self.ingredients),
            "instructions": self.instructions,
        }


class StoredRecipe(Recipe):
    def __init__(
        self,
        *,
        id: str,
        user_id: str,
        created_at: str,
        title: str,
        ingredients: Sequence[str],
        instructions: str,
    ) -> None:
        super().__init__(title=title, ingredients=ingredients, instructions=instructions)
        self.id = id
        self.user_id = user_id
        self.created_at = created_at

    def __repr__(self) -> str:
        return f"<StoredRecipe(id={self.id}, title={self.title!r})>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            **super().to_dict(),
            "createdAt": self.created_at,
        }


class FridgeItem:
    def __init__(
        self,
        *,
        id: str,
        user_id: str,
        name: str,
        quantity: str,
        created_at: str,
        updated_at: str,
    ) -> None:
        self.id = id
        self.user_id = user_id
        self.name = name
        self.quantity = quantity
        self.created_at = created_at
        self.updated_at = updated_at

    def __repr__(self) -> str:
        return f"<FridgeItem(name={self.name!r}, quantity={self.quantity!r})>"

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "quantity": self.quantity,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


class Profile:
    def __init__(
        self,
        *,
        user_id: str,
        diet_preferences: Sequence[str] = (),
        allergies: Sequence[str] = (),
        other_allergies: str = "",
    ) -> None:
        self.user_id = user_id
        self.diet_preferences = list(diet_preferences)
        self.allergies = list(allergies)
        self.other_allergies = other_allergies

    @property
    def all_allergies(self) -> list[str]:
        """Selected allergies followed by the free-text ones, comma separated."""
        others = [a.strip() for a in self.other_allergies.split(",")]
        return self.allergies + [a for a in others if a]

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "dietPreferences": list(self.diet_preferences),
            "allergies": list(self.allergies),
            "otherAllergies": self.other_allergies,
        }


def flatten_ingredients(items: Iterable[FridgeItem]) -> str:
    return ", ".join(f"{item.name} ({item.quantity})" for item in items)


class GenerationRequest:
    def __init__(
        self,
        *,
        ingredients: str,
        query: str = "",
        allergies: Sequence[str] = (),
        diet_preferences: Sequence[str] = (),
    ) -> None:
        self.ingredients = ingredients
        self.query = query
        self.allergies = list(allergies)
        self.diet_preferences = list(diet_preferences)

    @classmethod
    def from_fridge(
        cls,
        items: Iterable[FridgeItem],
        *,
        query: str,
        profile: Profile,
    ) -> Self:
        return cls(
            ingredients=flatten_ingredients(items),
            query=query,
            allergies=profile.all_allergies,
            diet_preferences=profile.diet_preferences,
        )
