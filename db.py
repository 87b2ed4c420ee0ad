from datetime import datetime, timezone
import json
from uuid import uuid4

from databases import Database
from databases.interfaces import Record

from domain.models import FridgeItem, Profile, Recipe, StoredRecipe


CREATE_FRIDGE_ITEMS_TABLE = """
CREATE TABLE IF NOT EXISTS FridgeItems (
    id VARCHAR(64) PRIMARY KEY,
    user_id VARCHAR(128) NOT NULL,
    name VARCHAR(256) NOT NULL,
    quantity VARCHAR(256) NOT NULL,
    created_at VARCHAR(64) NOT NULL,
    updated_at VARCHAR(64) NOT NULL
)
"""

CREATE_PROFILES_TABLE = """
CREATE TABLE IF NOT EXISTS Profiles (
    user_id VARCHAR(128) PRIMARY KEY,
    diet_preferences TEXT NOT NULL,
    allergies TEXT NOT NULL,
    other_allergies TEXT NOT NULL
)
"""

CREATE_RECIPES_TABLE = """
CREATE TABLE IF NOT EXISTS Recipes (
    id VARCHAR(64) PRIMARY KEY,
    user_id VARCHAR(128) NOT NULL,
    title VARCHAR(256) NOT NULL,
    ingredients TEXT NOT NULL,
    instructions TEXT NOT NULL,
    created_at VARCHAR(64) NOT NULL
)
"""


CREATE_FRIDGE_ITEM = """
INSERT INTO FridgeItems(id, user_id, name, quantity, created_at, updated_at)
VALUES (:id, :user_id, :name, :quantity, :created_at, :updated_at)
"""

UPDATE_FRIDGE_ITEM = """
UPDATE FridgeItems SET name = :name, quantity = :quantity, updated_at = :updated_at
WHERE id = :id AND user_id = :user_id
"""

GET_FRIDGE_ITEM = "SELECT * FROM FridgeItems WHERE id = :id AND user_id = :user_id"

DELETE_FRIDGE_ITEM = "DELETE FROM FridgeItems WHERE id = :id AND user_id = :user_id"

LIST_FRIDGE_ITEMS = """
SELECT * FROM FridgeItems WHERE user_id = :user_id
ORDER BY created_at DESC, rowid DESC
"""


GET_PROFILE = "SELECT * FROM Profiles WHERE user_id = :user_id"

SAVE_PROFILE = """
INSERT INTO Profiles(user_id, diet_preferences, allergies, other_allergies)
VALUES (:user_id, :diet_preferences, :allergies, :other_allergies)
ON CONFLICT(user_id) DO UPDATE SET
    diet_preferences = excluded.diet_preferences,
    allergies = excluded.allergies,
    other_allergies = excluded.other_allergies
"""


CREATE_RECIPE = """
INSERT INTO Recipes(id, user_id, title, ingredients, instructions, created_at)
VALUES (:id, :user_id, :title, :ingredients, :instructions, :created_at)
"""

GET_RECIPE = "SELECT * FROM Recipes WHERE id = :id"

RENAME_RECIPE = "UPDATE Recipes SET title = :title WHERE id = :id"

DELETE_RECIPE = "DELETE FROM Recipes WHERE id = :id"

LIST_RECIPES = """
SELECT * FROM Recipes WHERE user_id = :user_id
ORDER BY created_at DESC, rowid DESC
"""


class FridgeItemNotFound(Exception):
    pass


class RecipeNotFound(Exception):
    pass


def now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def create_db(db: Database) -> None:
    for query in (CREATE_FRIDGE_ITEMS_TABLE, CREATE_PROFILES_TABLE, CREATE_RECIPES_TABLE):
        await db.execute(query=query)  # pyright: ignore[reportUnknownMemberType]


def _fridge_item(r: Record) -> FridgeItem:
    return FridgeItem(
        id=r["id"],
        user_id=r["user_id"],
        name=r["name"],
        quantity=r["quantity"],
        created_at=r["created_at"],
        updated_at=r["updated_at"],
    )


def _stored_recipe(r: Record) -> StoredRecipe:
    return StoredRecipe(
        id=r["id"],
        user_id=r["user_id"],
        title=r["title"],
        ingredients=json.loads(r["ingredients"]),
        instructions=r["instructions"],
        created_at=r["created_at"],
    )


class FridgeItemsRepository:
    """Fridge items, one row per item."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def add(self, user_id: str, name: str, quantity: str) -> FridgeItem:
        name = name.strip()
        if not name:
            raise ValueError("Item name cannot be empty.")
        ts = now()
        item = FridgeItem(
            id=uuid4().hex,
            user_id=user_id,
            name=name,
            quantity=quantity,
            created_at=ts,
            updated_at=ts,
        )
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            CREATE_FRIDGE_ITEM,
            values={
                "id": item.id,
                "user_id": item.user_id,
                "name": item.name,
                "quantity": item.quantity,
                "created_at": item.created_at,
                "updated_at": item.updated_at,
            },
        )
        return item

    async def get(self, user_id: str, id: str) -> FridgeItem:
        result = await self.db.fetch_one(  # pyright: ignore[reportUnknownMemberType]
            GET_FRIDGE_ITEM, values={"id": id, "user_id": user_id}
        )
        if result is None:
            raise FridgeItemNotFound(id)
        return _fridge_item(result)

    async def update(
        self, user_id: str, id: str, name: str, quantity: str
    ) -> FridgeItem:
        name = name.strip()
        if not name:
            raise ValueError("Item name cannot be empty.")
        await self.get(user_id, id)
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            UPDATE_FRIDGE_ITEM,
            values={
                "id": id,
                "user_id": user_id,
                "name": name,
                "quantity": quantity,
                "updated_at": now(),
            },
        )
        return await self.get(user_id, id)

    async def delete(self, user_id: str, id: str) -> None:
        await self.get(user_id, id)
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            DELETE_FRIDGE_ITEM, values={"id": id, "user_id": user_id}
        )

    async def list(self, user_id: str) -> tuple[FridgeItem, ...]:
        result = await self.db.fetch_all(  # pyright: ignore[reportUnknownMemberType]
            LIST_FRIDGE_ITEMS, values={"user_id": user_id}
        )
        return tuple(_fridge_item(r) for r in result)


class ProfilesRepository:
    def __init__(self, db: Database) -> None:
        self.db = db

    async def get(self, user_id: str) -> Profile:
        result = await self.db.fetch_one(  # pyright: ignore[reportUnknownMemberType]
            GET_PROFILE, values={"user_id": user_id}
        )
        if result is None:
            return Profile(user_id=user_id)
        return Profile(
            user_id=result["user_id"],
            diet_preferences=json.loads(result["diet_preferences"]),
            allergies=json.loads(result["allergies"]),
            other_allergies=result["other_allergies"],
        )

    async def save(self, profile: Profile) -> Profile:
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            SAVE_PROFILE,
            values={
                "user_id": profile.user_id,
                "diet_preferences": json.dumps(profile.diet_preferences, ensure_ascii=False),
                "allergies": json.dumps(profile.allergies, ensure_ascii=False),
                "other_allergies": profile.other_allergies,
            },
        )
        return profile


class RecipesRepository:
    """Recipes repository."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def add(self, user_id: str, recipe: Recipe) -> StoredRecipe:
        stored = StoredRecipe(
            id=uuid4().hex,
            user_id=user_id,
            created_at=now(),
            title=recipe.title,
            ingredients=recipe.ingredients,
            instructions=recipe.instructions,
        )
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            CREATE_RECIPE,
            values={
                "id": stored.id,
                "user_id": stored.user_id,
                "title": stored.title,
                "ingredients": json.dumps(stored.ingredients, ensure_ascii=False),
                "instructions": stored.instructions,
                "created_at": stored.created_at,
            },
        )
        return stored

    async def get(self, id: str) -> StoredRecipe:
        result = await self.db.fetch_one(  # pyright: ignore[reportUnknownMemberType]
            GET_RECIPE, values={"id": id}
        )
        if result is None:
            raise RecipeNotFound(id)
        return _stored_recipe(result)

    async def rename(self, id: str, title: str) -> StoredRecipe:
        title = title.strip()
        if not title:
            raise ValueError("Recipe title cannot be empty.")
        await self.get(id)
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            RENAME_RECIPE, values={"id": id, "title": title}
        )
        return await self.get(id)

    async def delete(self, id: str) -> None:
        await self.get(id)
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            DELETE_RECIPE, values={"id": id}
        )

    async def list(self, user_id: str) -> tuple[StoredRecipe, ...]:
        result = await self.db.fetch_all(  # pyright: ignore[reportUnknownMemberType]
            LIST_RECIPES, values={"user_id": user_id}
        )
        return tuple(_stored_recipe(r) for r in result)
