import contextlib
import logging
from typing import Iterator

from db import FridgeItemsRepository, ProfilesRepository, RecipesRepository
from domain.aopenai import CompletionClient
from domain.models import GenerationRequest, StoredRecipe
from domain.pipeline import generate_from_request


logger = logging.getLogger(__name__)


class EmptyFridge(Exception):
    pass


class GenerationInProgress(Exception):
    pass


class InFlightGuard:
    """At most one recipe generation per user at a time."""

    def __init__(self) -> None:
        self._users: set[str] = set()

    def busy(self, user_id: str) -> bool:
        return user_id in self._users

    @contextlib.contextmanager
    def hold(self, user_id: str) -> Iterator[None]:
        if user_id in self._users:
            raise GenerationInProgress(user_id)
        self._users.add(user_id)
        try:
            yield
        finally:
            self._users.discard(user_id)


async def create_recipe(
    user_id: str,
    *,
    query: str,
    fridge: FridgeItemsRepository,
    profiles: ProfilesRepository,
    recipes: RecipesRepository,
    client: CompletionClient,
    guard: InFlightGuard,
) -> StoredRecipe:
    with guard.hold(user_id):
        items = await fridge.list(user_id)
        if not items:
            raise EmptyFridge(user_id)

        profile = await profiles.get(user_id)
        request = GenerationRequest.from_fridge(items, query=query, profile=profile)
        logger.info(
            "Generating recipe for %s from %d items (%d allergies)",
            user_id,
            len(items),
            len(request.allergies),
        )

        recipe = await generate_from_request(request, client=client)
        return await recipes.add(user_id, recipe)
