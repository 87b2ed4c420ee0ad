"""The point."""

import logging
from typing import Sequence

from domain.aopenai import CompletionClient
from domain.models import GenerationRequest, Recipe
from domain.parser import parse
from domain.prompts import build_prompt


logger = logging.getLogger(__name__)


async def generate(
    ingredients: str,
    query: str = "",
    allergies: Sequence[str] = (),
    diet_preferences: Sequence[str] = (),
    *,
    client: CompletionClient,
) -> Recipe:
    """Core functionality. Ask for a recipe and parse whatever comes back.

    Errors from the client propagate as they are.
    """
    prompt = build_prompt(ingredients, query, allergies, diet_preferences)
    logger.debug(prompt)

    text = await client.complete(prompt)

    recipe = parse(text)
    logger.info("Generated %r", recipe)
    return recipe


async def generate_from_request(
    request: GenerationRequest,
    *,
    client: CompletionClient,
) -> Recipe:
    return await generate(
        request.ingredients,
        request.query,
        request.allergies,
        request.diet_preferences,
        client=client,
    )
