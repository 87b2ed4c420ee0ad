from typing import Callable

import pytest

from conftest import FakeCompletions, completion
from domain.aopenai import GenerationFormatError, GenerationHttpError
from domain.models import GenerationRequest, Recipe
from domain.pipeline import generate, generate_from_request
from domain.prompts import build_prompt


Factory = Callable[..., FakeCompletions]


PILAV_RECIPE = Recipe(
    title="Tavuklu Pilav",
    ingredients=["tavuk", "pirinç", "soğan"],
    instructions="Soğanı kavur, tavuğu ekle, pirinci ekle ve pişir.",
)


@pytest.mark.asyncio
async def test_generate(fake_completions: Factory) -> None:
    fake = fake_completions()
    client = fake.client()
    got = await generate("tavuk (500 g), pirinç (2 su bardağı), soğan (1)", "", [], [], client=client)
    await client.aclose()

    assert got == PILAV_RECIPE
    assert len(fake.requests) == 1


@pytest.mark.asyncio
async def test_generate_sends_built_prompt(fake_completions: Factory) -> None:
    fake = fake_completions()
    client = fake.client()
    await generate("yumurta (6)", "Kahvaltı", ["Süt"], ["vegetarian"], client=client)
    await client.aclose()

    user = fake.payloads[0]["messages"][1]
    assert user["content"] == build_prompt("yumurta (6)", "Kahvaltı", ["Süt"], ["vegetarian"])


@pytest.mark.asyncio
async def test_generate_degrades(fake_completions: Factory) -> None:
    fake = fake_completions(body=completion("bir tarif yok"))
    client = fake.client()
    got = await generate("yumurta (6)", client=client)
    await client.aclose()
    assert got == Recipe(title="Önerilen Tarif", ingredients=[], instructions="bir tarif yok")


@pytest.mark.asyncio
async def test_generate_http_error(
    fake_completions: Factory, monkeypatch: pytest.MonkeyPatch
) -> None:
    def parse(text: str) -> Recipe:
        raise AssertionError("parser should not run")

    monkeypatch.setattr("domain.pipeline.parse", parse)
    fake = fake_completions(status_code=429, body={"error": "rate limited"})
    client = fake.client()
    with pytest.raises(GenerationHttpError) as e:
        await generate("yumurta (6)", client=client)
    await client.aclose()
    assert e.value.status_code == 429


@pytest.mark.asyncio
async def test_generate_format_error(fake_completions: Factory) -> None:
    fake = fake_completions(body={"id": "chatcmpl-1"})
    client = fake.client()
    with pytest.raises(GenerationFormatError):
        await generate("yumurta (6)", client=client)
    await client.aclose()


@pytest.mark.asyncio
async def test_generate_from_request(fake_completions: Factory) -> None:
    fake = fake_completions()
    client = fake.client()
    request = GenerationRequest(
        ingredients="tavuk (1)",
        query="Pilav",
        allergies=["Balık"],
        diet_preferences=["glutenFree"],
    )
    got = await generate_from_request(request, client=client)
    await client.aclose()

    assert got == PILAV_RECIPE
    content = fake.payloads[0]["messages"][1]["content"]
    assert "Alerjilerim: Balık. " in content
    assert "Diyet tercihlerim: glutenFree. " in content
