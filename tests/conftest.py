import json
from pathlib import Path
from typing import Any, AsyncIterator, Callable

from databases import Database
import httpx
import pytest
import pytest_asyncio

import config
import db
from domain.aopenai import CompletionClient


ROOT = Path(__file__).parent.parent


PILAV = (
    "Başlık: Tavuklu Pilav, Malzemeler: tavuk, pirinç, soğan\n"
    "Tarif: Soğanı kavur, tavuğu ekle, pirinci ekle ve pişir."
)


def completion(content: Any) -> dict[str, Any]:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


class FakeCompletions:
    """Stands in for the completion endpoint and records what it was sent."""

    def __init__(self, status_code: int = 200, body: Any = None) -> None:
        self.status_code = status_code
        self.body = completion(PILAV) if body is None else body
        self.requests: list[httpx.Request] = []

    @property
    def payloads(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)

    def client(self, token: str = "sk-test") -> CompletionClient:
        http = httpx.AsyncClient(
            transport=httpx.MockTransport(self),
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )
        return CompletionClient(url="https://llm.test/v1/chat/completions", client=http)


@pytest.fixture
def fake_completions() -> Callable[..., FakeCompletions]:
    return FakeCompletions


@pytest.fixture
def cfg(tmp_path: Path) -> config.Config:
    return config.Config(
        db_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        html_dir=ROOT / "assets" / "html",
        openai_api_key="sk-test",
    )


@pytest_asyncio.fixture
async def database(cfg: config.Config) -> AsyncIterator[Database]:
    database = Database(cfg.db_url)
    await database.connect()
    await db.create_db(database)
    yield database
    await database.disconnect()
