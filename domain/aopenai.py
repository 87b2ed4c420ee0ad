import logging
from typing import Any

import httpx

from domain.prompts import SYSTEM_PROMPT


logger = logging.getLogger(__name__)


DEFAULT_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-mini"
TEMPERATURE = 0.7
MAX_TOKENS = 1000
TIMEOUT = 60 * 2


class GenerationError(Exception):
    pass


class GenerationHttpError(GenerationError):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"Completion request failed: {status_code}")
        self.status_code = status_code


class GenerationFormatError(GenerationError):
    pass


def openai_client_factory(
    token: str,
    *,
    timeout: float = TIMEOUT,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        headers={
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        },
        timeout=timeout,
    )


def _error_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text


class CompletionClient:
    """One chat completion per call against a configured endpoint."""

    def __init__(
        self,
        *,
        url: str = DEFAULT_URL,
        token: str = "",
        model: str = DEFAULT_MODEL,
        timeout: float = TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.model = model
        self._client = (
            openai_client_factory(token, timeout=timeout) if client is None else client
        )

    def payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

    async def complete(self, prompt: str) -> str:
        resp = await self._client.post(self.url, json=self.payload(prompt))

        if not resp.is_success:
            logger.error(
                "Completion error response (%s): %s",
                resp.status_code,
                _error_body(resp),
            )
            raise GenerationHttpError(resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise GenerationFormatError("Completion response is not JSON.") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationFormatError(
                "Problem reading completion. "
                "Expecting a 'choices[0].message.content' path."
            ) from e

        if not isinstance(content, str):
            raise GenerationFormatError("Non-string completion content.")

        return content.strip()

    async def aclose(self) -> None:
        await self._client.aclose()
