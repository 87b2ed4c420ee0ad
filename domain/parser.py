"""Pull a recipe out of the completion text.

The reply is free text. Each field is extracted on its own so a reply that is
only partly in the requested format still gives something useful.
"""

import re

from domain.models import DEFAULT_TITLE, Recipe


TITLE_PATTERN = re.compile(r"Başlık: ([^,\n]+)", re.IGNORECASE)
INGREDIENTS_PATTERN = re.compile(
    r"Malzemeler: (.+?)(?=Tarif:|\Z)", re.IGNORECASE | re.DOTALL
)
INSTRUCTIONS_PATTERN = re.compile(r"Tarif: (.+)\Z", re.IGNORECASE | re.DOTALL)
HEADER_PATTERN = re.compile(
    r"Başlık: .+\nMalzemeler: .+\n", re.IGNORECASE | re.DOTALL
)
SEPARATORS = re.compile(r"[\n,]+")


def extract_title(text: str) -> str:
    match = TITLE_PATTERN.search(text)
    if match:
        title = match.group(1).strip()
        if title:
            return title
    return DEFAULT_TITLE


def extract_ingredients(text: str) -> list[str]:
    match = INGREDIENTS_PATTERN.search(text)
    if not match:
        return []
    pieces = (p.strip() for p in SEPARATORS.split(match.group(1)))
    return [p for p in pieces if p]


def extract_instructions(text: str) -> str:
    match = INSTRUCTIONS_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    # May leave the whole text untouched.
    return HEADER_PATTERN.sub("", text, count=1).strip()


def parse(text: str) -> Recipe:
    return Recipe(
        title=extract_title(text),
        ingredients=extract_ingredients(text),
        instructions=extract_instructions(text),
    )
