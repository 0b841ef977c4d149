from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Protocol, Union

from groq import AsyncGroq

from ..pairings.models import AIPairing, PairingType
from .config import DEFAULT_LLM_CONFIG, LLMConfig

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert sommelier. When a guest names a dish, ingredient or wine "
    "that is not on the house list, you suggest wines that pair with it.\n\n"
    "Return ONLY a valid JSON array, with no prose before or after it."
)

_FENCE_RE = re.compile(r"```[A-Za-z]*[ \t]*\n?(.*?)\n?\s*```", re.DOTALL)


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Suggestions:
    items: tuple[AIPairing, ...]


@dataclass(frozen=True)
class CredentialMissing:
    pass


@dataclass(frozen=True)
class Degraded:
    reason: str = field(default="")


AIConsultResult = Union[Suggestions, CredentialMissing, Degraded]


class CredentialSource(Protocol):
    def load(self) -> str | None: ...


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


def bound_query(query: str, config: LLMConfig = DEFAULT_LLM_CONFIG) -> str:
    return " ".join((query or "").split())[: config.max_query_chars]


def build_prompt(query: str, config: LLMConfig = DEFAULT_LLM_CONFIG) -> str:
    term = bound_query(query, config)
    example = json.dumps(
        [{"name": "Wine name", "type": "wine", "matches": [term], "description": "Why it works"}]
    )
    return (
        f'Suggest exactly {config.suggestion_count} wine pairings for "{term}".\n'
        "Each suggestion must be an object with these fields:\n"
        '- "name": the wine (grape, style or appellation)\n'
        '- "type": always "wine"\n'
        f'- "matches": an array of foods it pairs with, always including "{term}"\n'
        '- "description": one short sentence on why the pairing works\n\n'
        f"Respond with a JSON array shaped like:\n{example}"
    )


# ---------------------------------------------------------------------------
# Response normalization
# ---------------------------------------------------------------------------


def strip_code_fences(text: str) -> str:
    # The fenced block may follow a lead-in line.
    match = _FENCE_RE.search(text or "")
    return (match.group(1) if match else text or "").strip()


def _normalize_item(raw: Any, term: str) -> AIPairing | None:
    if not isinstance(raw, dict):
        return None

    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        return None

    matches = raw.get("matches")
    if not isinstance(matches, list):
        return None
    cleaned = [m.strip() for m in matches if isinstance(m, str) and m.strip()]
    if not cleaned:
        return None
    if term and term.lower() not in (m.lower() for m in cleaned):
        cleaned.append(term)

    description = raw.get("description")
    return AIPairing(
        name=name.strip(),
        type=PairingType.wine,
        matches=tuple(cleaned),
        description=description.strip() if isinstance(description, str) else "",
    )


def parse_suggestions(
    content: str,
    query: str,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> AIConsultResult:
    """
    Turn raw model text into a consult result.

    Invalid elements are dropped individually; an unparseable reply or one with no
    valid element is ``Degraded``.
    """
    try:
        parsed = json.loads(strip_code_fences(content))
    except (json.JSONDecodeError, TypeError):
        return Degraded("response was not valid JSON")

    if not isinstance(parsed, list):
        return Degraded("response was not a JSON array")

    # The prompt sees a bounded term; stored matches keep the query as typed.
    term = (query or "").strip()
    items = [item for item in (_normalize_item(raw, term) for raw in parsed) if item is not None]
    if not items:
        return Degraded("response contained no usable suggestions")

    return Suggestions(items=tuple(items[: config.suggestion_count]))


# ---------------------------------------------------------------------------
# LLM Call
# ---------------------------------------------------------------------------


async def consult(
    query: str,
    credentials: CredentialSource,
    config: LLMConfig = DEFAULT_LLM_CONFIG,
) -> AIConsultResult:
    """
    Ask Groq for wine suggestions for ``query``.

    Returns ``CredentialMissing`` before any network call when no key is stored.
    Every other failure (disabled, timeout, API error, bad output) is ``Degraded``.
    """
    api_key = credentials.load()
    if not api_key:
        return CredentialMissing()

    if not config.enabled:
        return Degraded("AI consult is disabled")

    if not bound_query(query, config):
        return Degraded("empty query")

    try:
        client = AsyncGroq(api_key=api_key, timeout=config.timeout, max_retries=0)
        response = await client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(query, config)},
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
        content = response.choices[0].message.content or ""
    except Exception:
        logger.warning("Groq pairing consult failed", exc_info=True)
        return Degraded("request to the AI service failed")

    result = parse_suggestions(content, query, config)
    if isinstance(result, Degraded):
        logger.warning("Discarding Groq reply for %r: %s", query, result.reason)
    return result
