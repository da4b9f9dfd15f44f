"""
Curation adapter: hands ranked candidates to an LLM editor and validates its selection
"""

import asyncio
import json
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from pydantic import ValidationError

from open_agent import TextBlock  # type: ignore
from open_agent.types import AgentOptions  # type: ignore
from open_agent import client as oa_client  # type: ignore

from tebpaper.utils.constants import CurationConstants
from tebpaper.utils.llm_prompts import LLMPrompts
from tebpaper.utils.logger import logger
from tebpaper.utils.models import (
    CurationCandidate,
    CurationRequest,
    CurationSelection,
    RawArticle,
    ReaderPreferences,
)


class CurationError(Exception):
    """Base exception for curation failures."""
    pass


class CurationUnavailableError(CurationError):
    """Raised when the curation service cannot be reached or times out."""
    pass


class CurationMalformedError(CurationError):
    """Raised when the curation response cannot be parsed or validated."""
    pass


def build_curation_request(
    articles: Sequence[RawArticle],
    preferences: ReaderPreferences,
    max_candidates: int = CurationConstants.MAX_CANDIDATES,
) -> CurationRequest:
    """Take the top of the ranking as candidates; indices refer to that prefix"""
    candidates = [
        CurationCandidate(
            index=i,
            title=article.title,
            source_name=article.source_name,
            category=article.category,
            summary=article.summary[:CurationConstants.CANDIDATE_SUMMARY_LENGTH],
        )
        for i, article in enumerate(articles[:max_candidates])
    ]
    return CurationRequest(
        candidates=candidates,
        reader_leaning=preferences.leaning,
        frequency=preferences.frequency,
        categories=preferences.enabled_categories,
    )


def _extract_json_object(text: str) -> Optional[dict]:
    """Find the first complete JSON object embedded in surrounding text"""
    decoder = json.JSONDecoder()
    start = text.find('{')
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find('{', start + 1)
            continue
        if isinstance(obj, dict):
            return obj
        start = text.find('{', start + 1)
    return None


def parse_curation_response(text: str) -> CurationSelection:
    """
    Turn raw model output into a validated selection.

    The whole text is tried as JSON first. Models sometimes wrap the object in
    prose or code fences, so the first well-formed object inside the text is
    used as a fallback. Anything else is rejected outright; partial data
    never leaves this function.

    Raises:
        CurationMalformedError: If no valid selection can be recovered
    """
    if not text or not text.strip():
        raise CurationMalformedError("Curation response was empty")

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = _extract_json_object(text)
        if data is None:
            raise CurationMalformedError("Failed to parse curator response as JSON")

    if not isinstance(data, dict):
        raise CurationMalformedError("Curator response is not a JSON object")

    try:
        return CurationSelection.model_validate(data)
    except ValidationError as e:
        raise CurationMalformedError(f"Curator response failed validation: {e}") from e


class CurationAdapter(ABC):
    """Boundary to the external selection/summarization service"""

    @abstractmethod
    async def curate(self, request: CurationRequest) -> CurationSelection:
        pass


class LLMCurationAdapter(CurationAdapter):
    """Curates through an OpenAI-compatible endpoint via open-agent-sdk"""

    def __init__(self, config):
        self.config = config
        self.curation_config = config.curation

    async def curate(self, request: CurationRequest) -> CurationSelection:
        """
        Run a single curation call. Never retried here: a repeated call costs
        tokens and may select differently, so retrying is the caller's choice.
        """
        if not self.curation_config.model or not self.curation_config.api_url:
            raise CurationUnavailableError("Curation model or API URL is not configured")

        logger.info(f"Requesting curation for {len(request.candidates)} candidates")
        raw_text = await self._query(LLMPrompts.get_curation_user_prompt(request))
        selection = parse_curation_response(raw_text)
        logger.info(f"Curator selected {len(selection.articles)} articles")
        return selection

    async def _query(self, user_prompt: str) -> str:
        options = AgentOptions(
            system_prompt=LLMPrompts.get_curation_system_prompt(),
            model=self.curation_config.model,
            base_url=self.curation_config.api_url,
            temperature=self.curation_config.temperature,
            max_tokens=self.curation_config.max_tokens,
            api_key=self.curation_config.api_key,
            timeout=self.curation_config.timeout,
        )

        text_parts: List[str] = []
        try:
            async with asyncio.timeout(self.curation_config.timeout):
                async for msg in oa_client.query(user_prompt, options):
                    for block in msg.content:
                        if isinstance(block, TextBlock):
                            text_parts.append(block.text)
        except asyncio.TimeoutError as e:
            logger.warning(f"Curation timed out after {self.curation_config.timeout}s")
            raise CurationUnavailableError(
                f"Curation timed out after {self.curation_config.timeout}s"
            ) from e
        except Exception as e:
            raise CurationUnavailableError(f"Curation request failed: {e}") from e

        return "".join(text_parts).strip()
