"""
Search orchestrator: the public surface of conversation-aware property search.

Validates the prompt and credential, runs translation then execution, keeps the
conversation id between turns and exposes the outcome of the latest run as
either a SearchResult or a SearchError.

Each orchestrator is single-flight: callers must not start a second search()
while one is outstanding (check ``loading`` first). Calls are never queued or
interleaved here.

Usage:
    async with SearchOrchestrator(api_key="...") as orchestrator:
        await orchestrator.search("3 bedroom condo in Toronto")
        await orchestrator.search("under $800k")   # refines the first turn
        orchestrator.reset()                        # starts a new conversation
"""

import asyncio
import os
import sys

import httpx
import structlog

from homefinder.config import RepliersConfig
from homefinder.constants import (
    API_KEY_MALFORMED_MESSAGE,
    API_KEY_MISSING_MESSAGE,
    QUERY_REQUIRED_MESSAGE,
    SEARCH_FAILED_MESSAGE,
)
from homefinder.models.search import ErrorKind, SearchError, SearchResult, SearchStatus
from homefinder.services.conversation import ConversationState
from homefinder.services.executor import QueryExecutor
from homefinder.services.repliers import create_http_client
from homefinder.services.translator import QueryTranslator

logger = structlog.get_logger(__name__)

_IN_FLIGHT = frozenset({SearchStatus.TRANSLATING, SearchStatus.EXECUTING})


def validate_search_input(prompt: str | None, api_key: str | None) -> SearchError | None:
    """
    Check a prompt and credential before any network call is made.

    Returns:
        None when the search may proceed, otherwise a VALIDATION_FAILED error.
    """
    if not prompt or not prompt.strip():
        return SearchError(kind=ErrorKind.VALIDATION_FAILED, message=QUERY_REQUIRED_MESSAGE)
    if not api_key:
        return SearchError(kind=ErrorKind.VALIDATION_FAILED, message=API_KEY_MISSING_MESSAGE)
    # HTTP header values are ASCII on the wire
    if not api_key.isascii():
        return SearchError(kind=ErrorKind.VALIDATION_FAILED, message=API_KEY_MALFORMED_MESSAGE)
    return None


class SearchOrchestrator:
    """Runs the translate-then-execute pipeline for one conversation."""

    def __init__(
        self,
        api_key: str | None,
        repliers_config: RepliersConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            api_key:         Repliers API key. A missing key is reported by
                             search() as VALIDATION_FAILED.
            repliers_config: Endpoint configuration shared by both calls.
            client:          Optional shared httpx client. When omitted the
                             orchestrator creates and owns one.
        """
        self.repliers_config = repliers_config or RepliersConfig()
        self._owns_client = client is None
        self._client = client or create_http_client(self.repliers_config)
        self._translator = QueryTranslator(api_key or "", self._client, self.repliers_config)
        self._executor = QueryExecutor(api_key or "", self._client, self.repliers_config)
        self._conversation = ConversationState()
        self._api_key = api_key
        self._status = SearchStatus.IDLE
        self._result: SearchResult | None = None
        self._error: SearchError | None = None

    async def __aenter__(self) -> "SearchOrchestrator":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Drop the conversation and close the HTTP client if we own it."""
        self.reset()
        if self._owns_client:
            await self._client.aclose()

    @property
    def api_key(self) -> str | None:
        return self._api_key

    @api_key.setter
    def api_key(self, value: str | None) -> None:
        self._api_key = value
        self._translator.api_key = value or ""
        self._executor.api_key = value or ""

    @property
    def conversation_id(self) -> str | None:
        return self._conversation.current()

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def loading(self) -> bool:
        return self._status in _IN_FLIGHT

    @property
    def result(self) -> SearchResult | None:
        return self._result

    @property
    def error(self) -> SearchError | None:
        return self._error

    async def search(self, prompt: str) -> SearchResult | SearchError:
        """
        Resolve a natural-language prompt into listings.

        The conversation id returned by a successful translation is stored
        before the listings call and is kept even if that call fails, so the
        next prompt still refines this turn. On any failure the previous result
        stays available through ``result``.

        Args:
            prompt: Natural-language search request or refinement.

        Returns:
            The new SearchResult, or the SearchError that ended the run.
        """
        settled_status = self._status
        self._error = None

        invalid = validate_search_input(prompt, self._api_key)
        if invalid is not None:
            return self._fail(invalid)

        self._status = SearchStatus.TRANSLATING
        logger.info("search_started", conversation_id=self._conversation.current())

        try:
            translation = await self._translator.translate(
                prompt.strip(), self._conversation.current()
            )
            if isinstance(translation, SearchError):
                return self._fail(translation)

            self._conversation.set(translation.conversation_id)

            self._status = SearchStatus.EXECUTING
            listings = await self._executor.execute(translation.descriptor)
            if isinstance(listings, SearchError):
                return self._fail(listings)

        except httpx.HTTPError:
            logger.exception("search_network_failure", status=self._status.value)
            return self._fail(
                SearchError(kind=ErrorKind.NETWORK_FAILURE, message=SEARCH_FAILED_MESSAGE)
            )
        finally:
            # Cancellation or an unexpected error must not leave the run in flight
            if self._status in _IN_FLIGHT:
                self._status = settled_status

        result = SearchResult.from_listings(
            listings=listings,
            summary=translation.summary,
            conversation_id=translation.conversation_id,
        )
        self._result = result
        self._status = SearchStatus.SUCCESS
        logger.info(
            "search_completed",
            conversation_id=result.conversation_id,
            count=result.count,
        )
        return result

    def reset(self) -> None:
        """Forget the conversation and any stored result or error."""
        logger.info("search_conversation_reset", conversation_id=self._conversation.current())
        self._conversation.clear()
        self._result = None
        self._error = None
        self._status = SearchStatus.IDLE

    def _fail(self, error: SearchError) -> SearchError:
        logger.warning(
            "search_failed",
            kind=error.kind.value,
            status_code=error.status_code,
            conversation_id=self._conversation.current(),
        )
        self._error = error
        self._status = SearchStatus.ERROR
        return error


if __name__ == "__main__":
    async def _demo(prompts: list[str]) -> None:
        async with SearchOrchestrator(api_key=os.getenv("REPLIERS_API_KEY")) as orchestrator:
            for prompt in prompts:
                outcome = await orchestrator.search(prompt)
                print(outcome.model_dump(exclude={"listings"}))

    asyncio.run(_demo(sys.argv[1:] or ["3 bedroom condo in Toronto", "under $800k"]))
