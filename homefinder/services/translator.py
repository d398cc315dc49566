"""
Query translator service: turns a natural-language prompt into a listings query.

Sends the prompt, plus the conversation id of the previous turn when there is
one, to the Repliers NLP endpoint. The endpoint answers with a listings URL
(and optionally a structured body), a human-readable summary and the
conversation id to use for the next refinement.

Usage:
    translator = QueryTranslator(api_key="...", client=httpx.AsyncClient())
    outcome = await translator.translate("3 bedroom condo in Toronto")
    # Returns: TranslationResult on success, SearchError on a rejected prompt
    # or a failed NLP call.
"""

import httpx
import structlog

from homefinder.config import RepliersConfig
from homefinder.constants import (
    NOT_PROPERTY_SEARCH_MESSAGE,
    SEARCH_FAILED_MESSAGE,
    STATUS_NOT_PROPERTY_SEARCH,
    TRANSLATION_STATUS_MESSAGES,
)
from homefinder.models.search import (
    ErrorKind,
    NLPRequest,
    NLPResponse,
    SearchError,
    TranslationResult,
)
from homefinder.services.repliers import auth_headers

logger = structlog.get_logger(__name__)


class QueryTranslator:
    """Client for the Repliers NLP endpoint."""

    def __init__(
        self,
        api_key: str,
        client: httpx.AsyncClient,
        repliers_config: RepliersConfig | None = None,
    ):
        """
        Initialize the translator.

        Args:
            api_key:         Repliers API key sent in the credential header.
            client:          Shared httpx client (owned by the caller).
            repliers_config: Endpoint and header configuration.
        """
        self.api_key = api_key
        self.repliers_config = repliers_config or RepliersConfig()
        self._client = client

    async def translate(
        self, prompt: str, conversation_id: str | None = None
    ) -> TranslationResult | SearchError:
        """
        Translate a prompt into a query descriptor with a single NLP round trip.

        The caller guarantees a non-blank prompt. No retries are attempted.

        Args:
            prompt:          Natural-language search request.
            conversation_id: Id returned by the previous successful translation,
                             or None to start a new conversation.

        Returns:
            TranslationResult on success, otherwise a SearchError tagged
            DOMAIN_IRRELEVANT (406) or TRANSLATION_FAILED (anything else).

        Raises:
            httpx.HTTPError: On transport-level failures (connection, timeout).
        """
        payload = NLPRequest(prompt=prompt, conversation_id=conversation_id).to_payload(
            self.repliers_config.conversation_id_field
        )
        logger.info(
            "nlp_request_sent",
            prompt_preview=prompt[:50],
            conversation_id=conversation_id,
        )

        response = await self._client.post(
            self.repliers_config.nlp_url,
            json=payload,
            headers=auth_headers(self.api_key, self.repliers_config),
        )

        if response.status_code == STATUS_NOT_PROPERTY_SEARCH:
            logger.info("nlp_prompt_not_property_search", status_code=response.status_code)
            return SearchError(
                kind=ErrorKind.DOMAIN_IRRELEVANT,
                message=NOT_PROPERTY_SEARCH_MESSAGE,
                status_code=response.status_code,
            )

        if not response.is_success:
            logger.warning("nlp_request_failed", status_code=response.status_code)
            return SearchError(
                kind=ErrorKind.TRANSLATION_FAILED,
                message=TRANSLATION_STATUS_MESSAGES.get(
                    response.status_code, SEARCH_FAILED_MESSAGE
                ),
                status_code=response.status_code,
            )

        try:
            nlp_data = NLPResponse.model_validate(response.json())
        except ValueError as e:
            # Covers malformed JSON and pydantic validation errors alike
            logger.warning("nlp_response_invalid", error=str(e))
            return SearchError(
                kind=ErrorKind.TRANSLATION_FAILED,
                message=SEARCH_FAILED_MESSAGE,
                status_code=response.status_code,
            )

        descriptor = nlp_data.to_descriptor()
        logger.info(
            "nlp_request_translated",
            conversation_id=nlp_data.conversation_id,
            url=descriptor.url,
            has_body=bool(descriptor.body),
        )
        return TranslationResult(
            descriptor=descriptor,
            summary=nlp_data.resolved_summary(),
            conversation_id=nlp_data.conversation_id,
        )
