"""
Data models for natural-language property search.

These models define the wire format of the NLP endpoint, the query descriptor
handed from translation to execution, and the result/error surface exposed by
the search orchestrator.
"""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# A listing is an opaque property record: counted and forwarded, never inspected
Listing = Any


class ErrorKind(str, Enum):
    """Failure categories surfaced by a search pipeline run."""

    VALIDATION_FAILED = "validation_failed"
    DOMAIN_IRRELEVANT = "domain_irrelevant"
    TRANSLATION_FAILED = "translation_failed"
    EXECUTION_FAILED = "execution_failed"
    NETWORK_FAILURE = "network_failure"


class SearchStatus(str, Enum):
    """Lifecycle of a search orchestrator."""

    IDLE = "idle"
    TRANSLATING = "translating"
    EXECUTING = "executing"
    SUCCESS = "success"
    ERROR = "error"


class SearchError(BaseModel):
    """Tagged error produced instead of a SearchResult."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind = Field(description="Failure category")
    message: str = Field(description="User-facing message")
    status_code: int | None = Field(
        default=None, description="Upstream HTTP status, when the failure came from one"
    )


class QueryDescriptor(BaseModel):
    """How to query the listings service, as produced by translation."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Listings URL including the translated filters")
    # Only a non-empty object is sent as a POST payload; anything else means GET
    body: Any | None = Field(
        default=None, description="Structured filters that require a POST payload"
    )


class NLPRequest(BaseModel):
    """Request body for the NLP endpoint.

    ``conversation_id`` is dropped from the payload when absent so that a new
    conversation never sends ``"conversationId": null``. The key it travels
    under is configurable (``RepliersConfig.conversation_id_field``) because
    the Repliers API itself names it ``nlpId``.
    """

    model_config = ConfigDict(populate_by_name=True)

    prompt: str
    conversation_id: str | None = Field(default=None, alias="conversationId")

    def to_payload(self, conversation_key: str = "conversationId") -> dict[str, Any]:
        payload: dict[str, Any] = {"prompt": self.prompt}
        if self.conversation_id is not None:
            payload[conversation_key] = self.conversation_id
        return payload


class NLPQuery(BaseModel):
    """The ``request`` block of an NLP response."""

    url: str
    body: Any | None = None
    summary: str | None = None


class NLPResponse(BaseModel):
    """Successful NLP endpoint response."""

    conversation_id: str = Field(validation_alias=AliasChoices("conversationId", "nlpId"))
    summary: str | None = None
    request: NLPQuery

    def resolved_summary(self) -> str:
        # Some responses only carry the summary inside the request block
        return self.summary or self.request.summary or ""

    def to_descriptor(self) -> QueryDescriptor:
        return QueryDescriptor(url=self.request.url, body=self.request.body)


class TranslationResult(BaseModel):
    """Output of a successful translation."""

    model_config = ConfigDict(frozen=True)

    descriptor: QueryDescriptor
    summary: str
    conversation_id: str


class SearchResult(BaseModel):
    """Aggregated outcome of a successful pipeline run."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    listings: list[Listing] = Field(default_factory=list)
    summary: str = ""
    conversation_id: str = Field(alias="conversationId")
    count: int = Field(ge=0)

    @classmethod
    def from_listings(
        cls, listings: list[Listing], summary: str, conversation_id: str
    ) -> "SearchResult":
        return cls(
            listings=listings,
            summary=summary,
            conversation_id=conversation_id,
            count=len(listings),
        )
