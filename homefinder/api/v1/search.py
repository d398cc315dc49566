"""
Natural-language property search API endpoints.

Each conversation is a session backed by its own SearchOrchestrator. Sending a
prompt without a session_id opens a new conversation; sending the returned
session_id again refines it.

Endpoints:
- POST   /api/v1/search                     - Run a search turn
- POST   /api/v1/search/{session_id}/reset  - Start the conversation over
- DELETE /api/v1/search/{session_id}        - Close the conversation
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Header, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from homefinder.config import get_settings
from homefinder.models.search import ErrorKind, SearchError, SearchResult, SearchStatus
from homefinder.services.search_orchestrator import SearchOrchestrator, validate_search_input
from homefinder.services.sessions import SessionRegistry

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/search", tags=["search"])

# HTTP status returned for each failure category
ERROR_HTTP_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_FAILED: 422,
    ErrorKind.DOMAIN_IRRELEVANT: 422,
    ErrorKind.TRANSLATION_FAILED: 502,
    ErrorKind.EXECUTION_FAILED: 502,
    ErrorKind.NETWORK_FAILURE: 503,
}


class SearchRequest(BaseModel):
    """Request body for a search turn."""

    prompt: str = Field(description="Natural-language search or refinement")
    session_id: str | None = Field(
        default=None, description="Conversation to refine; omit to start a new one"
    )


class SearchResponse(BaseModel):
    """Outcome of a search turn."""

    # None when a new conversation was rejected before a session was opened
    session_id: str | None = None
    status: SearchStatus
    result: SearchResult | None = None
    error: SearchError | None = None


class ResetResponse(BaseModel):
    """Response for a conversation reset."""

    session_id: str
    status: SearchStatus


def _get_sessions(request: Request) -> SessionRegistry:
    sessions = getattr(request.app.state, "sessions", None)
    if sessions is None:
        raise HTTPException(status_code=503, detail="Search service unavailable")
    return sessions


def _get_orchestrator(sessions: SessionRegistry, session_id: str) -> SearchOrchestrator:
    orchestrator = sessions.get(session_id)
    if orchestrator is None:
        raise HTTPException(status_code=404, detail="Unknown search session")
    return orchestrator


@router.post("", response_model=SearchResponse)
async def search(
    body: SearchRequest,
    request: Request,
    x_repliers_api_key: Annotated[str | None, Header()] = None,
) -> SearchResponse | JSONResponse:
    """
    Run one conversational search turn.

    The Repliers credential comes from the ``X-Repliers-Api-Key`` header and
    falls back to the server's configured key.

    Example usage with curl:
    ```
    curl -X POST http://localhost:8000/api/v1/search \\
      -H "Content-Type: application/json" \\
      -H "X-Repliers-Api-Key: <key>" \\
      -d '{"prompt": "3 bedroom condo in Toronto"}'
    ```
    """
    sessions = _get_sessions(request)
    api_key = x_repliers_api_key or get_settings().repliers_api_key or None

    if body.session_id is None:
        # Rejected turns must not open (and possibly evict) a session
        invalid = validate_search_input(body.prompt, api_key)
        if invalid is not None:
            logger.info("search_rejected", kind=invalid.kind.value, message=invalid.message)
            return JSONResponse(
                status_code=ERROR_HTTP_STATUS[invalid.kind],
                content=SearchResponse(status=SearchStatus.ERROR, error=invalid).model_dump(
                    mode="json", by_alias=True
                ),
            )
        session_id, orchestrator = sessions.create(api_key)
    else:
        session_id = body.session_id
        orchestrator = _get_orchestrator(sessions, session_id)
        if orchestrator.loading:
            raise HTTPException(
                status_code=409, detail="A search is already running for this session"
            )
        if x_repliers_api_key:
            orchestrator.api_key = x_repliers_api_key

    structlog.contextvars.bind_contextvars(
        session_id=session_id, prompt_preview=body.prompt[:50]
    )

    outcome = await orchestrator.search(body.prompt)
    response = SearchResponse(
        session_id=session_id,
        status=orchestrator.status,
        result=outcome if isinstance(outcome, SearchResult) else None,
        error=outcome if isinstance(outcome, SearchError) else None,
    )

    if isinstance(outcome, SearchError):
        return JSONResponse(
            status_code=ERROR_HTTP_STATUS[outcome.kind],
            content=response.model_dump(mode="json", by_alias=True),
        )
    return response


@router.post("/{session_id}/reset", response_model=ResetResponse)
async def reset_search(session_id: str, request: Request) -> ResetResponse:
    """Clear the conversation context and stored result of a session."""
    orchestrator = _get_orchestrator(_get_sessions(request), session_id)
    orchestrator.reset()
    return ResetResponse(session_id=session_id, status=orchestrator.status)


@router.delete("/{session_id}", status_code=204)
async def delete_search(session_id: str, request: Request) -> Response:
    """Close a session and release its conversation."""
    if not await _get_sessions(request).delete(session_id):
        raise HTTPException(status_code=404, detail="Unknown search session")
    return Response(status_code=204)


@router.get("/health")
async def health_check() -> dict:
    """Health check for the search service."""
    return {"status": "healthy", "service": "homefinder-search"}
