"""Book assistant API endpoints.

Routes:
- GET /assistant - Current caller state and conversation
- POST /assistant/query - Send a message to the assistant
- POST /assistant/sessions - Start a new chat
- GET /assistant/sessions - List the caller's chats
- GET /assistant/sessions/{session_id} - One chat with its messages
- POST /assistant/identify - Claim a handle
- POST /assistant/logout - Forget identity and anonymous chat

Client state travels in two cookies: the identified user id and the
anonymous chat token.

Dependencies: book_assistant.application.services, book_assistant.api.deps
System role: Book assistant HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from book_assistant.api.deps import (
    get_chat_service,
    get_client_state,
    get_conversation_store,
    get_session_resolver,
    get_settings_dependency,
    store_client_state,
)
from book_assistant.api.routers.router_utils import (
    session_detail,
    session_summary,
    to_http_exception,
)
from book_assistant.application.adapters.conversation_store import ConversationStore
from book_assistant.application.services.chat_service import ChatService
from book_assistant.application.services.session_resolver import ClientState, SessionResolver
from book_assistant.configs import Settings
from book_assistant.models.chat import AssistantQueryRequest, AssistantQueryResponse
from book_assistant.models.common import StatusResponse
from book_assistant.models.session import (
    ChatSessionDetail,
    ChatSessionListResponse,
    ChatSessionSummary,
)
from book_assistant.models.user import (
    AssistantStateResponse,
    IdentifyRequest,
    IdentityResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assistant", tags=["assistant"])


@router.get("", response_model=AssistantStateResponse)
async def get_state(
    response: Response,
    state: ClientState = Depends(get_client_state),
    resolver: SessionResolver = Depends(get_session_resolver),
    store: ConversationStore = Depends(get_conversation_store),
    settings: Settings = Depends(get_settings_dependency),
) -> AssistantStateResponse:
    """Current caller state.

    Identified callers get their session list and most recent session;
    anonymous callers get the session their token names (created on first
    visit).
    """
    try:
        resolved = await resolver.resolve(state)
        messages = await store.get_messages(resolved.chat_session.id)
        sessions = [] if resolved.anonymous else await store.list_sessions(resolved.user)
    except Exception as e:
        raise to_http_exception(e, "Load assistant state")

    store_client_state(response, resolved.state, settings)
    return AssistantStateResponse(
        identified=not resolved.anonymous,
        identifier=None if resolved.anonymous else resolved.user.identifier,
        current_session=session_detail(resolved.chat_session, messages),
        sessions=[session_summary(s) for s in sessions],
    )


@router.post("/query", response_model=AssistantQueryResponse)
async def query(
    request: AssistantQueryRequest,
    response: Response,
    state: ClientState = Depends(get_client_state),
    resolver: SessionResolver = Depends(get_session_resolver),
    chat_service: ChatService = Depends(get_chat_service),
    settings: Settings = Depends(get_settings_dependency),
) -> AssistantQueryResponse:
    """Send a message to the assistant.

    Flow:
    1. Resolve the caller's session (explicit session_id must be theirs)
    2. Run the turn through ChatService
    3. Return the reply with the session it was stored in

    Raises:
        HTTPException(400): Invalid message
        HTTPException(404): Session not found
        HTTPException(500): Processing error
    """
    try:
        resolved = await resolver.resolve(state, request.session_id)
        session_id = resolved.chat_session.id
        session_number = resolved.chat_session.session_number
        result = await chat_service.process_message(resolved.chat_session, request.message)
    except Exception as e:
        raise to_http_exception(e, "Assistant query")

    store_client_state(response, resolved.state, settings)
    return AssistantQueryResponse(
        **result.model_dump(exclude={"error"}),
        session_id=session_id,
        session_number=session_number,
    )


@router.post(
    "/sessions",
    response_model=ChatSessionSummary,
    status_code=status.HTTP_201_CREATED,
)
async def new_session(
    response: Response,
    state: ClientState = Depends(get_client_state),
    resolver: SessionResolver = Depends(get_session_resolver),
    settings: Settings = Depends(get_settings_dependency),
) -> ChatSessionSummary:
    """Start a new chat for the caller."""
    try:
        resolved = await resolver.start_new_session(state)
    except Exception as e:
        raise to_http_exception(e, "Create session")

    store_client_state(response, resolved.state, settings)
    return session_summary(resolved.chat_session)


@router.get("/sessions", response_model=ChatSessionListResponse)
async def list_sessions(
    response: Response,
    state: ClientState = Depends(get_client_state),
    resolver: SessionResolver = Depends(get_session_resolver),
    store: ConversationStore = Depends(get_conversation_store),
    settings: Settings = Depends(get_settings_dependency),
) -> ChatSessionListResponse:
    """List the caller's chats, most recently active first.

    Anonymous callers only ever see the chat their token names.
    """
    try:
        resolved = await resolver.resolve(state)
        if resolved.anonymous:
            sessions = [resolved.chat_session]
        else:
            sessions = await store.list_sessions(resolved.user)
    except Exception as e:
        raise to_http_exception(e, "List sessions")

    store_client_state(response, resolved.state, settings)
    return ChatSessionListResponse(
        sessions=[session_summary(s) for s in sessions],
        total=len(sessions),
    )


@router.get("/sessions/{session_id}", response_model=ChatSessionDetail)
async def get_session(
    session_id: str,
    state: ClientState = Depends(get_client_state),
    resolver: SessionResolver = Depends(get_session_resolver),
    store: ConversationStore = Depends(get_conversation_store),
) -> ChatSessionDetail:
    """One of the caller's chats with its messages.

    Raises:
        HTTPException(404): Session does not exist or is not the caller's
    """
    try:
        resolved = await resolver.resolve(state, session_id)
        messages = await store.get_messages(resolved.chat_session.id)
    except Exception as e:
        raise to_http_exception(e, "Get session")

    return session_detail(resolved.chat_session, messages)


@router.post("/identify", response_model=IdentityResponse)
async def identify(
    request: IdentifyRequest,
    response: Response,
    state: ClientState = Depends(get_client_state),
    resolver: SessionResolver = Depends(get_session_resolver),
    settings: Settings = Depends(get_settings_dependency),
) -> IdentityResponse:
    """Claim a handle; the caller's state is unchanged on failure.

    Raises:
        HTTPException(400): Blank, non-alphanumeric or reserved handle
    """
    try:
        new_state = await resolver.identify(state, request.identifier)
        user = await resolver.current_user(new_state)
    except Exception as e:
        raise to_http_exception(e, "Identify")

    store_client_state(response, new_state, settings)
    return IdentityResponse(user_id=user.id, identifier=user.identifier)


@router.post("/logout", response_model=StatusResponse)
async def logout(
    response: Response,
    state: ClientState = Depends(get_client_state),
    resolver: SessionResolver = Depends(get_session_resolver),
    settings: Settings = Depends(get_settings_dependency),
) -> StatusResponse:
    """Forget the caller's identity and anonymous chat."""
    new_state = await resolver.logout(state)
    store_client_state(response, new_state, settings)
    return StatusResponse(success=True)
