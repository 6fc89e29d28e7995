"""
Chat API routes.
"""
import logging
from datetime import datetime, timezone
from typing import List, Literal, Optional
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, StrictStr

from domain.errors import InvalidInput
from domain.models import ChatRole, ChatTurn
from services.chat import build_chat_service

router = APIRouter()
chat_service = build_chat_service()
logger = logging.getLogger(__name__)


class ChatTurnModel(BaseModel):
    role: Literal["user", "assistant"]
    content: StrictStr


class ChatRequest(BaseModel):
    message: StrictStr
    history: Optional[List[ChatTurnModel]] = None


class ChatResponse(BaseModel):
    response: str
    timestamp: str


def error_response(status_code: int, error: str, details: str) -> JSONResponse:
    """Error body shared by the chat routes: {"error": ..., "details": ...}."""
    return JSONResponse(status_code=status_code, content={"error": error, "details": details})


def history_from_request(request: ChatRequest) -> List[ChatTurn]:
    return [ChatTurn(role=ChatRole(t.role), content=t.content) for t in request.history or []]


@router.post("/chat", response_model=ChatResponse)
def chat(request: ChatRequest):
    """
    Answer a chat message, searching for places when the agent did not.
    """
    try:
        text = chat_service.respond(request.message, history_from_request(request))
    except InvalidInput as exc:
        return error_response(400, "Invalid request", str(exc))
    except Exception as exc:
        logger.exception("Error processing chat request")
        return error_response(500, "Internal server error", str(exc) or type(exc).__name__)

    return ChatResponse(
        response=text,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
