"""
Chat composition: agent reply first, lazy place search as a fallback.
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from domain.errors import AgentError, InvalidInput
from domain.models import AgentReply, ChatTurn
from services.keyword_extractor import extract_keywords
from services.lazy_search import LazySearchService
from services.query_classifier import is_new_search
from services.response_formatter import format_places

logger = logging.getLogger(__name__)

AGENT_APOLOGY = "Sorry, I couldn't reach the assistant right now."


class TextAgent(Protocol):
    def generate(self, message: str, history: Optional[Sequence[ChatTurn]] = None) -> AgentReply:
        ...


class ChatService:
    def __init__(self, agent: TextAgent, search_service: LazySearchService):
        self.agent = agent
        self.search_service = search_service

    def _ask_agent(self, message: str, history: Optional[Sequence[ChatTurn]]) -> AgentReply:
        try:
            return self.agent.generate(message, history)
        except AgentError as exc:
            logger.warning("Agent failed, answering with apology: %s", exc)
            return AgentReply(text=AGENT_APOLOGY, used_tool=False)

    def respond(self, message: str, history: Optional[Sequence[ChatTurn]] = None) -> str:
        """
        Produce the final reply for `message`.

        When the agent answered without searching and the message reads as a
        new search, the formatted search result is appended to its text.
        """
        if message is None or not message.strip():
            raise InvalidInput("Message must not be empty")

        reply = self._ask_agent(message, history)
        if reply.used_tool:
            return reply.text
        if not is_new_search(message):
            logger.debug("Follow-up message, no fallback search")
            return reply.text

        term = extract_keywords(message)
        result = self.search_service.search(term)
        logger.info("Fallback search for %r: %s", term, result.status.value)
        block = format_places(result.records, result.term)
        if not reply.text:
            return block
        return f"{reply.text}\n\n{block}"


def build_chat_service(session_factory=None) -> ChatService:
    """Wire the default store, provider and agent together."""
    from db import SessionLocal
    from services.agent_client import PlacesAgent
    from services.places_client import get_default_places_client
    from settings import settings

    provider = get_default_places_client() if settings.PROVIDER_ENABLED else None
    search_service = LazySearchService(session_factory or SessionLocal, provider)
    return ChatService(PlacesAgent(search_service), search_service)
