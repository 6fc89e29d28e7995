"""
Core domain models for the camper spots assistant.
These are framework-agnostic and can be used across all services.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass
class Place:
    """A campsite or overnight parking spot. `url` is the storage key."""
    name: str
    description: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    url: Optional[str] = None


class SearchStatus(str, Enum):
    """Which tier served a search."""
    CACHED = "cached"  # fast path, local store
    FETCHED = "fetched"  # slow path, external provider
    NO_MATCH = "no_match"


@dataclass
class SearchResult:
    term: str
    status: SearchStatus
    records: List[Place] = field(default_factory=list)
    total_matched: int = 0


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatTurn:
    role: ChatRole
    content: str


@dataclass
class AgentReply:
    """Text produced by the agent, plus whether it ran the place search tool."""
    text: str
    used_tool: bool = False
