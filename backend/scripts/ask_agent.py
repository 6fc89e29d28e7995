"""Send one message through the chat pipeline and print the reply.

Usage (from backend/):
    python -m scripts.ask_agent "I'm looking for a quiet spot in La Masella"
    python -m scripts.ask_agent --search-only "Berga"

--search-only skips the agent and runs the lazy store/provider search directly,
which is handy for checking the cache without an Anthropic key.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parents[1] / ".env")

from db import SessionLocal, init_db  # noqa: E402
from domain.errors import InvalidInput  # noqa: E402
from services.chat import build_chat_service  # noqa: E402
from services.response_formatter import format_places  # noqa: E402

logger = logging.getLogger("ask_agent")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ask the camper spots assistant a question.")
    parser.add_argument("message", help="Chat message, or a search term with --search-only.")
    parser.add_argument("--search-only", action="store_true", help="Bypass the agent and search the term directly.")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")
    init_db()
    service = build_chat_service(SessionLocal)

    try:
        if args.search_only:
            result = service.search_service.search(args.message)
            logger.info("status=%s total_matched=%d", result.status.value, result.total_matched)
            print(format_places(result.records, result.term))
        else:
            print(service.respond(args.message))
    except InvalidInput as exc:
        logger.error("Invalid input: %s", exc)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
