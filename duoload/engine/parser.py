"""GraphQL request building and response parsing for the Duocards API."""

from __future__ import annotations

import json
from typing import Any

from ..errors import InvalidCollectionError, ParseError
from .records import LearningStatus, Page, VocabularyRecord

CARDS_QUERY = """
query DeckCards($deckId: ID!, $first: Int!, $cursor: String) {
  node(id: $deckId) {
    __typename
    ... on Deck {
      id
      cards(first: $first, after: $cursor) {
        edges {
          node { id front back hint knownCount }
          cursor
        }
        pageInfo { endCursor hasNextPage }
      }
    }
  }
}
""".strip()

NOT_FOUND_MARKERS = ("not found", "not_found", "does not exist")


def build_cards_query(deck_id: str, page_size: int, cursor: str | None) -> dict[str, Any]:
    return {
        "query": CARDS_QUERY,
        "variables": {"deckId": deck_id, "first": page_size, "cursor": cursor},
    }


class ResponseParser:
    """Turn raw response bodies into :class:`Page` objects."""

    def parse_page(self, body: str, deck_id: str, page_number: int) -> Page:
        try:
            payload = json.loads(body)
        except (TypeError, ValueError) as exc:
            raise ParseError(f"invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise ParseError("top-level JSON value is not an object")

        self._raise_for_errors(payload, deck_id)

        data = payload.get("data")
        if not isinstance(data, dict):
            raise ParseError("missing 'data' object")
        node = data.get("node")
        if node is None:
            raise InvalidCollectionError(deck_id)
        if not isinstance(node, dict):
            raise ParseError("'data.node' is not an object")
        typename = node.get("__typename")
        if typename is not None and typename != "Deck":
            raise InvalidCollectionError(deck_id, f"Identifier refers to a {typename}, not a Deck")

        cards = node.get("cards")
        if not isinstance(cards, dict):
            raise ParseError("missing 'cards' connection")
        edges = cards.get("edges")
        page_info = cards.get("pageInfo")
        if not isinstance(edges, list):
            raise ParseError("missing 'cards.edges' list")
        if not isinstance(page_info, dict) or "hasNextPage" not in page_info:
            raise ParseError("missing 'cards.pageInfo.hasNextPage'")

        records = tuple(self._parse_edge(edge, index) for index, edge in enumerate(edges))
        end_cursor = page_info.get("endCursor")
        return Page(
            records=records,
            current_page=page_number,
            has_next=bool(page_info["hasNextPage"]),
            total_pages=None,
            end_cursor=str(end_cursor) if end_cursor is not None else None,
        )

    # ------------------------------------------------------------------
    def _raise_for_errors(self, payload: dict[str, Any], deck_id: str) -> None:
        errors = payload.get("errors")
        if not errors:
            return
        messages = []
        for error in errors if isinstance(errors, list) else [errors]:
            if isinstance(error, dict):
                messages.append(str(error.get("message", "")))
            else:
                messages.append(str(error))
        joined = "; ".join(m for m in messages if m)
        if any(marker in joined.lower() for marker in NOT_FOUND_MARKERS):
            raise InvalidCollectionError(deck_id, f"Deck not found: {joined}")
        if payload.get("data") is None:
            raise ParseError(f"GraphQL errors: {joined or 'unknown'}")

    def _parse_edge(self, edge: Any, index: int) -> VocabularyRecord:
        node = edge.get("node") if isinstance(edge, dict) else None
        if not isinstance(node, dict):
            raise ParseError(f"edge {index} has no card node")
        front = node.get("front")
        back = node.get("back")
        if not isinstance(front, str) or not front:
            raise ParseError(f"card {index} has an empty 'front'")
        if not isinstance(back, str) or not back:
            raise ParseError(f"card {index} has an empty 'back'")
        hint = node.get("hint")
        example = hint if isinstance(hint, str) and hint.strip() else None
        known_count = node.get("knownCount")
        if known_count is not None and not isinstance(known_count, int):
            raise ParseError(f"card {index} has a non-integer 'knownCount'")
        return VocabularyRecord(
            word=front,
            translation=back,
            example=example,
            status=LearningStatus.from_known_count(known_count),
        )


__all__ = ["CARDS_QUERY", "ResponseParser", "build_cards_query"]
