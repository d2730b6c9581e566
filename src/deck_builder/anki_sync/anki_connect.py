"""
AnkiConnect client used as the card sink.

Public API:
- Note: a Front/Back note with tags, ready for the addNote action
- CardSink: the two operations the deck pipeline needs (create_deck, add_note)
- AnkiConnectClient: CardSink implementation talking to a local Anki

Usage example:

client = AnkiConnectClient("http://127.0.0.1:8765")
client.verify_connection()
client.create_deck("Croatian → Spanish")
client.add_note(Note(deck_name="Croatian → Spanish", front="dan", back="día"))

Notes:
- Connection refused and timeouts raise SinkUnreachable.
- An AnkiConnect `error` answer (duplicate note, bad deck...) raises SinkItemRejected.
"""
from __future__ import annotations

import logging
import socket
import urllib.error
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Protocol

from deck_builder.common.http import post_json
from deck_builder.config_models import DEFAULT_ANKI_CONNECT_URL, DEFAULT_TIMEOUT_SECONDS
from deck_builder.errors import SinkItemRejected, SinkUnreachable

logger = logging.getLogger(__name__)

ANKI_CONNECT_VERSION = 6


@dataclass
class Note:
    deck_name: str
    front: str
    back: str
    model_name: str = "Basic"
    tags: List[str] = field(default_factory=lambda: ["auto-generated", "language-learning"])

    @property
    def fields(self) -> Dict[str, str]:
        return {"Front": self.front, "Back": self.back}

    def to_payload(self) -> Dict[str, Any]:
        # Ordered set: keep first occurrence of each tag
        tags = list(dict.fromkeys(self.tags))
        return {
            "deckName": self.deck_name,
            "modelName": self.model_name,
            "fields": self.fields,
            "tags": tags,
        }


class CardSink(Protocol):
    def create_deck(self, name: str) -> int:
        ...

    def add_note(self, note: Note) -> int:
        ...


class AnkiConnectClient:
    def __init__(self, url: str = DEFAULT_ANKI_CONNECT_URL, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        self.url = url
        self.timeout = timeout

    def invoke(self, action: str, params: Mapping[str, Any] | None = None) -> Any:
        payload: Dict[str, Any] = {
            "action": action,
            "version": ANKI_CONNECT_VERSION,
        }
        if params:
            payload["params"] = params
        try:
            parsed = post_json(self.url, payload, timeout=self.timeout)
        except urllib.error.HTTPError as e:
            # The server answered, so it is reachable; the request itself was refused
            raise SinkItemRejected(action, f"HTTP {e.code}: {e.reason}") from e
        except (urllib.error.URLError, socket.timeout, ConnectionError) as e:
            raise SinkUnreachable(self.url, str(e)) from e
        except ValueError as e:
            raise SinkItemRejected(action, f"invalid JSON response: {e}") from e

        if not isinstance(parsed, dict):
            raise SinkItemRejected(action, f"unexpected response: {parsed!r}")
        if parsed.get("error") is not None:
            raise SinkItemRejected(action, str(parsed["error"]))
        return parsed.get("result")

    def verify_connection(self) -> int:
        """Check AnkiConnect is up and return its API version."""
        logger.debug(f"Verifying connection to AnkiConnect at {self.url}")
        version = self.invoke("version")
        logger.info(f"Connected to AnkiConnect (version: {version})")
        return int(version)

    def deck_names(self) -> List[str]:
        return list(self.invoke("deckNames") or [])

    def create_deck(self, name: str) -> int:
        """Create a deck, returning its id. AnkiConnect returns the existing id if it already exists."""
        logger.debug(f"Creating deck: {name}")
        deck_id = self.invoke("createDeck", {"deck": name})
        if deck_id is None:
            raise SinkItemRejected("createDeck", "no deck id returned")
        logger.info(f"Created deck '{name}' with ID: {deck_id}")
        return int(deck_id)

    def add_note(self, note: Note) -> int:
        note_id = self.invoke("addNote", {"note": note.to_payload()})
        if note_id is None:
            raise SinkItemRejected("addNote", "no note id returned")
        logger.debug(f"Added note with ID: {note_id}", extra={"deck": note.deck_name})
        return int(note_id)
