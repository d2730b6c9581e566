"""AnkiConnect sink exports.

Example usage:

from deck_builder.anki_sync import AnkiConnectClient, Note

client = AnkiConnectClient()
client.add_note(Note(deck_name="My Deck", front="dan", back="día"))
"""
from .anki_connect import AnkiConnectClient, CardSink, Note
