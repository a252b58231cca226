"""Trello board API access."""

from trellord_connector.trello.client import TrelloClient, TrelloClientError
from trellord_connector.trello.models import Action, MalformedActionError

__all__ = [
    "Action",
    "MalformedActionError",
    "TrelloClient",
    "TrelloClientError",
]
