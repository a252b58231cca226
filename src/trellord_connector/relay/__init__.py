"""Relay layer - board actions in, webhook messages out."""

from trellord_connector.relay.classifier import ActionClassifier
from trellord_connector.relay.dispatcher import DispatchResult, MessageDispatcher, WebhookChannel
from trellord_connector.relay.formatter import build_webhook_payload
from trellord_connector.relay.models import EmbedField, Notification, QueuedMessage
from trellord_connector.relay.poller import BoardPoller, PollResult
from trellord_connector.relay.state import DedupLedger, MessageQueue, RelayContext
from trellord_connector.relay.webhook import DiscordWebhook, DryRunWebhook

__all__ = [
    "ActionClassifier",
    "BoardPoller",
    "DedupLedger",
    "DiscordWebhook",
    "DispatchResult",
    "DryRunWebhook",
    "EmbedField",
    "MessageDispatcher",
    "MessageQueue",
    "Notification",
    "PollResult",
    "QueuedMessage",
    "RelayContext",
    "WebhookChannel",
    "build_webhook_payload",
]
