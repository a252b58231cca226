"""Translation of Trello board actions into notifications.

Each supported action type has one handler in a lookup table. Handlers
return a :class:`Notification`; types without a handler are reported as
unsupported by returning ``None``.

Optional detail fields are presence-gated: they are only emitted when the
corresponding key exists in the payload. Values needed for the title or
the link are required and raise :class:`MalformedActionError` when absent.
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping
from typing import Any

from trellord_connector.relay.models import EmbedField, Notification
from trellord_connector.relay.strings import EN
from trellord_connector.trello.models import TRELLO_BOARD_URL, TRELLO_CARD_URL, Action

DESCRIPTION_PREVIEW_LENGTH = 100
ELLIPSIS = "..."
EMPTY_VALUE = "-"
CHECK_MARK = ":white_check_mark:"
CROSS_MARK = ":x:"
# Due status values are not localized.
DUE_COMPLETED = "Completed"
DUE_WAITING = "Waiting"

Handler = Callable[[Action], Notification]


def truncate_description(text: str | None) -> str:
    """Cut a card description down to a preview followed by an ellipsis."""
    return f"{(text or '')[:DESCRIPTION_PREVIEW_LENGTH]}{ELLIPSIS}"


def render_value(value: Any) -> str:
    """Render a payload value as embed field text."""
    if value is None or value == "":
        return EMPTY_VALUE
    return str(value)


def first_name(card: Mapping[str, Any], key: str) -> str | None:
    """Return the name of the first entry of ``card[key]``, if any."""
    items = card.get(key)
    if not isinstance(items, list) or not items or not isinstance(items[0], dict):
        return None
    name = items[0].get("name")
    return None if name is None else str(name)


def best_url(action: Action) -> str | None:
    """Card link if the action has one, else board link, else None."""
    card_link = action.card.get("shortLink")
    if card_link:
        return TRELLO_CARD_URL.format(short_link=card_link)
    board = action.data.get("board")
    if isinstance(board, dict) and board.get("shortLink"):
        return TRELLO_BOARD_URL.format(short_link=board["shortLink"])
    return None


class ActionClassifier:
    """Maps Trello actions to notifications using a localized catalog.

    Example:
        ```python
        classifier = ActionClassifier(get_catalog("en"))
        notification = classifier.classify(action)
        if notification is None:
            ...  # unsupported action type
        ```
    """

    def __init__(self, strings: Mapping[str, str] | None = None) -> None:
        """Initialize the classifier.

        Args:
            strings: Message catalog; English when omitted.
        """
        self.strings = strings if strings is not None else EN
        self._handlers: dict[str, Handler] = {
            "createCard": self._create_card,
            "updateCard": self._update_card,
            "deleteCard": self._delete_card,
            "addMemberToCard": functools.partial(self._card_event, "add_member_to_card"),
            "removeMemberFromCard": functools.partial(
                self._card_event, "remove_member_from_card"
            ),
            "moveCardToBoard": functools.partial(self._card_event, "move_card_to_board"),
            "updateList": self._update_list,
            "addChecklistToCard": functools.partial(self._card_event, "add_checklist"),
            "removeChecklistFromCard": functools.partial(self._card_event, "remove_checklist"),
            "updateCheckItemStateOnCard": self._update_check_item_state,
            "updateChecklist": self._update_checklist,
            "commentCard": self._comment_card,
            "createList": self._create_list,
            "addMemberToBoard": self._add_member_to_board,
            "copyCard": self._copy_card,
            "addAttachmentToCard": self._add_attachment_to_card,
        }

    @property
    def supported_types(self) -> frozenset[str]:
        """Action types this classifier can translate."""
        return frozenset(self._handlers)

    def classify(self, action: Action) -> Notification | None:
        """Translate an action into a notification.

        Args:
            action: The Trello action.

        Returns:
            The notification, or None when the action type is unsupported.

        Raises:
            MalformedActionError: If a supported action lacks a required field.
        """
        handler = self._handlers.get(action.type)
        if handler is None:
            return None
        return handler(action)

    # Helpers

    def _text(self, key: str, **values: Any) -> str:
        return self.strings[key].format(**values)

    def _field(self, key: str, value: Any) -> EmbedField:
        return EmbedField(name=self.strings[key], value=render_value(value))

    def _due_status(self, complete: Any) -> str:
        return DUE_COMPLETED if complete else DUE_WAITING

    # Card actions

    def _create_card(self, action: Action) -> Notification:
        card = action.require("data", "card")
        fields: list[EmbedField] = []

        if "desc" in card:
            fields.append(self._field("description", truncate_description(card["desc"])))
        if "due" in card:
            fields.append(self._field("due_date", card["due"]))
        if "dueComplete" in card:
            fields.append(self._field("due_complete", self._due_status(card["dueComplete"])))
        if "idAttachmentCover" in card:
            fields.append(self._field("attachment_cover", card["idAttachmentCover"]))
        if "idChecklists" in card and (checklist := first_name(card, "checklists")):
            fields.append(self._field("checklist", checklist))
        if "idMembers" in card:
            fields.append(self._field("members", action.require("memberCreator", "fullName")))
        if "idLabels" in card and (label := first_name(card, "labels")):
            fields.append(self._field("labels", label))
        if "idList" in card:
            fields.append(self._field("list", action.require("data", "list", "name")))

        return Notification(
            title=self._text("create_card_title", card=action.require("data", "card", "name")),
            description=self._text("create_card_desc"),
            url=action.card_url(),
            fields=tuple(fields),
        )

    def _update_card(self, action: Action) -> Notification:
        card = action.require("data", "card")
        old = action.old
        fields: list[EmbedField] = []

        # Order is the display order of the paired fields.
        if "idList" in old:
            fields.append(
                self._field("previous_list", action.require("data", "listBefore", "name"))
            )
            fields.append(self._field("current_list", action.require("data", "listAfter", "name")))
        if "name" in old:
            fields.append(self._field("previous_name", old["name"]))
            fields.append(self._field("current_name", card.get("name")))
        if "idMembers" in old:
            fields.append(self._field("members", action.require("memberCreator", "username")))
        if "desc" in old:
            fields.append(self._field("previous_desc", truncate_description(old["desc"])))
            fields.append(self._field("current_desc", truncate_description(card.get("desc"))))
        if "due" in old:
            fields.append(self._field("previous_due", old["due"]))
            fields.append(self._field("current_due", card.get("due")))
        if "dueComplete" in old:
            fields.append(
                self._field("previous_due_complete", self._due_status(old["dueComplete"]))
            )
            fields.append(
                self._field("current_due_complete", self._due_status(card.get("dueComplete")))
            )
        if "idAttachmentCover" in old:
            fields.append(self._field("previous_attachment_cover", old["idAttachmentCover"]))
            fields.append(self._field("current_attachment_cover", card.get("idAttachmentCover")))
        if "idChecklists" in old and (checklist := first_name(card, "checklists")):
            fields.append(self._field("previous_checklist", checklist))

        return Notification(
            title=self._text("update_card_title", card=action.require("data", "card", "name")),
            description=self._text("update_card_desc"),
            url=action.card_url(),
            fields=tuple(fields),
        )

    def _delete_card(self, action: Action) -> Notification:
        return Notification(
            title=self._text("delete_card_title"),
            description=self._text("delete_card_desc"),
            url=best_url(action),
        )

    def _card_event(self, key: str, action: Action) -> Notification:
        """Title quoting the card name plus a fixed description."""
        return Notification(
            title=self._text(f"{key}_title", card=action.require("data", "card", "name")),
            description=self._text(f"{key}_desc"),
            url=action.card_url(),
        )

    def _comment_card(self, action: Action) -> Notification:
        fields: list[EmbedField] = []
        if "text" in action.data:
            fields.append(self._field("comment_text", action.data["text"]))
        return Notification(
            title=self._text("comment_title", card=action.require("data", "card", "name")),
            description=self._text(
                "comment_desc", member=action.require("memberCreator", "username")
            ),
            url=action.card_url(),
            fields=tuple(fields),
        )

    def _copy_card(self, action: Action) -> Notification:
        return Notification(
            title=self._text("copy_card_title"),
            description=self._text(
                "copy_card_desc", member=action.require("memberCreator", "username")
            ),
            url=action.card_url(),
            fields=(
                self._field("copy_card_original", action.require("data", "cardSource", "name")),
                self._field("copy_card_new", action.require("data", "card", "name")),
            ),
        )

    def _add_attachment_to_card(self, action: Action) -> Notification:
        return Notification(
            title=self._text("add_attachment_title", card=action.require("data", "card", "name")),
            description=self._text(
                "add_attachment_desc",
                attachment=action.require("data", "attachment", "name"),
            ),
            url=action.card_url(),
        )

    # Checklists

    def _update_check_item_state(self, action: Action) -> Notification:
        check_item = action.require("data", "checkItem")
        name = action.require("data", "checkItem", "name")
        fields: list[EmbedField] = []
        if "state" in check_item:
            marker = CHECK_MARK if check_item["state"] == "complete" else CROSS_MARK
            fields.append(self._field("check_item_field", f"{marker} {name}"))
        return Notification(
            title=self._text("check_item_title", item=name),
            description=self._text("check_item_desc"),
            url=action.card_url(),
            fields=tuple(fields),
        )

    def _update_checklist(self, action: Action) -> Notification:
        name = action.require("data", "checklist", "name")
        fields: list[EmbedField] = []
        if "name" in action.old:
            fields.append(self._field("checklist_previous_name", action.old["name"]))
            fields.append(self._field("checklist_current_name", name))
        return Notification(
            title=self._text("update_checklist_title", checklist=name),
            description=self._text("update_checklist_desc"),
            url=best_url(action),
            fields=tuple(fields),
        )

    # Lists and board

    def _update_list(self, action: Action) -> Notification:
        trello_list = action.require("data", "list")
        name = action.require("data", "list", "name")
        if trello_list.get("closed") is True:
            title = self._text("archive_list_title", list=name)
            description = self._text("archive_list_desc")
        else:
            title = self._text("update_list_title", list=name)
            if "name" in action.old:
                description = self._text("update_list_desc", old=action.old["name"])
            else:
                description = self._text("update_list_desc_unnamed")
        return Notification(title=title, description=description, url=action.board_url())

    def _create_list(self, action: Action) -> Notification:
        return Notification(
            title=self._text("create_list_title", list=action.require("data", "list", "name")),
            description=self._text(
                "create_list_desc", member=action.require("memberCreator", "username")
            ),
            url=action.board_url(),
        )

    def _add_member_to_board(self, action: Action) -> Notification:
        return Notification(
            title=self._text(
                "add_member_to_board_title", member=action.require("member", "username")
            ),
            description=self._text(
                "add_member_to_board_desc", member=action.require("memberCreator", "username")
            ),
            url=action.board_url(),
        )
