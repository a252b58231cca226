"""Localized message catalogs for relayed notifications.

Templates use ``str.format`` placeholders. Every catalog defines the same
keys as the English one.
"""

from __future__ import annotations

from collections.abc import Mapping

EN: dict[str, str] = {
    # Shared field labels
    "description": "Description",
    "due_date": "Due date",
    "due_complete": "Due status",
    "attachment_cover": "Cover attachment",
    "checklist": "Checklist",
    "previous_checklist": "Previous checklist",
    "members": "Members",
    "labels": "Label",
    "list": "List",
    "previous_list": "Previous list",
    "current_list": "Current list",
    "previous_name": "Previous name",
    "current_name": "Current name",
    "previous_desc": "Previous description",
    "current_desc": "Current description",
    "previous_due": "Previous due date",
    "current_due": "Current due date",
    "previous_due_complete": "Previous due status",
    "current_due_complete": "Current due status",
    "previous_attachment_cover": "Previous cover attachment",
    "current_attachment_cover": "Current cover attachment",
    # Cards
    "create_card_title": 'New card "{card}"',
    "create_card_desc": "A new card was created on the board.",
    "update_card_title": 'Card updated "{card}"',
    "update_card_desc": "A card was updated.",
    "delete_card_title": "Card deleted",
    "delete_card_desc": "A card was deleted from the board.",
    "add_member_to_card_title": 'Member added to card "{card}"',
    "add_member_to_card_desc": "A member was assigned to the card.",
    "remove_member_from_card_title": 'Member removed from card "{card}"',
    "remove_member_from_card_desc": "A member was unassigned from the card.",
    "move_card_to_board_title": 'Card moved to the board "{card}"',
    "move_card_to_board_desc": "A card was moved in from another board.",
    "copy_card_title": "Card copied",
    "copy_card_desc": "Copied by {member}",
    "copy_card_original": "Original card",
    "copy_card_new": "New card",
    "add_attachment_title": 'Attachment added to "{card}"',
    "add_attachment_desc": "File: {attachment}",
    "comment_title": 'New comment on "{card}"',
    "comment_desc": "Comment by {member}",
    "comment_text": "Comment",
    # Lists
    "create_list_title": 'List created "{list}"',
    "create_list_desc": "Created by {member}",
    "archive_list_title": 'List archived "{list}"',
    "archive_list_desc": "The list was archived.",
    "update_list_title": 'List updated "{list}"',
    "update_list_desc": 'Previously named "{old}"',
    "update_list_desc_unnamed": "The list was updated.",
    # Checklists
    "add_checklist_title": 'Checklist added to "{card}"',
    "add_checklist_desc": "A checklist was added to the card.",
    "remove_checklist_title": 'Checklist removed from "{card}"',
    "remove_checklist_desc": "A checklist was removed from the card.",
    "check_item_title": 'Checklist item updated "{item}"',
    "check_item_desc": "A checklist item changed state.",
    "check_item_field": "Item",
    "update_checklist_title": 'Checklist updated "{checklist}"',
    "update_checklist_desc": "A checklist was updated.",
    "checklist_previous_name": "Previous checklist name",
    "checklist_current_name": "Current checklist name",
    # Board
    "add_member_to_board_title": 'New board member "{member}"',
    "add_member_to_board_desc": "Added by {member}",
}

ES: dict[str, str] = {
    "description": "Descripción",
    "due_date": "Fecha de vencimiento",
    "due_complete": "Estado del vencimiento",
    "attachment_cover": "Portada",
    "checklist": "Checklist",
    "previous_checklist": "Checklist anterior",
    "members": "Miembros",
    "labels": "Etiqueta",
    "list": "Lista",
    "previous_list": "Lista anterior",
    "current_list": "Lista actual",
    "previous_name": "Nombre anterior",
    "current_name": "Nombre actual",
    "previous_desc": "Descripción anterior",
    "current_desc": "Descripción actual",
    "previous_due": "Vencimiento anterior",
    "current_due": "Vencimiento actual",
    "previous_due_complete": "Estado anterior",
    "current_due_complete": "Estado actual",
    "previous_attachment_cover": "Portada anterior",
    "current_attachment_cover": "Portada actual",
    "create_card_title": 'Nueva tarjeta "{card}"',
    "create_card_desc": "Se creó una tarjeta en el tablero.",
    "update_card_title": 'Tarjeta actualizada "{card}"',
    "update_card_desc": "Se actualizó una tarjeta.",
    "delete_card_title": "Tarjeta eliminada",
    "delete_card_desc": "Se eliminó una tarjeta del tablero.",
    "add_member_to_card_title": 'Miembro añadido a la tarjeta "{card}"',
    "add_member_to_card_desc": "Se asignó un miembro a la tarjeta.",
    "remove_member_from_card_title": 'Miembro quitado de la tarjeta "{card}"',
    "remove_member_from_card_desc": "Se quitó un miembro de la tarjeta.",
    "move_card_to_board_title": 'Tarjeta movida al tablero "{card}"',
    "move_card_to_board_desc": "Una tarjeta llegó desde otro tablero.",
    "copy_card_title": "Tarjeta copiada",
    "copy_card_desc": "Copiada por {member}",
    "copy_card_original": "Tarjeta original",
    "copy_card_new": "Tarjeta nueva",
    "add_attachment_title": 'Adjunto añadido a "{card}"',
    "add_attachment_desc": "Archivo: {attachment}",
    "comment_title": 'Nuevo comentario en "{card}"',
    "comment_desc": "Comentario de {member}",
    "comment_text": "Comentario",
    "create_list_title": 'Lista creada "{list}"',
    "create_list_desc": "Creada por {member}",
    "archive_list_title": 'Lista archivada "{list}"',
    "archive_list_desc": "La lista fue archivada.",
    "update_list_title": 'Lista actualizada "{list}"',
    "update_list_desc": 'Antes se llamaba "{old}"',
    "update_list_desc_unnamed": "La lista fue actualizada.",
    "add_checklist_title": 'Checklist añadido a "{card}"',
    "add_checklist_desc": "Se añadió un checklist a la tarjeta.",
    "remove_checklist_title": 'Checklist quitado de "{card}"',
    "remove_checklist_desc": "Se quitó un checklist de la tarjeta.",
    "check_item_title": 'Elemento de checklist actualizado "{item}"',
    "check_item_desc": "Un elemento del checklist cambió de estado.",
    "check_item_field": "Elemento",
    "update_checklist_title": 'Checklist actualizado "{checklist}"',
    "update_checklist_desc": "Se actualizó un checklist.",
    "checklist_previous_name": "Nombre anterior del checklist",
    "checklist_current_name": "Nombre actual del checklist",
    "add_member_to_board_title": 'Nuevo miembro del tablero "{member}"',
    "add_member_to_board_desc": "Añadido por {member}",
}

CATALOGS: dict[str, Mapping[str, str]] = {
    "en": EN,
    "es": ES,
}

AVAILABLE_LANGUAGES = frozenset(CATALOGS)


def get_catalog(language: str) -> Mapping[str, str]:
    """Return the message catalog for a language.

    Raises:
        KeyError: If no catalog exists for the language.
    """
    return CATALOGS[language]
