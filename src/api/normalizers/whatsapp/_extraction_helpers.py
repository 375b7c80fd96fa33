"""Helpers de acesso null-safe ao payload do webhook WhatsApp.

Cada helper devolve None quando a estrutura intermediária falta ou tem
tipo inesperado; nenhum deles levanta exceção.
"""

from __future__ import annotations

from typing import Any


def as_mapping(value: Any) -> dict[str, Any] | None:
    """Retorna o valor se for dict, senão None."""
    return value if isinstance(value, dict) else None


def first_item(container: dict[str, Any] | None, key: str) -> dict[str, Any] | None:
    """Primeiro elemento (dict) da lista `container[key]`."""
    if container is None:
        return None
    items = container.get(key)
    if not isinstance(items, list) or not items:
        return None
    return as_mapping(items[0])


def text_field(container: dict[str, Any] | None, key: str) -> str | None:
    """Campo escalar como string; vazio/ausente/estrutura -> None."""
    if container is None:
        return None
    value = container.get(key)
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value)
    return text or None


def first_change_value(payload: dict[str, Any]) -> tuple[
    dict[str, Any] | None,
    dict[str, Any] | None,
    dict[str, Any] | None,
]:
    """(entry[0], entry[0].changes[0], entry[0].changes[0].value)."""
    entry = first_item(payload, "entry")
    change = first_item(entry, "changes")
    value = as_mapping(change.get("value")) if change is not None else None
    return entry, change, value


def extract_sender_phone(value: dict[str, Any] | None) -> str | None:
    """Telefone do remitente: messages[0].from > contacts[0].wa_id > statuses[0].recipient_id."""
    return (
        text_field(first_item(value, "messages"), "from")
        or text_field(first_item(value, "contacts"), "wa_id")
        or text_field(first_item(value, "statuses"), "recipient_id")
    )


def extract_contact_name(value: dict[str, Any] | None) -> str | None:
    """contacts[0].profile.name."""
    contact = first_item(value, "contacts")
    profile = as_mapping(contact.get("profile")) if contact is not None else None
    return text_field(profile, "name")
