"""Identidade canônica de roteamento (extraída de webhooks pela camada api)."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True, slots=True)
class NormalizedIdentity:
    """Campos de roteamento do webhook. Todos opcionais."""

    business_account_id: str | None = None
    phone_number_id: str | None = None
    display_phone_number: str | None = None
    sender_phone: str | None = None
    message_type: str | None = None
    message_id: str | None = None
    timestamp: str | None = None
    contact_name: str | None = None
    field: str | None = None

    @property
    def routing_phones(self) -> tuple[str, ...]:
        """Telefones candidatos ao match por sufixo, em ordem de preferência."""
        return tuple(phone for phone in (self.sender_phone, self.display_phone_number) if phone)

    @property
    def has_identity(self) -> bool:
        return bool(self.phone_number_id or self.routing_phones)

    def as_dict(self) -> dict[str, str | None]:
        return asdict(self)
