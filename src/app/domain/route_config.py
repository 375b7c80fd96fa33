"""RouteConfig — regra de roteamento telefone -> destino.

Formato de fio/persistência usa os nomes camelCase históricos
(phoneNumber, targetUrl, routeBy...). Atributos Python seguem snake_case.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.services.phone_matcher import normalize_phone

if TYPE_CHECKING:
    from collections.abc import Mapping

_FALSE_STRINGS = frozenset({"false", "0", "no", "off"})


class RouteStrategy(StrEnum):
    """Estratégia de resolução da qual a regra participa."""

    SENDER = "sender"
    BUSINESS = "business"
    DEFAULT = "default"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _new_route_id() -> str:
    return uuid.uuid4().hex


def validate_target_url(value: str) -> str:
    """Garante URL absoluta http(s) com host."""
    url = (value or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("targetUrl deve ser uma URL absoluta (http/https)")
    return url


def _normalize_raw_phone(value: Any) -> str:
    return normalize_phone(None if value is None else str(value))


def _coerce_optional_id(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


_MODEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RouteConfig(BaseModel):
    """Regra de roteamento persistida no registry."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(default_factory=_new_route_id)
    phone_number: str = ""
    phone_number_id: str | None = None
    target_url: str
    description: str = ""
    route_by: RouteStrategy = RouteStrategy.SENDER
    active: bool = True
    synced: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("phone_number", mode="before")
    @classmethod
    def _normalize_phone_number(cls, value: Any) -> str:
        return _normalize_raw_phone(value)

    @field_validator("phone_number_id", mode="before")
    @classmethod
    def _coerce_phone_number_id(cls, value: Any) -> str | None:
        return _coerce_optional_id(value)

    @field_validator("description", mode="before")
    @classmethod
    def _default_description(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("target_url")
    @classmethod
    def _check_target_url(cls, value: str) -> str:
        return validate_target_url(value)

    def to_wire(self) -> dict[str, Any]:
        """Serializa no formato camelCase (API e persistência)."""
        return self.model_dump(mode="json", by_alias=True)

    def with_changes(self, changes: Mapping[str, Any]) -> RouteConfig:
        """Retorna cópia revalidada com `changes` aplicados e updated_at renovado."""
        data = self.model_dump()
        data.update(changes)
        data["id"] = self.id
        data["created_at"] = self.created_at
        data["updated_at"] = _utcnow()
        return RouteConfig.model_validate(data)


class RouteConfigCreate(BaseModel):
    """Payload de criação de regra (API administrativa)."""

    model_config = _MODEL_CONFIG

    phone_number: str = ""
    phone_number_id: str | None = None
    target_url: str
    description: str = ""
    route_by: RouteStrategy = RouteStrategy.SENDER
    active: bool = True

    @field_validator("phone_number", mode="before")
    @classmethod
    def _normalize_phone_number(cls, value: Any) -> str:
        return _normalize_raw_phone(value)

    @field_validator("phone_number_id", mode="before")
    @classmethod
    def _coerce_phone_number_id(cls, value: Any) -> str | None:
        return _coerce_optional_id(value)

    @field_validator("description", mode="before")
    @classmethod
    def _default_description(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("target_url")
    @classmethod
    def _check_target_url(cls, value: str) -> str:
        return validate_target_url(value)

    @model_validator(mode="after")
    def _check_routing_key(self) -> RouteConfigCreate:
        if self.route_by == RouteStrategy.SENDER and not self.phone_number:
            raise ValueError("phoneNumber é obrigatório para routeBy=sender")
        if self.route_by == RouteStrategy.BUSINESS and not self.phone_number_id:
            raise ValueError("phoneNumberId é obrigatório para routeBy=business")
        return self

    def build(self, *, synced: bool = False) -> RouteConfig:
        """Cria a RouteConfig com id e timestamps novos."""
        return RouteConfig.model_validate({**self.model_dump(), "synced": synced})


class RouteConfigUpdate(BaseModel):
    """Payload de atualização parcial (somente campos enviados são aplicados)."""

    model_config = _MODEL_CONFIG

    phone_number: str | None = None
    phone_number_id: str | None = None
    target_url: str | None = None
    description: str | None = None
    route_by: RouteStrategy | None = None
    active: bool | None = None

    @field_validator("phone_number_id", mode="before")
    @classmethod
    def _coerce_phone_number_id(cls, value: Any) -> str | None:
        return _coerce_optional_id(value)

    @field_validator("target_url")
    @classmethod
    def _check_target_url(cls, value: str | None) -> str | None:
        return None if value is None else validate_target_url(value)

    def changes(self) -> dict[str, Any]:
        """Campos efetivamente alterados.

        phoneNumber vazio mantém o número atual; phoneNumberId explícito
        como null limpa o identificador.
        """
        sent = self.model_dump(exclude_unset=True)
        changes: dict[str, Any] = {}
        for name, value in sent.items():
            if name == "phone_number_id":
                changes[name] = value
            elif name == "phone_number":
                if value and normalize_phone(value):
                    changes[name] = value
            elif value is not None:
                changes[name] = value
        return changes


@dataclass(frozen=True, slots=True)
class SyncOutcome:
    """Resultado de uma substituição do subconjunto sincronizado."""

    added: int
    removed: int
    dropped: int
    local: int

    def as_dict(self) -> dict[str, int]:
        return {
            "added": self.added,
            "removed": self.removed,
            "dropped": self.dropped,
            "local": self.local,
        }


def _pick(candidate: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = candidate.get(key)
        if value not in (None, ""):
            return value
    return None


def _parse_strategy(value: Any) -> RouteStrategy:
    try:
        return RouteStrategy(str(value).strip().lower())
    except ValueError:
        return RouteStrategy.SENDER


def _parse_active(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def route_from_candidate(candidate: Mapping[str, Any]) -> RouteConfig | None:
    """Mapeia um item da fonte remota para RouteConfig sincronizada.

    Retorna None quando falta chave de roteamento utilizável ou URL válida.
    """
    if not hasattr(candidate, "get"):
        return None

    target_url = _pick(candidate, "targetUrl", "target_url", "url")
    if not target_url:
        return None

    strategy = _parse_strategy(_pick(candidate, "routeBy", "route_by") or RouteStrategy.SENDER)
    phone = normalize_phone(str(_pick(candidate, "phoneNumber", "phone_number", "phone") or ""))
    phone_number_id = _coerce_optional_id(_pick(candidate, "phoneNumberId", "phone_number_id"))

    has_key = (
        bool(phone)
        or (strategy == RouteStrategy.BUSINESS and phone_number_id is not None)
        or strategy == RouteStrategy.DEFAULT
    )
    if not has_key:
        return None

    try:
        return RouteConfig(
            phone_number=phone,
            phone_number_id=phone_number_id,
            target_url=str(target_url),
            description=candidate.get("description") or "",
            route_by=strategy,
            active=_parse_active(candidate.get("active")),
            synced=True,
        )
    except ValidationError:
        return None
