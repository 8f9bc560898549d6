"""Core data models used across loader, catalog, service, and CLI."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DEFAULT_BASE_URL = "http://192.168.1.167/sony"
DEFAULT_TRANSPORT = "auto"


@dataclass(frozen=True)
class NameValue:
    name: str
    value: str


def sorted_name_values(items: Iterable[NameValue]) -> tuple[NameValue, ...]:
    return tuple(sorted(items, key=lambda nv: nv.name))


class MethodType(str, Enum):
    METHOD = "M"
    NOTIFICATION = "N"

    @property
    def label(self) -> str:
        return "Method" if self is MethodType.METHOD else "Notification"


def _clean_names(values: Iterable[Any] | str | None) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,) if values else ()
    return tuple(str(v) for v in values if v is not None and v != "")


def _coerce_variation(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value if value >= 0 else 0
    if isinstance(value, float):
        return int(value) if value.is_integer() and value >= 0 else 0
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0


@dataclass(frozen=True)
class Method:
    base_url: str
    service: str
    transport: str
    command: str
    version: str
    variation: int = 0
    parms: tuple[str, ...] = ()
    ret_vals: tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        *,
        base_url: str | None = None,
        service: str | None = None,
        transport: str | None = None,
        command: str | None = None,
        version: str | None = None,
        variation: Any = None,
        parms: Iterable[Any] | str | None = None,
        ret_vals: Iterable[Any] | str | None = None,
    ) -> Method:
        """Build a method from loosely typed fields.

        Empty and null parameter/return entries are dropped and the variation
        is coerced to a non-negative integer (0 when absent or invalid).
        """
        return cls(
            base_url=base_url or "",
            service=service or "",
            transport=transport or DEFAULT_TRANSPORT,
            command=command or "",
            version="" if version is None else str(version),
            variation=_coerce_variation(variation),
            parms=_clean_names(parms),
            ret_vals=_clean_names(ret_vals),
        )

    @classmethod
    def blank(cls, base_url: str = DEFAULT_BASE_URL, transport: str = DEFAULT_TRANSPORT) -> Method:
        return cls(
            base_url=base_url,
            service="service",
            transport=transport,
            command="getPowerStatus",
            version="1.1",
        )

    @property
    def parms_text(self) -> str:
        return ",".join(self.parms)


@dataclass(frozen=True)
class MethodDef:
    base_url: str
    model_name: str
    service_name: str
    service_version: str
    transport: str
    method: Method
    method_type: MethodType = MethodType.METHOD

    def is_duplicate_key(self, other: MethodDef) -> bool:
        return (
            self.service_name == other.service_name
            and self.method.command == other.method.command
            and self.method.version == other.method.version
            and self.method.variation == other.method.variation
        )

    def is_same_def(self, other: MethodDef) -> bool:
        return (
            self.is_duplicate_key(other)
            and self.method_type == other.method_type
            and sorted(self.method.parms) == sorted(other.method.parms)
            and sorted(self.method.ret_vals) == sorted(other.method.ret_vals)
        )


@dataclass(frozen=True)
class CommandRequest:
    base_url: str
    service_name: str
    transport: str
    command: str
    version: str
    parms: str = ""

    @classmethod
    def from_method(cls, method: Method) -> CommandRequest:
        return cls(
            base_url=method.base_url,
            service_name=method.service,
            transport=method.transport,
            command=method.command,
            version=method.version,
            parms=method.parms_text,
        )

    def to_payload(self) -> dict[str, str]:
        return {
            "baseUrl": self.base_url,
            "serviceName": self.service_name,
            "transport": self.transport,
            "command": self.command,
            "version": self.version,
            "parms": self.parms,
        }


@dataclass(frozen=True)
class CommandResult:
    success: bool
    results: str | None = None
    message: str | None = None
    request: CommandRequest | None = field(default=None, compare=False)

    @property
    def text(self) -> str:
        if self.success:
            return self.results or ""
        return self.message or ""
