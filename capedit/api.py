"""Stable public API for building tooling on top of capedit.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from pathlib import Path

from capedit.core.catalog import CapabilityDocument, DefinitionCatalog, MergeOutcome
from capedit.core.channels import Channel, decode_group_id, encode_group_id
from capedit.core.config import Settings
from capedit.core.errors import (
    CapeditError,
    ChannelNotFoundError,
    ConfigError,
    DocumentLoadError,
    DocumentValidationError,
    GroupInUseError,
    SelectionError,
    TransportConnectError,
    TransportError,
    TransportSendError,
    TransportTimeoutError,
    TypeDefinitionError,
)
from capedit.core.model import (
    CommandRequest,
    CommandResult,
    Method,
    MethodDef,
    MethodType,
    NameValue,
)
from capedit.core.service import EditorService
from capedit.core.typedef import TypeDefinition
from capedit.transports.base import CommandExecutor
from capedit.transports.http import HTTPExecutor

__all__ = [
    "CapeditError",
    "ChannelNotFoundError",
    "ConfigError",
    "DocumentLoadError",
    "DocumentValidationError",
    "GroupInUseError",
    "SelectionError",
    "TransportError",
    "TransportConnectError",
    "TransportSendError",
    "TransportTimeoutError",
    "TypeDefinitionError",
    "CapabilityDocument",
    "Channel",
    "CommandExecutor",
    "CommandRequest",
    "CommandResult",
    "DefinitionCatalog",
    "HTTPExecutor",
    "MergeOutcome",
    "Method",
    "MethodDef",
    "MethodType",
    "NameValue",
    "Settings",
    "TypeDefinition",
    "decode_group_id",
    "encode_group_id",
    "Client",
]


class Client:
    """Public client for interacting with capedit core capabilities.

    A `Client` instance wraps catalog loading/merging, selection, command
    execution and type definition editing behind a stable API intended for
    third-party tools (GUI/TUI/services/scripts).
    """

    def __init__(
        self,
        *,
        executor: CommandExecutor | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._service = EditorService(executor=executor, settings=settings)

    @property
    def catalog(self) -> DefinitionCatalog:
        return self._service.catalog

    @property
    def current_method(self) -> Method:
        return self._service.current_method

    @property
    def type_definition(self) -> TypeDefinition:
        return self._service.type_definition

    def load_catalog(self, text: str, *, source: str = "<document>") -> MergeOutcome:
        return self._service.load_catalog(text, source=source)

    def merge_catalog(self, text: str, *, source: str = "<document>") -> MergeOutcome:
        return self._service.merge_catalog(text, source=source)

    def open_catalogs(self, *paths: Path) -> list[MergeOutcome]:
        return self._service.open_catalogs(paths)

    def list_methods(self) -> list[MethodDef]:
        return self._service.list_methods()

    def select_method(self, index: int) -> MethodDef:
        return self._service.select_method(index)

    def run_command(self, *, parms: str | None = None) -> CommandResult:
        if parms is not None:
            self._service.set_parms(parms)
        return self._service.run_command()

    def load_type_definition(self, text: str, *, file_name: str = "") -> TypeDefinition:
        return self._service.load_type_definition(text, file_name=file_name)

    def export_type_definition(self) -> str:
        return self._service.export_type_definition()

    def delete_group(self, group_name: str) -> bool:
        return self._service.delete_group(group_name)
