"""Service layer used by CLI and future UI frontends."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from capedit.core.catalog import DefinitionCatalog, MergeOutcome
from capedit.core.config import Settings, load_settings
from capedit.core.document_loader import (
    dump_type_definition,
    load_capability_file,
    load_type_file,
    parse_capability_document,
    parse_type_document,
)
from capedit.core.errors import GroupInUseError, TransportError
from capedit.core.model import CommandRequest, CommandResult, Method, MethodDef, MethodType
from capedit.core.typedef import TypeDefinition
from capedit.transports.base import CommandExecutor
from capedit.transports.http import HTTPExecutor

LOGGER = logging.getLogger(__name__)


class EditorService:
    """Owns the definition catalog, the working command and the open type definition."""

    def __init__(
        self,
        *,
        executor: CommandExecutor | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.executor = executor or HTTPExecutor(
            self.settings.execute_url,
            timeout_s=self.settings.timeout_s,
        )
        self.catalog = DefinitionCatalog()
        self.current_method = Method.blank(
            base_url=self.settings.default_base_url,
            transport=self.settings.default_transport,
        )
        self.results = ""
        self.type_definition = TypeDefinition()
        self.type_file_name = ""

    def load_catalog(self, text: str, *, source: str = "<document>") -> MergeOutcome:
        document = parse_capability_document(text, source=source)
        return self.catalog.load(document)

    def merge_catalog(self, text: str, *, source: str = "<document>") -> MergeOutcome:
        document = parse_capability_document(text, source=source)
        return self.catalog.merge(document)

    def open_catalogs(self, paths: Sequence[Path]) -> list[MergeOutcome]:
        """Load the first file and merge the rest into the catalog."""
        outcomes: list[MergeOutcome] = []
        for position, path in enumerate(paths):
            document = load_capability_file(path)
            if position == 0:
                outcomes.append(self.catalog.load(document))
            else:
                outcomes.append(self.catalog.merge(document))
        return outcomes

    def list_methods(self) -> list[MethodDef]:
        return list(self.catalog.methods)

    @property
    def conflict_warnings(self) -> tuple[str, ...]:
        return tuple(
            f"Conflicting signatures for {first.service_name}.{first.method.command} "
            f"v{first.method.version} ({first.model_name} vs {second.model_name})"
            for first, second in self.catalog.duplicate_keys()
        )

    def select_method(self, index: int) -> MethodDef:
        definition = self.catalog.select(index)
        if definition.method_type is MethodType.METHOD:
            self.current_method = replace(
                self.current_method,
                base_url=definition.base_url,
                service=definition.service_name,
                transport=definition.transport,
                command=definition.method.command,
                version=definition.method.version,
                parms=definition.method.parms,
            )
        else:
            LOGGER.debug("Selected notification %s; working command unchanged", definition.method.command)
        return definition

    def set_parms(self, parms_text: str) -> None:
        self.current_method = replace(self.current_method, parms=(parms_text,) if parms_text else ())

    def run_command(self) -> CommandResult:
        request = CommandRequest.from_method(self.current_method)
        self.results = "waiting..."
        try:
            result = self.executor.execute(request)
        except TransportError as exc:
            LOGGER.warning("Command %s failed: %s", request.command, exc)
            result = CommandResult(success=False, message=str(exc), request=request)
        self.results = result.text
        return result

    def open_type_definition(self, path: Path) -> TypeDefinition:
        self.type_definition = load_type_file(path)
        self.type_file_name = path.name
        return self.type_definition

    def load_type_definition(self, text: str, *, file_name: str = "") -> TypeDefinition:
        self.type_definition = parse_type_document(text, source=file_name or "<document>")
        self.type_file_name = file_name
        return self.type_definition

    def export_type_definition(self) -> str:
        return dump_type_definition(self.type_definition)

    def delete_group(self, group_name: str) -> bool:
        if self.type_definition.group_in_use(group_name):
            raise GroupInUseError(
                f"Channel group '{group_name}' is in use by at least one channel and cannot be deleted"
            )
        return self.type_definition.remove_group(group_name)
