"""Deduplicated, ordered catalog of RPC method definitions."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from capedit.core.errors import SelectionError
from capedit.core.model import MethodDef, MethodType

LOGGER = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^\d+(?:\.\d+)*$")


@dataclass(frozen=True)
class CapabilityDocument:
    model_name: str
    method_defs: tuple[MethodDef, ...]


@dataclass(frozen=True)
class MergeOutcome:
    model_name: str
    merged: bool
    added: int = 0

    @property
    def message(self) -> str:
        if not self.merged:
            return f"Already loaded {self.model_name} methods"
        return f"Loaded {self.added} methods"


def version_key(version: str) -> tuple[int, tuple[int, ...], str]:
    """Order versions numerically, placing unparseable versions last.

    ``"1.9"`` sorts before ``"1.10"``. Non-numeric versions compare after every
    numeric one and among themselves by their text. This differs from a plain
    float parse in places: ``"1.05"`` sorts after ``"1.1"`` (components 5 > 1)
    and ``"1.0a"`` sorts last instead of being read as 1.0.
    """
    text = version.strip()
    if _VERSION_RE.match(text):
        return 0, tuple(int(part) for part in text.split(".")), text
    return 1, (), text


def sort_key(definition: MethodDef) -> tuple[Any, ...]:
    return (
        definition.service_name,
        definition.method_type.value,
        definition.method.command,
        version_key(definition.method.version),
        definition.method.variation,
    )


class DefinitionCatalog:
    def __init__(self) -> None:
        self.loaded_models: list[str] = []
        self.methods: list[MethodDef] = []
        self.selected_index = -1

    @property
    def loaded_file(self) -> str:
        return ",".join(self.loaded_models)

    @property
    def selected(self) -> MethodDef | None:
        if not 0 <= self.selected_index < len(self.methods):
            return None
        return self.methods[self.selected_index]

    def is_loaded(self, model_name: str) -> bool:
        return model_name in self.loaded_models

    def set_methods(self, defs: Iterable[MethodDef]) -> None:
        self.selected_index = -1
        self.methods = list(defs)
        self._sort()

    def merge_methods(self, defs: Iterable[MethodDef]) -> int:
        self.selected_index = -1
        added = 0
        for definition in defs:
            if any(definition.is_same_def(existing) for existing in self.methods):
                continue
            self.methods.append(definition)
            added += 1
        self._sort()
        return added

    def load(self, document: CapabilityDocument) -> MergeOutcome:
        self.loaded_models = [document.model_name]
        self.set_methods(document.method_defs)
        LOGGER.info("Loaded %d methods from %s", len(document.method_defs), document.model_name)
        return MergeOutcome(model_name=document.model_name, merged=True, added=len(document.method_defs))

    def merge(self, document: CapabilityDocument) -> MergeOutcome:
        if self.is_loaded(document.model_name):
            LOGGER.info("Skipping %s: already loaded", document.model_name)
            return MergeOutcome(model_name=document.model_name, merged=False)

        added = self.merge_methods(document.method_defs)
        self.loaded_models.append(document.model_name)
        LOGGER.info("Merged %d of %d methods from %s", added, len(document.method_defs), document.model_name)
        return MergeOutcome(model_name=document.model_name, merged=True, added=added)

    def select(self, index: int) -> MethodDef:
        if index < 0 or index >= len(self.methods):
            raise SelectionError(
                f"No catalog entry at index {index}. Catalog has {len(self.methods)} entries."
            )
        self.selected_index = index
        return self.methods[index]

    def duplicate_keys(self) -> list[tuple[MethodDef, MethodDef]]:
        """Pairs sharing service/command/version/variation but differing in signature."""
        pairs: list[tuple[MethodDef, MethodDef]] = []
        for i, first in enumerate(self.methods):
            for second in self.methods[i + 1 :]:
                if first.method_type == second.method_type and first.is_duplicate_key(second):
                    pairs.append((first, second))
        return pairs

    def rest_api(self) -> list[dict[str, Any]]:
        services: dict[str, dict[str, Any]] = {}
        for definition in self.methods:
            service = services.setdefault(
                definition.service_name,
                {
                    "serviceName": definition.service_name,
                    "version": definition.service_version,
                    "methods": [],
                    "notifications": [],
                },
            )
            bucket = "methods" if definition.method_type is MethodType.METHOD else "notifications"
            service[bucket].append(
                {
                    "methodName": definition.method.command,
                    "version": definition.method.version,
                    "variation": definition.method.variation,
                    "parms": list(definition.method.parms),
                    "retVals": list(definition.method.ret_vals),
                }
            )
        return list(services.values())

    def _sort(self) -> None:
        self.methods.sort(key=sort_key)
