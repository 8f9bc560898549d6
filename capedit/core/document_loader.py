"""Loading and validation of capability and type definition JSON documents."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

from jsonschema import ValidationError, validators

from capedit.core.catalog import CapabilityDocument
from capedit.core.errors import DocumentLoadError, DocumentValidationError
from capedit.core.model import Method, MethodDef, MethodType
from capedit.core.typedef import TypeDefinition

CAPABILITY_SCHEMA = "capability.schema.json"
TYPEDEF_SCHEMA = "typedef.schema.json"
LOGGER = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def load_schema_validator(name: str) -> Any:
    schema_text = resources.files("capedit.schemas").joinpath(name).read_text(encoding="utf-8")
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentLoadError(f"Could not read document {path}: {exc}") from exc


def _decode_json(text: str, source: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DocumentValidationError(f"Invalid JSON in {source}: {exc}") from exc


def _validate(doc: Any, schema_name: str, source: str) -> None:
    validator = load_schema_validator(schema_name)
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise DocumentValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc


def _version_text(value: Any) -> str:
    return "" if value is None else str(value)


def build_method_defs(doc: dict[str, Any]) -> list[MethodDef]:
    """Flatten the services of a validated capability document into method defs."""
    base_url = doc.get("baseURL") or ""
    model_name = doc["modelName"]
    defs: list[MethodDef] = []
    for srv in doc["services"]:
        service_name = srv["serviceName"]
        transport = srv.get("transport") or ""
        for method_type, key in ((MethodType.METHOD, "methods"), (MethodType.NOTIFICATION, "notifications")):
            for mthd in srv.get(key) or []:
                method = Method.create(
                    base_url=base_url,
                    service=service_name,
                    transport=transport,
                    command=mthd["methodName"],
                    version=_version_text(mthd.get("version")),
                    variation=mthd.get("variation"),
                    parms=mthd.get("parms"),
                    ret_vals=mthd.get("retVals"),
                )
                defs.append(
                    MethodDef(
                        base_url=base_url,
                        model_name=model_name,
                        service_name=service_name,
                        service_version=_version_text(srv.get("version")),
                        transport=method.transport,
                        method=method,
                        method_type=method_type,
                    )
                )
    return defs


def parse_capability_document(text: str, *, source: str = "<document>") -> CapabilityDocument:
    doc = _decode_json(text, source)
    _validate(doc, CAPABILITY_SCHEMA, source)
    defs = build_method_defs(doc)
    LOGGER.debug("Parsed %d method definitions from %s", len(defs), source)
    return CapabilityDocument(
        model_name=doc["modelName"],
        method_defs=tuple(defs),
    )


def parse_type_document(text: str, *, source: str = "<document>") -> TypeDefinition:
    doc = _decode_json(text, source)
    if isinstance(doc, list):
        if not doc:
            raise DocumentValidationError(f"Type definition list in {source} is empty")
        doc = doc[0]
    _validate(doc, TYPEDEF_SCHEMA, source)
    return TypeDefinition.parse(doc)


def load_capability_file(path: Path) -> CapabilityDocument:
    return parse_capability_document(read_text(path), source=str(path))


def load_type_file(path: Path) -> TypeDefinition:
    return parse_type_document(read_text(path), source=str(path))


def dump_type_definition(type_definition: TypeDefinition) -> str:
    return json.dumps(type_definition.export(), indent=2)
