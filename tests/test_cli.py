from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from capedit import cli
from capedit.core.config import Settings
from capedit.core.errors import TransportSendError
from capedit.core.model import CommandRequest, CommandResult
from capedit.core.service import EditorService

CATALOG = {
    "modelName": "KD-55",
    "baseURL": "http://tv/sony",
    "services": [
        {
            "serviceName": "system",
            "transport": "auto",
            "methods": [{"methodName": "getPowerStatus", "version": "1.0", "parms": [], "retVals": ["result"]}],
            "notifications": [{"methodName": "notifyPowerStatus", "version": "1.0"}],
        }
    ],
}

TYPES = {
    "modelName": "KD-55",
    "label": "Sony TV",
    "service": "scalar",
    "channelGroups": {"system": "System", "primary": "Primary", "unused": "Unused"},
    "channels": [
        {"channelId": "system#powerstatus", "channelType": "switch", "properties": {}, "state": {}},
        {"channelId": "system#volume", "mappedChannelId": "primary#volume", "channelType": "dimmer"},
    ],
}


class FakeExecutor:
    def __init__(self) -> None:
        self.calls: list[CommandRequest] = []

    def execute(self, request: CommandRequest) -> CommandResult:
        self.calls.append(request)
        return CommandResult(success=True, results='[{"status":"active"}]')


class FailingExecutor:
    def execute(self, request: CommandRequest) -> CommandResult:
        raise TransportSendError(500, "Internal Server Error")


runner = CliRunner()


def _use_executor(monkeypatch, executor) -> None:
    monkeypatch.setattr(cli, "EditorService", lambda: EditorService(executor=executor, settings=Settings()))


def _write(path: Path, doc: object) -> Path:
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def test_catalog_list_command(monkeypatch, tmp_path: Path):
    _use_executor(monkeypatch, FakeExecutor())
    doc = _write(tmp_path / "kd55.json", CATALOG)
    result = runner.invoke(cli.app, ["catalog", "list", str(doc), str(doc)])
    assert result.exit_code == 0
    assert "Loaded: KD-55" in result.stdout
    assert "[0] system M getPowerStatus v1.0 () -> result" in result.stdout
    assert "[1] system N notifyPowerStatus v1.0" in result.stdout
    assert "Info: Already loaded KD-55 methods" in result.stderr


def test_catalog_export_command(monkeypatch, tmp_path: Path):
    _use_executor(monkeypatch, FakeExecutor())
    doc = _write(tmp_path / "kd55.json", CATALOG)
    out = tmp_path / "out.json"
    result = runner.invoke(cli.app, ["catalog", "export", str(doc), "-o", str(out)])
    assert result.exit_code == 0
    exported = json.loads(out.read_text(encoding="utf-8"))
    assert exported[0]["serviceName"] == "system"
    assert exported[0]["notifications"][0]["methodName"] == "notifyPowerStatus"


def test_run_command(monkeypatch, tmp_path: Path):
    executor = FakeExecutor()
    _use_executor(monkeypatch, executor)
    doc = _write(tmp_path / "kd55.json", CATALOG)
    result = runner.invoke(cli.app, ["run", str(doc), "--index", "0", "--parms", ""])
    assert result.exit_code == 0
    assert '[{"status":"active"}]' in result.stdout
    assert executor.calls[0].command == "getPowerStatus"
    assert executor.calls[0].parms == ""


def test_run_notification_is_refused(monkeypatch, tmp_path: Path):
    executor = FakeExecutor()
    _use_executor(monkeypatch, executor)
    doc = _write(tmp_path / "kd55.json", CATALOG)
    result = runner.invoke(cli.app, ["run", str(doc), "--index", "1"])
    assert result.exit_code == 1
    assert "notification" in result.stderr
    assert executor.calls == []


def test_run_transport_failure_is_clean(monkeypatch, tmp_path: Path):
    _use_executor(monkeypatch, FailingExecutor())
    doc = _write(tmp_path / "kd55.json", CATALOG)
    result = runner.invoke(cli.app, ["run", str(doc), "--index", "0"])
    assert result.exit_code == 1
    assert "Error: 500 Internal Server Error" in result.stderr
    assert "Traceback" not in result.stderr


def test_invalid_document_error_is_clean(monkeypatch, tmp_path: Path):
    _use_executor(monkeypatch, FakeExecutor())
    doc = _write(tmp_path / "bad.json", {"services": []})
    result = runner.invoke(cli.app, ["catalog", "list", str(doc)])
    assert result.exit_code == 1
    assert "Error: Schema validation failed" in result.stderr
    assert "Traceback" not in result.stdout
    assert "Traceback" not in result.stderr


def test_types_show_command(monkeypatch, tmp_path: Path):
    _use_executor(monkeypatch, FakeExecutor())
    doc = _write(tmp_path / "types.json", TYPES)
    result = runner.invoke(cli.app, ["types", "show", str(doc)])
    assert result.exit_code == 0
    assert "KD-55: Sony TV (scalar)" in result.stdout
    assert "unused: Unused (unused)" in result.stdout
    assert "system#volume -> primary#volume [dimmer]" in result.stdout


def test_types_normalize_round_trips(monkeypatch, tmp_path: Path):
    _use_executor(monkeypatch, FakeExecutor())
    doc = _write(tmp_path / "types.json", [TYPES])
    out = tmp_path / "normalized.json"
    result = runner.invoke(cli.app, ["types", "normalize", str(doc), "--output", str(out)])
    assert result.exit_code == 0
    normalized = json.loads(out.read_text(encoding="utf-8"))
    assert normalized["channelGroups"] == TYPES["channelGroups"]
    assert normalized["channels"][1]["mappedChannelId"] == "primary#volume"
    assert "mappedChannelId" not in normalized["channels"][0]


def test_types_delete_group_in_use_fails(monkeypatch, tmp_path: Path):
    _use_executor(monkeypatch, FakeExecutor())
    doc = _write(tmp_path / "types.json", TYPES)
    result = runner.invoke(cli.app, ["types", "delete-group", str(doc), "primary"])
    assert result.exit_code == 1
    assert "in use" in result.stderr


def test_types_delete_unused_group(monkeypatch, tmp_path: Path):
    _use_executor(monkeypatch, FakeExecutor())
    doc = _write(tmp_path / "types.json", TYPES)
    result = runner.invoke(cli.app, ["types", "delete-group", str(doc), "unused"])
    assert result.exit_code == 0
    assert "unused" not in json.loads(result.stdout)["channelGroups"]


def test_types_map_and_unmap(monkeypatch, tmp_path: Path):
    _use_executor(monkeypatch, FakeExecutor())
    doc = _write(tmp_path / "types.json", TYPES)
    mapped = runner.invoke(cli.app, ["types", "map", str(doc), "system#powerstatus", "primary#power"])
    assert mapped.exit_code == 0
    assert json.loads(mapped.stdout)["channels"][0]["mappedChannelId"] == "primary#power"

    unmapped = runner.invoke(cli.app, ["types", "map", str(doc), "system#volume"])
    assert unmapped.exit_code == 0
    assert all("mappedChannelId" not in c for c in json.loads(unmapped.stdout)["channels"])


def test_types_map_unknown_channel(monkeypatch, tmp_path: Path):
    _use_executor(monkeypatch, FakeExecutor())
    doc = _write(tmp_path / "types.json", TYPES)
    result = runner.invoke(cli.app, ["types", "map", str(doc), "system#missing", "primary#x"])
    assert result.exit_code == 1
    assert "Error: No channel 'system#missing'" in result.stderr


def test_catalog_list_reports_conflicting_signatures(monkeypatch, tmp_path: Path):
    _use_executor(monkeypatch, FakeExecutor())
    first = _write(tmp_path / "a.json", CATALOG)
    other = json.loads(json.dumps(CATALOG))
    other["modelName"] = "KD-65"
    other["services"][0]["methods"][0]["parms"] = ['{"id":"int"}']
    second = _write(tmp_path / "b.json", other)

    result = runner.invoke(cli.app, ["catalog", "list", str(first), str(second)])

    assert result.exit_code == 0
    assert "Warning: Conflicting signatures for system.getPowerStatus v1.0 (KD-55 vs KD-65)" in result.stderr
