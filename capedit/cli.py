"""Typer CLI entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from capedit.core.errors import CapeditError
from capedit.core.model import MethodDef, MethodType
from capedit.core.service import EditorService

app = typer.Typer(help="Explore device RPC capability catalogs and edit channel type definitions")
catalog_app = typer.Typer(help="Load, merge and inspect capability catalogs")
types_app = typer.Typer(help="Inspect and edit channel type definitions")
app.add_typer(catalog_app, name="catalog")
app.add_typer(types_app, name="types")


def _build_service() -> EditorService:
    return EditorService()


def _open_catalogs(service: EditorService, files: list[Path]) -> None:
    for outcome in service.open_catalogs(files):
        if outcome.merged:
            typer.echo(f"{outcome.model_name}: {outcome.message}", err=True)
        else:
            typer.echo(f"Info: {outcome.message}", err=True)
    for warning in service.conflict_warnings:
        typer.echo(f"Warning: {warning}", err=True)


def _format_entry(index: int, definition: MethodDef) -> str:
    method = definition.method
    parms = ", ".join(method.parms)
    ret_vals = ", ".join(method.ret_vals)
    variation = f"#{method.variation}" if method.variation else ""
    return (
        f"[{index}] {definition.service_name} {definition.method_type.value} "
        f"{method.command} v{method.version}{variation} ({parms}) -> {ret_vals}"
    )


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    typer.echo(f"Wrote {output}", err=True)


@catalog_app.command("list")
def list_catalog(
    files: list[Path] = typer.Argument(..., help="Capability documents; the first is loaded, the rest merged"),
) -> None:
    """List the merged catalog with selectable indices."""
    try:
        service = _build_service()
        _open_catalogs(service, files)
        methods = service.list_methods()
        if not methods:
            typer.echo("No methods loaded")
            raise typer.Exit(code=1)
        typer.echo(f"Loaded: {service.catalog.loaded_file}")
        for index, definition in enumerate(methods):
            typer.echo(_format_entry(index, definition))
    except CapeditError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@catalog_app.command("export")
def export_catalog(
    files: list[Path] = typer.Argument(..., help="Capability documents to merge"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write JSON here instead of stdout"),
) -> None:
    """Export the merged catalog grouped by service."""
    try:
        service = _build_service()
        _open_catalogs(service, files)
        _emit(json.dumps(service.catalog.rest_api(), indent=2), output)
    except CapeditError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("run")
def run_command(
    files: list[Path] = typer.Argument(..., help="Capability documents; the first is loaded, the rest merged"),
    index: int = typer.Option(..., "--index", "-i", help="Catalog index from 'capedit catalog list'"),
    parms: str | None = typer.Option(None, "--parms", help="Parameter text sent instead of the catalog signature"),
) -> None:
    """Select a catalog entry and execute it on the device."""
    try:
        service = _build_service()
        _open_catalogs(service, files)
        definition = service.select_method(index)
        if definition.method_type is not MethodType.METHOD:
            typer.echo(f"Error: {definition.method.command} is a notification and cannot be executed", err=True)
            raise typer.Exit(code=1)
        if parms is not None:
            service.set_parms(parms)
        method = service.current_method
        typer.echo(f"Running {method.service}.{method.command} v{method.version} via {method.transport}", err=True)
        result = service.run_command()
        if result.success:
            typer.echo(result.text)
        else:
            typer.echo(f"Error: {result.text}", err=True)
            raise typer.Exit(code=1)
    except CapeditError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@types_app.command("show")
def show_type(file: Path) -> None:
    """Show the channel groups and channels of a type definition."""
    try:
        service = _build_service()
        td = service.open_type_definition(file)
        typer.echo(f"{td.model_name}: {td.label} ({td.service})")
        if td.description:
            typer.echo(f"  {td.description}")
        typer.echo("Groups:")
        for group in td.channel_groups:
            in_use = "" if td.group_in_use(group.name) else " (unused)"
            typer.echo(f"  {group.name}: {group.value}{in_use}")
        typer.echo("Channels:")
        for chl in td.channels:
            mapped = f" -> {chl.mapped_channel_with_group}" if chl.is_mapped else ""
            typer.echo(f"  {chl.channel_with_group}{mapped} [{chl.channel_type}]")
    except CapeditError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@types_app.command("normalize")
def normalize_type(
    file: Path,
    output: Path | None = typer.Option(None, "--output", "-o", help="Write JSON here instead of stdout"),
) -> None:
    """Parse a type definition and write it back in canonical form."""
    try:
        service = _build_service()
        service.open_type_definition(file)
        _emit(service.export_type_definition(), output)
    except CapeditError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@types_app.command("delete-group")
def delete_group(
    file: Path,
    group: str,
    output: Path | None = typer.Option(None, "--output", "-o", help="Write JSON here instead of stdout"),
) -> None:
    """Delete a channel group that no channel maps into."""
    try:
        service = _build_service()
        service.open_type_definition(file)
        if not service.delete_group(group):
            typer.echo(f"Warning: no channel group '{group}'", err=True)
        _emit(service.export_type_definition(), output)
    except CapeditError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@types_app.command("map")
def map_channel(
    file: Path,
    channel: str = typer.Argument(..., help="Group-qualified channel id, e.g. 'status#power'"),
    mapped: str | None = typer.Argument(None, help="Group-qualified target id; omit to unmap"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write JSON here instead of stdout"),
) -> None:
    """Map a channel to another group/id, or unmap it."""
    try:
        service = _build_service()
        td = service.open_type_definition(file)
        if mapped is None:
            td.unmap_channel(channel)
        else:
            td.map_channel(channel, mapped)
        _emit(service.export_type_definition(), output)
    except CapeditError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
