"""CLI entry point for urlpipe."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated
from urllib.parse import urlsplit

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from urlpipe.config import DEFAULT_CONFIG_TEMPLATE, UrlpipeConfig, load_config
from urlpipe.executor import run as run_pipeline
from urlpipe.log import configure_logging
from urlpipe.state import (
    ACTIVE_PARAM,
    INPUT_PARAM,
    ORDER_PARAM,
    PipelineRun,
    PipelineState,
    build_link,
    decode_state,
    encode_state,
    move as move_edit,
    params_from_link,
    set_config as set_config_edit,
    set_input as set_input_edit,
    toggle as toggle_edit,
)
from urlpipe.transforms import TransformNotFoundError, TransformRegistry, discover_plugins, load_registry
from urlpipe.urls import is_valid_url

app = typer.Typer(
    name="urlpipe",
    help="Run shareable pipelines of URL transforms.",
)

config_app = typer.Typer(help="Manage urlpipe configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: UrlpipeConfig | None = None

_DIRECTIONS = {"up": -1, "down": 1}

LinkArg = Annotated[str, typer.Argument(help="Share link or query string")]
InputOpt = Annotated[str | None, typer.Option("--url", "-u", help="Input URL (overrides the link)")]
ActiveOpt = Annotated[
    str | None, typer.Option("--active", "-a", help="Comma-separated active transforms")
]
OrderOpt = Annotated[str | None, typer.Option("--order", help="Comma-separated transform order")]
SetOpt = Annotated[
    list[str] | None,
    typer.Option("--set", "-s", help="Config override as key.field=value (repeatable)"),
]


def _get_config() -> UrlpipeConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to urlpipe.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


def _fail(message: str) -> typer.Exit:
    rprint(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(1)


def _get_registry() -> TransformRegistry:
    try:
        return load_registry(_get_config().plugins)
    except TransformNotFoundError as e:
        raise _fail(str(e))


def _require_known(key: str, registry: TransformRegistry) -> None:
    if key not in registry:
        known = ", ".join(registry.all_keys())
        raise _fail(f"Unknown transform '{key}'. Use one of: {known}.")


def _collect_params(
    link: str | None,
    url: str | None,
    active: str | None,
    order: str | None,
    sets: list[str] | None,
) -> dict[str, str]:
    """Merge link parameters with explicit overrides (overrides win)."""
    params = params_from_link(link or "")
    for name, value in ((INPUT_PARAM, url), (ACTIVE_PARAM, active), (ORDER_PARAM, order)):
        if value is not None:
            params[name] = value
    for item in sets or []:
        name, sep, value = item.partition("=")
        if not sep or "." not in name:
            raise _fail(f"Invalid --set '{item}': expected key.field=value")
        params[name] = value
    return params


def _link_base(link: str | None, cfg: UrlpipeConfig) -> str:
    """Reuse the link's own address when it has one, else the configured share URL."""
    if link:
        parts = urlsplit(link.strip())
        if parts.scheme and parts.netloc:
            return parts._replace(query="", fragment="").geturl()
    return cfg.share_url


def _state_payload(state: PipelineState, result: PipelineRun) -> dict:
    return {
        "input": state.input,
        "order": list(state.order),
        "active": list(state.active_order()),
        "configs": state.configs,
        "steps": [
            {"key": s.key, "result": s.result, "output": s.output, "status": s.status}
            for s in result.steps
        ],
        "output": result.output,
    }


def _display_run(state: PipelineState, result: PipelineRun, registry: TransformRegistry) -> None:
    """Render input, per-transform status, and output."""
    url_invalid = state.input != "" and not is_valid_url(state.input)
    show_status = state.input != "" and not url_invalid

    rprint(Panel(escape(state.input) or "[dim](empty)[/dim]", title="Input", border_style="blue"))
    if url_invalid:
        rprint("[red]Not a valid URL[/red]")

    table = Table(title="Transformations")
    table.add_column("#", justify="right")
    table.add_column("Active")
    table.add_column("Transform", style="cyan")
    table.add_column("Config", style="yellow")
    table.add_column("Status")
    for idx, key in enumerate(state.order, start=1):
        definition = registry.lookup(key)
        is_active = key in state.active
        config = state.config_for(key)
        config_str = ", ".join(f"{f}={v}" for f, v in config.items()) if is_active and config else ""
        status = ""
        step = result.result_for(key)
        if show_status and step is not None:
            status = "[green]applied[/green]" if step.applied else "[dim]no match[/dim]"
        table.add_row(
            str(idx),
            "✓" if is_active else "",
            escape(definition.label if definition else key),
            escape(config_str),
            status,
        )
    rprint(table)
    rprint("[bold]Output[/bold]")
    typer.echo(result.output)


@app.command()
def transforms() -> None:
    """List registered transforms in default order."""
    registry = _get_registry()
    table = Table(title=f"Transforms ({len(registry)})")
    table.add_column("Key", style="cyan")
    table.add_column("Label")
    table.add_column("Config fields", style="yellow")
    for definition in registry.all():
        fields = []
        for f in definition.fields:
            desc = f.name
            if f.presets:
                desc += f" (presets: {', '.join(f.presets)})"
            fields.append(desc)
        table.add_row(escape(definition.key), escape(definition.label), escape("; ".join(fields)) or "-")
    rprint(table)

    plugins = discover_plugins()
    if plugins:
        rprint(f"[dim]Plugins discovered:[/dim] {escape(', '.join(plugins))}")


@app.command()
def run(
    link: Annotated[str | None, typer.Argument(help="Share link or query string")] = None,
    url: InputOpt = None,
    active: ActiveOpt = None,
    order: OrderOpt = None,
    sets: SetOpt = None,
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: text or json")
    ] = "text",
) -> None:
    """Decode the pipeline state and run it."""
    if format not in ("text", "json"):
        raise _fail(f"Unknown format '{format}': expected text or json")
    registry = _get_registry()
    state = decode_state(_collect_params(link, url, active, order, sets), registry)
    result = run_pipeline(state, registry)

    if format == "json":
        typer.echo(json.dumps(_state_payload(state, result), indent=2))
    else:
        _display_run(state, result, registry)


@app.command()
def link(
    link: Annotated[str | None, typer.Argument(help="Share link or query string")] = None,
    url: InputOpt = None,
    active: ActiveOpt = None,
    order: OrderOpt = None,
    sets: SetOpt = None,
) -> None:
    """Print the canonical share link for the given state."""
    cfg = _get_config()
    registry = _get_registry()
    state = decode_state(_collect_params(link, url, active, order, sets), registry)
    typer.echo(build_link(_link_base(link, cfg), encode_state(state, registry)))


@app.command()
def toggle(
    link: LinkArg,
    key: Annotated[str, typer.Argument(help="Transform key to enable or disable")],
) -> None:
    """Enable or disable a transform."""
    registry = _get_registry()
    _require_known(key, registry)
    params = toggle_edit(params_from_link(link), key, registry)
    typer.echo(build_link(_link_base(link, _get_config()), params))


@app.command()
def move(
    link: LinkArg,
    key: Annotated[str, typer.Argument(help="Transform key to move")],
    direction: Annotated[str, typer.Argument(help="up or down")],
) -> None:
    """Move a transform one place earlier or later."""
    registry = _get_registry()
    _require_known(key, registry)
    if direction not in _DIRECTIONS:
        raise _fail(f"Invalid direction '{direction}': expected up or down")
    params = move_edit(params_from_link(link), key, _DIRECTIONS[direction], registry)
    typer.echo(build_link(_link_base(link, _get_config()), params))


@app.command("set-config")
def set_config(
    link: LinkArg,
    name: Annotated[str, typer.Argument(help="Config parameter as key.field")],
    value: Annotated[str, typer.Argument(help="New value; empty removes it")] = "",
) -> None:
    """Set one config field of a transform."""
    registry = _get_registry()
    key, sep, field = name.partition(".")
    if not sep:
        raise _fail(f"Invalid config name '{name}': expected key.field")
    _require_known(key, registry)
    params = set_config_edit(params_from_link(link), key, field, value, registry)
    typer.echo(build_link(_link_base(link, _get_config()), params))


@app.command("set-input")
def set_input(
    link: LinkArg,
    value: Annotated[str, typer.Argument(help="New input URL; empty clears it")] = "",
) -> None:
    """Replace the input URL."""
    params = set_input_edit(params_from_link(link), value)
    typer.echo(build_link(_link_base(link, _get_config()), params))


# ── config subcommands ────────────────────────────────────────────


@config_app.command("init")
def config_init(
    path: Annotated[str, typer.Option("--path", "-p", help="Where to write the config")] = "urlpipe.yaml",
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing file")] = False,
) -> None:
    """Write the default config template."""
    dest = Path(path)
    if dest.exists() and not force:
        raise _fail(f"{dest} already exists (use --force to overwrite)")
    dest.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {dest}")


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.safe_dump(cfg.model_dump(), sort_keys=False), "yaml", theme="monokai"))
