"""Typer CLI entrypoint."""

from __future__ import annotations

import typer

from nmprops.api import Client
from nmprops.core.errors import NmpropsError
from nmprops.core.model import RenderMode

app = typer.Typer(help="Parse, validate and render network connection setting properties")


def _build_client() -> Client:
    client = Client()
    for warning in client.load_warnings:
        typer.echo(f"Warning: {warning}", err=True)
    return client


@app.command("settings")
def list_settings(
    setting: str | None = typer.Argument(None, help="Only list this setting's properties"),
) -> None:
    """List setting groups and their properties."""
    try:
        client = _build_client()
        infos = client.list_settings() if setting is None else [client.setting(setting)]
        for info in infos:
            typer.echo(f"{info.name}: {info.title}")
            for name, descriptor in info.properties.items():
                marks = []
                if descriptor.cli_alias:
                    marks.append(f"alias {descriptor.cli_alias}")
                if descriptor.is_secret:
                    marks.append("secret")
                if descriptor.is_multi_valued:
                    marks.append("multi")
                suffix = f" ({', '.join(marks)})" if marks else ""
                typer.echo(f"  {name}{suffix}")
    except NmpropsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("describe")
def describe(setting: str, prop: str = typer.Argument(..., metavar="PROPERTY")) -> None:
    """Show help text and allowed values for a property."""
    try:
        client = _build_client()
        typer.echo(client.describe(setting, prop))
    except NmpropsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("values")
def list_values(setting: str, prop: str = typer.Argument(..., metavar="PROPERTY")) -> None:
    """List the legal values of a property, one per line."""
    try:
        client = _build_client()
        for value in client.values(setting, prop):
            typer.echo(value)
    except NmpropsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("complete")
def complete(
    setting: str,
    prop: str = typer.Argument(..., metavar="PROPERTY"),
    text: str = typer.Argument("", help="Text typed so far"),
) -> None:
    """Print completion candidates for TEXT."""
    try:
        client = _build_client()
        for candidate in client.complete(setting, prop, text):
            typer.echo(candidate)
    except NmpropsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("normalize")
def normalize(
    setting: str,
    prop: str = typer.Argument(..., metavar="PROPERTY"),
    text: str = typer.Argument(..., help="Value as typed by a user"),
    pretty: bool = typer.Option(False, "--pretty", help="Render in the human-oriented form"),
    show_secrets: bool = typer.Option(False, "--show-secrets", help="Do not hide secret values"),
) -> None:
    """Parse TEXT for a property and print it back in canonical form."""
    try:
        client = _build_client()
        group = client.new_setting(setting)
        client.assign(group, prop, text)
        mode = RenderMode.PRETTY if pretty else RenderMode.PARSABLE
        rendered = client.render(group, prop, mode=mode, show_secrets=show_secrets)
        typer.echo(rendered.text)
    except NmpropsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("check")
def check(
    setting: str,
    prop: str = typer.Argument(..., metavar="PROPERTY"),
    text: str = typer.Argument(..., help="Value as typed by a user"),
) -> None:
    """Validate TEXT for a property; exits 1 with the error kind when rejected."""
    try:
        client = _build_client()
        outcome = client.check(setting, prop, text)
    except NmpropsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if not outcome.ok:
        typer.echo(f"{outcome.kind.value}: {outcome.message}", err=True)
        raise typer.Exit(code=1)
    typer.echo("ok")


@app.command("parts")
def parts(
    connection_type: str = typer.Argument(..., metavar="TYPE"),
    slave_type: str | None = typer.Option(None, "--slave-type", help="Slave type of the connection"),
) -> None:
    """List the setting groups a connection of TYPE may carry."""
    try:
        client = _build_client()
        valid = client.valid_parts(connection_type, slave_type)
        if slave_type:
            typer.echo(f"Slave setting: {client.slave_setting(slave_type)}")
        for part in valid:
            need = "mandatory" if part.mandatory else "optional"
            typer.echo(f"{part.setting} ({need})")
    except NmpropsError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
