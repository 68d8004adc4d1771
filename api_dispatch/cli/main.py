"""Main CLI entry point for api-dispatch."""

import json
import sys
from collections.abc import Mapping

import httpx
import typer
from rich.console import Console
from rich.table import Table

from api_dispatch.core.config import DispatchSettings, validate_all
from api_dispatch.core.config.source import ConfigSource
from api_dispatch.core.endpoints import resolve_endpoint
from api_dispatch.core.exceptions import ApiDispatchError
from api_dispatch.core.logging import configure_root_logging
from api_dispatch.core.registry import ClientRegistry

app = typer.Typer(
    name="api-dispatch",
    help="Call configured provider api endpoints",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()


def _load_settings(config_file: str | None) -> DispatchSettings:
    # Environment already checked by validate_all() in the app callback
    settings = DispatchSettings.load()
    if config_file:
        settings = DispatchSettings(
            config_file=config_file,
            log_level=settings.log_level,
            request_timeout=settings.request_timeout,
        )
    return settings


def _load_config(settings: DispatchSettings) -> ConfigSource:
    try:
        return ConfigSource.from_toml(settings.config_file)
    except FileNotFoundError:
        console.print(f"[red]❌ Config file not found: {settings.config_file}[/red]")
        sys.exit(1)
    except ValueError as e:
        # tomllib.TOMLDecodeError is a ValueError
        console.print(f"[red]❌ Invalid config file {settings.config_file}: {e}[/red]")
        sys.exit(1)


def _parse_data(pairs: list[str] | None) -> dict[str, str]:
    data: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {pair!r}", param_hint="--data")
        data[key] = value
    return data


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """API Dispatch CLI."""
    errors = validate_all()
    if errors:
        for error in errors:
            console.print(f"[red]❌ Invalid environment configuration: {error}[/red]")
        sys.exit(1)
    configure_root_logging("DEBUG" if verbose else _load_settings(None).log_level)


@app.command()
def version() -> None:
    """Show version information."""
    from api_dispatch import __version__

    console.print(f"[bold cyan]api-dispatch[/bold cyan] version [green]{__version__}[/green]")


@app.command()
def call(
    provider: str = typer.Argument(..., help="Provider name in the config file"),
    endpoint: str = typer.Argument(..., help="Endpoint name under the provider"),
    data: list[str] = typer.Option(None, "--data", "-d", help="Request data as key=value"),
    config_file: str = typer.Option(None, "--config", "-c", help="Config file path"),
    timeout: float = typer.Option(None, "--timeout", "-t", help="Request timeout in seconds"),
) -> None:
    """Call a configured endpoint and print the response."""
    payload = _parse_data(data)
    settings = _load_settings(config_file)
    config = _load_config(settings)

    with ClientRegistry(config, timeout=settings.request_timeout) as registry:
        try:
            client = registry.get_or_create_client(provider)
            if timeout is not None:
                client.with_timeout(timeout)
            response = client.call_endpoint(endpoint, payload)
        except ApiDispatchError as e:
            console.print(f"[red]❌ {e}[/red]")
            sys.exit(1)
        except httpx.HTTPError as e:
            console.print(f"[red]❌ Request failed: {e}[/red]")
            sys.exit(1)

    status_style = "green" if response.is_success else "red"
    console.print(
        f"[{status_style}]{response.status_code} {response.reason_phrase}[/{status_style}] "
        f"{response.request.method} {response.request.url}"
    )
    if "json" in response.headers.get("content-type", ""):
        try:
            console.print_json(data=response.json())
            return
        except json.JSONDecodeError:
            pass
    if response.text:
        console.print(response.text, markup=False, highlight=False)


@app.command()
def endpoints(
    provider: str = typer.Argument(..., help="Provider name in the config file"),
    config_file: str = typer.Option(None, "--config", "-c", help="Config file path"),
) -> None:
    """List the endpoints configured for a provider."""
    settings = _load_settings(config_file)
    config = _load_config(settings)

    if provider not in config:
        known = ", ".join(config.provider_names()) or "none"
        console.print(
            f"[red]❌ Missing config for api provider {provider!r}[/red] (configured: {known})"
        )
        sys.exit(1)
    provider_config = config.provider(provider)

    table = Table(title=f"Endpoints: {provider}")
    table.add_column("Endpoint", style="cyan")
    table.add_column("Method", style="yellow")
    table.add_column("Url", style="green")

    configured = provider_config.get("endpoints")
    if not isinstance(configured, Mapping):
        configured = {}
    for name in configured:
        try:
            resolved = resolve_endpoint(provider_config, name, provider)
        except ApiDispatchError as e:
            table.add_row(name, "[red]error[/red]", f"[red]{e}[/red]")
            continue
        table.add_row(name, resolved.method.value.upper(), resolved.url)

    console.print(table)


if __name__ == "__main__":
    app()
