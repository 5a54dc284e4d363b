"""
Command-line entry point for checking a Tanzu AI Services setup.
"""

from __future__ import annotations

import asyncio
import logging

import click
import httpx
from rich.console import Console
from rich.table import Table

from .config import Configuration
from .credentials import (
    API_KEY_KEY,
    ENDPOINT_KEY,
    VCAP_SERVICES_KEY,
    Credentials,
    resolve_credentials,
)
from .discovery import discover_models, filter_chat_models
from .errors import TanzuError
from .llm.errors import ProviderError
from .provider import TANZU_DEFAULT_MODEL, TanzuAIServicesProvider

console = Console()


def setup_logging(config: Configuration, verbose: bool = False) -> None:
    """Apply the YAML ``logging`` section to the root logger."""
    logging_config = config.get_logging_config()
    level = "DEBUG" if verbose else logging_config.get("level", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=logging_config.get(
            "format", "%(asctime)s - %(levelname)s - %(message)s"
        ),
    )


def mask_secret(secret: str) -> str:
    if len(secret) <= 8:
        return "***"
    return f"{secret[:4]}...{secret[-4:]}"


def _resolve(config: Configuration) -> Credentials:
    try:
        return resolve_credentials(config)
    except TanzuError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML settings file (defaults to the packaged config.yaml).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, config_file: str | None, verbose: bool) -> None:
    """Inspect and exercise Tanzu AI Services credentials."""
    config = Configuration(config_path=config_file)
    setup_logging(config, verbose)
    ctx.obj = config


@cli.command(name="credentials")
@click.pass_obj
def credentials_cmd(config: Configuration) -> None:
    """Show which credentials would be used."""
    creds = _resolve(config)
    explicit = config.get_param(ENDPOINT_KEY) is not None and (
        config.get_secret(API_KEY_KEY) is not None
    )
    source = "explicit configuration" if explicit else VCAP_SERVICES_KEY

    console.print("\n[bold]Tanzu AI Services Credentials[/bold]\n")
    console.print(f"Source: {source}")
    console.print(f"Endpoint: {creds.endpoint_base}")
    console.print(f"API Key: {mask_secret(creds.api_key)}")
    console.print(f"Config URL: {creds.config_url or 'Not set'}")
    console.print(f"Model Hint: {creds.model_name or 'Not set'}\n")


@cli.command(name="models")
@click.option("--chat-only", is_flag=True, help="Only list chat-capable models.")
@click.pass_obj
def models_cmd(config: Configuration, chat_only: bool) -> None:
    """List models advertised by the endpoint."""
    creds = _resolve(config)
    try:
        models = asyncio.run(
            discover_models(creds, http_config=config.get_http_config())
        )
    except (httpx.HTTPError, ValueError) as e:
        raise click.ClickException(f"Model discovery failed: {e}") from e

    if chat_only:
        keep = filter_chat_models(models)
        models = [m for m in models if m.name in keep]

    table = Table(title="Available Models")
    table.add_column("Model")
    table.add_column("Capabilities")
    for m in models:
        table.add_row(m.name, ", ".join(m.capabilities))
    console.print(table)


async def _chat(
    config: Configuration, prompt: str, model_name: str | None, stream: bool
) -> None:
    model = config.get_model_config(TANZU_DEFAULT_MODEL)
    if model_name:
        model = model.model_copy(update={"model_name": model_name})

    async with await TanzuAIServicesProvider.from_env(model, config) as provider:
        messages = [{"role": "user", "content": prompt}]
        if stream:
            async for chunk in provider.stream("", messages):
                for choice in chunk.get("choices") or []:
                    text = (choice.get("delta") or {}).get("content")
                    if text:
                        console.print(text, end="", markup=False)
            console.print()
            return

        message, usage = await provider.complete("", messages)
        console.print(message["content"], markup=False)
        console.print(
            f"[dim]{usage.model}: {usage.usage.input_tokens} in / "
            f"{usage.usage.output_tokens} out[/dim]"
        )


@cli.command(name="chat")
@click.argument("prompt")
@click.option("--model", "model_name", default=None, help="Model to use.")
@click.option("--stream", is_flag=True, help="Stream the response.")
@click.pass_obj
def chat_cmd(
    config: Configuration, prompt: str, model_name: str | None, stream: bool
) -> None:
    """Send a single prompt and print the reply."""
    try:
        asyncio.run(_chat(config, prompt, model_name, stream))
    except (TanzuError, ProviderError) as e:
        raise click.ClickException(str(e)) from e


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
