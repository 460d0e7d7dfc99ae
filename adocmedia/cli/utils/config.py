"""Settings and document loading for the adocmedia CLI."""

import json
import logging
import os
from dataclasses import replace
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from adocmedia.engine import DisplayConfig, Document
from adocmedia.engine.options import normalize_protocols, parse_size
from adocmedia.exceptions import ConfigError
from adocmedia.models import DisplaySettings

console = Console()

# Settings storage; ADOCMEDIA_CONFIG points elsewhere
config_dir = os.path.expanduser("~/.config/adocmedia")
config_path = os.path.join(config_dir, "config.json")


def setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_settings(path: Optional[str] = None) -> DisplaySettings:
    """Load the settings file; a missing file yields the defaults."""
    path = path or os.environ.get("ADOCMEDIA_CONFIG") or config_path
    if not os.path.exists(path):
        return DisplaySettings()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return DisplaySettings.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid settings file {path}: {e}") from e


def build_config(
    *,
    remote: Optional[bool] = None,
    protocols: Optional[List[str]] = None,
    max_size: Optional[str] = None,
    config_file: Optional[str] = None,
) -> DisplayConfig:
    """Settings file, then ADOCMEDIA_* environment, then command-line options."""
    config = DisplayConfig.from_env(base=load_settings(config_file).to_config())
    overrides = {}
    if remote is not None:
        overrides["display_remote_images"] = remote
    if protocols:
        overrides["remote_image_protocols"] = normalize_protocols(protocols)
    if max_size:
        overrides["max_image_size"] = parse_size(max_size)
    return replace(config, **overrides)


def load_document(path: str) -> Document:
    try:
        return Document.from_file(path)
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[bold red]Error:[/bold red] Could not read {path}: {e}")
        raise typer.Exit(1)
