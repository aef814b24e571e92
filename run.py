import asyncio
import json
import os
import sys
from dataclasses import asdict
from pathlib import Path

import typer
import yaml

from icn_extract.commons.engine import ExtractionEngine
from icn_extract.commons.logger import setup_logging
from icn_extract.commons.types import Settings
from icn_extract.parsers.orders import parse_order_listing
from icn_extract.parsers.roster import parse_roster_text
from icn_extract.services.import_service import ImportService

app = typer.Typer(add_completion=False, help="ICN census and antibiotic order extractor")


def resource_path(relative_path: str) -> str:
    """Absolute path to a bundled resource, frozen (.exe) or in development."""
    if hasattr(sys, "_MEIPASS"):
        # PyInstaller bundle
        base_path = sys._MEIPASS
    else:
        base_path = os.path.abspath(".")

    return os.path.join(base_path, relative_path)


def load_cfg(path: str = "icn_extract/configs/settings.yaml") -> dict:
    config_path = resource_path(path)
    if not os.path.exists(config_path):
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _start(cfg: dict, console: bool = True):
    settings = Settings.model_validate(cfg)
    return setup_logging(settings.paths.logs_root, os.getenv("LOG_LEVEL", "INFO"), console)


def _read(file: Path) -> str:
    return file.read_text(encoding="utf-8", errors="replace")


def _echo(data):
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


@app.command()
def roster(file: Path = typer.Argument(..., exists=True, dir_okay=False, help="pasted census text")):
    """Parse a census/roster paste into resident rows."""
    _start(load_cfg())
    _echo([asdict(r) for r in parse_roster_text(_read(file))])


@app.command()
def orders(file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Order Listing Report text")):
    """Parse an Order Listing Report paste into antibiotic orders."""
    _start(load_cfg())
    _echo([asdict(r) for r in parse_order_listing(_read(file))])


@app.command()
def parse(file: Path = typer.Argument(..., exists=True, dir_okay=False)):
    """Detect the document kind and print the validated import payload."""
    cfg = load_cfg()
    _start(cfg)
    engine = ExtractionEngine(cfg)
    _echo(engine.parse_and_map(_read(file), source=file.name))


@app.command()
def review(
    file: Path = typer.Argument(..., exists=True, dir_okay=False),
    notes: Path = typer.Option(None, exists=True, dir_okay=False, help="JSON {record_id: notes}"),
):
    """Stewardship documentation gaps for every order in the listing."""
    cfg = load_cfg()
    _start(cfg)
    engine = ExtractionEngine(cfg)
    notes_map = json.loads(_read(notes)) if notes else {}
    _echo(engine.review(parse_order_listing(_read(file)), notes_map))


@app.command()
def watch():
    """Process the inbox backlog, then keep watching it for new pastes."""
    cfg = load_cfg()
    logger = _start(cfg)
    engine = ExtractionEngine(cfg)
    settings = engine.cfg
    logger.info(f"Starting import service on {settings.paths.inbox}")
    svc = ImportService(engine, settings.paths)
    try:
        asyncio.run(svc.run_watch_mode(settings.watch.filename_glob))
    except KeyboardInterrupt:
        logger.info("Import service stopped")


if __name__ == "__main__":
    app()
