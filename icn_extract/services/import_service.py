# icn_extract/services/import_service.py
import asyncio
import json
import os
import re
import shutil
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from icn_extract.commons.engine import ExtractionEngine
from icn_extract.commons.logger import logger
from icn_extract.commons.types import PathsCfg
from icn_extract.helpers.file_transport import FileWatcher, read_when_ready
from icn_extract.validation.validators import validate_payload_or_raise


def generate_archive_filename(source: str, kind: str = "unknown", origin: str = "file") -> str:
    """
    Timestamped name for a parsed payload, sortable by arrival.
    Ex: 20260124-170605-123456_orders_file_january_abx.json
    """
    if not isinstance(source, str):
        raise TypeError(f"Invalid type for source: expected str, got {type(source).__name__}")

    ts = datetime.utcnow().strftime("%Y%m%d-%H%M%S-%f")
    base_name = os.path.splitext(os.path.basename(source))[0] or "pasted"
    safe_base = re.sub(r"[^a-zA-Z0-9_\-]", "_", base_name)
    return f"{ts}_{kind.lower()}_{origin}_{safe_base}.json"


class ImportService:
    def __init__(self, engine: ExtractionEngine, paths: PathsCfg):
        self.engine = engine
        self.paths = paths
        Path(paths.archive).mkdir(parents=True, exist_ok=True)
        Path(paths.error).mkdir(parents=True, exist_ok=True)

    def _to_error(self, text: str, src: str) -> Path:
        err_name = Path(src).name if src else "pasted.err.txt"
        errp = Path(self.paths.error) / err_name
        errp.write_text(text, encoding="utf-8")
        if src and Path(src).exists() and Path(src).resolve() != errp.resolve():
            Path(src).unlink()
        return errp

    async def process_text(self, text: str, src: str = ""):
        """Parse one export, archive the JSON payload and the raw file.

        Returns the output path, or None when the input went to error/.
        """
        if not text.strip():
            return None
        try:
            payload = self.engine.parse_and_map(text, source=Path(src).name if src else None)
            validate_payload_or_raise(payload)

            filename = generate_archive_filename(src or "pasted", payload["kind"])
            out_json = Path(self.paths.archive) / filename
            out_json.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
            summary = payload["summary"]
            logger.info(
                f"{summary['kind']}: {summary['rows_extracted']} row(s) from "
                f"{summary['lines_seen']} line(s) -> {out_json}"
            )
            if summary["rows_extracted"] == 0:
                logger.warning(f"Nothing extracted from {src or 'pasted text'}")

            if src and Path(src).exists():
                dst_dir = Path(self.paths.archive) / "raw"
                dst_dir.mkdir(parents=True, exist_ok=True)
                shutil.move(src, dst_dir / Path(src).name)
            return out_json

        except ValidationError as ve:
            errp = self._to_error(text, src)
            logger.error(f"Validation failed for {errp.name}: {ve}")
            return None
        except Exception as ex:
            errp = self._to_error(text, src)
            logger.exception(f"Error processing import: {ex}. Moved to {errp}")
            return None

    async def process_backlog(self, glob_pat: str):
        inbox = Path(self.paths.inbox)
        files = sorted(inbox.glob(glob_pat))
        if not files:
            return []
        logger.info(f"Backlog: {len(files)} file(s) in {inbox}")
        outputs = []
        for f in files:
            text = read_when_ready(f)
            if text is None:
                continue
            outputs.append(await self.process_text(text, str(f)))
        return outputs

    async def run_watch_mode(self, glob_pat: str):
        loop = asyncio.get_running_loop()

        await self.process_backlog(glob_pat)

        watcher = FileWatcher(self.paths.inbox, glob_pat, self.process_text, loop)
        watcher.start()
        logger.info(f"Watching {self.paths.inbox} for {glob_pat}")
        try:
            await asyncio.Event().wait()
        finally:
            watcher.stop()
