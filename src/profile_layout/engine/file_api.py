"""
Module: engine.file_api

Purpose:
    JSON-file implementation of the persistence API.
    One file per profile under a root directory; reads take a shared
    lock and writes an exclusive one, using portalocker for Mac,
    Windows and Linux compatibility.

File shape:
    {"profile_id": "42", "saved_at": "2026-...Z", "modules": [WireModule, ...]}

Key Classes:
    - JsonFileModuleAPI: PersistenceAPI backed by JSON files

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - gui.main_window: Default editor backend
    - scripts/render_layout_preview.py: Reading saved layouts
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import portalocker

from .persistence import SaveResponse, WireModule

logger = logging.getLogger(__name__)

_PROFILE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class JsonFileModuleAPI:
    """
    Persistence API storing each profile layout as a JSON file.

    Missing files load as an empty layout. Saves replace the whole
    file; concurrent editors of one profile get last-write-wins.

    Example:
        >>> api = JsonFileModuleAPI(Path("workspace/profiles"))
        >>> asyncio.run(api.load_modules("42"))
        []
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path_for(self, profile_id: str) -> Path:
        """File holding a profile's layout."""
        profile_id = str(profile_id)
        if not _PROFILE_ID_RE.match(profile_id):
            raise ValueError(f"Invalid profile id: {profile_id!r}")
        return self.root / f"profile_{profile_id}.json"

    async def load_modules(self, profile_id: str) -> List[WireModule]:
        path = self.path_for(profile_id)
        return await asyncio.to_thread(self._read, path)

    async def save_modules(self, profile_id: str, modules: List[WireModule]) -> SaveResponse:
        path = self.path_for(profile_id)
        document = {
            "profile_id": str(profile_id),
            "saved_at": datetime.now(timezone.utc).isoformat(),
            "modules": list(modules),
        }
        await asyncio.to_thread(self._write, path, document)
        return SaveResponse(success=True)

    @staticmethod
    def _read(path: Path) -> List[WireModule]:
        if not path.exists():
            logger.debug(f"No saved layout at {path.name}")
            return []
        with open(path, "r", encoding="utf-8") as f:
            portalocker.lock(f, portalocker.LOCK_SH)
            try:
                content = f.read()
            finally:
                portalocker.unlock(f)

        if not content.strip():
            return []
        document: Dict[str, Any] = json.loads(content)
        modules = document.get("modules", [])
        if not isinstance(modules, list):
            raise ValueError(f"{path.name}: 'modules' must be a list")
        return modules

    @staticmethod
    def _write(path: Path, document: Dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        if not path.exists():
            path.touch()

        # r+ so the file is only truncated once the lock is held
        with open(path, "r+", encoding="utf-8") as f:
            portalocker.lock(f, portalocker.LOCK_EX)
            try:
                f.seek(0)
                f.truncate()
                json.dump(document, f, indent=2, ensure_ascii=False)
                f.flush()
            finally:
                portalocker.unlock(f)
        logger.debug(f"Wrote {len(document['modules'])} modules to {path.name}")
