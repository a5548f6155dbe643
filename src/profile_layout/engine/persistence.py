"""
Module: engine.persistence

Purpose:
    Persistence Gateway: translate the Module Store to and from the
    flattened wire format, and invoke the external load/save API.

Wire format (one record per module):
    {module_id, module_type, position_x, position_y, position_width,
     position_height, content (JSON string), is_visible, sort_order}

    Saves always send the complete module list (full replace, last
    write wins). Loads replace the whole store. Neither is retried;
    collaborator failures reach the caller unchanged and leave the
    store as it was.

Key Functions:
    - to_wire(): Modules -> wire records
    - from_wire(): Wire records -> modules

Key Classes:
    - PersistenceAPI: Protocol for the external collaborator
    - PersistenceGateway: Load/save against a ModuleStore
    - SaveResponse: Result returned by the save API
    - WireFormatError: Malformed wire record

Dependencies:
    - json (std)

Used By:
    - engine.file_api: JSON file implementation of PersistenceAPI
    - engine.session: Session save/load
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from .models import GridPosition, Module
from .store import ModuleStore

logger = logging.getLogger(__name__)

WireModule = Dict[str, Any]

WIRE_KEYS = (
    "module_id",
    "module_type",
    "position_x",
    "position_y",
    "position_width",
    "position_height",
    "content",
    "is_visible",
    "sort_order",
)


class WireFormatError(ValueError):
    """A wire record is missing fields or carries invalid values."""
    pass


@dataclass(frozen=True)
class SaveResponse:
    """Result of a save call: success flag and optional error text."""

    success: bool
    error: Optional[str] = None


class PersistenceAPI(Protocol):
    """External load/save collaborator."""

    async def load_modules(self, profile_id: str) -> List[WireModule]:
        ...

    async def save_modules(self, profile_id: str, modules: List[WireModule]) -> SaveResponse:
        ...


def to_wire(modules: Iterable[Module]) -> List[WireModule]:
    """
    Flatten modules to wire records.

    Position becomes four scalar fields and content is JSON-encoded.
    """
    return [
        {
            "module_id": module.id,
            "module_type": module.type,
            "position_x": module.position.x,
            "position_y": module.position.y,
            "position_width": module.position.width,
            "position_height": module.position.height,
            "content": json.dumps(module.content, ensure_ascii=False),
            "is_visible": module.is_visible,
            "sort_order": module.sort_order,
        }
        for module in modules
    ]


def from_wire(records: Sequence[Mapping[str, Any]]) -> List[Module]:
    """
    Rebuild modules from wire records, ordered by sort_order.

    Content may arrive as a JSON string or as an already-decoded
    object (JSON database columns).

    Raises:
        WireFormatError: If any record is malformed
    """
    modules = [_module_from_record(record) for record in records]
    # Stable: equal sort orders keep their arrival order
    modules.sort(key=lambda m: m.sort_order)
    return modules


def _module_from_record(record: Mapping[str, Any]) -> Module:
    missing = [key for key in WIRE_KEYS if key not in record]
    if missing:
        raise WireFormatError(f"Wire record missing fields {missing}: {dict(record)!r}")

    content = record["content"]
    if isinstance(content, str):
        try:
            content = json.loads(content) if content else {}
        except json.JSONDecodeError as e:
            raise WireFormatError(
                f"Module {record['module_id']} has invalid JSON content: {e}"
            ) from e
    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise WireFormatError(f"Module {record['module_id']} content must be an object")

    try:
        position = GridPosition(
            x=_wire_int(record, "position_x"),
            y=_wire_int(record, "position_y"),
            width=_wire_int(record, "position_width"),
            height=_wire_int(record, "position_height"),
        )
        sort_order = _wire_int(record, "sort_order")
    except (TypeError, ValueError) as e:
        raise WireFormatError(f"Module {record['module_id']} has invalid geometry: {e}") from e

    is_visible = record["is_visible"]
    if not isinstance(is_visible, bool):
        raise WireFormatError(
            f"Module {record['module_id']} is_visible must be a boolean: {is_visible!r}"
        )

    return Module(
        id=str(record["module_id"]),
        type=str(record["module_type"]),
        position=position,
        content=content,
        is_visible=is_visible,
        sort_order=sort_order,
    )


def _wire_int(record: Mapping[str, Any], key: str) -> int:
    value = record[key]
    # bool is an int subclass
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer: {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{key} must be an integer: {value!r}")
        return int(value)
    if not isinstance(value, int):
        raise ValueError(f"{key} must be an integer: {value!r}")
    return value


class PersistenceGateway:
    """
    Load/save a ModuleStore through a PersistenceAPI.

    The gateway keeps no in-flight tracking; callers must not run a
    save and a load for the same store concurrently.
    """

    def __init__(self, api: PersistenceAPI, store: ModuleStore) -> None:
        self.api = api
        self.store = store

    async def load(self, profile_id: str) -> int:
        """
        Replace the store contents with the saved layout.

        Returns:
            Number of modules loaded

        Raises:
            WireFormatError / LayoutIntegrityError: Saved data is invalid
            Any collaborator exception, unchanged
        """
        records = await self.api.load_modules(profile_id)
        modules = from_wire(records)
        self.store.replace_all(modules)
        logger.info(f"Loaded {len(modules)} modules for profile {profile_id}")
        return len(modules)

    async def save(self, profile_id: str) -> SaveResponse:
        """
        Send the complete current layout.

        A rejected save is returned as-is; local edits are never rolled back.
        """
        records = to_wire(self.store.modules)
        response = await self.api.save_modules(profile_id, records)
        if response.success:
            logger.info(f"Saved {len(records)} modules for profile {profile_id}")
        else:
            logger.warning(f"Save rejected for profile {profile_id}: {response.error}")
        return response
