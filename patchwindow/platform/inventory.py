"""Inventory-file platform backend.

Serves collections and maintenance windows from a YAML (or JSON) inventory
exported from the management site, and records applied schedules back into
it. The inventory layout is::

    site: PS1
    collections:
      - id: PS100012
        name: Servers - Patch Wednesday
        windows:
          - name: Monthly Patching
            start: 2020-01-08T19:00:00
            duration_minutes: 60
            recurring: true
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from ..scheduling.models import CollectionRef, ExistingWindow, ScheduledWindow
from .base import MaintenancePlatform, PlatformError, RemoteUpdateError, register_platform


logger = logging.getLogger(__name__)


@register_platform("inventory")
class InventoryPlatform(MaintenancePlatform):
    """Platform backend backed by an inventory file or mapping."""

    def __init__(self, config: Dict[str, Any]):
        """Initialize the backend.

        Args:
            config: Backend configuration with either ``inventory_path`` or
                an in-memory ``data`` mapping, plus optional ``site`` and
                ``read_only``

        Raises:
            PlatformError: If the inventory cannot be loaded or belongs to
                another site
        """
        super().__init__(config)
        path = config.get('inventory_path')
        self.inventory_path: Optional[Path] = Path(path) if path else None
        self.read_only = config.get('read_only', False)
        self.applied: List[Dict[str, Any]] = []

        if config.get('data') is not None:
            self._data = copy.deepcopy(config['data'])
        elif self.inventory_path:
            self._data = self._load(self.inventory_path)
        else:
            raise PlatformError("Inventory platform requires inventory_path or data")

        if not isinstance(self._data.get('collections', []), list):
            raise PlatformError("Inventory 'collections' must be a list")

        inventory_site = self._data.get('site')
        if self.site and inventory_site and str(inventory_site).lower() != str(self.site).lower():
            raise PlatformError(
                f"Inventory belongs to site '{inventory_site}', not '{self.site}'"
            )
        if not self.site:
            self.site = inventory_site

    def _load(self, path: Path) -> Dict[str, Any]:
        """Load the inventory file."""
        if not path.exists():
            raise PlatformError(f"Inventory file not found: {path}")

        try:
            content = path.read_text(encoding='utf-8')
            if path.suffix.lower() == '.json':
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise PlatformError(f"Invalid YAML in inventory {path}: {e}")
        except json.JSONDecodeError as e:
            raise PlatformError(f"Invalid JSON in inventory {path}: {e}")

        if not isinstance(data, dict):
            raise PlatformError(f"Inventory {path} must contain a mapping")

        return data

    def _save(self) -> None:
        if self.read_only or not self.inventory_path:
            return

        if self.inventory_path.suffix.lower() == '.json':
            content = json.dumps(self._data, indent=2, default=str)
        else:
            content = yaml.safe_dump(self._data, default_flow_style=False, sort_keys=False)
        self.inventory_path.write_text(content, encoding='utf-8')

    def _collection_entries(self) -> List[Dict[str, Any]]:
        return self._data.get('collections') or []

    def _find_collection(self, collection_id: str) -> Optional[Dict[str, Any]]:
        for entry in self._collection_entries():
            if str(entry.get('id')) == collection_id:
                return entry
        return None

    def list_collections(self) -> List[CollectionRef]:
        collections = []
        for entry in self._collection_entries():
            try:
                collections.append(CollectionRef(collection_id=str(entry['id']), name=entry['name']))
            except (KeyError, TypeError, ValidationError) as e:
                raise PlatformError(f"Malformed collection entry in inventory: {e}")
        return collections

    def get_windows(self, collection: CollectionRef) -> List[ExistingWindow]:
        entry = self._find_collection(collection.collection_id)
        if entry is None:
            raise PlatformError(f"Collection {collection.collection_id} not found")

        windows = []
        for window in entry.get('windows') or []:
            try:
                windows.append(ExistingWindow(
                    name=window['name'],
                    start=window['start'],
                    duration_minutes=window['duration_minutes'],
                    is_recurring=window.get('recurring', False)
                ))
            except (KeyError, TypeError, ValidationError) as e:
                raise PlatformError(
                    f"Malformed maintenance window on collection {collection.collection_id}: {e}"
                )
        return windows

    def apply_schedule(self, collection_id: str, window_name: str, schedule: ScheduledWindow) -> None:
        entry = self._find_collection(collection_id)
        if entry is None:
            raise RemoteUpdateError(
                f"Collection {collection_id} not found",
                collection_id=collection_id,
                window_name=window_name
            )

        for window in entry.get('windows') or []:
            if window.get('name') == window_name:
                break
        else:
            raise RemoteUpdateError(
                f"Maintenance window '{window_name}' not found on collection {collection_id}",
                collection_id=collection_id,
                window_name=window_name
            )

        previous = dict(window)
        window['start'] = schedule.start.isoformat()
        window['duration_minutes'] = schedule.duration_minutes
        window['recurring'] = schedule.is_recurring
        try:
            self._save()
        except OSError as e:
            # Leave the in-memory inventory as it is on disk
            window.clear()
            window.update(previous)
            raise RemoteUpdateError(
                f"Could not save inventory {self.inventory_path}: {e}",
                collection_id=collection_id,
                window_name=window_name
            )

        self.applied.append({
            "collection_id": collection_id,
            "window_name": window_name,
            "start": schedule.start,
            "end": schedule.end
        })
        logger.debug(f"Applied {schedule.start.isoformat()} to {collection_id}/{window_name}")
