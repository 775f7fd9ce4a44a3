"""Shared test fixtures and configuration for patchwindow tests."""

import pytest
from datetime import date, datetime
from pathlib import Path
import sys

import yaml

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from patchwindow.platform import InventoryPlatform
from patchwindow.scheduling.models import CollectionRef


@pytest.fixture
def sample_inventory_data():
    """Inventory with matching, excluded, empty and unrelated collections.

    January 2020: the 6th is a Monday, the 8th a Wednesday and the 9th a
    Thursday. Patch Tuesday is the 14th.
    """
    return {
        "site": "PS1",
        "collections": [
            {
                "id": "PS100012",
                "name": "Servers - Patch Wednesday 7pm",
                "windows": [
                    {"name": "Monthly Patching", "start": datetime(2020, 1, 8, 19, 0),
                     "duration_minutes": 60, "recurring": True},
                ],
            },
            {
                "id": "PS100013",
                "name": "Servers - Patch Thursday 2am",
                "windows": [
                    {"name": "Monthly Patching", "start": "2020-01-09T02:00:00",
                     "duration_minutes": 120, "recurring": True},
                ],
            },
            {
                "id": "PS100014",
                "name": "Servers - Patch Fake Test",
                "windows": [
                    {"name": "Monthly Patching", "start": "2020-01-08T22:00:00",
                     "duration_minutes": 30},
                ],
            },
            {
                "id": "PS100015",
                "name": "Servers - Patch Weekly reoccurring",
                "windows": [
                    {"name": "Weekly", "start": "2020-01-11T01:00:00",
                     "duration_minutes": 240, "recurring": True},
                ],
            },
            {
                "id": "PS100016",
                "name": "Servers - Patch Monday 11pm",
                "windows": [
                    {"name": "Monthly Patching", "start": "2020-01-06T23:00:00",
                     "duration_minutes": 90},
                ],
            },
            {
                "id": "PS100017",
                "name": "Servers - Patch Unscheduled",
                "windows": [],
            },
            {
                "id": "PS100020",
                "name": "Workstations - Pilot",
                "windows": [
                    {"name": "Pilot", "start": "2020-01-08T12:00:00",
                     "duration_minutes": 60},
                ],
            },
        ],
    }


@pytest.fixture
def inventory_platform(sample_inventory_data):
    """In-memory inventory platform for site PS1."""
    return InventoryPlatform({"site": "PS1", "data": sample_inventory_data})


@pytest.fixture
def inventory_file(tmp_path, sample_inventory_data):
    """Inventory written to a temporary YAML file."""
    path = tmp_path / "inventory.yaml"
    path.write_text(yaml.safe_dump(sample_inventory_data, sort_keys=False), encoding='utf-8')
    return path


@pytest.fixture
def wednesday_collection():
    return CollectionRef(collection_id="PS100012", name="Servers - Patch Wednesday 7pm")


@pytest.fixture
def january_run_date():
    """A run date before the January 2020 Patch Tuesday."""
    return date(2020, 1, 10)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
