"""Unit tests for collection name filtering."""

import pytest

from patchwindow.scheduling.filters import (
    CollectionFilter,
    CollectionFilterError,
    DEFAULT_EXCLUDE_PATTERNS,
)
from patchwindow.scheduling.models import CollectionRef


def _collections(*names):
    return [CollectionRef(collection_id=f"PS1{i:05d}", name=name) for i, name in enumerate(names)]


class TestCollectionFilter:
    """Test CollectionFilter matching."""

    def test_default_matches_everything_not_excluded(self):
        collection_filter = CollectionFilter()

        assert collection_filter.matches("Servers - Patch Wednesday")
        assert collection_filter.matches("Workstations")
        assert not collection_filter.matches("Servers Fake Group")
        assert not collection_filter.matches("Servers - Weekly reoccurring")

    def test_default_exclusions(self):
        assert DEFAULT_EXCLUDE_PATTERNS == ("*Fake*", "*reoccurring")

    def test_wildcard_is_whole_name_and_case_insensitive(self):
        collection_filter = CollectionFilter("Servers*")

        assert collection_filter.matches("Servers - Patch Wednesday")
        assert collection_filter.matches("servers - patch thursday")
        assert not collection_filter.matches("All Servers")

    def test_question_mark_matches_one_character(self):
        collection_filter = CollectionFilter("Ring ?")

        assert collection_filter.matches("Ring 1")
        assert not collection_filter.matches("Ring 10")

    def test_reoccurring_only_excluded_as_suffix(self):
        collection_filter = CollectionFilter()

        assert not collection_filter.matches("Servers REOCCURRING")
        assert collection_filter.matches("reoccurring servers")

    def test_exclusions_win_over_include(self):
        collection_filter = CollectionFilter("*Fake*")
        assert not collection_filter.matches("Fake Servers")

    def test_no_exclusions(self):
        collection_filter = CollectionFilter("*", exclude_patterns=None)

        assert collection_filter.matches("Servers Fake Group")
        assert collection_filter.exclude_patterns == []

    def test_custom_exclusions(self):
        collection_filter = CollectionFilter("Servers*", exclude_patterns=["*Pilot*"])

        assert not collection_filter.matches("Servers Pilot")
        assert collection_filter.matches("Servers Fake")

    def test_apply_keeps_discovery_order(self):
        collections = _collections(
            "Servers C",
            "Workstations",
            "Servers A",
            "Servers Fake",
            "Servers B",
        )

        selected = CollectionFilter("Servers*").apply(collections)

        assert [c.name for c in selected] == ["Servers C", "Servers A", "Servers B"]

    def test_apply_no_matches(self):
        assert CollectionFilter("Nothing*").apply(_collections("Servers A")) == []

    def test_empty_pattern_rejected(self):
        with pytest.raises(CollectionFilterError):
            CollectionFilter("")

    def test_repr(self):
        assert "Servers*" in repr(CollectionFilter("Servers*"))
