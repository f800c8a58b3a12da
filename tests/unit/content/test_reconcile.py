"""Tests for merging change sets into stored records."""

import pytest

from showcase.core.modules.blog.models import BLOG_SCHEMA
from showcase.core.modules.content.reconcile import (
    orphaned_media,
    reconcile,
    resolve_multiple_media,
    resolve_single_media,
)
from showcase.core.modules.hero_slider.models import HERO_SLIDE_SCHEMA
from showcase.core.modules.service.models import SERVICE_SCHEMA
from showcase.errors import ValidationError


class TestResolveSingleMedia:
    """Tests for primary media precedence."""

    def test_upload_wins(self):
        """Test that a freshly uploaded file beats everything else."""
        assert resolve_single_media("new", "given", "stored") == "new"

    def test_payload_url_beats_stored(self):
        """Test that a URL in the payload replaces the stored one."""
        assert resolve_single_media(None, "given", "stored") == "given"

    def test_explicit_empty_clears(self):
        """Test that an explicit empty string clears the stored URL."""
        assert resolve_single_media(None, "", "stored") == ""

    def test_falls_back_to_stored_then_empty(self):
        """Test the fallbacks when nothing new is provided."""
        assert resolve_single_media(None, None, "stored") == "stored"
        assert resolve_single_media(None, None, None) == ""


class TestResolveMultipleMedia:
    """Tests for secondary media lists."""

    def test_payload_list_plus_uploads(self):
        """Test that uploads are appended after the given list."""
        assert resolve_multiple_media(["u2"], ["u1"], ["old"]) == ["u1", "u2"]

    def test_stored_list_used_when_payload_has_none(self):
        """Test that uploads are appended to the stored list when no list is given."""
        assert resolve_multiple_media(["u3"], None, ["u1", "u2"]) == ["u1", "u2", "u3"]

    def test_cap_truncates(self):
        """Test that the cap keeps the first entries without raising."""
        urls = [f"u{i}" for i in range(1, 7)]
        assert resolve_multiple_media([], urls, None, cap=4) == ["u1", "u2", "u3", "u4"]

    def test_cap_applies_after_append(self):
        """Test that uploads beyond the cap are dropped."""
        assert resolve_multiple_media(["u4", "u5"], ["u1", "u2", "u3"], None, cap=4) == ["u1", "u2", "u3", "u4"]


class TestReconcile:
    """Tests for computing the next record state."""

    @pytest.fixture(autouse=True)
    def setup(self):
        """Set up a stored blog state for all tests in this class."""
        self.existing = {
            "_id": 3,
            "title": "Old Title",
            "slug": "old-title",
            "short_description": "Summary",
            "category": ["news", "tech"],
            "tags": ["a"],
            "image": "http://testserver/media/blogs/abc__old.png",
            "views": 12,
        }

    def test_omitted_field_preserved(self):
        """Test that fields missing from the change set keep their values."""
        state = reconcile(BLOG_SCHEMA, self.existing, {"tags": ["b"]}, {})
        assert state["category"] == ["news", "tech"]
        assert state["tags"] == ["b"]
        assert state["views"] == 12

    def test_empty_list_clears(self):
        """Test that an explicit empty list clears an array field."""
        state = reconcile(BLOG_SCHEMA, self.existing, {"category": []}, {})
        assert state["category"] == []

    def test_slug_rederived_when_title_changes(self):
        """Test that a new title yields a new slug and keeps the id."""
        state = reconcile(BLOG_SCHEMA, self.existing, {"title": "Brand New Title"}, {})
        assert state["slug"] == "brand-new-title"
        assert state["_id"] == 3

    def test_slug_kept_without_title(self):
        """Test that the slug is untouched when title is absent."""
        state = reconcile(BLOG_SCHEMA, self.existing, {"short_description": "Other"}, {})
        assert state["slug"] == "old-title"

    def test_title_without_letters_rejected(self):
        """Test that a title yielding an empty slug is rejected."""
        with pytest.raises(ValidationError, match="at least one letter or digit"):
            reconcile(BLOG_SCHEMA, self.existing, {"title": "!!!"}, {})

    def test_existing_not_mutated(self):
        """Test that the stored state is left untouched."""
        reconcile(BLOG_SCHEMA, self.existing, {"category": [], "title": "New"}, {"image": ["http://x/new.png"]})
        assert self.existing["category"] == ["news", "tech"]
        assert self.existing["slug"] == "old-title"

    def test_create_defaults(self):
        """Test that create fills media slots and leaves other defaults to the model."""
        state = reconcile(SERVICE_SCHEMA, None, {"title": "Consulting", "paragraphs": ["p"]}, {"images": ["u1"]})
        assert state == {
            "title": "Consulting",
            "paragraphs": ["p"],
            "hero_image": "",
            "images": ["u1"],
            "slug": "consulting",
        }

    def test_unsluggable_resource_has_no_slug(self):
        """Test that hero slides never get a slug."""
        state = reconcile(HERO_SLIDE_SCHEMA, None, {"title": "Welcome", "media_type": "video"}, {})
        assert "slug" not in state


class TestOrphanedMedia:
    """Tests for finding media no longer referenced after an update."""

    def test_replaced_primary_is_orphaned(self):
        """Test that a replaced primary image is reported."""
        before = {"hero_image": "old", "images": ["a", "b"]}
        after = {"hero_image": "new", "images": ["a", "b"]}
        assert orphaned_media(SERVICE_SCHEMA, before, after) == ["old"]

    def test_removed_list_entries_are_orphaned(self):
        """Test that URLs dropped from a list are reported once."""
        before = {"hero_image": "", "images": ["a", "b", "c"]}
        after = {"hero_image": "", "images": ["b"]}
        assert orphaned_media(SERVICE_SCHEMA, before, after) == ["a", "c"]

    def test_moved_url_not_orphaned(self):
        """Test that a URL still referenced from another slot is kept."""
        before = {"hero_image": "a", "images": []}
        after = {"hero_image": "", "images": ["a"]}
        assert orphaned_media(SERVICE_SCHEMA, before, after) == []
