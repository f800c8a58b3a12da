"""Tests for slug derivation."""

from showcase.utils import is_slug, slugify


class TestSlugify:
    """Tests for slugify function."""

    def test_title_with_punctuation(self):
        """Test that punctuation is dropped and spaces become hyphens."""
        assert slugify("Tech Conference 2024!") == "tech-conference-2024"

    def test_idempotent(self):
        """Test that slugifying a slug returns it unchanged."""
        slug = slugify("My First Event")
        assert slug == "my-first-event"
        assert slugify(slug) == slug

    def test_whitespace_runs_collapsed(self):
        """Test that runs of spaces collapse into a single hyphen."""
        assert slugify("  Hello    World  ") == "hello-world"

    def test_existing_hyphens_collapsed(self):
        """Test that hyphens in the title are removed along with other punctuation."""
        assert slugify("Before - After") == "before-after"

    def test_non_ascii_letters_dropped(self):
        """Test that non-ASCII letters are removed, not transliterated."""
        assert slugify("Café Déjà Vu") == "caf-dj-vu"

    def test_only_punctuation_gives_empty_slug(self):
        """Test that a title without letters or digits yields an empty slug."""
        assert slugify("!!! ???") == ""

    def test_result_is_valid_slug(self):
        """Test that results match the slug format."""
        assert is_slug(slugify("Design & Build: Phase 2"))
        assert not is_slug("Not A Slug")
