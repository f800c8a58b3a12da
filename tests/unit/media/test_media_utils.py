"""Tests for media naming and URL helpers."""

from showcase.core.modules.media.utils import (
    build_media_url,
    build_public_id,
    is_absolute_url,
    is_valid_public_id,
    public_id_from_url,
    sanitize_filename,
)

MEDIA_URL = "https://api.example.com/media"


class TestSanitizeFilename:
    """Tests for sanitize_filename function."""

    def test_normal_filename_unchanged(self):
        """Test that normal filenames pass through safely."""
        assert sanitize_filename("photo.jpg") == "photo.jpg"
        assert sanitize_filename("report_2024.png") == "report_2024.png"

    def test_spaces_become_hyphens(self):
        """Test that whitespace runs become a single hyphen for URL safety."""
        assert sanitize_filename("my   holiday photo.jpg") == "my-holiday-photo.jpg"

    def test_path_traversal_attack_unix(self):
        """Test that Unix path traversal attempts are neutralized."""
        assert sanitize_filename("../../../etc/passwd") == "passwd"
        assert sanitize_filename("../file.png") == "file.png"

    def test_hidden_files_leading_dots_removed(self):
        """Test that leading dots are removed to prevent hidden files."""
        assert sanitize_filename(".hidden") == "hidden"
        assert sanitize_filename("...file.png") == "file.png"

    def test_unsafe_characters_replaced(self):
        """Test that characters outside the safe set become single underscores."""
        assert sanitize_filename("file:name.png") == "file_name.png"
        assert sanitize_filename("café?.jpg") == "caf_.jpg"
        assert sanitize_filename("a__b.png") == "a_b.png"

    def test_long_filename_preserves_extension(self):
        """Test that extension is preserved when truncating long filenames."""
        result = sanitize_filename("a" * 150 + ".webp")
        assert len(result) <= 100
        assert result.endswith(".webp")

    def test_long_filename_without_extension(self):
        """Test that filenames without extension are simply truncated."""
        assert sanitize_filename("x" * 150) == "x" * 100

    def test_long_extension_handled(self):
        """Test that very long extensions don't break truncation."""
        assert len(sanitize_filename("file." + "e" * 120)) <= 100

    def test_degenerate_names_return_default(self):
        """Test that names with nothing meaningful left return the default."""
        assert sanitize_filename("") == "unnamed_file"
        assert sanitize_filename("...") == "unnamed_file"
        assert sanitize_filename("***") == "unnamed_file"
        assert sanitize_filename("   ") == "unnamed_file"


class TestPublicIds:
    """Tests for store keys and their URLs."""

    def test_public_id_is_unique_and_namespaced(self):
        """Test that ids live in their folder and never collide."""
        first = build_public_id("blogs", "cover.png")
        second = build_public_id("blogs", "cover.png")
        assert first != second
        assert first.startswith("blogs/")
        assert first.endswith("__cover.png")
        assert is_valid_public_id(first)

    def test_url_round_trip(self):
        """Test that the id is recovered from its own URL."""
        public_id = build_public_id("events", "poster.jpg")
        assert public_id_from_url(MEDIA_URL, build_media_url(MEDIA_URL + "/", public_id)) == public_id

    def test_foreign_urls_have_no_public_id(self):
        """Test that URLs outside this media store are not ours to delete."""
        assert public_id_from_url(MEDIA_URL, "https://res.cloudinary.com/demo/image/upload/x.png") is None
        assert public_id_from_url(MEDIA_URL, "") is None

    def test_traversal_rejected(self):
        """Test that keys escaping their folder are invalid."""
        assert not is_valid_public_id("../etc/passwd")
        assert not is_valid_public_id("blogs/../../x")
        assert not is_valid_public_id("blogs")
        assert public_id_from_url(MEDIA_URL, MEDIA_URL + "/../secrets/key") is None

    def test_absolute_urls(self):
        """Test the absolute URL check used to filter media lists."""
        assert is_absolute_url("https://cdn.example.com/a.png")
        assert is_absolute_url("http://localhost:5000/media/x/y.png")
        assert not is_absolute_url("/media/x/y.png")
        assert not is_absolute_url("ftp://example.com/a.png")
        assert not is_absolute_url("undefined")
