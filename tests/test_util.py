"""
Tests for utility modules.
"""

from scd_extract.util.files import ensure_dir, read_bytes, write_text


class TestFiles:
    """Tests for file utilities."""

    def test_ensure_dir_creates_directory(self, tmp_path):
        """Test creating new directory."""
        new_dir = tmp_path / "new" / "nested" / "dir"

        result = ensure_dir(new_dir)

        assert new_dir.is_dir()
        assert result == new_dir

    def test_ensure_dir_existing_directory(self, tmp_path):
        """Test with existing directory."""
        existing = tmp_path / "existing"
        existing.mkdir()

        ensure_dir(existing)

        assert existing.exists()

    def test_write_text_creates_parents(self, tmp_path):
        """Test writing into a directory that does not exist yet."""
        target = tmp_path / "out" / "IED1.cid"

        write_text(target, "<SCL/>\n")

        assert target.read_text(encoding="utf-8") == "<SCL/>\n"

    def test_write_text_keeps_lf(self, tmp_path):
        """Test line endings are written as LF on every platform."""
        target = tmp_path / "lf.cid"

        write_text(target, "a\nb\n")

        assert target.read_bytes() == b"a\nb\n"

    def test_write_text_utf8(self, tmp_path):
        """Test non-ASCII content is written as UTF-8."""
        target = tmp_path / "utf8.cid"

        write_text(target, "Schaltanlage Süd\n")

        assert target.read_bytes() == "Schaltanlage Süd\n".encode("utf-8")

    def test_read_bytes(self, tmp_path):
        """Test reading raw bytes."""
        source = tmp_path / "in.scd"
        source.write_bytes(b"<SCL/>")

        assert read_bytes(source) == b"<SCL/>"
