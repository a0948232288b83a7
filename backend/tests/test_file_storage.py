from io import BytesIO
from pathlib import Path

from PIL import Image

from services.photo_optimizer import is_heic_file, optimize_photo
from storage.file_storage import FileStorage, safe_file_name


def _jpeg_bytes(size=(400, 300), fmt="JPEG") -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, (120, 60, 30)).save(buf, format=fmt)
    return buf.getvalue()


class TestOptimizePhoto:
    def test_downsizes_landscape_to_max_dimension(self):
        result = optimize_photo(_jpeg_bytes((4000, 3000)), max_dimension=1920)
        assert result.optimized
        assert (result.width, result.height) == (1920, 1440)
        assert Image.open(BytesIO(result.data)).format == "JPEG"

    def test_downsizes_portrait_by_height(self):
        result = optimize_photo(_jpeg_bytes((1000, 4000)), max_dimension=1000)
        assert (result.width, result.height) == (250, 1000)

    def test_small_image_keeps_size_and_becomes_jpeg(self):
        result = optimize_photo(_jpeg_bytes((64, 48), fmt="PNG"))
        assert (result.width, result.height) == (64, 48)
        assert Image.open(BytesIO(result.data)).format == "JPEG"

    def test_undecodable_bytes_returned_unchanged(self):
        result = optimize_photo(b"not an image")
        assert not result.optimized
        assert result.data == b"not an image"
        assert result.width is None


def test_is_heic_file():
    assert is_heic_file("IMG_0001.HEIC")
    assert is_heic_file("upload", "image/heif")
    assert not is_heic_file("photo.jpg", "image/jpeg")


def test_save_photo_writes_optimized_copy(tmp_path):
    storage = FileStorage(str(tmp_path / "media"))
    stored = storage.save_photo("album1", "p1", _jpeg_bytes((3000, 1000)), max_dimension=1500)

    path = Path(stored.path)
    assert path.exists()
    assert path.parent == (tmp_path / "media" / "albums" / "album1" / "photos").resolve()
    assert (stored.width, stored.height) == (1500, 500)


def test_save_photo_is_idempotent(tmp_path):
    storage = FileStorage(str(tmp_path / "media"))
    first = storage.save_photo("album1", "p1", _jpeg_bytes())
    before = Path(first.path).read_bytes()
    second = storage.save_photo("album1", "p1", _jpeg_bytes((10, 10)))
    assert second.path == first.path
    assert Path(second.path).read_bytes() == before


def test_delete_album_files(tmp_path):
    storage = FileStorage(str(tmp_path / "media"))
    storage.save_photo("album1", "p1", _jpeg_bytes())
    assert storage.delete_album_files("album1")
    assert not (tmp_path / "media" / "albums" / "album1").exists()
    assert not storage.delete_album_files("album1")


def test_publish_export_replaces_existing(tmp_path):
    storage = FileStorage(str(tmp_path / "media"))
    old = storage.get_export_path("book")
    old.write_bytes(b"old")
    rendered = tmp_path / "tmp.pdf"
    rendered.write_bytes(b"new")

    published = storage.publish_export(rendered, "book")

    assert published == old
    assert published.read_bytes() == b"new"
    assert not rendered.exists()
    assert storage.resolve_export("book.pdf") == published.resolve()


def test_resolve_export_rejects_traversal_and_missing(tmp_path):
    storage = FileStorage(str(tmp_path / "media"))
    (tmp_path / "media" / "secret.pdf").write_bytes(b"x")
    assert storage.resolve_export("../secret.pdf") is None
    assert storage.resolve_export("missing.pdf") is None


def test_safe_file_name():
    assert safe_file_name('a/b:c*d?"e<f>g|h', "2024-03-01") == "abcdefgh_20240301"
    assert safe_file_name("  ", "2024-03-01T10:00") == "album_20240301"
    assert safe_file_name("Summer trip", "") == "Summer_trip"
