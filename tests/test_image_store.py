import pytest

from fertiliser_dashboard.modules.product.image_store import local_path, store_image


def test_store_image_copies_and_returns_file_url(tmp_path):
    src = tmp_path / "my photo.png"
    src.write_bytes(b"\x89PNG fake")
    store = tmp_path / "store"

    url = store_image(src, images_dir=store)
    assert url.startswith("file://")
    stored = local_path(url)
    assert stored.parent == store.resolve()
    assert stored.name.endswith("_my_photo.png")
    assert stored.read_bytes() == b"\x89PNG fake"


def test_store_image_rejects_other_types(tmp_path):
    src = tmp_path / "notes.txt"
    src.write_text("x")
    with pytest.raises(ValueError):
        store_image(src, images_dir=tmp_path / "store")


def test_local_path_ignores_remote_urls():
    assert local_path("https://example.com/a.png") is None
    assert local_path(None) is None
