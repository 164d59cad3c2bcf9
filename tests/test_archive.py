import pytest

from prism_instance_installer.archive import ArchiveError, ZipExtractor

from conftest import make_corrupt_zip, make_zip, read_tree, write_tree


def test_extracts_full_tree(tmp_path):
    archive = make_zip(tmp_path / "pack.zip", {
        "mods/a.jar": b"a",
        "config/deep/b.toml": b"b",
        "options.txt": b"o",
    })
    dest = tmp_path / "out"
    dest.mkdir()

    ZipExtractor().extract(archive, dest)

    assert read_tree(dest) == {
        "mods/a.jar": b"a",
        "config/deep/b.toml": b"b",
        "options.txt": b"o",
    }


def test_overwrites_existing_entries(tmp_path):
    archive = make_zip(tmp_path / "pack.zip", {"options.txt": b"new"})
    dest = tmp_path / "out"
    write_tree(dest, {"options.txt": b"old", "keep.txt": b"k"})

    ZipExtractor().extract(archive, dest, overwrite=True)

    assert read_tree(dest) == {"options.txt": b"new", "keep.txt": b"k"}


def test_keeps_existing_entries_without_overwrite(tmp_path):
    archive = make_zip(tmp_path / "pack.zip", {"options.txt": b"new", "mods/a.jar": b"a"})
    dest = tmp_path / "out"
    write_tree(dest, {"options.txt": b"old"})

    ZipExtractor().extract(archive, dest, overwrite=False)

    assert read_tree(dest) == {"options.txt": b"old", "mods/a.jar": b"a"}


def test_corrupt_archive_raises_os_error(tmp_path):
    archive = tmp_path / "bad.zip"
    archive.write_bytes(b"PK\x03\x04 truncated")
    dest = tmp_path / "out"
    dest.mkdir()

    with pytest.raises(ArchiveError) as excinfo:
        ZipExtractor().extract(archive, dest)

    assert isinstance(excinfo.value, OSError)
    assert "bad.zip" in str(excinfo.value)


def test_damaged_deflate_stream_raises_archive_error(tmp_path):
    archive = make_corrupt_zip(tmp_path / "damaged.zip")
    dest = tmp_path / "out"
    dest.mkdir()

    with pytest.raises(ArchiveError):
        ZipExtractor().extract(archive, dest)
