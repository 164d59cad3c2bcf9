import zipfile
from datetime import datetime

import pytest

from prism_instance_installer.installer import LogEntry, LogLevel
from prism_instance_installer.paths import AppPaths


FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5)
FIXED_TS = "20240102_030405"


class FakePicker:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def pick_file(self, pattern, title):
        self.calls.append((pattern, title))
        return self.result


class RecordingSink:
    def __init__(self):
        self.entries = []
        self.presented = 0

    def append(self, level, message):
        assert self.presented == 0, "append after present"
        self.entries.append(LogEntry(level, message))

    def flush_and_present(self):
        self.presented += 1

    def messages(self, level=None):
        return [e.message for e in self.entries if level is None or e.level is level]

    def warnings(self):
        return self.messages(LogLevel.WARN)

    def errors(self):
        return self.messages(LogLevel.ERROR)


def write_tree(root, files):
    """Create files under root from a {relative path: bytes} mapping."""
    for rel, data in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


def read_tree(root):
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


def make_zip(path, files):
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return path


@pytest.fixture
def app_paths(tmp_path):
    app_data = tmp_path / "appdata"
    temp_dir = tmp_path / "tmp"
    app_data.mkdir()
    temp_dir.mkdir()
    return AppPaths(app_data=app_data, temp_dir=temp_dir)


@pytest.fixture
def target(app_paths):
    root = app_paths.app_data / ".minecraft"
    root.mkdir()
    return root


@pytest.fixture
def sink():
    return RecordingSink()


def make_corrupt_zip(path, name="mods/big.jar"):
    """A deflated archive whose compressed stream is damaged."""
    payload = b"".join(f"entry {i} of the mod manifest\n".encode() for i in range(2000))
    make_zip(path, {name: payload})
    data = bytearray(path.read_bytes())
    # local header is 30 bytes plus the file name; writestr adds no extra field
    start = 30 + len(name.encode()) + 16
    for i in range(start, start + 20):
        data[i] ^= 0xFF
    path.write_bytes(bytes(data))
    return path
