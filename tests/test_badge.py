import pytest

from prism_instance_installer.badge import make_status_badge


def _close(actual, expected, tol=3):
    return all(abs(a - e) <= tol for a, e in zip(actual, expected))


@pytest.mark.parametrize("ok, colour", [
    (True, (0x3F, 0xB9, 0x50, 255)),
    (False, (0xF8, 0x51, 0x49, 255)),
])
def test_badge_colour(ok, colour):
    img = make_status_badge(ok)

    assert img.size == (48, 48)
    assert img.mode == "RGBA"
    assert _close(img.getpixel((24, 8)), colour)
    assert img.getpixel((0, 0))[3] == 0


def test_badge_size():
    assert make_status_badge(True, size=32).size == (32, 32)
