"""Round status badge shown at the top of the log window."""

from __future__ import annotations

from PIL import Image, ImageDraw

C_GREEN = "#3fb950"
C_RED   = "#f85149"
C_MARK  = "#0d1117"


def make_status_badge(ok: bool, size: int = 48) -> Image.Image:
    """Green disc with a check mark, or red disc with a cross."""
    # Draw at 4x and scale down for smooth edges
    scale = 4
    big = size * scale
    img = Image.new("RGBA", (big, big), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    draw.ellipse((0, 0, big - 1, big - 1), fill=C_GREEN if ok else C_RED)

    width = max(1, big // 10)
    if ok:
        points = [(big * 0.28, big * 0.52), (big * 0.44, big * 0.68), (big * 0.73, big * 0.35)]
        draw.line(points, fill=C_MARK, width=width, joint="curve")
    else:
        lo, hi = big * 0.32, big * 0.68
        draw.line([(lo, lo), (hi, hi)], fill=C_MARK, width=width)
        draw.line([(hi, lo), (lo, hi)], fill=C_MARK, width=width)

    return img.resize((size, size), Image.LANCZOS)
