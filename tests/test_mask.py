"""
Tests for matrix_rain/mask.py - Stencils, mask sources and background loading.
"""

import os
import sys
import time

import pytest
from PIL import Image

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from conftest import StaticMaskSource

from matrix_rain.errors import MaskSourceError, MaskUnavailable
from matrix_rain.mask import (
    ImageMaskSource,
    MaskLoader,
    Stencil,
    build_stencil,
)


MASK_ROWS = [
    "##  ",
    "#  #",
]


class TestStencil:
    def test_dimensions(self):
        stencil = Stencil(rows=tuple(MASK_ROWS))
        assert (stencil.width, stencil.height) == (4, 2)

    def test_blank_cells(self):
        stencil = Stencil(rows=tuple(MASK_ROWS), blank_char=" ")
        assert stencil.is_blank(0, 2) is True
        assert stencil.is_blank(0, 0) is False
        assert stencil.is_blank(1, 1) is True

    def test_outside_is_never_blank(self):
        stencil = Stencil(rows=tuple(MASK_ROWS), blank_char=" ")
        assert stencil.is_blank(-1, 0) is False
        assert stencil.is_blank(2, 2) is False
        assert stencil.is_blank(0, 4) is False

    def test_offset(self):
        stencil = Stencil(rows=tuple(MASK_ROWS), offset_row=3, offset_col=5, blank_char=" ")
        assert stencil.is_blank(3, 7) is True
        assert stencil.is_blank(0, 2) is False

    def test_ragged_rows(self):
        stencil = Stencil(rows=("   ", " "), blank_char=" ")
        assert stencil.is_blank(1, 2) is False


class TestBuildStencil:
    def test_not_inverted_blanks_spaces(self):
        stencil = build_stencil(StaticMaskSource(MASK_ROWS), "m.png", 4, 2)
        assert stencil.blank_char == " "
        assert stencil.is_blank(0, 3) is True

    def test_inverted_blanks_hashes(self):
        stencil = build_stencil(StaticMaskSource(MASK_ROWS), "m.png", 4, 2, inverted=True)
        assert stencil.blank_char == "#"
        assert stencil.is_blank(0, 0) is True
        assert stencil.is_blank(0, 3) is False

    def test_source_gets_pixel_height(self):
        source = StaticMaskSource(MASK_ROWS)
        build_stencil(source, "m.png", 80, 24, font_ratio=3)
        assert source.calls == [("m.png", 80, 72, 3)]

    def test_offsets_carried(self):
        stencil = build_stencil(StaticMaskSource(MASK_ROWS), "m.png", 4, 2, offset_row=1, offset_col=2)
        assert (stencil.offset_row, stencil.offset_col) == (1, 2)

    def test_trailing_empty_rows_dropped(self):
        stencil = build_stencil(StaticMaskSource(MASK_ROWS + [""]), "m.png", 4, 2)
        assert stencil.height == 2

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, -1)])
    def test_empty_viewport(self, width, height):
        source = StaticMaskSource(MASK_ROWS)
        with pytest.raises(MaskUnavailable):
            build_stencil(source, "m.png", width, height)
        assert source.calls == []

    def test_no_rows(self):
        with pytest.raises(MaskUnavailable):
            build_stencil(StaticMaskSource([]), "m.png", 4, 2)

    def test_source_error(self):
        with pytest.raises(MaskUnavailable, match="broken"):
            build_stencil(StaticMaskSource(error="broken"), "m.png", 4, 2)


class TestImageMaskFit:
    @pytest.mark.parametrize(
        "img,box,ratio,expected",
        [
            ((100, 100), (80, 48), 2, (48, 24)),
            ((200, 50), (80, 48), 2, (80, 10)),
            ((10, 10), (0, 10), 2, (0, 0)),
            ((0, 10), (80, 48), 2, (0, 0)),
        ],
    )
    def test_fit(self, img, box, ratio, expected):
        assert ImageMaskSource.fit(img[0], img[1], box[0], box[1], ratio) == expected


class TestImageMaskSource:
    def _make_image(self, path):
        # Left half white, right half black
        img = Image.new("L", (40, 40), 0)
        for x in range(20):
            for y in range(40):
                img.putpixel((x, y), 255)
        img.save(path)

    def test_renders_foreground_and_background(self, tmp_path):
        path = str(tmp_path / "half.png")
        self._make_image(path)
        rows = ImageMaskSource().render(path, 20, 40, 2)
        assert len(rows) == 10
        assert all(len(row) == 20 for row in rows)
        assert rows[0].startswith("#####")
        assert rows[0].endswith("     ")

    def test_transparent_is_background(self, tmp_path):
        path = str(tmp_path / "clear.png")
        Image.new("RGBA", (10, 10), (255, 255, 255, 0)).save(path)
        rows = ImageMaskSource().render(path, 10, 20, 2)
        assert rows
        assert set("".join(rows)) == {" "}

    def test_missing_file(self, tmp_path):
        with pytest.raises(MaskSourceError):
            ImageMaskSource().render(str(tmp_path / "missing.png"), 10, 10, 2)

    def test_not_an_image(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(MaskSourceError):
            ImageMaskSource().render(str(path), 10, 10, 2)


def wait_for(loader, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        result = loader.poll()
        if result is not None:
            return result
        time.sleep(0.01)
    raise AssertionError("mask loader never finished")


class TestMaskLoader:
    def test_poll_before_request(self):
        loader = MaskLoader(StaticMaskSource(MASK_ROWS), "m.png")
        assert loader.poll() is None

    def test_successful_build(self):
        loader = MaskLoader(StaticMaskSource(MASK_ROWS), "m.png", inverted=True)
        try:
            loader.request(4, 2)
            result = wait_for(loader)
            assert result.ok
            assert result.stencil.blank_char == "#"
            # Delivered once
            assert loader.poll() is None
        finally:
            loader.shutdown()

    def test_failed_build(self):
        loader = MaskLoader(StaticMaskSource(error="bad image"), "m.png")
        try:
            loader.request(4, 2)
            result = wait_for(loader)
            assert not result.ok
            assert isinstance(result.error, MaskUnavailable)
        finally:
            loader.shutdown()

    def test_latest_request_wins(self):
        source = StaticMaskSource(MASK_ROWS)
        loader = MaskLoader(source, "m.png")
        try:
            loader.request(4, 2)
            loader.request(8, 3)
            result = wait_for(loader)
            assert result.ok
            assert source.calls[-1] == ("m.png", 8, 6, 2)
        finally:
            loader.shutdown()

    def test_shutdown_discards_request(self):
        loader = MaskLoader(StaticMaskSource(MASK_ROWS), "m.png")
        loader.request(4, 2)
        loader.shutdown()
        time.sleep(0.05)
        assert loader.poll() is None
