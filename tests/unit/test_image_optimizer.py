"""Unit tests for the OCR image optimizer."""

import pytest

from ocr_pipeline.processors import image_optimizer
from ocr_pipeline.processors.image_optimizer import ImageOptimizer, optimized_path_for

Image = pytest.importorskip("PIL.Image")


def _save_image(path, size, mode="RGB", fmt="PNG"):
    Image.new(mode, size, color="white").save(path, format=fmt)
    return path


class TestImageOptimizer:
    """Tests for ImageOptimizer.optimize."""

    def test_optimized_path_naming(self, tmp_path):
        """Suffix goes before the extension."""
        assert optimized_path_for(tmp_path / "scan_page.1.png") == tmp_path / "scan_page.1_optimized.png"

    @pytest.mark.asyncio
    async def test_large_image_fitted_inside_bounds(self, tmp_path):
        """Aspect ratio is kept while fitting 2000x2800."""
        source = _save_image(tmp_path / "page.png", (4000, 4000))

        result = await ImageOptimizer().optimize(source)

        assert result == tmp_path / "page_optimized.png"
        with Image.open(result) as img:
            assert img.size == (2000, 2000)

    @pytest.mark.asyncio
    async def test_small_image_not_enlarged(self, tmp_path):
        """Images already within bounds keep their size."""
        source = _save_image(tmp_path / "page.png", (300, 400))

        result = await ImageOptimizer().optimize(source)

        with Image.open(result) as img:
            assert img.size == (300, 400)

    @pytest.mark.asyncio
    async def test_rgba_converted_and_jpeg_kept(self, tmp_path):
        """Alpha is dropped; JPEG sources stay JPEG."""
        png = _save_image(tmp_path / "alpha.png", (50, 50), mode="RGBA")
        jpg = _save_image(tmp_path / "photo.jpg", (50, 50), fmt="JPEG")

        png_result = await ImageOptimizer().optimize(png)
        jpg_result = await ImageOptimizer().optimize(jpg)

        with Image.open(png_result) as img:
            assert img.mode == "RGB"
        with Image.open(jpg_result) as img:
            assert img.format == "JPEG"

    @pytest.mark.asyncio
    async def test_unreadable_image_copied(self, write_file):
        """Processing errors fall back to a byte copy."""
        source = write_file("broken.png", b"not an image at all")

        result = await ImageOptimizer().optimize(source)

        assert result.name == "broken_optimized.png"
        assert result.read_bytes() == b"not an image at all"

    @pytest.mark.asyncio
    async def test_without_pillow_copies(self, tmp_path, monkeypatch):
        """Missing Pillow behaves like a failed optimization."""
        monkeypatch.setattr(image_optimizer, "Image", None)
        source = _save_image(tmp_path / "page.png", (10, 10))

        optimizer = ImageOptimizer()
        result = await optimizer.optimize(source)

        assert optimizer.enabled is False
        assert result.read_bytes() == source.read_bytes()

    @pytest.mark.asyncio
    async def test_copy_failure_returns_source(self, tmp_path):
        """If nothing can be written the source path is used."""
        missing = tmp_path / "missing.png"

        assert await ImageOptimizer().optimize(missing) == missing
