import numpy as np
import pytest

from helpers_compare import assert_images_close
from siftspace import Image, LinearUpScaler, Subsampler


class TestSubsampler:
    def test_image_none(self):
        with pytest.raises(TypeError):
            Subsampler().down_scale(None)

    def test_image_0x0(self):
        with pytest.raises(ValueError):
            Subsampler().down_scale(Image.blank(0, 0))

    def test_image_1x1(self):
        image = Image([[0.3]])
        assert_images_close(Subsampler().down_scale(image), image, 1e-5)

    def test_image_2x2(self):
        actual = Subsampler().down_scale(Image([[0.3, 0.4], [0.5, 0.6]]))
        assert_images_close(actual, Image([[0.3]]), 1e-5)

    def test_image_3x2(self):
        actual = Subsampler().down_scale(Image([[0.3, 0.4], [0.5, 0.6], [0.7, 0.8]]))
        assert_images_close(actual, Image([[0.3], [0.7]]), 1e-5)

    def test_image_3x3(self):
        actual = Subsampler().down_scale(
            Image([[0.3, 0.4, -0.1], [0.5, 0.6, -0.2], [0.7, 0.8, -0.3]])
        )
        assert_images_close(actual, Image([[0.3, -0.1], [0.7, -0.3]]), 1e-5)

    def test_sigma_and_transform(self):
        actual = Subsampler().down_scale(Image.blank(10, 10, 3.2, 2, 3, 4))
        assert actual.sigma == pytest.approx(3.2)
        assert actual.scale == pytest.approx(1.0)
        assert actual.offset_x == pytest.approx(1.5)
        assert actual.offset_y == pytest.approx(2.0)

    @pytest.mark.parametrize("shape", [(1, 7), (8, 8), (9, 4), (17, 31)])
    def test_size_halves_rounding_up(self, shape):
        actual = Subsampler().down_scale(Image.blank(*shape))
        assert actual.shape == ((shape[0] + 1) // 2, (shape[1] + 1) // 2)


class TestLinearUpScaler:
    def test_image_none(self):
        with pytest.raises(TypeError):
            LinearUpScaler().up_scale(None)

    def test_zero_image(self):
        actual = LinearUpScaler().up_scale(Image.blank(0, 10))
        assert actual.shape == (0, 19)

    def test_one_by_one(self):
        actual = LinearUpScaler().up_scale(Image([[0.4]]))
        assert_images_close(actual, Image([[0.4]]), 1e-10)

    def test_sigma_and_transform(self):
        actual = LinearUpScaler().up_scale(Image.blank(10, 10, 3.4, 2, 3, 4))
        assert actual.sigma == pytest.approx(3.4)
        assert actual.scale == pytest.approx(4.0)
        assert actual.offset_x == pytest.approx(6.0)
        assert actual.offset_y == pytest.approx(8.0)

    def test_interpolate(self):
        actual = LinearUpScaler().up_scale(
            Image([[0.0, 1.0, 2.0], [4.0, 5.0, 6.0]])
        )
        expected = [
            [0.0, 0.5, 1.0, 1.5, 2.0],
            [2.0, 2.5, 3.0, 3.5, 4.0],
            [4.0, 4.5, 5.0, 5.5, 6.0],
        ]
        assert_images_close(actual, Image(expected), 1e-6)

    def test_diagonal_uses_four_neighbors(self):
        actual = LinearUpScaler().up_scale(Image([[1.0, 0.0], [0.0, 0.0]]))
        assert actual.get_pixel(1, 1) == pytest.approx(0.25)
        assert actual.get_pixel(0, 1) == pytest.approx(0.5)
        assert actual.get_pixel(1, 0) == pytest.approx(0.5)


@pytest.mark.parametrize("shape", [(1, 1), (5, 8), (12, 7), (33, 20)])
def test_even_pixels_survive_down_then_up(shape, rng):
    original = Image(rng.random(shape).astype(np.float32), 1.0, 1.0, 0.0, 0.0)
    down = Subsampler().down_scale(original)
    assert down.shape == (-(-shape[0] // 2), -(-shape[1] // 2))

    up = LinearUpScaler().up_scale(down)
    evens = up.pixels[::2, ::2]
    np.testing.assert_array_equal(evens, original.pixels[::2, ::2])
    assert up.same_transform(original)
