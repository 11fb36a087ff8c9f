import numpy as np
import pytest
from sphere_renders import constants
from sphere_renders.color import Color, encode_pixels, gamma_decode, gamma_encode


def test_gamma_round_trip():
    xs = np.linspace(0.0, 1.0, 101)
    np.testing.assert_allclose(gamma_decode(gamma_encode(xs)), xs, atol=1e-4)


def test_gamma_constant():
    assert constants.GAMMA == 1.5
    assert gamma_encode(0.25) == pytest.approx(0.25 ** (1.0 / 1.5))
    assert gamma_decode(0.25) == pytest.approx(0.125)


def test_arithmetic_never_clamps():
    a = Color(0.75, 2.0, -0.5)
    b = Color(0.5, 0.5, 0.5)

    assert a.add(b) == Color(1.25, 2.5, 0.0)
    assert a.scale(2.0) == Color(1.5, 4.0, -1.0)
    assert a.multiply(Color(2.0, 3.0, 1.0)) == Color(1.5, 6.0, -0.5)


def test_clamp():
    assert Color(2.0, -1.0, 0.5).clamp() == Color(1.0, 0.0, 0.5)


def test_to_rgba_clamps_encodes_and_rounds():
    r, g, b, a = Color(2.0, -1.0, 0.5).to_rgba()

    assert (r, g, a) == (255, 0, 255)
    assert b == round(0.5 ** (1.0 / 1.5) * 255)


def test_black_and_white_pixels():
    assert Color.black().to_rgba() == (0, 0, 0, 255)
    assert Color.white().to_rgba() == (255, 255, 255, 255)


def test_from_rgba_decodes():
    assert Color.from_rgba((255, 255, 255, 255)) == Color.white()
    c = Color.from_rgba((128, 0, 64))
    assert c.red == pytest.approx((128 / 255.0) ** 1.5)
    assert c.green == 0.0


def test_encode_pixels_batch_matches_single():
    colors = np.array([[0.1, 0.2, 0.3], [1.5, 0.0, 0.7]])
    pixels = encode_pixels(colors)

    assert pixels.shape == (2, 4)
    assert pixels.dtype == np.uint8
    for row, color in zip(pixels, colors):
        assert tuple(int(v) for v in row) == Color.from_array(color).to_rgba()
