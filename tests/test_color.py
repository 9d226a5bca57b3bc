from __future__ import annotations

import math

import pytest

from colordetect.models import Color
from tests.synthetic import paint_box, solid

SAMPLES = [
    Color(0, 0, 0),
    Color(255, 255, 255),
    Color(11, 157, 173),
    Color(154, 111, 96),
    Color(1, 2, 3, 0.25),
    Color(250, 5, 128, 0.0),
]


@pytest.mark.parametrize("color", SAMPLES)
def test_invert_is_an_involution(color: Color):
    assert color.invert().invert() == color


def test_invert_preserves_alpha():
    assert Color(10, 20, 30, 0.4).invert() == Color(245, 235, 225, 0.4)


@pytest.mark.parametrize("color", SAMPLES)
def test_hex_round_trip(color: Color):
    parsed = Color.from_hex(color.to_hex())
    assert (parsed.red, parsed.green, parsed.blue) == (color.red, color.green, color.blue)


def test_to_hex_zero_pads():
    assert Color(10, 0, 255).to_hex() == "#0a00ff"


def test_from_hex_rejects_garbage():
    with pytest.raises(ValueError):
        Color.from_hex("#12345")
    with pytest.raises(ValueError):
        Color.from_hex("zzzzzz")


def test_channels_are_truncated():
    c = Color(10.9, 20.2, 255.99)
    assert (c.red, c.green, c.blue, c.alpha) == (10, 20, 255, 1.0)


def test_invalid_colors_are_flagged_not_rejected():
    assert Color(0, 0, 0).is_valid()
    assert not Color(256, 0, 0).is_valid()
    assert not Color(0, -1, 0).is_valid()
    assert not Color(0, 0, 0, 1.5).is_valid()
    # arithmetic still works on invalid values
    assert Color(300, 0, 0).diff_rgb(Color(0, 0, 0)) == 300


def test_str():
    assert str(Color(1, 2, 3)) == "rgb(1, 2, 3)"
    assert str(Color(1, 2, 3, 0.5)) == "rgba(1, 2, 3, 0.5)"


def test_opacity_and_same():
    c = Color(9, 8, 7)
    assert c.opacity(0.3).alpha == 0.3
    assert c.same(c.opacity(0.3))
    assert not c.same(Color(9, 8, 6))


@pytest.mark.parametrize(
    "color, expected",
    [
        (Color.RED, (0.0, 1.0, 0.5)),
        (Color.GREEN, (1 / 3, 1.0, 0.5)),
        (Color.BLUE, (2 / 3, 1.0, 0.5)),
        (Color.YELLOW, (1 / 6, 1.0, 0.5)),  # red wins the red/green tie
        (Color.CYAN, (0.5, 1.0, 0.5)),  # green wins the green/blue tie
        (Color.MAGENTA, (5 / 6, 1.0, 0.5)),
        (Color(128, 128, 128), (0.0, 0.0, 128 / 255)),
    ],
)
def test_to_hsl(color: Color, expected: tuple[float, float, float]):
    assert color.to_hsl() == pytest.approx(expected)


def test_hsl_is_cached():
    c = Color(11, 157, 173)
    assert c.to_hsl() is c.to_hsl()


def test_diff_rgb_is_euclidean():
    assert Color(0, 0, 0).diff_rgb(Color(3, 4, 0)) == 5
    assert Color(0, 0, 0).diff(Color(3, 4, 12)) == 13


def test_diff_hsl_weights_hue():
    assert Color.RED.diff_hsl(Color.YELLOW) == pytest.approx(10 / 6)
    assert Color.RED.diff_hsl(Color(128, 64, 64)) == pytest.approx(abs(1.0 - Color(128, 64, 64).hsl[1]))


@pytest.mark.parametrize("color", SAMPLES)
def test_self_similarity(color: Color):
    assert color.similar_hsl(color)
    assert color.similar(color)
    assert color.diff_rgb(color) == 0


def test_similar_rgb_threshold():
    base = Color(100, 100, 100)
    assert base.similar_rgb(Color(100, 100, 139))
    assert not base.similar_rgb(Color(100, 100, 140))
    assert base.similar_rgb(Color(100, 100, 140), threshold=41)


def test_similar_hsl_tolerances():
    assert Color.RED.similar_hsl(Color(128, 0, 0))  # same hue and saturation, darker
    assert not Color.RED.similar_hsl(Color(255, 40, 0))  # hue moved
    assert not Color.RED.similar_hsl(Color(200, 150, 150))  # washed out
    assert Color.RED.similar_hsl(Color(255, 40, 0), hue_tol=0.05)


def test_average_single_color_is_identity():
    c = Color(17, 33, 250)
    assert Color.average([c]) == c


def test_average_is_order_invariant():
    colors = [Color(10, 200, 3), Color(99, 1, 50), Color(255, 0, 254)]
    assert Color.average(colors) == Color.average(reversed(colors))


def test_average_truncates():
    assert Color.average([Color(0, 0, 0), Color(1, 3, 5)]) == Color(0, 1, 2)


def test_average_of_nothing_is_an_error():
    with pytest.raises(ValueError):
        Color.average([])


def test_count_similars_exact_count():
    buffer = solid(10, 10, Color.BLACK)
    paint_box(buffer, (2, 3, 8, 3), Color.RED)  # 7 pixels
    assert Color.RED.count_similars(buffer) == 7
    assert Color(200, 0, 0).count_similars(buffer) == 7
    assert Color.GREEN.count_similars(buffer) == 0


def test_count_similars_with_max_returns_bool():
    buffer = solid(10, 10, Color.BLACK)
    paint_box(buffer, (2, 3, 8, 3), Color.RED)
    assert Color.RED.count_similars(buffer, 5) is True
    assert Color.RED.count_similars(buffer, 7) is True
    assert Color.RED.count_similars(buffer, 8) is False


class _RowSpy:
    """Buffer stand-in that records how many rows were read."""

    def __init__(self, buffer):
        self.buffer = buffer
        self.rows_read = 0

    @property
    def pixels(self):
        for row in self.buffer.pixels:
            self.rows_read += 1
            yield row


def test_count_similars_stops_once_max_is_reached():
    buffer = solid(10, 10, Color.RED)
    spy = _RowSpy(buffer)
    assert Color.RED.count_similars(spy, 10) is True
    assert spy.rows_read == 1

    spy = _RowSpy(buffer)
    assert Color.RED.count_similars(spy) == 100
    assert spy.rows_read == 10


def test_count_similars_matches_scalar_predicate():
    buffer = solid(4, 4, Color.BLACK)
    paint_box(buffer, (0, 0, 3, 0), Color(255, 255, 0))
    paint_box(buffer, (0, 1, 3, 1), Color(0, 255, 255))
    paint_box(buffer, (0, 2, 3, 2), Color(250, 10, 10))
    ref = Color(255, 0, 0)
    expected = sum(
        ref.similar(buffer.get_color(x, y)) for y in range(buffer.height) for x in range(buffer.width)
    )
    assert ref.count_similars(buffer) == expected
    assert not math.isnan(expected)


@pytest.mark.parametrize("max_count", [0, -3])
def test_count_similars_without_a_positive_max_returns_the_count(max_count):
    none_similar = Color.RED.count_similars(solid(4, 4, Color.BLUE), max_count)
    assert none_similar == 0
    assert type(none_similar) is int
    assert Color.RED.count_similars(solid(4, 4, Color.RED), max_count) == 16
