import math
import random

import pytest

from kineticrir import Vector3


def test_basic_algebra():
    a = Vector3(1.0, 2.0, 3.0)
    b = Vector3(-2.0, 0.5, 4.0)
    assert a.add(b) == Vector3(-1.0, 2.5, 7.0)
    assert a.sub(b) == Vector3(3.0, 1.5, -1.0)
    assert a.mul(2.0) == Vector3(2.0, 4.0, 6.0)
    assert a + b == a.add(b)
    assert a - b == a.sub(b)
    assert 2.0 * a == a * 2.0
    assert -a == Vector3(-1.0, -2.0, -3.0)
    assert a.dot(b) == pytest.approx(-2.0 + 1.0 + 12.0)


def test_vectors_are_immutable():
    v = Vector3(1.0, 2.0, 3.0)
    with pytest.raises(AttributeError):
        v.x = 5.0  # type: ignore[misc]
    v.add(Vector3(1.0, 1.0, 1.0))
    assert v == Vector3(1.0, 2.0, 3.0)


def test_normalize_has_unit_length():
    for v in (Vector3(3.0, 4.0, 12.0), Vector3(-1e-3, 2e-3, 0.0), Vector3(0.0, 0.0, -7.0)):
        assert v.normalize().length() == pytest.approx(1.0)


def test_normalize_zero_vector_raises():
    with pytest.raises(ValueError, match="zero-length"):
        Vector3(0.0, 0.0, 0.0).normalize()


def test_cross_is_orthogonal():
    rng = random.Random(3)
    for _ in range(100):
        a = Vector3(rng.uniform(-5, 5), rng.uniform(-5, 5), rng.uniform(-5, 5))
        b = Vector3(rng.uniform(-5, 5), rng.uniform(-5, 5), rng.uniform(-5, 5))
        c = a.cross(b)
        assert abs(c.dot(a)) < 1e-9
        assert abs(c.dot(b)) < 1e-9


def test_cross_of_up_and_facing_points_left():
    left = Vector3(0.0, 1.0, 0.0).cross(Vector3(0.0, 0.0, -1.0))
    assert left == Vector3(-1.0, 0.0, 0.0)


def test_from_iterable_and_tuple():
    v = Vector3.from_iterable([1, 2, 3])
    assert v.as_tuple() == (1.0, 2.0, 3.0)
    with pytest.raises(ValueError):
        Vector3.from_iterable([1.0, 2.0])


@pytest.mark.parametrize("method", ["marsaglia", "rejection"])
def test_random_directions_are_unit_and_uniform(method):
    rng = random.Random(1234)
    n = 6000
    bins = [0] * 10
    z_sum = 0.0
    for _ in range(n):
        v = Vector3.random(rng, method=method)
        assert abs(v.length() - 1.0) < 1e-9
        z_sum += v.z
        bins[min(int((v.z + 1.0) / 0.2), 9)] += 1
    assert abs(z_sum / n) < 0.05
    expected = n / 10
    sigma = math.sqrt(expected * 0.9)
    for count in bins:
        assert abs(count - expected) < 5 * sigma


def test_random_unknown_method():
    with pytest.raises(ValueError, match="unknown sampling method"):
        Vector3.random(method="fibonacci")
