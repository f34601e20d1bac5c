from __future__ import annotations

import math

from pygame.math import Vector3
from pytest import approx

from physarum.sim.core.rng import DeterministicRng
from physarum.sim.utils.quaternion import FORWARD, UP, Quaternion


def _tuple(vector: Vector3) -> tuple[float, float, float]:
    return (vector.x, vector.y, vector.z)


def test_axis_angle_rotation_matches_right_hand_rule():
    quarter = Quaternion.from_axis_angle(UP, math.pi / 2)
    assert _tuple(quarter.rotate(FORWARD)) == approx((0.0, 1.0, 0.0), abs=1e-12)


def test_composition_applies_right_operand_first():
    yaw = Quaternion.from_axis_angle(Vector3(0, 0, 1), math.pi / 2)
    pitch = Quaternion.from_axis_angle(Vector3(0, 1, 0), math.pi / 2)

    combined = (yaw * pitch).rotate(FORWARD)
    stepwise = yaw.rotate(pitch.rotate(FORWARD))

    assert _tuple(combined) == approx(_tuple(stepwise), abs=1e-12)


def test_rotation_preserves_length_and_reverse_angle_inverts():
    axis = Vector3(1, 2, 3)
    q = Quaternion.from_axis_angle(axis, 0.7)
    v = Vector3(0.3, -1.2, 2.0)

    rotated = q.rotate(v)
    restored = Quaternion.from_axis_angle(axis, -0.7).rotate(rotated)

    assert rotated.length() == approx(v.length())
    assert _tuple(restored) == approx(_tuple(v))


def test_normalized_and_degenerate_axis():
    assert Quaternion(2.0, 0.0, 0.0, 0.0).normalized() == Quaternion.identity()
    assert Quaternion.from_axis_angle(Vector3(0, 0, 0), 1.0) == Quaternion.identity()
    assert Quaternion(0.0, 0.0, 0.0, 0.0).normalized() == Quaternion.identity()


def test_random_unit_quaternions_are_normalized_and_seeded():
    rng_a = DeterministicRng(17)
    rng_b = DeterministicRng(17)

    samples_a = [rng_a.next_unit_quaternion() for _ in range(50)]
    samples_b = [rng_b.next_unit_quaternion() for _ in range(50)]

    assert samples_a == samples_b
    assert all(q.length() == approx(1.0) for q in samples_a)


def test_rng_reset_and_probabilities():
    rng = DeterministicRng(5)
    first = [rng.next_float() for _ in range(3)]
    rng.reset()
    assert [rng.next_float() for _ in range(3)] == first

    assert rng.next_bool(0.0) is False
    assert rng.next_bool(1.0) is True
    assert rng.sample_choice([]) is None
    assert rng.next_unit_circle().length() == approx(1.0)
