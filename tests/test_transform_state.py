import math

from core.transform_state import TransformState
from domain.models import Point2D, Transform


def test_scale_clamped_on_write():
    st = TransformState(min_scale=0.1, max_scale=2.0)
    assert st.set(Transform(Point2D(0, 0), 0.0, 9.0)).scale == 2.0
    assert st.set(Transform(Point2D(0, 0), 0.0, -1.0)).scale == 0.1


def test_initial_value_is_clamped():
    st = TransformState(Transform(Point2D(1, 2), 0.0, 50.0), max_scale=2.5)
    assert st.scale == 2.5


def test_non_finite_fields_keep_previous_values():
    st = TransformState(Transform(Point2D(1, 2), 30.0, 1.0))
    st.set(Transform(Point2D(math.nan, 5), math.inf, math.nan))
    assert st.snapshot() == Transform(Point2D(1, 2), 30.0, 1.0)


def test_rotation_and_position_unbounded():
    st = TransformState()
    st.set(Transform(Point2D(-500, 99999), 725.0, 1.0))
    assert st.rotation == 725.0
    assert st.position == Point2D(-500, 99999)


def test_reset_restores_initial():
    st = TransformState(Transform(Point2D(1, 2), 3.0, 1.0))
    st.set(Transform(Point2D(9, 9), 90.0, 2.0))
    assert st.reset() == Transform(Point2D(1, 2), 3.0, 1.0)
