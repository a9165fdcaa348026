import logging
import math
import pytest
from spatial.api import MEASURES, SHAPES, OperationOutcome, available_operations, execute
from spatial.errors import ErrorKind


def point(x, y, z):
    return {"x": x, "y": y, "z": z}


RAY_AT_SPHERE = {
    "ray": {"origin": point(0, 0, 0), "direction": point(0, 0, 1)},
    "sphere": {"center": point(0, 0, 5), "radius": 1},
}


class TestExecuteSuccess:
    def test_ray_sphere(self):
        outcome = execute("ray_sphere", RAY_AT_SPHERE)
        assert isinstance(outcome, OperationOutcome)
        assert outcome.ok
        assert outcome.error is None
        assert outcome.result["intersects"] is True
        assert [hit["distance"] for hit in outcome.result["hits"]] == [4.0, 6.0]
        assert outcome.result["hits"][0]["point"] == point(0.0, 0.0, 4.0)

    def test_result_is_json_ready(self):
        outcome = execute("bounding_box_volume", {"points": [point(0, 0, 0), point(2, 1, 3)], "box_type": "AABB"})
        assert outcome.result["box_type"] == "aabb"
        assert outcome.result["volume"] == 6.0

    def test_line_line(self):
        outcome = execute("line_line", {
            "line1": {"point": point(0, 0, 0), "direction": point(1, 0, 0)},
            "line2": {"point": point(0, 0, 1), "direction": point(0, 1, 0)},
        })
        assert outcome.result["relation"] == "skew"
        assert outcome.result["minimum_distance"] == 1.0

    def test_axis_rotation_accepts_upper_case(self):
        outcome = execute("axis_rotation_matrix", {"axis": "Z", "angle": math.pi / 2})
        assert outcome.ok
        assert outcome.result["rows"][0][1] == pytest.approx(-1.0)

    def test_convert_coordinates(self):
        outcome = execute("convert_coordinates", {
            "coordinates": point(0, 0, 2), "from_system": "cartesian", "to_system": "spherical",
        })
        assert outcome.result["converted"] == point(2.0, 0.0, 0.0)
        assert outcome.result["to_system"] == "spherical"

    def test_matrix_determinant(self):
        outcome = execute("matrix_determinant", {"matrix": {"rows": [[2, 0, 1], [1, 3, 2], [1, 1, 2]]}})
        assert outcome.result["determinant"] == pytest.approx(6.0)
        assert outcome.result["is_invertible"] is True

    def test_tolerance_override(self):
        payload = {
            "sphere1": {"center": point(0, 0, 0), "radius": 1},
            "sphere2": {"center": point(2.000001, 0, 0), "radius": 1},
        }
        assert execute("sphere_sphere", payload).result["relation"] == "separate"
        payload["tolerances"] = {"tangency": 1e-3}
        assert execute("sphere_sphere", payload).result["relation"] == "external_tangent"


    def test_long_ray_direction(self):
        payload = {"ray": {"origin": point(0, 0, 0), "direction": point(0, 0, 1e200)}, "sphere": RAY_AT_SPHERE["sphere"]}
        outcome = execute("ray_sphere", payload)
        assert outcome.ok
        assert [hit["distance"] for hit in outcome.result["hits"]] == [4.0, 6.0]

    def test_huge_sphere(self):
        payload = {"ray": RAY_AT_SPHERE["ray"], "sphere": {"center": point(0, 0, 0), "radius": 1e200}}
        outcome = execute("ray_sphere", payload)
        assert outcome.ok
        assert outcome.result["closest_distance"] == pytest.approx(1e200)


class TestExecuteFailure:
    def test_unknown_operation(self):
        outcome = execute("ray_torus", RAY_AT_SPHERE)
        assert not outcome.ok
        assert outcome.error_kind is ErrorKind.UNSUPPORTED_VARIANT
        assert "ray_torus" in outcome.error

    def test_degenerate_geometry(self):
        payload = {"ray": {"origin": point(0, 0, 0), "direction": point(0, 0, 0)}, "sphere": RAY_AT_SPHERE["sphere"]}
        outcome = execute("ray_sphere", payload)
        assert outcome.error_kind is ErrorKind.DEGENERATE_GEOMETRY
        assert outcome.error == "Ray direction vector cannot be zero"

    def test_non_finite_component(self):
        payload = {"ray": RAY_AT_SPHERE["ray"], "sphere": {"center": point(float("nan"), 0, 5), "radius": 1}}
        assert execute("ray_sphere", payload).error_kind is ErrorKind.INVALID_VALUE

    def test_missing_field(self):
        outcome = execute("ray_sphere", {"ray": RAY_AT_SPHERE["ray"]})
        assert outcome.error_kind is ErrorKind.INVALID_VALUE
        assert "sphere" in outcome.error

    def test_unknown_axis(self):
        outcome = execute("axis_rotation_matrix", {"axis": "w", "angle": 1.0})
        assert outcome.error_kind is ErrorKind.UNSUPPORTED_VARIANT

    def test_unknown_coordinate_system(self):
        outcome = execute("convert_coordinates", {
            "coordinates": point(1, 0, 0), "from_system": "polar", "to_system": "cartesian",
        })
        assert outcome.error_kind is ErrorKind.UNSUPPORTED_VARIANT

    def test_slerp_parameter_out_of_range(self):
        identity = {"x": 0, "y": 0, "z": 0, "w": 1}
        outcome = execute("quaternion_slerp", {"q1": identity, "q2": identity, "t": 2.0})
        assert outcome.error_kind is ErrorKind.OUT_OF_RANGE

    def test_inverted_aabb(self):
        outcome = execute("aabb_volume", {"aabb": {"min_point": point(1, 1, 1), "max_point": point(0, 2, 2)}})
        assert outcome.error_kind is ErrorKind.OUT_OF_RANGE

    def test_best_fit_needs_two_lines(self):
        outcome = execute("multiple_line_best_fit", {"lines": [{"point": point(0, 0, 0), "direction": point(1, 0, 0)}]})
        assert outcome.error_kind is ErrorKind.DEGENERATE_GEOMETRY
        assert outcome.error == "At least 2 lines are required"

    def test_rejection_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="spatial.api"):
            execute("sphere_volume", {"radius": -1})
        assert "Rejected sphere_volume request (out_of_range)" in caplog.text

    def test_loosened_zero_vector_tolerance_rejects_short_direction(self):
        payload = {
            "line1": {"point": point(0, 0, 0), "direction": point(1e-6, 0, 0)},
            "line2": {"point": point(0, 0, 1), "direction": point(0, 1, 0)},
        }
        assert execute("line_line", payload).ok
        payload["tolerances"] = {"zero_vector": 1e-3}
        outcome = execute("line_line", payload)
        assert outcome.error_kind is ErrorKind.DEGENERATE_GEOMETRY
        assert outcome.error.startswith("Line direction is shorter than the zero-vector tolerance")

    def test_loosened_tolerance_checks_shapes_in_lists(self):
        lines = [
            {"point": point(0, 0, 0), "direction": point(1, 0, 0)},
            {"point": point(0, 1, 0), "direction": point(0, 0, 1e-6)},
        ]
        outcome = execute("multiple_line_best_fit", {"lines": lines, "tolerances": {"zero_vector": 1e-3}})
        assert outcome.error_kind is ErrorKind.DEGENERATE_GEOMETRY


class TestExecuteOverflow:
    """Finite inputs whose results overflow come back as invalid_value failures."""

    def assert_overflow(self, operation, payload):
        outcome = execute(operation, payload)
        assert not outcome.ok
        assert outcome.error_kind is ErrorKind.INVALID_VALUE
        assert outcome.result is None
        return outcome

    def test_dot_product(self):
        outcome = self.assert_overflow("dot_product", {"v1": point(1e200, 0, 0), "v2": point(1e200, 0, 0)})
        assert outcome.error == "Result is not finite; input magnitudes are too large"

    def test_point_plane_distance(self):
        self.assert_overflow("point_plane_distance", {
            "point": point(1e308, 0, 0),
            "plane": {"point": point(-1e308, 0, 0), "normal": point(1, 0, 0)},
        })

    def test_ray_cylinder(self):
        self.assert_overflow("ray_cylinder", {
            "ray": {"origin": point(0, 0, 0), "direction": point(1, 0, 0)},
            "cylinder": {"center": point(0, 0, 0), "axis": point(0, 0, 1), "radius": 1e200, "height": 1},
        })

    def test_sphere_volume(self):
        outcome = self.assert_overflow("sphere_volume", {"radius": 1e120})
        assert outcome.error == "Sphere volume is not finite; input magnitudes are too large"

    def test_aabb_volume(self):
        self.assert_overflow("aabb_volume", {
            "aabb": {"min_point": point(-1e120, -1e120, -1e120), "max_point": point(1e120, 1e120, 1e120)},
        })

    def test_overflow_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="spatial.api"):
            execute("cylinder_volume", {"radius": 1e200, "height": 1})
        assert "Rejected cylinder_volume request (invalid_value)" in caplog.text


class TestAvailableOperations:
    def test_component_filter(self):
        assert available_operations(SHAPES) == ["aabb_aabb", "ray_aabb", "ray_cylinder", "ray_sphere", "sphere_sphere"]

    def test_all_operations(self):
        names = available_operations()
        assert set(available_operations(MEASURES)) < set(names)
        assert "line_segment" in names
        assert "quaternion_slerp" in names
