"""Unit tests for mesh module."""

import pytest
import math
import json

from mesh import Mesh, COLOR_RECTANGLE, COLOR_STUB, COLOR_CAP
from ribbon import build_ribbon


class TestMesh:
    """Tests for Mesh class."""

    def test_create_empty(self):
        """Test creating empty mesh."""
        mesh = Mesh()
        assert len(mesh.vertices) == 0
        assert len(mesh.faces) == 0

    def test_add_vertex(self):
        """Test adding vertices."""
        mesh = Mesh()
        idx = mesh.add_vertex((1.0, 2.0, 3.0))
        assert idx == 0
        assert mesh.vertices[0] == (1.0, 2.0, 3.0)
        assert mesh.add_vertex((4.0, 5.0, 6.0)) == 1

    def test_add_triangle(self):
        """Test adding triangle."""
        mesh = Mesh()
        v0 = mesh.add_vertex((0, 0, 0))
        v1 = mesh.add_vertex((1, 0, 0))
        v2 = mesh.add_vertex((0, 1, 0))

        mesh.add_triangle(v0, v1, v2, color=COLOR_STUB)

        assert mesh.faces == [[0, 1, 2]]
        assert mesh.colors == [COLOR_STUB]


class TestFromRibbon:
    """Tests for building a mesh from a ribbon."""

    def test_straight(self, straight_path):
        """Test a single rectangle becomes 4 vertices and 2 faces."""
        mesh = Mesh.from_ribbon(build_ribbon(straight_path, {"width": 1}))

        assert len(mesh.vertices) == 4
        assert mesh.faces == [[0, 1, 2], [0, 2, 3]]
        assert mesh.colors == [COLOR_RECTANGLE, COLOR_RECTANGLE]
        assert mesh.outline == [(1, 2), (3, 0), (0, 1), (2, 3)]

    def test_l_turn_welds_shared_corners(self, l_path):
        """Test rectangles, stubs and fan share their common corners."""
        ribbon = build_ribbon(l_path, {"width": 1})
        mesh = Mesh.from_ribbon(ribbon)

        assert len(mesh.faces) == len(ribbon.triangles) == 17
        # 4 + 3 rectangle corners, 2 + 1 new stub corners, 8 new arc points
        assert len(mesh.vertices) == 18
        # Mitered vertex: left end of the first rectangle, left start of the second
        assert mesh.faces[1][2] == mesh.faces[2][0]

    def test_colors_by_shape(self, l_path):
        """Test faces are colored by the shape they come from."""
        mesh = Mesh.from_ribbon(build_ribbon(l_path, {"width": 1}))
        assert mesh.colors[:4] == [COLOR_RECTANGLE] * 4
        assert mesh.colors[4:8] == [COLOR_STUB] * 4
        assert mesh.colors[8:] == [COLOR_CAP] * 9

    def test_area(self, straight_path, l_path):
        """Test area of the straight band and the rounded L."""
        straight = Mesh.from_ribbon(build_ribbon(straight_path, {"width": 1}))
        assert abs(straight.area - 20.0) < 1e-9

        l_mesh = Mesh.from_ribbon(build_ribbon(l_path, {"width": 1}))
        expected = 36.0 + 3.0 + 9 * 0.5 * math.sin(math.radians(10))
        assert abs(l_mesh.area - expected) < 1e-6

    def test_normals_point_up(self, l_path):
        """Test counter-clockwise faces get +Z normals."""
        mesh = Mesh.from_ribbon(build_ribbon(l_path, {"width": 1}))
        mesh.compute_normals()
        assert len(mesh.normals) == len(mesh.faces)
        for n in mesh.normals:
            assert abs(n[2] - 1.0) < 1e-9

    def test_invalid_weld_tolerance(self, straight_path):
        """Test weld tolerance must be positive."""
        with pytest.raises(ValueError):
            Mesh.from_ribbon(build_ribbon(straight_path, {"width": 1}), weld_tolerance=0)


class TestExport:
    """Tests for file export."""

    def test_to_obj(self, l_path, tmp_path):
        """Test OBJ export writes vertices, faces and outline lines."""
        mesh = Mesh.from_ribbon(build_ribbon(l_path, {"width": 1}))
        filename = tmp_path / "ribbon.obj"
        mesh.to_obj(str(filename))

        lines = filename.read_text().splitlines()
        assert sum(1 for l in lines if l.startswith("v ")) == len(mesh.vertices)
        assert sum(1 for l in lines if l.startswith("f ")) == len(mesh.faces)
        assert sum(1 for l in lines if l.startswith("l ")) == len(mesh.outline)
        assert "f 1 2 3" in lines

    def test_to_stl(self, l_path, tmp_path):
        """Test ASCII STL export writes one facet per face."""
        mesh = Mesh.from_ribbon(build_ribbon(l_path, {"width": 1}))
        filename = tmp_path / "ribbon.stl"
        mesh.to_stl(str(filename))

        content = filename.read_text()
        assert content.startswith("solid ribbon")
        assert content.count("facet normal") == len(mesh.faces)
        assert content.count("vertex ") == 3 * len(mesh.faces)
        assert content.rstrip().endswith("endsolid ribbon")

    def test_to_json(self, straight_path, tmp_path):
        """Test JSON export round-trips through json.load."""
        mesh = Mesh.from_ribbon(build_ribbon(straight_path, {"width": 1}))
        filename = tmp_path / "ribbon.json"
        mesh.to_json(str(filename))

        with open(filename) as f:
            data = json.load(f)
        assert data["faces"] == [[0, 1, 2], [0, 2, 3]]
        assert len(data["vertices"]) == 4
        assert data["outline"] == [[1, 2], [3, 0], [0, 1], [2, 3]]
