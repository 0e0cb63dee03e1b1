"""
Indexed mesh for export.

Converts a RibbonMesh (triangles as explicit point triples) into shared
vertices plus index faces, and writes OBJ, STL or JSON files.
"""

from dataclasses import dataclass, field
import json
import math

from ribbon import RibbonMesh


# Color constants (RGB 0-255)
COLOR_RECTANGLE = (70, 130, 180)  # Steel blue
COLOR_STUB = (255, 165, 0)        # Orange
COLOR_CAP = (220, 20, 60)         # Crimson


@dataclass
class Mesh:
    """
    A 3D mesh with vertices and faces.

    Vertices are (x, y, z) tuples.
    Faces are lists of vertex indices (triangles).
    """
    vertices: list[tuple[float, float, float]] = field(default_factory=list)
    faces: list[list[int]] = field(default_factory=list)
    normals: list[tuple[float, float, float]] = field(default_factory=list)

    # Optional per-face colors (r, g, b) 0-255
    colors: list[tuple[int, int, int]] = field(default_factory=list)

    # Outline edges as vertex index pairs
    outline: list[tuple[int, int]] = field(default_factory=list)

    def add_vertex(self, v: tuple[float, float, float]) -> int:
        """Add a vertex and return its index."""
        self.vertices.append(v)
        return len(self.vertices) - 1

    def add_triangle(self, v0: int, v1: int, v2: int, color: tuple[int, int, int] = None):
        """Add a triangle face."""
        self.faces.append([v0, v1, v2])
        if color:
            self.colors.append(color)

    @classmethod
    def from_ribbon(cls, ribbon: RibbonMesh, weld_tolerance: float = 1e-9) -> 'Mesh':
        """
        Build an indexed mesh from a ribbon.

        Points closer than about weld_tolerance share one vertex, so
        rectangles, stubs and fans meeting at a corner are connected.

        Args:
            ribbon: Output of build_ribbon()
            weld_tolerance: Grid size used to merge coincident points

        Returns:
            Mesh with one colored face per ribbon triangle
        """
        if weld_tolerance <= 0:
            raise ValueError(f"weld_tolerance must be positive, got {weld_tolerance}")

        mesh = cls()
        index_of = {}

        def vertex_index(p) -> int:
            key = tuple(round(c / weld_tolerance) for c in p)
            if key not in index_of:
                index_of[key] = mesh.add_vertex(tuple(float(c) for c in p))
            return index_of[key]

        # build_ribbon() emits rectangles, then stubs, then fans
        num_rect = 2 * len(ribbon.rectangles)
        num_stub = 2 * len(ribbon.stubs)
        for i, tri in enumerate(ribbon.triangles):
            if i < num_rect:
                color = COLOR_RECTANGLE
            elif i < num_rect + num_stub:
                color = COLOR_STUB
            else:
                color = COLOR_CAP
            mesh.add_triangle(*(vertex_index(p) for p in tri), color=color)

        for a, b in ribbon.outline_edges():
            mesh.outline.append((vertex_index(a), vertex_index(b)))

        return mesh

    def compute_normals(self):
        """Compute face normals."""
        self.normals = []
        for face in self.faces:
            v0 = self.vertices[face[0]]
            v1 = self.vertices[face[1]]
            v2 = self.vertices[face[2]]

            # Two edge vectors
            e1 = (v1[0] - v0[0], v1[1] - v0[1], v1[2] - v0[2])
            e2 = (v2[0] - v0[0], v2[1] - v0[1], v2[2] - v0[2])

            # Cross product
            nx = e1[1] * e2[2] - e1[2] * e2[1]
            ny = e1[2] * e2[0] - e1[0] * e2[2]
            nz = e1[0] * e2[1] - e1[1] * e2[0]

            # Normalize
            length = math.sqrt(nx*nx + ny*ny + nz*nz)
            if length > 1e-10:
                self.normals.append((nx/length, ny/length, nz/length))
            else:
                self.normals.append((0, 0, 1))

    @property
    def area(self) -> float:
        """Total surface area of all faces."""
        total = 0.0
        for face in self.faces:
            v0, v1, v2 = (self.vertices[i] for i in face)
            e1 = (v1[0] - v0[0], v1[1] - v0[1], v1[2] - v0[2])
            e2 = (v2[0] - v0[0], v2[1] - v0[1], v2[2] - v0[2])
            nx = e1[1] * e2[2] - e1[2] * e2[1]
            ny = e1[2] * e2[0] - e1[0] * e2[2]
            nz = e1[0] * e2[1] - e1[1] * e2[0]
            total += math.sqrt(nx*nx + ny*ny + nz*nz) / 2
        return total

    def to_obj(self, filename: str):
        """Export mesh to OBJ file format, outline edges as line elements."""
        with open(filename, 'w') as f:
            f.write("# Ribbon - OBJ Export\n")
            f.write(f"# Vertices: {len(self.vertices)}\n")
            f.write(f"# Faces: {len(self.faces)}\n\n")

            for v in self.vertices:
                f.write(f"v {v[0]:.6f} {v[1]:.6f} {v[2]:.6f}\n")

            f.write("\n")

            # OBJ uses 1-based indexing
            for face in self.faces:
                indices = " ".join(str(i + 1) for i in face)
                f.write(f"f {indices}\n")

            if self.outline:
                f.write("\n")
                for a, b in self.outline:
                    f.write(f"l {a + 1} {b + 1}\n")

    def to_stl(self, filename: str):
        """Export mesh to STL file format (ASCII)."""
        if len(self.normals) != len(self.faces):
            self.compute_normals()

        with open(filename, 'w') as f:
            f.write("solid ribbon\n")

            for face, normal in zip(self.faces, self.normals):
                f.write(f"  facet normal {normal[0]:.6f} {normal[1]:.6f} {normal[2]:.6f}\n")
                f.write("    outer loop\n")
                for i in face:
                    v = self.vertices[i]
                    f.write(f"      vertex {v[0]:.6f} {v[1]:.6f} {v[2]:.6f}\n")
                f.write("    endloop\n")
                f.write("  endfacet\n")

            f.write("endsolid ribbon\n")

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "vertices": [list(v) for v in self.vertices],
            "faces": [list(face) for face in self.faces],
            "outline": [list(edge) for edge in self.outline],
        }

    def to_json(self, filename: str):
        """Export mesh to a JSON file."""
        with open(filename, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)
