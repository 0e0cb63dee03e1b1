#!/usr/bin/env python3
"""
Visual check for ribbon generation.
Plots the centerline, ribbon triangles and outline edges for a few paths.
"""

import math
import sys

import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection, PolyCollection
import numpy as np

from ribbon import build_ribbon, RibbonMesh


def create_demo_paths() -> dict[str, list[tuple[float, float, float]]]:
    """Create a set of paths exercising left/right turns and sharp bends."""
    # Archimedean spiral, coarse enough that every vertex is a real joint
    ts = np.linspace(0, 4 * np.pi, 25)
    spiral = [(float(2 + 2 * t) * math.cos(t), float(2 + 2 * t) * math.sin(t), 0.0) for t in ts]

    return {
        "L-turn": [(0, 0, 0), (10, 0, 0), (10, 10, 0)],
        "Zigzag": [(0, 0, 0), (8, 6, 0), (16, 0, 0), (24, 6, 0), (32, 0, 0)],
        "Hairpin": [(0, 0, 0), (20, 0, 0), (20, 6, 0), (0, 8, 0)],
        "Spiral": spiral,
    }


def plot_ribbon(ax, ribbon: RibbonMesh, path=None, title: str = "Ribbon",
                show_outline: bool = True, alpha: float = 0.6):
    """
    Draw a ribbon on a matplotlib axis.

    Args:
        ax: Target axes
        ribbon: Output of build_ribbon()
        path: Optional centerline to draw on top
        title: Axes title
        show_outline: Draw the outline edges
        alpha: Triangle fill opacity
    """
    polys = [[(p[0], p[1]) for p in tri] for tri in ribbon.triangles]

    # One color per shape: rectangles, stubs, cap fans
    num_rect = 2 * len(ribbon.rectangles)
    num_stub = 2 * len(ribbon.stubs)
    palette = plt.cm.Set2(np.linspace(0, 1, 3))
    face_colors = np.empty((len(polys), 4))
    face_colors[:num_rect] = palette[0]
    face_colors[num_rect:num_rect + num_stub] = palette[1]
    face_colors[num_rect + num_stub:] = palette[2]

    ax.add_collection(PolyCollection(polys, facecolors=face_colors, alpha=alpha,
                                     edgecolors='gray', linewidths=0.3))

    if show_outline:
        edges = [[(a[0], a[1]), (b[0], b[1])] for a, b in ribbon.outline_edges()]
        ax.add_collection(LineCollection(edges, colors='black', linewidths=1.2))

    if path is not None:
        xs = [p[0] for p in path]
        ys = [p[1] for p in path]
        ax.plot(xs, ys, 'r--', linewidth=1, marker='o', markersize=3, label='Centerline')

    for joint in ribbon.joints:
        ax.plot(*joint.inside_intersection[:2], 'kx', markersize=5)

    ax.set_title(title)
    ax.autoscale_view()
    ax.set_aspect('equal')
    ax.grid(True, alpha=0.3)


def save_ribbon_plot(ribbon: RibbonMesh, filename: str, path=None, title: str = "Ribbon"):
    """Plot a single ribbon to an image file."""
    fig, ax = plt.subplots(1, 1, figsize=(8, 8))
    plot_ribbon(ax, ribbon, path=path, title=title)
    plt.tight_layout()
    plt.savefig(filename, dpi=150, bbox_inches='tight')
    plt.close(fig)


def main():
    output = sys.argv[1] if len(sys.argv) > 1 else '/tmp/ribbon_test.png'
    paths = create_demo_paths()

    fig, axes = plt.subplots(1, len(paths), figsize=(6 * len(paths), 6))

    for ax, (name, path) in zip(axes, paths.items()):
        ribbon = build_ribbon(path, {"width": 1.0})
        print(f"{name}: {len(ribbon.rectangles)} rectangles, {len(ribbon.stubs)} stubs, "
              f"{len(ribbon.fans)} caps, {len(ribbon.triangles)} triangles")
        for joint in ribbon.joints:
            print(f"  Joint {joint.index} at ({joint.vertex[0]:.2f}, {joint.vertex[1]:.2f}): "
                  f"inside={joint.inside}")
        plot_ribbon(ax, ribbon, path=path, title=name)

    plt.tight_layout()
    plt.savefig(output, dpi=150)
    print(f"\nSaved plot to {output}")
    plt.show()


if __name__ == '__main__':
    main()
