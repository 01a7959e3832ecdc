"""
Text rendering of quadtrees

Turns a built QuadTree back into pixels and prints it, either as the image
itself or as an indented dump of the node hierarchy.
"""

from typing import List

import torch

from quad_node import ColorValue, QuadNode
from quad_tree import QuadTree

BLACK_CHAR = '#'
WHITE_CHAR = '.'
INDENT = '  '

QUADRANT_NAMES = ('q1', 'q2', 'q3', 'q4')


def rasterize(tree: QuadTree) -> torch.Tensor:
    """
    Paint every leaf of the tree into a (side, side) bool tensor

    Set samples are black, which makes this the inverse of QuadTree.init().
    """
    if not tree.is_valid():
        raise ValueError('[Quadtree Visualizer]: cannot rasterize an invalid tree')

    side = tree.side_length
    canvas = torch.zeros(side, side, dtype=torch.bool)

    for x, y, _, node in tree.iter_quadrants():
        if not node.is_leaf():
            continue
        if node.get_color_value() is ColorValue.Mixed:
            raise ValueError(f'[Quadtree Visualizer]: leaf at ({x}, {y}) has no color')

        s = node.get_side_length()
        canvas[y:y + s, x:x + s] = node.get_color_value() is ColorValue.Black

    return canvas


class QuadtreeVisualizer:
    """Renders quadtrees as text"""
    def __init__(self, black: str = BLACK_CHAR, white: str = WHITE_CHAR, indent: str = INDENT):
        self.black = black
        self.white = white
        self.indent = indent

    def render_ascii(self, tree: QuadTree) -> List[str]:
        """Render the image encoded by the tree, one string per row"""
        canvas = rasterize(tree)
        return [
            ''.join(self.black if sample else self.white for sample in row.tolist())
            for row in canvas
        ]

    def describe(self, node: QuadNode) -> str:
        if not node.is_initialized():
            return '<uninitialized>'
        size = node.get_side_length()
        return f'{size}x{size} {node.get_color_value().value}'

    def format_node(self, node: QuadNode, label: str, depth: int, lines: list) -> list:
        lines.append(f'{self.indent * depth}{label}: {self.describe(node)}')
        for name, child in zip(QUADRANT_NAMES, node.get_children()):
            self.format_node(child, name, depth + 1, lines)
        return lines

    def format_tree(self, tree: QuadTree) -> List[str]:
        """Indented dump of the node hierarchy, children listed q1..q4"""
        return self.format_node(tree.get_root(), 'root', 0, [])


def render_ascii(tree: QuadTree, black: str = BLACK_CHAR, white: str = WHITE_CHAR) -> List[str]:
    return QuadtreeVisualizer(black=black, white=white).render_ascii(tree)


def format_tree(tree: QuadTree) -> List[str]:
    return QuadtreeVisualizer().format_tree(tree)
