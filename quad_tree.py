'''
# ------------------------------------------------------------------------
#
#   Quad Tree
#
#   Builds the quadtree representation of a square binary image from its
#   flattened pixel data.
#
#   How it works:
#   1. The flat samples are checked: the count must be a non-zero perfect
#      square whose side is a power of two (so every halving is exact).
#   2. The samples are reshaped into rows, row 0 being the first row the
#      caller flattened.
#   3. Each region is scanned. A homogeneous region becomes a leaf with the
#      region's color, anything else becomes a Mixed node.
#   4. Mixed nodes are split into q1..q4, the children are built first and
#      then handed to the parent in one set_children() call.
#
#   Construction never raises for bad input. A tree that could not be built
#   keeps an uninitialized root and reports is_valid() == False.
#
# -------------------------------------------------------------------------
'''

import math
from typing import Iterator, List, Optional, Tuple

import numpy as np
import torch

from quad_node import Children, ColorValue, QuadNode


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def sample_bit(sample) -> bool:
    """Map one sample to its bit: Black and non-zero values are set"""
    if isinstance(sample, ColorValue):
        if sample is ColorValue.Mixed:
            raise ValueError('Mixed is not a pixel color')
        return sample is ColorValue.Black
    return bool(sample)


def to_samples(pixels) -> torch.Tensor:
    """
    Flatten caller supplied pixels into a 1-D bool tensor

    Accepts lists, numpy arrays or tensors of any shape (flattened row-major).
    Non-zero samples and ColorValue.Black are set, zero samples and
    ColorValue.White are cleared.
    """
    if isinstance(pixels, torch.Tensor):
        samples = pixels.detach().cpu().flatten()
    else:
        array = np.asarray(pixels)
        if array.dtype == object:
            array = np.vectorize(sample_bit, otypes=[np.bool_])(array)
        samples = torch.as_tensor(array).flatten()

    if samples.dtype == torch.bool:
        return samples
    return samples != 0


def check_shape(sample_count: int, side_length: Optional[int] = None) -> Tuple[Optional[int], str]:
    """
    Work out the side length of a flat image with sample_count pixels

    Returns:
        (side_length, '') if the shape is usable, (None, reason) otherwise
    """
    if sample_count == 0:
        return None, 'image is empty'

    side = math.isqrt(sample_count)
    if side * side != sample_count:
        return None, f'{sample_count} samples do not form a square image'

    if side_length is not None and side_length != side:
        return None, f'side length {side_length} does not match {sample_count} samples'

    if not is_power_of_two(side):
        return None, f'side length {side} is not a power of two'

    return side, ''


class QuadtreeBuilder:
    """Builds a quadtree from binary image rows by recursive homogeneity splitting"""
    def __init__(self, verbose: bool = True):
        """
        Initialize quadtree builder

        Args:
            verbose: Print a summary line after each build
        """
        self.verbose = verbose

    def is_homogeneous(self, rows: torch.Tensor, x: int, y: int, side_length: int) -> bool:
        """Check if every sample in the region has the same value"""
        region = rows[y:y + side_length, x:x + side_length]
        return bool(torch.all(region == region[0, 0]))

    def make_node(self, rows: torch.Tensor, x_off: int, y_off: int, side_length: int) -> QuadNode:
        """
        Create the node for one region

        Returns:
            A leaf with the region's color if it is homogeneous, otherwise
            a Mixed node without children
        """
        if self.is_homogeneous(rows, x_off, y_off, side_length):
            return QuadNode(side_length, QuadNode.from_sample(rows[y_off, x_off].item()))

        return QuadNode(side_length, ColorValue.Mixed)

    def build_tree(self, rows: torch.Tensor, x_off: int = 0, y_off: int = 0,
                   side_length: Optional[int] = None) -> QuadNode:
        """
        Recursively build the quadtree for a region of the image

        Args:
            rows: Image samples (side, side), row 0 at the top
            x_off, y_off: Top-left corner of the region
            side_length: Region size (whole image if None)

        Returns:
            Root node of the region. An uninitialized node is returned if the
            children could not be installed.
        """
        if side_length is None:
            side_length = rows.shape[0]

        node = self.make_node(rows, x_off, y_off, side_length)
        if node.get_color_value() is not ColorValue.Mixed:
            return node

        half = side_length // 2
        children = Children(
            self.build_tree(rows, x_off + half, y_off, half),         # q1: upper-right
            self.build_tree(rows, x_off, y_off, half),                # q2: upper-left
            self.build_tree(rows, x_off, y_off + half, half),         # q3: lower-left
            self.build_tree(rows, x_off + half, y_off + half, half),  # q4: lower-right
        )

        if not node.set_children(children):
            return QuadNode()

        return node

    def build(self, rows: torch.Tensor) -> QuadNode:
        """
        Build complete quadtree

        Args:
            rows: Image samples (side, side)

        Returns:
            Root node of the image
        """
        root = self.build_tree(rows)

        if self.verbose:
            print(f'[Quadtree]: Built quadtree with {QuadTree(root).leaf_count()} leaves '
                  f'for a {rows.shape[0]}x{rows.shape[1]} image')

        return root


class QuadTree:
    """Quadtree representation of a square binary image"""
    def __init__(self, root: Optional[QuadNode] = None, builder: Optional[QuadtreeBuilder] = None):
        """
        Create a tree around a root node (uninitialized if None)

        Wrapping an existing node gives a read-only view of that subtree, which
        is how child quadrants are checked and compared.
        """
        self._root = root if root is not None else QuadNode()
        self.builder = builder

    @classmethod
    def from_pixels(cls, pixels, side_length: Optional[int] = None,
                    builder: Optional[QuadtreeBuilder] = None) -> 'QuadTree':
        tree = cls(builder=builder)
        tree.init(pixels, side_length)
        return tree

    @staticmethod
    def parse_rows(samples: torch.Tensor, side_length: int) -> torch.Tensor:
        """Split flat samples into side_length rows of side_length samples each"""
        return samples.reshape(side_length, side_length)

    def init(self, pixels, side_length: Optional[int] = None) -> bool:
        """
        Construct the quadtree of a binary image from its raw pixel data

        Set samples are black and cleared samples are white. On failure the
        tree is left uninitialized and is_valid() returns False.

        Args:
            pixels: Flattened pixel values, row-major
            side_length: Row and column size of the image (inferred if None)

        Returns:
            True if the tree was built
        """
        self._root = QuadNode()

        try:
            samples = to_samples(pixels)
        except (TypeError, ValueError, RuntimeError) as e:
            print(f'[Quadtree]: Rejected image: unreadable pixel data ({e})')
            return False

        side, reason = check_shape(samples.numel(), side_length)
        if side is None:
            print(f'[Quadtree]: Rejected image: {reason}')
            return False

        if self.builder is None:
            self.builder = QuadtreeBuilder()

        rows = self.parse_rows(samples, side)
        root = self.builder.build(rows)
        if not root.is_valid():
            print('[Quadtree]: Rejected image: node hierarchy is malformed')
            return False

        self._root = root
        return True

    def get_root(self) -> QuadNode:
        return self._root

    @property
    def side_length(self) -> int:
        return self._root.get_side_length()

    def is_valid(self) -> bool:
        """
        Check the root and, recursively, every child quadrant as its own subtree

        Each child must cover exactly half of its parent's side, so nodes that
        were re-initialized after construction are caught here.
        """
        root = self._root
        if not root.is_initialized() or not root.is_valid():
            return False

        if root.is_leaf():
            return True

        half = root.get_side_length() // 2
        return all(
            child.get_side_length() == half and QuadTree(child).is_valid()
            for child in root.get_children()
        )

    def iter_quadrants(self) -> Iterator[Tuple[int, int, int, QuadNode]]:
        """
        Walk the tree depth first in q1..q4 order

        Yields:
            (x, y, depth, node) for every node, x/y being the top-left pixel
        """
        if not self._root.is_initialized():
            return

        stack = [(0, 0, 0, self._root)]
        while stack:
            x, y, depth, node = stack.pop()
            yield x, y, depth, node

            if node.is_leaf():
                continue

            half = node.get_side_length() // 2
            q1, q2, q3, q4 = node.get_children()
            # Pushed in reverse so q1 is visited first
            stack.append((x + half, y + half, depth + 1, q4))
            stack.append((x, y + half, depth + 1, q3))
            stack.append((x, y, depth + 1, q2))
            stack.append((x + half, y, depth + 1, q1))

    def get_leaf_nodes(self) -> List[QuadNode]:
        return [node for _, _, _, node in self.iter_quadrants() if node.is_leaf()]

    def leaf_count(self) -> int:
        return len(self.get_leaf_nodes())

    def depth(self) -> int:
        """Number of splits along the deepest branch (0 for a single leaf, -1 if empty)"""
        return max((depth for _, _, depth, _ in self.iter_quadrants()), default=-1)

    def __eq__(self, other):
        if not isinstance(other, QuadTree):
            return NotImplemented

        mine, theirs = self._root, other._root

        # if either tree is uninitialized, they are only equal if both are
        if not mine.is_initialized() or not theirs.is_initialized():
            return mine.is_initialized() == theirs.is_initialized()

        if not self.is_valid() or not other.is_valid():
            return False

        if (mine.get_side_length() != theirs.get_side_length()
                or mine.get_color_value() != theirs.get_color_value()):
            return False

        if mine.is_leaf() or theirs.is_leaf():
            return mine.is_leaf() and theirs.is_leaf()

        # check the subtree for each child
        return all(
            QuadTree(child) == QuadTree(other_child)
            for child, other_child in zip(mine.get_children(), theirs.get_children())
        )

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        if not self._root.is_initialized():
            return 'QuadTree(<uninitialized>)'
        return f'QuadTree(side_length={self.side_length}, leaves={self.leaf_count()}, depth={self.depth()})'
