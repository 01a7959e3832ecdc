#!/usr/bin/env python3
"""
Test that tree equality is structural: trees compare by content and shape,
never by node identity, and a single changed pixel breaks equality.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from quad_node import ColorValue, QuadNode
from quad_tree import QuadTree, QuadtreeBuilder

B, W = 1, 0

EXAMPLE_4X4 = [
    W, W, B, W,
    W, W, W, B,
    B, B, B, B,
    W, W, B, B,
]


def build(pixels, side_length=None):
    return QuadTree.from_pixels(pixels, side_length, builder=QuadtreeBuilder(verbose=False))


def test_reflexive_and_repeatable():
    print("=" * 80)
    print("TESTING REFLEXIVE EQUALITY")
    print("=" * 80)

    first = build(EXAMPLE_4X4)
    second = build(EXAMPLE_4X4)

    assert first == first, "A tree must equal itself"
    assert first == second, "Trees built from identical input must be equal"
    assert first.get_root() is not second.get_root()
    assert not (first != second)
    print("  ✓ Identical input gives equal trees")


def test_single_pixel_changes_break_equality():
    print("=" * 80)
    print("TESTING SINGLE PIXEL DIFFERENCES")
    print("=" * 80)

    reference = build(EXAMPLE_4X4)
    for i in range(len(EXAMPLE_4X4)):
        changed = list(EXAMPLE_4X4)
        changed[i] = 1 - changed[i]
        other = build(changed)

        assert other.is_valid()
        assert reference != other, f"Flipping pixel {i} must change the tree"
    print(f"  ✓ All {len(EXAMPLE_4X4)} single pixel flips detected")

    # Homogeneous images differing in one pixel as well
    plain = build([W] * 64)
    speck = build([W] * 63 + [B])
    assert plain != speck


def test_uninitialized_trees():
    empty = QuadTree()
    also_empty = build([])
    valid = build(EXAMPLE_4X4)

    assert empty == also_empty, "Uninitialized trees are only equal to each other"
    assert empty != valid
    assert valid != empty


def test_leaf_internal_mismatch():
    """A leaf never equals an internal node, even with the same side and color"""
    leaf = QuadNode(2, ColorValue.Black)

    internal = QuadNode(2, ColorValue.Black)
    assert internal.set_children([QuadNode(1, ColorValue.Black) for _ in range(4)])

    assert QuadTree(leaf).is_valid() and QuadTree(internal).is_valid()
    assert QuadTree(leaf) != QuadTree(internal)
    assert QuadTree(internal) != QuadTree(leaf)


def test_size_and_color_mismatch():
    assert build([B] * 4) != build([B] * 16)
    assert build([B] * 16) != build([W] * 16)


def test_subtree_views_compare_structurally():
    tree = build(EXAMPLE_4X4)

    # Wrapping the same root in another tree is still the same structure
    assert QuadTree(tree.get_root()) == tree

    # Each child quadrant is itself a comparable tree
    q1, q2, q3, q4 = tree.get_root().get_children()
    assert QuadTree(q2) == build([W] * 4)
    assert QuadTree(q4) == build([B] * 4)
    assert QuadTree(q1) == build([B, W, W, B])
    assert QuadTree(q3) == build([B, B, W, W])
    assert QuadTree(q1) != QuadTree(q3)


def test_not_comparable_with_other_types():
    tree = build(EXAMPLE_4X4)
    assert tree != 5
    assert not (tree == "tree")


if __name__ == "__main__":
    try:
        test_reflexive_and_repeatable()
        test_single_pixel_changes_break_equality()
        test_uninitialized_trees()
        test_leaf_internal_mismatch()
        test_size_and_color_mismatch()
        test_subtree_views_compare_structurally()
        test_not_comparable_with_other_types()

        print("=" * 80)
        print("ALL TESTS PASSED!")
        print("=" * 80)

    except Exception as e:
        print(f"\n❌ TEST FAILED: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
