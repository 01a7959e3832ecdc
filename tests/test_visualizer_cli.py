#!/usr/bin/env python3
"""
Test rasterizing and printing quadtrees, and the command line entry point.
"""

import sys
import os
import tempfile
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
import torch

from image_loader import save_raw_image
from quad_tree import QuadTree, QuadtreeBuilder
from quadtree_cli import main
from quadtree_visualizer import QuadtreeVisualizer, format_tree, rasterize, render_ascii

B, W = 1, 0

EXAMPLE_4X4 = [
    W, W, B, W,
    W, W, W, B,
    B, B, B, B,
    W, W, B, B,
]


def build(pixels, side_length=None):
    return QuadTree.from_pixels(pixels, side_length, builder=QuadtreeBuilder(verbose=False))


def test_rasterize_inverts_construction():
    print("=" * 80)
    print("TESTING RASTERIZE ROUND TRIP")
    print("=" * 80)

    generator = torch.Generator().manual_seed(0)
    for side in [1, 2, 4, 8, 16]:
        # Blocky images so that some quadrants merge into larger leaves
        coarse = torch.randint(0, 2, (max(side // 2, 1),) * 2, generator=generator).bool()
        image = coarse.repeat_interleave(2, 0).repeat_interleave(2, 1)[:side, :side]
        image[0, 0] = ~image[0, 0]

        tree = build(image)
        assert tree.is_valid()
        assert torch.equal(rasterize(tree), image), f"{side}x{side} image did not survive the round trip"
        print(f"  ✓ {side}x{side}: {tree.leaf_count()} leaves")


def test_render_ascii_example():
    tree = build(EXAMPLE_4X4)
    assert render_ascii(tree) == [
        '..#.',
        '...#',
        '####',
        '..##',
    ]
    assert render_ascii(tree, black='1', white='0')[2] == '1111'


def test_format_tree_example():
    lines = format_tree(build(EXAMPLE_4X4))
    for line in lines:
        print(line)

    assert lines == [
        'root: 4x4 Mixed',
        '  q1: 2x2 Mixed',
        '    q1: 1x1 White',
        '    q2: 1x1 Black',
        '    q3: 1x1 White',
        '    q4: 1x1 Black',
        '  q2: 2x2 White',
        '  q3: 2x2 Mixed',
        '    q1: 1x1 Black',
        '    q2: 1x1 Black',
        '    q3: 1x1 White',
        '    q4: 1x1 White',
        '  q4: 2x2 Black',
    ]


def test_invalid_trees_are_not_rendered():
    with pytest.raises(ValueError):
        rasterize(QuadTree())
    assert QuadtreeVisualizer().format_tree(QuadTree()) == ['root: <uninitialized>']


def test_cli_prints_image(capsys):
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, 'example.raw')
        save_raw_image(path, EXAMPLE_4X4)

        assert main([path, '--tree']) == 0

    out = capsys.readouterr().out
    assert '..#.\n...#\n####\n..##\n' in out
    assert 'root: 4x4 Mixed' in out
    assert '10 leaves' in out


def test_cli_failures(capsys):
    assert main([]) == 1
    assert 'no image file specified' in capsys.readouterr().out

    with tempfile.TemporaryDirectory() as tmp:
        assert main([os.path.join(tmp, 'missing.raw')]) == 1
        assert 'unable to open image file' in capsys.readouterr().out

        # 3x3 fits in two bytes but is not a power of two
        path = os.path.join(tmp, 'odd.raw')
        save_raw_image(path, [B] * 9)
        assert main([path, '--side-length', '3']) == 1
        assert 'image could not be parsed' in capsys.readouterr().out


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
