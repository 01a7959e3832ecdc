#!/usr/bin/env python3
"""
Command line entry point: load a raw binary image and print its quadtree

usage:
    quadtree {image_file} [--side-length N] [--tree]
"""

import argparse
import sys

from image_loader import ImageLoadError, load_raw_image
from quad_tree import QuadTree
from quadtree_visualizer import QuadtreeVisualizer


def build_parser(prog: str = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description='Encode a square black and white raw image as a quadtree',
    )
    parser.add_argument('image_file', nargs='?', help='bit-packed raw image, MSB first, set bits are black')
    parser.add_argument('--side-length', type=int, default=None,
                        help='image side in pixels (inferred from the file size if omitted)')
    parser.add_argument('--tree', action='store_true', help='also print the node hierarchy')
    parser.add_argument('--black', default='#', help='character used for black pixels')
    parser.add_argument('--white', default='.', help='character used for white pixels')
    return parser


def fail(parser: argparse.ArgumentParser, reason: str) -> int:
    print(reason)
    parser.print_usage(sys.stdout)
    return 1


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.image_file is None:
        return fail(parser, 'no image file specified')

    try:
        pixels, side_length = load_raw_image(args.image_file, args.side_length)
    except ImageLoadError as e:
        return fail(parser, str(e))

    tree = QuadTree.from_pixels(pixels, side_length)
    if not tree.is_valid():
        print('image could not be parsed')
        return 1

    print(f'[Quadtree]: {side_length}x{side_length} image, {tree.leaf_count()} leaves, depth {tree.depth()}')

    visualizer = QuadtreeVisualizer(black=args.black, white=args.white)
    for line in visualizer.render_ascii(tree):
        print(line)

    if args.tree:
        print()
        for line in visualizer.format_tree(tree):
            print(line)

    return 0


if __name__ == '__main__':
    sys.exit(main())
