"""
Raw binary image loading

A raw image file is a bit-packed dump of a square black and white image:
rows are stored top to bottom, each byte holds eight pixels with the most
significant bit first, and a set bit is a black pixel. When the pixel count
is not a multiple of eight the last byte is padded with cleared bits.
"""

import math
import os
from typing import Optional, Tuple

import numpy as np
import torch

BITS_PER_BYTE = 8


class ImageLoadError(ValueError):
    """Raised when a raw image file cannot be turned into pixel samples"""


def unpack_pixels(data: bytes, side_length: Optional[int] = None) -> Tuple[torch.Tensor, int]:
    """
    Unpack bit-packed image bytes into individual pixel samples

    Args:
        data: Raw file contents
        side_length: Image side in pixels. If None, every bit in the data
            is a pixel and the bit count must be a perfect square.

    Returns:
        (pixels, side_length) with pixels a flat bool tensor, row-major
    """
    if len(data) == 0:
        raise ImageLoadError('[Quadtree Loader]: image file is empty')

    bits = np.unpackbits(np.frombuffer(data, dtype=np.uint8))

    if side_length is None:
        side_length = math.isqrt(bits.size)
        if side_length * side_length != bits.size:
            raise ImageLoadError(
                f'[Quadtree Loader]: {bits.size} bits do not form a square image, pass the side length explicitly'
            )
    else:
        if side_length <= 0:
            raise ImageLoadError(f'[Quadtree Loader]: side length must be positive, got {side_length}')

        pixel_count = side_length * side_length
        if pixel_count > bits.size:
            raise ImageLoadError(
                f'[Quadtree Loader]: {side_length}x{side_length} image needs {pixel_count} bits, file has {bits.size}'
            )
        if bits.size - pixel_count >= BITS_PER_BYTE:
            raise ImageLoadError(
                f'[Quadtree Loader]: {bits.size - pixel_count} bits left over for a {side_length}x{side_length} image'
            )
        bits = bits[:pixel_count]

    pixels = torch.from_numpy(bits.astype(np.bool_))
    return pixels, side_length


def pack_pixels(pixels) -> bytes:
    """Pack flat pixel samples into the raw file layout (inverse of unpack_pixels)"""
    if isinstance(pixels, torch.Tensor):
        samples = pixels.detach().cpu().flatten().numpy()
    else:
        samples = np.asarray(pixels).flatten()

    return np.packbits(samples != 0).tobytes()


def load_raw_image(path: str, side_length: Optional[int] = None) -> Tuple[torch.Tensor, int]:
    """
    Load a raw binary image file

    Args:
        path: Path to the image file
        side_length: Image side in pixels (inferred from the file size if None)

    Returns:
        (pixels, side_length) ready to be handed to QuadTree.init()
    """
    if not os.path.isfile(path):
        raise ImageLoadError(f'[Quadtree Loader]: unable to open image file: {path}')

    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise ImageLoadError(f'[Quadtree Loader]: unable to open image file: {path} ({e})') from e

    pixels, side_length = unpack_pixels(data, side_length)
    print(f'[Quadtree Loader]: Loaded {side_length}x{side_length} image from {path}')
    return pixels, side_length


def save_raw_image(path: str, pixels):
    """Write flat pixel samples to a raw image file"""
    with open(path, 'wb') as f:
        f.write(pack_pixels(pixels))
