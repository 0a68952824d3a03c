"""Bloom blur kernels and framebuffer layout for the renderer."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

FBO_MARGIN = 50


def gauss_kernel(sigma: float, halfwidth: int) -> List[float]:
    """One half of a normalised symmetric 1D gaussian kernel, centre first."""
    factor = 1.0 / (sigma * math.sqrt(2 * math.pi))
    result = [factor * math.exp(-(n**2) / (2 * sigma**2)) for n in range(halfwidth)]
    if not result:
        return result
    norm = 2 * sum(result[1:]) + result[0]
    return [value / norm for value in result]


def optim_gauss_kernel(weights: Sequence[float]) -> Tuple[List[float], List[float]]:
    """Merge neighbouring texel weights into linearly interpolated samples.

    Returns ``(offsets, weights)``; the centre sample is kept unchanged and a
    trailing lone weight keeps its own offset.
    """
    weights_in = list(weights)
    if not weights_in:
        raise ValueError("kernel must hold at least the centre weight")
    in_size = len(weights_in)

    offsets_out = [0.0]
    weights_out = [weights_in[0]]
    for i in range(1, in_size // 2 + 1):
        first = 2 * i - 1
        weight = weights_in[first]
        offset = float(first)
        if 2 * i < in_size:
            second = 2 * i
            weight += weights_in[second]
            offset = (first * weights_in[first] + second * weights_in[second]) / weight
        offsets_out.append(offset)
        weights_out.append(weight)
    return offsets_out, weights_out


@dataclass(frozen=True)
class FboLayout:
    """Sizes of the HDR, blur ping-pong and luminance framebuffers."""

    widths: Tuple[int, int, int, int]
    heights: Tuple[int, int, int, int]
    mipmaps: Tuple[int, int, int, int]
    lum_lod: int
    blur_downscale: int

    @property
    def base_width(self) -> int:
        return self.widths[0]

    @property
    def base_height(self) -> int:
        return self.heights[0]


def fbo_layout(width: int, height: int, blur_downscale: int = 2) -> FboLayout:
    """Framebuffer layout for a viewport of ``width`` by ``height``."""
    if blur_downscale <= 0:
        raise ValueError("blur downscale must be positive")
    base_width = width + 2 * FBO_MARGIN
    base_height = height + 2 * FBO_MARGIN
    half_max = max(base_width, base_height) // 2
    if half_max <= 0:
        raise ValueError("viewport too small")
    lum_lod = math.floor(math.log2(half_max))
    return FboLayout(
        widths=(
            base_width,
            base_width // blur_downscale,
            base_width // blur_downscale,
            base_width // 2,
        ),
        heights=(
            base_height,
            base_height // blur_downscale,
            base_height // blur_downscale,
            base_height // 2,
        ),
        mipmaps=(1, 1, 1, lum_lod + 1),
        lum_lod=lum_lod,
        blur_downscale=blur_downscale,
    )