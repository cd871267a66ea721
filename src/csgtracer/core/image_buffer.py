"""Taichi-backed pixel buffer for rendered images.

An ImageBuffer holds one color and one "ambiguous" flag per pixel. The
renderer fills it with linear light intensities (unbounded above); the
per-pixel post-processing passes run as Taichi kernels over the buffer's
ndarrays:

    - resolve_ambiguous_pixels(): replace each flagged pixel by the average
      of its unflagged 3x3 neighbours
    - downsample(): average factor x factor blocks (anti-aliasing)
    - max_color_value(): largest channel over the whole image, used to
      normalize the image for 8-bit output
    - to_uint8(): scale by 255 / max and clamp to 0..255

Storage is ti.ndarray rather than ti.field. Ndarrays are released when the
buffer is garbage collected, so a long-lived process can render any number
of images.

Pixel (i, j) is column i (left to right) and row j (top to bottom). The
ndarrays are indexed [i, j, channel]; to_numpy() transposes to the
conventional (height, width, 3) layout.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from csgtracer.core.image_buffer import ImageBuffer
    >>> from csgtracer.core.vector import Color
    >>> buffer = ImageBuffer(4, 3)
    >>> buffer.set_pixel(1, 2, Color(0.5, 0.25, 1.0))
    >>> buffer.to_uint8()[2, 1]
    array([127,  63, 255], dtype=uint8)
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from csgtracer.core.errors import (
    InvalidConfigurationError,
    NegativeColorError,
    PixelOutOfBoundsError,
)
from csgtracer.core.vector import BLACK, Color


@dataclass
class PixelData:
    """Contents of one pixel.

    Attributes:
        color: Linear light intensity.
        is_ambiguous: Whether the pixel could not be traced reliably.
    """

    color: Color = BLACK
    is_ambiguous: bool = False


# =============================================================================
# Kernels
# =============================================================================

color_array = ti.types.ndarray(dtype=ti.f64, ndim=3)
flag_array = ti.types.ndarray(dtype=ti.i32, ndim=2)


@ti.kernel
def _max_channel(colors: color_array) -> ti.f64:
    """Largest channel value, or 0 for an all-black image."""
    result = ti.cast(0.0, ti.f64)
    for i, j, c in ti.ndrange(colors.shape[0], colors.shape[1], 3):
        ti.atomic_max(result, colors[i, j, c])
    return result


@ti.kernel
def _count_negative(colors: color_array) -> ti.i32:
    count = 0
    for i, j, c in ti.ndrange(colors.shape[0], colors.shape[1], 3):
        if colors[i, j, c] < 0.0:
            count += 1
    return count


@ti.kernel
def _resolve_ambiguous(src: color_array, flags: flag_array, dst: color_array):
    """Write src to dst with flagged pixels replaced by a neighbour average."""
    width = src.shape[0]
    height = src.shape[1]
    for i, j in ti.ndrange(width, height):
        for c in ti.static(range(3)):
            dst[i, j, c] = src[i, j, c]
        if flags[i, j] != 0:
            total = ti.Vector([0.0, 0.0, 0.0], dt=ti.f64)
            count = 0
            for di in ti.static(range(-1, 2)):
                for dj in ti.static(range(-1, 2)):
                    ni = i + di
                    nj = j + dj
                    if ni >= 0 and ni < width and nj >= 0 and nj < height:
                        if flags[ni, nj] == 0:
                            for c in ti.static(range(3)):
                                total[c] += src[ni, nj, c]
                            count += 1
            for c in ti.static(range(3)):
                if count > 0:
                    dst[i, j, c] = total[c] / ti.cast(count, ti.f64)
                else:
                    dst[i, j, c] = 0.0


@ti.kernel
def _downsample(
    src: color_array,
    src_flags: flag_array,
    dst: color_array,
    dst_flags: flag_array,
    factor: ti.i32,
):
    """Average each factor x factor block of src into one pixel of dst."""
    for i, j in ti.ndrange(dst.shape[0], dst.shape[1]):
        total = ti.Vector([0.0, 0.0, 0.0], dt=ti.f64)
        flag = 0
        for di, dj in ti.ndrange(factor, factor):
            for c in ti.static(range(3)):
                total[c] += src[i * factor + di, j * factor + dj, c]
            flag = ti.max(flag, src_flags[i * factor + di, j * factor + dj])
        for c in ti.static(range(3)):
            dst[i, j, c] = total[c] / ti.cast(factor * factor, ti.f64)
        dst_flags[i, j] = flag


@ti.kernel
def _convert_to_uint8(colors: color_array, max_value: ti.f64, out: ti.types.ndarray()):
    """Scale each channel to 0..255 relative to max_value, truncating."""
    for i, j, c in ti.ndrange(colors.shape[0], colors.shape[1], 3):
        scaled = ti.cast(255.0 * colors[i, j, c] / max_value, ti.i32)
        out[j, i, c] = ti.cast(ti.min(255, ti.max(0, scaled)), ti.u8)


# =============================================================================
# Image Buffer
# =============================================================================


class ImageBuffer:
    """A width x height grid of colors with per-pixel ambiguity flags.

    Requires Taichi to be initialized (ti.init) before construction.

    Args:
        pixels_wide: Number of columns.
        pixels_high: Number of rows.

    Raises:
        InvalidConfigurationError: If either dimension is not positive.
    """

    def __init__(self, pixels_wide: int, pixels_high: int) -> None:
        if pixels_wide < 1 or pixels_high < 1:
            raise InvalidConfigurationError(
                f"Image dimensions must be positive, got {pixels_wide}x{pixels_high}"
            )
        self._width = pixels_wide
        self._height = pixels_high

        self._colors = ti.ndarray(dtype=ti.f64, shape=(pixels_wide, pixels_high, 3))
        self._ambiguous = ti.ndarray(dtype=ti.i32, shape=(pixels_wide, pixels_high))
        self._colors.fill(0.0)
        self._ambiguous.fill(0)

    @classmethod
    def from_numpy(
        cls,
        colors: npt.NDArray[np.float64],
        ambiguous: npt.NDArray[np.bool_] | None = None,
    ) -> "ImageBuffer":
        """Build a buffer from a (height, width, 3) array and optional (height, width) mask."""
        if colors.ndim != 3 or colors.shape[2] != 3:
            raise InvalidConfigurationError(
                f"Expected a (height, width, 3) array, got shape {colors.shape}"
            )
        height, width = colors.shape[:2]
        buffer = cls(width, height)
        buffer._colors.from_numpy(
            np.ascontiguousarray(np.transpose(colors, (1, 0, 2)), dtype=np.float64)
        )
        if ambiguous is not None:
            buffer._ambiguous.from_numpy(
                np.ascontiguousarray(ambiguous.T, dtype=np.int32)
            )
        return buffer

    @property
    def pixels_wide(self) -> int:
        return self._width

    @property
    def pixels_high(self) -> int:
        return self._height

    def _check_bounds(self, i: int, j: int) -> None:
        if not (0 <= i < self._width and 0 <= j < self._height):
            raise PixelOutOfBoundsError(
                f"Pixel ({i}, {j}) outside {self._width}x{self._height} image"
            )

    def pixel(self, i: int, j: int) -> PixelData:
        """Return the contents of pixel (i, j).

        Raises:
            PixelOutOfBoundsError: If (i, j) is outside the image.
        """
        self._check_bounds(i, j)
        c = self._colors
        return PixelData(
            color=Color(float(c[i, j, 0]), float(c[i, j, 1]), float(c[i, j, 2])),
            is_ambiguous=bool(self._ambiguous[i, j]),
        )

    def set_pixel(self, i: int, j: int, color: Color, is_ambiguous: bool = False) -> None:
        """Store a color (and ambiguity flag) at pixel (i, j).

        Raises:
            PixelOutOfBoundsError: If (i, j) is outside the image.
        """
        self._check_bounds(i, j)
        self._colors[i, j, 0] = color.red
        self._colors[i, j, 1] = color.green
        self._colors[i, j, 2] = color.blue
        self._ambiguous[i, j] = 1 if is_ambiguous else 0

    # =========================================================================
    # Post-processing
    # =========================================================================

    def ambiguous_count(self) -> int:
        return int(self._ambiguous.to_numpy().sum())

    def resolve_ambiguous_pixels(self) -> int:
        """Replace every ambiguous pixel by the mean of its unambiguous neighbours.

        A flagged pixel with no unambiguous neighbour becomes black. Flags are
        left set so callers can still see which pixels were estimated.

        Returns:
            The number of pixels that were resolved.
        """
        count = self.ambiguous_count()
        if count == 0:
            return 0
        resolved = ti.ndarray(dtype=ti.f64, shape=(self._width, self._height, 3))
        _resolve_ambiguous(self._colors, self._ambiguous, resolved)
        self._colors = resolved
        return count

    def downsample(self, factor: int) -> "ImageBuffer":
        """Return a new buffer with each factor x factor block averaged.

        An output pixel is ambiguous if any sample in its block was.

        Raises:
            InvalidConfigurationError: If factor does not divide both dimensions.
        """
        if factor < 1 or self._width % factor != 0 or self._height % factor != 0:
            raise InvalidConfigurationError(
                f"Cannot downsample {self._width}x{self._height} by {factor}"
            )
        if factor == 1:
            return self
        small = ImageBuffer(self._width // factor, self._height // factor)
        _downsample(self._colors, self._ambiguous, small._colors, small._ambiguous, factor)
        return small

    def max_color_value(self) -> float:
        """Largest color channel in the image, or 1.0 if the image is black.

        Raises:
            NegativeColorError: If any channel of any pixel is negative.
        """
        negative_count = _count_negative(self._colors)
        if negative_count > 0:
            raise NegativeColorError(f"{negative_count} negative color channels in image")
        max_value = float(_max_channel(self._colors))
        return max_value if max_value > 0.0 else 1.0

    # =========================================================================
    # Export
    # =========================================================================

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """Colors as a (height, width, 3) float64 array."""
        return np.transpose(self._colors.to_numpy(), (1, 0, 2)).astype(np.float64)

    def ambiguous_mask(self) -> npt.NDArray[np.bool_]:
        """Ambiguity flags as a (height, width) boolean array."""
        return self._ambiguous.to_numpy().T.astype(bool)

    def to_uint8(self) -> npt.NDArray[np.uint8]:
        """Normalized 8-bit image of shape (height, width, 3).

        Each channel becomes int(255 * value / max_color_value()), clamped
        to 0..255. The maximum is taken over this buffer, so an anti-aliased
        render is normalized by its brightest averaged pixel rather than by
        its brightest sample.
        """
        max_value = self.max_color_value()
        out = np.zeros((self._height, self._width, 3), dtype=np.uint8)
        _convert_to_uint8(self._colors, max_value, out)
        return out

    def __repr__(self) -> str:
        return f"ImageBuffer({self._width}x{self._height})"
