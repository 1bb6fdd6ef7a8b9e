"""
Multidimensional sample sources.

Wraps a NumPy array (or ``np.memmap``) together with its axis names and the
identity of the channel axis, and exposes chunked traversal so that the
histogram passes never copy more than one slab of the image at a time.
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import InvalidChannelAxisError

# Axis names recognised as the channel axis when none is given explicitly.
CHANNEL_AXIS_NAMES = ("c", "ch", "channel", "channels")

_DEFAULT_AXIS_NAMES = ("x", "y", "z", "t")

AxisSpec = Union[int, str, None]


def default_axes(ndim: int) -> Tuple[str, ...]:
    """Spatial axis names for an array without explicit labels."""
    if ndim <= len(_DEFAULT_AXIS_NAMES):
        return _DEFAULT_AXIS_NAMES[:ndim]
    return tuple(f"dim{i}" for i in range(ndim))


def resolve_channel_axis(
    channel_axis: AxisSpec,
    axes: Sequence[str],
    shape: Sequence[int],
) -> Optional[int]:
    """Turn an axis index or name into a validated channel-axis index.

    When *channel_axis* is ``None`` an axis whose name is one of
    ``CHANNEL_AXIS_NAMES`` is used, if present.

    Raises
    ------
    InvalidChannelAxisError
        Unknown name, index out of range, or a channel axis of length 0.
    """
    ndim = len(shape)

    if channel_axis is None:
        lowered = [a.lower() for a in axes]
        matches = [i for i, a in enumerate(lowered) if a in CHANNEL_AXIS_NAMES]
        if not matches:
            return None
        if len(matches) > 1:
            raise InvalidChannelAxisError(
                f"Ambiguous channel axis: {[axes[i] for i in matches]}"
            )
        index = matches[0]
    elif isinstance(channel_axis, str):
        if channel_axis not in axes:
            raise InvalidChannelAxisError(
                f"Unknown channel axis {channel_axis!r}; axes are {tuple(axes)}"
            )
        index = list(axes).index(channel_axis)
    else:
        index = int(channel_axis)
        if not -ndim <= index < ndim:
            raise InvalidChannelAxisError(
                f"Channel axis {index} out of range for {ndim}-D data"
            )
        index %= ndim

    if shape[index] == 0:
        raise InvalidChannelAxisError(
            f"Channel axis {axes[index]!r} has length 0"
        )
    return index


class ArraySource:
    """A read-only N-D sample array with named axes and an optional channel axis.

    Parameters
    ----------
    data : array-like
        Real-valued samples. ``np.memmap`` inputs stay memory-mapped.
    axes : sequence of str, optional
        One name per dimension (defaults to ``x, y, z, t``).
    channel_axis : int or str, optional
        Index or name of the channel axis.
    is_integer : bool, optional
        Whether samples are integer-valued. Inferred from the dtype if omitted.
    """

    def __init__(
        self,
        data,
        axes: Optional[Sequence[str]] = None,
        channel_axis: AxisSpec = None,
        is_integer: Optional[bool] = None,
    ):
        arr = np.asanyarray(data)
        if arr.ndim == 0:
            arr = arr.reshape(1)
        if arr.dtype.kind not in "biuf":
            raise ValueError(f"Expected real-valued samples, got dtype {arr.dtype}")

        if axes is None:
            axes = default_axes(arr.ndim)
        axes = tuple(str(a) for a in axes)
        if len(axes) != arr.ndim:
            raise ValueError(
                f"Got {len(axes)} axis names for {arr.ndim}-D data"
            )
        if len(set(axes)) != len(axes):
            raise ValueError(f"Duplicate axis names: {axes}")

        self.data = arr
        self.axes = axes
        self.channel_axis = resolve_channel_axis(channel_axis, axes, arr.shape)
        if is_integer is None:
            is_integer = arr.dtype.kind in "biu"
        self.is_integer = bool(is_integer)

    # -- geometry --

    @property
    def shape(self) -> Tuple[int, ...]:
        return tuple(self.data.shape)

    @property
    def ndim(self) -> int:
        return self.data.ndim

    @property
    def size(self) -> int:
        return int(self.data.size)

    @property
    def channel_count(self) -> int:
        if self.channel_axis is None:
            return 1
        return int(self.data.shape[self.channel_axis])

    @property
    def spatial_shape(self) -> Tuple[int, ...]:
        """Shape of the coordinate space with the channel axis collapsed to 1."""
        span = list(self.data.shape)
        if self.channel_axis is not None:
            span[self.channel_axis] = 1
        return tuple(span)

    @property
    def n_spatial_positions(self) -> int:
        return int(np.prod(self.spatial_shape, dtype=np.int64))

    @property
    def chunk_axis(self) -> Optional[int]:
        """Longest spatial axis (first on ties); chunks are slabs along it.

        Slicing the longest axis keeps each slab small even when leading
        axes are singletons, e.g. ``(1, Y, X)`` or ``(C, 1, Y, X)``.
        """
        spatial = [i for i in range(self.ndim) if i != self.channel_axis]
        if not spatial:
            return None
        return max(spatial, key=lambda i: self.shape[i])

    # -- traversal --

    def iter_chunks(self, chunk_size: int = 64) -> Iterator[np.ndarray]:
        """Yield views of the data sliced along ``chunk_axis``.

        Every chunk keeps the full channel axis, so both per-channel and
        composite passes can work on it independently.
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
        axis = self.chunk_axis
        if axis is None:
            yield self.data
            return
        index = [slice(None)] * self.ndim
        for start in range(0, self.data.shape[axis], chunk_size):
            index[axis] = slice(start, start + chunk_size)
            yield self.data[tuple(index)]

    def channel_rows(self, chunk: np.ndarray) -> np.ndarray:
        """Reshape a chunk to ``(channel_count, n)`` float64 rows."""
        if self.channel_axis is None:
            rows = chunk.reshape(1, -1)
        else:
            rows = np.moveaxis(chunk, self.channel_axis, 0).reshape(
                self.channel_count, -1
            )
        return rows.astype(np.float64, copy=False)

    def composite_values(self, chunk: np.ndarray) -> np.ndarray:
        """Channel-averaged value at every spatial position of a chunk."""
        if self.channel_axis is None:
            return chunk.astype(np.float64, copy=False).ravel()
        total = np.sum(chunk, axis=self.channel_axis, dtype=np.float64)
        return (total / self.channel_count).ravel()

    def __repr__(self) -> str:
        return (
            f"ArraySource(shape={self.shape}, axes={self.axes}, "
            f"channel_axis={self.channel_axis}, is_integer={self.is_integer})"
        )
