from __future__ import annotations

from dataclasses import dataclass
import logging
import threading

import numpy as np
import torch


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteBatch:
    """One finished surface handed to a display.

    ``frame_h_w_4`` is a ``torch.uint8`` tensor the batch owns outright, so a
    sink may hold on to it across later redraws.
    """

    frame_h_w_4: torch.Tensor

    @property
    def shape(self) -> tuple[int, int]:
        return (int(self.frame_h_w_4.shape[0]), int(self.frame_h_w_4.shape[1]))


def compile_full_rewrite_batch(frame_rgba: np.ndarray) -> WriteBatch:
    if frame_rgba.dtype != np.uint8:
        raise ValueError("frame_rgba must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("frame_rgba must have shape (H, W, 4)")
    # The surface buffer is cleared and redrawn in place; detach from it.
    return WriteBatch(torch.from_numpy(np.array(frame_rgba, copy=True, order="C")))


class FrameMatrix:
    """Latest presented frame, readable from another thread.

    Each submitted batch replaces the whole frame, resizing the matrix when
    the surface changed size, and bumps :attr:`revision`.
    """

    def __init__(self, height: int = 0, width: int = 0, background: tuple[int, int, int, int] = (0, 0, 0, 255)) -> None:
        if height < 0 or width < 0:
            raise ValueError("height and width must be >= 0")
        self._lock = threading.Lock()
        self._revision = 0
        fill = torch.tensor(background, dtype=torch.uint8).view(1, 1, 4)
        self._frame = fill.expand(height, width, 4).clone()

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def shape(self) -> tuple[int, int]:
        with self._lock:
            return (int(self._frame.shape[0]), int(self._frame.shape[1]))

    def read_snapshot(self) -> torch.Tensor:
        with self._lock:
            return self._frame.clone()

    def submit_write_batch(self, batch: WriteBatch) -> int:
        frame = batch.frame_h_w_4
        if not torch.is_tensor(frame):
            raise TypeError(f"frame must be a torch.Tensor, got {type(frame)!r}")
        if frame.dtype != torch.uint8 or frame.ndim != 3 or frame.shape[2] != 4:
            raise ValueError(f"frame must be uint8 (H, W, 4), got {frame.dtype} {tuple(frame.shape)}")
        with self._lock:
            if tuple(frame.shape[:2]) != tuple(self._frame.shape[:2]):
                LOGGER.debug("frame matrix resized to %dx%d", frame.shape[1], frame.shape[0])
            self._frame = frame.clone()
            self._revision += 1
            return self._revision
