from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (0, 0, 0, 0)) -> np.ndarray:
    canvas = np.zeros((max(0, height), max(0, width), 4), dtype=np.uint8)
    fill(canvas, color)
    return canvas


def fill(canvas: np.ndarray, color: RGBA) -> None:
    canvas[:, :, 0] = color[0]
    canvas[:, :, 1] = color[1]
    canvas[:, :, 2] = color[2]
    canvas[:, :, 3] = color[3]


def new_mask(canvas: np.ndarray) -> np.ndarray:
    return np.zeros(canvas.shape[:2], dtype=bool)


def blend_mask(dst: np.ndarray, mask: np.ndarray, color: RGBA) -> None:
    """Source-over composite ``color`` onto every pixel set in ``mask``."""
    if mask.shape != dst.shape[:2]:
        raise ValueError("mask shape must match canvas height/width")
    if not np.any(mask):
        return
    src_alpha = color[3] / 255.0
    if src_alpha <= 0.0:
        return

    patch = dst[mask]
    dst_rgb = patch[:, :3].astype(np.float32)
    dst_alpha = patch[:, 3].astype(np.float32) / 255.0
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 3)

    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha + dst_rgb * (dst_alpha * (1.0 - src_alpha))[:, None]
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    out_rgb = out_rgb_num / safe_alpha[:, None]

    patch[:, :3] = np.clip(np.rint(out_rgb), 0, 255).astype(np.uint8)
    patch[:, 3] = np.clip(np.rint(out_alpha * 255.0), 0, 255).astype(np.uint8)
    dst[mask] = patch


def mark_hline(mask: np.ndarray, y: float) -> None:
    row = _pixel_index(y)
    if row is None or row < 0 or row >= mask.shape[0]:
        return
    mask[row, :] = True


def mark_vline(mask: np.ndarray, x: float) -> None:
    col = _pixel_index(x)
    if col is None or col < 0 or col >= mask.shape[1]:
        return
    mask[:, col] = True


def _pixel_index(value: float) -> int | None:
    if not np.isfinite(value):
        return None
    return int(np.floor(value))
