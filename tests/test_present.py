from __future__ import annotations

import unittest

import numpy as np
import torch

from graphel.present import FrameMatrix, WriteBatch, compile_full_rewrite_batch
from graphel.raster import new_canvas


class FrameMatrixTests(unittest.TestCase):
    def test_init_fills_background(self) -> None:
        matrix = FrameMatrix(height=2, width=3, background=(9, 8, 7, 255))
        snap = matrix.read_snapshot()
        self.assertEqual(tuple(snap.shape), (2, 3, 4))
        self.assertEqual(snap.dtype, torch.uint8)
        self.assertEqual(snap[1, 2].tolist(), [9, 8, 7, 255])
        self.assertEqual(matrix.revision, 0)

    def test_rejects_negative_size(self) -> None:
        with self.assertRaises(ValueError):
            FrameMatrix(height=-1, width=2)

    def test_full_rewrite_resizes_and_bumps_revision(self) -> None:
        matrix = FrameMatrix()
        frame = new_canvas(5, 4, color=(1, 2, 3, 255))
        revision = matrix.submit_write_batch(compile_full_rewrite_batch(frame))
        self.assertEqual(revision, 1)
        self.assertEqual(matrix.shape, (4, 5))
        np.testing.assert_array_equal(matrix.read_snapshot().numpy(), frame)
        self.assertEqual(matrix.submit_write_batch(compile_full_rewrite_batch(new_canvas(2, 2))), 2)
        self.assertEqual(matrix.shape, (2, 2))

    def test_snapshot_is_independent_of_matrix(self) -> None:
        matrix = FrameMatrix(height=1, width=1, background=(0, 0, 0, 255))
        snap = matrix.read_snapshot()
        snap[0, 0, 0] = 99
        self.assertEqual(matrix.read_snapshot()[0, 0].tolist(), [0, 0, 0, 255])

    def test_rejects_malformed_frames(self) -> None:
        matrix = FrameMatrix(height=1, width=1)
        with self.assertRaises(ValueError):
            matrix.submit_write_batch(WriteBatch(torch.zeros((1, 1, 4), dtype=torch.int32)))
        with self.assertRaises(ValueError):
            matrix.submit_write_batch(WriteBatch(torch.zeros((1, 4), dtype=torch.uint8)))
        with self.assertRaises(TypeError):
            matrix.submit_write_batch(WriteBatch(np.zeros((1, 1, 4), dtype=np.uint8)))  # type: ignore[arg-type]
        self.assertEqual(matrix.revision, 0)


class WriteBatchCompileTests(unittest.TestCase):
    def test_full_rewrite_requires_uint8_rgba(self) -> None:
        with self.assertRaises(ValueError):
            compile_full_rewrite_batch(np.zeros((2, 2, 4), dtype=np.float32))
        with self.assertRaises(ValueError):
            compile_full_rewrite_batch(np.zeros((2, 2, 3), dtype=np.uint8))

    def test_batch_owns_its_pixels(self) -> None:
        frame = new_canvas(3, 2, color=(10, 20, 30, 255))
        batch = compile_full_rewrite_batch(frame)
        frame[:] = 0
        self.assertEqual(batch.frame_h_w_4[1, 2].tolist(), [10, 20, 30, 255])
        self.assertEqual(batch.shape, (2, 3))

    def test_non_contiguous_frame_is_accepted(self) -> None:
        frame = new_canvas(4, 4, color=(1, 1, 1, 255))[:, ::2]
        batch = compile_full_rewrite_batch(frame)
        self.assertEqual(batch.shape, (4, 2))


if __name__ == "__main__":
    unittest.main()
