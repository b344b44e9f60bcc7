from .canvas import RGBA, blend_mask, fill, mark_hline, mark_vline, new_canvas, new_mask
from .stroke import clip_segment, stroke_path

__all__ = [
    "RGBA",
    "blend_mask",
    "clip_segment",
    "fill",
    "mark_hline",
    "mark_vline",
    "new_canvas",
    "new_mask",
    "stroke_path",
]
