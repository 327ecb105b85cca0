from .canvas import draw_hline, draw_vline, new_canvas
from .draw_lines import draw_polyline, draw_segment
from .draw_markers import draw_circles
from .draw_text import draw_text, text_size
from .surface import DirtyState, PillowTextMeasurer, RasterSurface

__all__ = [
    "DirtyState",
    "PillowTextMeasurer",
    "RasterSurface",
    "draw_circles",
    "draw_hline",
    "draw_polyline",
    "draw_segment",
    "draw_text",
    "draw_vline",
    "new_canvas",
    "text_size",
]
