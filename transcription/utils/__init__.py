from .debug_overlay import draw_keep_area, save_debug_layouts

__all__ = ["draw_keep_area", "save_debug_layouts"]
