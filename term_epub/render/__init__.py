from .fonts import FontAsset, find_font, font_search_dirs
from .templates import escape_xml, render_chapter

__all__ = [
    "FontAsset",
    "find_font",
    "font_search_dirs",
    "escape_xml",
    "render_chapter",
]
