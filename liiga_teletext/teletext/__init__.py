"""Teletext page model, layout and rendering."""

from .layout import DetailLevel, DisplayMode, LayoutConfig, compute_layout, compute_wide_layout
from .page import ErrorMessageRow, FutureGamesHeaderRow, GameResultRow, TeletextPage, build_page, subheader_for
from .renderer import Placement, render_frame, render_once, render_placements
from .resize import ResizeHandler, should_update_layout

__all__ = [
    "DetailLevel",
    "DisplayMode",
    "ErrorMessageRow",
    "FutureGamesHeaderRow",
    "GameResultRow",
    "LayoutConfig",
    "Placement",
    "ResizeHandler",
    "TeletextPage",
    "build_page",
    "compute_layout",
    "compute_wide_layout",
    "render_frame",
    "render_once",
    "render_placements",
    "should_update_layout",
    "subheader_for",
]
