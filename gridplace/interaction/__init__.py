"""Interaction state machine: sessions, snapping, smoothing, tickers and border drags."""

from .borders import (
    BorderHandle,
    BorderOrientation,
    compute_border_handles,
    drag_border,
    find_handle,
)
from .session import InteractionSession, InteractionState, ResizeDirection, resize_rect
from .smoothing import SmoothedRect, SnapAxis, nearest_cell, smooth_step
from .ticker import AsyncioTicker, ManualTicker, Ticker

__all__ = [
    "BorderHandle",
    "BorderOrientation",
    "compute_border_handles",
    "drag_border",
    "find_handle",
    "InteractionSession",
    "InteractionState",
    "ResizeDirection",
    "resize_rect",
    "SmoothedRect",
    "SnapAxis",
    "nearest_cell",
    "smooth_step",
    "AsyncioTicker",
    "ManualTicker",
    "Ticker",
]
