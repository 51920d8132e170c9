"""Stable category to palette-slot assignment for chart rendering."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

import pandas as pd

from .config import get_config_value
from .models import TransactionKind
from .snapshot import as_frame, canonical_order

DEFAULT_PALETTE = ('#4F46E5', '#22C55E', '#EC4899', '#F59E0B', '#6366F1', '#14B8A6')


def get_palette() -> Sequence[str]:
    palette = get_config_value('palette', default=None)
    return tuple(palette) if palette else DEFAULT_PALETTE


def assign_category_slots(
    source,
    palette_size: Optional[int] = None,
    *,
    kind: Optional[TransactionKind] = None,
) -> Dict[str, int]:
    """Map categories to palette slots in first-seen, date-descending order.

    Slots wrap around (``index % palette_size``) once there are more
    categories than palette entries.
    """
    size = len(get_palette()) if palette_size is None else palette_size
    if size < 1:
        raise ValueError("palette_size must be at least 1")

    frame = canonical_order(as_frame(source))
    if kind is not None:
        frame = frame[frame['Kind'] == TransactionKind(kind).value]
    return {
        str(category): index % size
        for index, category in enumerate(pd.unique(frame['Category']))
    }


def category_colors(
    source,
    palette: Optional[Sequence[str]] = None,
    *,
    kind: Optional[TransactionKind] = None,
) -> Dict[str, str]:
    """Resolve :func:`assign_category_slots` against a concrete palette."""
    palette = tuple(palette) if palette else tuple(get_palette())
    slots = assign_category_slots(source, len(palette), kind=kind)
    return {category: palette[slot] for category, slot in slots.items()}
