"""Label to display color resolution."""

from __future__ import annotations

import hashlib
from typing import Dict, List, Optional

from .models import UNLABELED, Dataset

# Reserved colors for well-known labels
LABEL_COLORS: Dict[str, str] = {
    "road signs": "#8B5CF6",
    "traffic signs": "#0EA5E9",
    "driving signs": "#F97316",
    UNLABELED: "#8E9196",
}

PALETTE: List[str] = list(LABEL_COLORS.values())


def resolve_color(label: str) -> str:
    """
    Get the display color for a label.

    Known labels map to their reserved color. Any other label is hashed
    into the palette, so a given label keeps the same color across calls
    and across runs.

    Args:
        label: Label text

    Returns:
        Color as a ``#RRGGBB`` string
    """
    color = LABEL_COLORS.get(label)
    if color is not None:
        return color

    digest = hashlib.md5(label.encode("utf-8")).digest()
    return PALETTE[int.from_bytes(digest[:4], "big") % len(PALETTE)]


def list_known_labels(dataset: Optional[Dataset] = None) -> List[str]:
    """
    Get label suggestions for the label editor.

    Args:
        dataset: Optional dataset whose labels extend the reserved ones

    Returns:
        Reserved labels followed by any other labels used in the dataset
    """
    labels = list(LABEL_COLORS)
    if dataset is not None:
        labels.extend(label for label in dataset.labels() if label not in LABEL_COLORS)
    return labels
