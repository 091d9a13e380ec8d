"""
Immutable domain records built per request from the feed (or the database).
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .windows import Window


@dataclass(frozen=True)
class Deal:
    """A single deal offered by a restaurant."""
    object_id: str
    discount: int = 0  # percentage, e.g. 20 for 20%
    dine_in: bool = False
    lightning: bool = False
    qty_left: int = 0
    availability: Window = field(default_factory=Window.always)


@dataclass(frozen=True)
class Restaurant:
    """A restaurant with its daily opening hours and deals."""
    object_id: str
    name: Optional[str] = None
    address1: Optional[str] = None
    image_link: Optional[str] = None
    suburb: Optional[str] = None
    cuisines: Tuple[str, ...] = ()
    hours: Optional[Window] = None  # None when the feed gave no open/close
    deals: Tuple[Deal, ...] = ()


@dataclass(frozen=True)
class ChallengeData:
    """Everything loaded for one query."""
    restaurants: Tuple[Restaurant, ...] = ()

    @property
    def deal_count(self) -> int:
        return sum(len(r.deals) for r in self.restaurants)
