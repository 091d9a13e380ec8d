"""
Active-deal lookup: which deals are live at a given clock time.
A deal counts only if its restaurant is open and its own window contains
the time.
"""

from datetime import time
from typing import Iterable, List, Tuple

from .domain import Deal, Restaurant
from .windows import MissingBusinessHoursError, contains


def is_restaurant_open(restaurant: Restaurant, t: time) -> bool:
    """Check the restaurant's opening hours; missing hours are an error."""
    if restaurant.hours is None:
        raise MissingBusinessHoursError(
            f"Restaurant '{restaurant.object_id}' has no opening hours"
        )
    return contains(restaurant.hours, t)


def is_deal_active(deal: Deal, t: time) -> bool:
    return contains(deal.availability, t)


def active_deals(restaurants: Iterable[Restaurant], t: time) -> List[Tuple[Restaurant, Deal]]:
    """(restaurant, deal) pairs live at t, in feed order."""
    matches = []
    for restaurant in restaurants:
        if not restaurant.deals:
            continue
        if not is_restaurant_open(restaurant, t):
            continue
        for deal in restaurant.deals:
            if is_deal_active(deal, t):
                matches.append((restaurant, deal))
    return matches
