"""
Map loosely typed feed DTOs onto the immutable domain records.
"""

import logging
from datetime import time
from typing import List, Optional

from .domain import ChallengeData, Deal, Restaurant
from .schemas import ChallengeDataDTO, DealDTO, RestaurantDTO
from .util.time_utils import parse_clock
from .windows import Window


logger = logging.getLogger(__name__)


class MalformedFeedValue(ValueError):
    """A feed record is missing its id or carries an unusable scalar."""


def to_challenge_data(dto: Optional[ChallengeDataDTO]) -> ChallengeData:
    """Convert the whole feed document; a missing restaurant list is empty."""
    if dto is None or dto.restaurants is None:
        return ChallengeData()
    return ChallengeData(restaurants=tuple(to_restaurants(dto.restaurants)))


def to_restaurants(dtos: List[RestaurantDTO]) -> List[Restaurant]:
    return [to_restaurant(dto) for dto in dtos]


def to_restaurant(dto: RestaurantDTO) -> Restaurant:
    """Convert one restaurant and its deals."""
    if not dto.object_id or not dto.object_id.strip():
        raise MalformedFeedValue(f"Restaurant '{dto.name}' has no objectId")

    open_time = parse_clock(dto.open_raw)
    close_time = parse_clock(dto.close_raw)

    hours = None
    if open_time is not None or close_time is not None:
        hours = Window(open_time, close_time)  # one-sided hours raise here
    else:
        logger.debug(f"Restaurant {dto.object_id} has no opening hours")

    deals = tuple(to_deal(d, open_time, close_time) for d in (dto.deals or []))

    return Restaurant(
        object_id=dto.object_id,
        name=dto.name,
        address1=dto.address1,
        image_link=dto.image_link,
        suburb=dto.suburb,
        cuisines=tuple(dto.cuisines or ()),
        hours=hours,
        deals=deals,
    )


def to_deal(dto: DealDTO, restaurant_open: Optional[time], restaurant_close: Optional[time]) -> Deal:
    """
    Convert one deal.

    The window falls back from the deal's start/end to its open/close and
    then to the restaurant's hours. Nothing resolved means always available.
    """
    start = _resolve_time(dto.start_raw, dto.open_raw, restaurant_open)
    end = _resolve_time(dto.end_raw, dto.close_raw, restaurant_close)

    return Deal(
        object_id=dto.object_id,
        discount=_safe_int(dto.discount),
        dine_in=_safe_bool(dto.dine_in),
        lightning=_safe_bool(dto.lightning),
        qty_left=_safe_int(dto.qty_left),
        availability=Window(start, end),
    )


def _resolve_time(primary_raw: Optional[str], secondary_raw: Optional[str],
                  fallback: Optional[time]) -> Optional[time]:
    t = parse_clock(primary_raw)
    if t is not None:
        return t
    t = parse_clock(secondary_raw)
    if t is not None:
        return t
    return fallback


def _safe_int(s: Optional[str]) -> int:
    if s is None or not s.strip():
        return 0
    try:
        return int(s.strip())
    except ValueError:
        raise MalformedFeedValue(f"Expected a whole number, got '{s}'")


def _safe_bool(s: Optional[str]) -> bool:
    return s is not None and s.strip().lower() == "true"
