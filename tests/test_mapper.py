"""
Tests for mapping feed documents onto domain records.
"""

import json
import pytest
from datetime import time
from pathlib import Path

from restaurant_deals.mapper import MalformedFeedValue, to_challenge_data, to_restaurant
from restaurant_deals.schemas import ChallengeDataDTO, RestaurantDTO
from restaurant_deals.util.time_utils import InvalidTimeFormat
from restaurant_deals.windows import Window, MalformedWindowError


DATA_FILE = Path(__file__).parent / "data" / "challengedata.json"


def load_sample():
    raw = json.loads(DATA_FILE.read_text())
    return to_challenge_data(ChallengeDataDTO.model_validate(raw))


def find(name, data):
    return next(r for r in data.restaurants if r.name == name)


def restaurant_dto(**overrides):
    payload = {
        "objectId": "RX",
        "name": "Example",
        "address1": "123",
        "suburb": "Melbourne",
        "open": "4:00pm",
        "close": "10:00pm",
        "cuisines": [],
        "deals": [],
    }
    payload.update(overrides)
    return RestaurantDTO.model_validate(payload)


def test_sample_file_parses():
    data = load_sample()
    assert [r.name for r in data.restaurants] == [
        "Masala Kitchen", "Kekou", "ABC Chicken", "Late Night Noodles"
    ]
    assert data.deal_count == 5


def test_restaurant_fields():
    r = find("Masala Kitchen", load_sample())
    assert r.object_id == "DEA567C5-F64C-3C03-FF00-E3B24909BE00"
    assert r.address1 == "55 Walsh Street"
    assert r.suburb == "Lower East"
    assert r.cuisines == ("Indian", "Koto", "Vegetarian")
    assert r.image_link.endswith("masala.jpg")
    assert r.hours == Window(time(15, 0), time(21, 0))


def test_deal_scalars_are_converted():
    d = find("Masala Kitchen", load_sample()).deals[0]
    assert d.discount == 50
    assert d.dine_in is False
    assert d.lightning is True
    assert d.qty_left == 5


def test_deal_explicit_start_end():
    d = find("Kekou", load_sample()).deals[0]
    assert d.availability == Window(time(14, 0), time(21, 0))


def test_deal_falls_back_to_restaurant_hours():
    r = find("ABC Chicken", load_sample())
    assert r.deals[0].availability == r.hours


def test_deal_open_close_fallback():
    d = find("Masala Kitchen", load_sample()).deals[1]
    assert d.availability == Window(time(17, 0), time(19, 0))


def test_start_takes_precedence_over_open():
    r = to_restaurant(restaurant_dto(deals=[{
        "objectId": "D1", "start": "5:00pm", "open": "6:00pm", "close": "8:00pm"
    }]))
    assert r.deals[0].availability == Window(time(17, 0), time(20, 0))


def test_wrap_around_hours_are_kept():
    r = find("Late Night Noodles", load_sample())
    assert r.hours.wraps
    assert r.deals[0].availability == Window(time(21, 0), time(1, 0))


def test_missing_restaurant_hours():
    r = to_restaurant(restaurant_dto(open=None, close=None, deals=[{"objectId": "D1"}]))
    assert r.hours is None
    assert r.deals[0].availability.always_open


def test_one_sided_restaurant_hours_rejected():
    with pytest.raises(MalformedWindowError):
        to_restaurant(restaurant_dto(close=""))


def test_bad_time_string_rejected():
    with pytest.raises(InvalidTimeFormat):
        to_restaurant(restaurant_dto(open="sixish"))


def test_blank_and_missing_scalars_default():
    r = to_restaurant(restaurant_dto(deals=[{
        "objectId": "D1", "discount": "", "dineIn": None, "qtyLeft": " "
    }]))
    d = r.deals[0]
    assert d.discount == 0
    assert d.qty_left == 0
    assert d.dine_in is False
    assert d.lightning is False


def test_typed_scalars_accepted():
    r = to_restaurant(restaurant_dto(deals=[{
        "objectId": "D1", "discount": 15, "dineIn": True, "lightning": "TRUE", "qtyLeft": 2
    }]))
    d = r.deals[0]
    assert d.discount == 15
    assert d.dine_in is True
    assert d.lightning is True
    assert d.qty_left == 2


def test_unknown_keys_and_missing_lists():
    dto = ChallengeDataDTO.model_validate({
        "restaurants": [{"objectId": "R1", "open": "9:00am", "close": "5:00pm", "rating": 4.5}]
    })
    data = to_challenge_data(dto)
    assert data.restaurants[0].deals == ()
    assert data.restaurants[0].cuisines == ()


def test_missing_restaurant_list_is_empty():
    assert to_challenge_data(ChallengeDataDTO()).restaurants == ()
    assert to_challenge_data(None).restaurants == ()


def test_non_numeric_scalar_rejected():
    with pytest.raises(MalformedFeedValue):
        to_restaurant(restaurant_dto(deals=[{"objectId": "D1", "discount": "50%"}]))
    with pytest.raises(ValueError):
        to_restaurant(restaurant_dto(deals=[{"objectId": "D1", "qtyLeft": "lots"}]))


def test_restaurant_without_object_id_rejected():
    with pytest.raises(MalformedFeedValue):
        to_restaurant(restaurant_dto(objectId=None))
    with pytest.raises(MalformedFeedValue):
        to_restaurant(restaurant_dto(objectId="  "))
