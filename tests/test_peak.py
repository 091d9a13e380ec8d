"""
Unit tests for the peak overlap sweep.
"""
import unittest
from datetime import time

from restaurant_deals.domain import Deal, Restaurant
from restaurant_deals.peak import (
    PeakResult, TimeEvent, build_events, peak, peak_deal_time
)
from restaurant_deals.windows import Window, DAY_START, END_OF_DAY


def w(start_hour, end_hour):
    return Window(time(start_hour, 0), time(end_hour, 0))


class TestPeakScenarios(unittest.TestCase):
    """Known overlap scenarios."""

    def test_simple_overlap(self):
        # 10-14, 12-18, 13-15 -> three deals between 13 and 14
        result = peak([w(10, 14), w(12, 18), w(13, 15)])
        self.assertEqual(result, PeakResult(time(13, 0), time(14, 0), 3))

    def test_wrap_around_midnight(self):
        # 20:00 -> 02:00 and 21:00 -> 23:00
        result = peak([w(20, 2), w(21, 23)])
        self.assertEqual(result, PeakResult(time(21, 0), time(23, 0), 2))

    def test_always_open_window(self):
        result = peak([Window.always(), w(10, 12)])
        self.assertEqual(result, PeakResult(time(10, 0), time(12, 0), 2))

    def test_exclusive_end_time(self):
        # First window ends at 15:00 exclusive, second starts at 15:00
        result = peak([w(10, 15), w(15, 16)])
        self.assertEqual(result, PeakResult(time(15, 0), time(16, 0), 1))

    def test_empty_input(self):
        result = peak([])
        self.assertEqual(result.count, 0)
        self.assertIsNone(result.start)
        self.assertIsNone(result.end)

    def test_single_window(self):
        result = peak([w(9, 17)])
        self.assertEqual(result, PeakResult(time(9, 0), time(17, 0), 1))

    def test_duplicates_count_separately(self):
        result = peak([w(9, 11), w(9, 11), w(9, 11)])
        self.assertEqual(result.count, 3)

    def test_single_wrap_window_reports_evening_slice(self):
        # Morning piece [00:00, 02:00) is seen first, evening piece last
        result = peak([w(22, 2)])
        self.assertEqual(result, PeakResult(time(22, 0), END_OF_DAY, 1))

    def test_only_always_open(self):
        result = peak([Window.always()])
        self.assertEqual(result, PeakResult(DAY_START, END_OF_DAY, 1))


class TestPeakTieBehaviour(unittest.TestCase):
    """The witness is the last slice reaching the maximum, not the widest."""

    def test_later_equal_plateau_wins(self):
        result = peak([w(8, 9), w(8, 9), w(18, 19), w(18, 19)])
        self.assertEqual(result, PeakResult(time(18, 0), time(19, 0), 2))

    def test_coincident_events_narrow_the_witness(self):
        # Two deals overlap over the whole of 11:00-14:00, but 10-12 closes
        # and 12-14 opens at 12:00, so only the later slice is reported.
        result = peak([w(10, 12), w(11, 14), w(12, 14)])
        self.assertEqual(result.count, 2)
        self.assertEqual(result.start, time(12, 0))
        self.assertEqual(result.end, time(14, 0))

    def test_zero_length_window_is_reported_as_degenerate_slice(self):
        # Stable sort keeps (12,+1) before (12,-1): count 1 touched at 12:00
        result = peak([w(12, 12)])
        self.assertEqual(result, PeakResult(time(12, 0), time(12, 0), 1))


class TestPeakProperties(unittest.TestCase):

    def setUp(self):
        self.windows = [w(6, 9), w(7, 11), w(20, 3), Window.always(), w(10, 16), w(15, 22)]

    def test_rerun_is_identical(self):
        self.assertEqual(peak(self.windows), peak(list(self.windows)))

    def test_accepts_generators(self):
        self.assertEqual(peak(iter(self.windows)), peak(self.windows))

    def test_permutation_without_coincident_instants_is_stable(self):
        windows = [
            Window(time(6, 5), time(9, 10)),
            Window(time(7, 15), time(11, 20)),
            Window(time(20, 25), time(3, 30)),
            Window(time(10, 35), time(16, 40)),
        ]
        expected = peak(windows)
        for rotated in (windows[1:] + windows[:1], list(reversed(windows)), windows[2:] + windows[:2]):
            self.assertEqual(peak(rotated), expected)

    def test_permutation_with_coincident_instants_keeps_count(self):
        expected = peak(self.windows).count
        self.assertEqual(peak(list(reversed(self.windows))).count, expected)
        self.assertEqual(peak(self.windows[3:] + self.windows[:3]).count, expected)


class TestEvents(unittest.TestCase):

    def test_normal_window_events(self):
        self.assertEqual(
            build_events([w(10, 14)]),
            [TimeEvent(time(10, 0), 1), TimeEvent(time(14, 0), -1)]
        )

    def test_wrap_window_is_split_at_midnight(self):
        self.assertEqual(
            build_events([w(20, 2)]),
            [
                TimeEvent(time(20, 0), 1),
                TimeEvent(END_OF_DAY, -1),
                TimeEvent(DAY_START, 1),
                TimeEvent(time(2, 0), -1),
            ]
        )

    def test_always_open_pinned_to_day_bounds(self):
        self.assertEqual(
            build_events([Window.always()]),
            [TimeEvent(DAY_START, 1), TimeEvent(END_OF_DAY, -1)]
        )


class TestPeakDealTime(unittest.TestCase):

    def test_flattens_deals_across_restaurants_ignoring_hours(self):
        closed_hours = Window(time(1, 0), time(2, 0))
        r1 = Restaurant(
            object_id="R1", hours=closed_hours,
            deals=(
                Deal("D1", availability=w(10, 14)),
                Deal("D2", availability=w(12, 18)),
            )
        )
        r2 = Restaurant(
            object_id="R2", hours=closed_hours,
            deals=(Deal("D3", availability=w(13, 15)),)
        )
        result = peak_deal_time([r1, r2])
        self.assertEqual(result, PeakResult(time(13, 0), time(14, 0), 3))

    def test_no_deals(self):
        result = peak_deal_time([Restaurant(object_id="R1", hours=w(9, 17))])
        self.assertEqual(result, PeakResult(None, None, 0))


if __name__ == '__main__':
    unittest.main()
