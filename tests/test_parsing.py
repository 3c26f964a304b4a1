import unittest
from datetime import datetime

from engine.parsing import (
    end_of_day,
    epoch_millis,
    is_same_calendar_day,
    parse_explicit_date,
    parse_explicit_time,
    parse_record_date,
    parse_record_time,
    start_of_day,
)


class RecordDateParsingTests(unittest.TestCase):
    def test_first_component_above_twelve_is_read_day_first(self) -> None:
        self.assertEqual(parse_record_date("13/01/2024"), datetime(2024, 1, 13))

    def test_second_component_above_twelve_is_read_month_first(self) -> None:
        self.assertEqual(parse_record_date("01/13/2024"), datetime(2024, 1, 13))

    def test_ambiguous_value_defaults_to_month_first(self) -> None:
        self.assertEqual(parse_record_date("02/03/2024"), datetime(2024, 2, 3))
        self.assertEqual(parse_record_date("05/04/2024"), datetime(2024, 5, 4))

    def test_dash_separator(self) -> None:
        self.assertEqual(parse_record_date("09-30-2026"), datetime(2026, 9, 30))
        self.assertEqual(parse_record_date("19-10-2026"), datetime(2026, 10, 19))

    def test_rejects_malformed_values(self) -> None:
        for value in (None, "", "garbage", "01/02", "01/02/2024/05", "aa/02/2024", "01//2024"):
            with self.subTest(value=value):
                self.assertIsNone(parse_record_date(value))

    def test_overflowing_days_and_months_roll_forward(self) -> None:
        self.assertEqual(parse_record_date("02/30/2024"), datetime(2024, 3, 1))
        self.assertEqual(parse_record_date("13/13/2024"), datetime(2025, 1, 13))
        self.assertEqual(parse_record_date("03/00/2024"), datetime(2024, 2, 29))

    def test_two_digit_years_fall_in_the_twentieth_century(self) -> None:
        self.assertEqual(parse_record_date("01/02/24"), datetime(1924, 1, 2))
        self.assertEqual(parse_record_date("01/02/2024"), datetime(2024, 1, 2))

    def test_out_of_range_years_are_unparseable(self) -> None:
        self.assertIsNone(parse_record_date("01/02/99999"))
        self.assertIsNone(parse_record_date("01/99999999999/2024"))


class ExplicitDateParsingTests(unittest.TestCase):
    def test_iso_date(self) -> None:
        self.assertEqual(parse_explicit_date("2024-03-09"), datetime(2024, 3, 9))

    def test_invalid_iso_date(self) -> None:
        for value in (None, "", "2024-03", "2024/03/09", "2024-xx-09"):
            with self.subTest(value=value):
                self.assertIsNone(parse_explicit_date(value))

    def test_overflowing_iso_date_rolls_forward(self) -> None:
        self.assertEqual(parse_explicit_date("2024-02-31"), datetime(2024, 3, 2))
        self.assertEqual(parse_explicit_date("2024-13-45"), datetime(2025, 2, 14))


class RecordTimeParsingTests(unittest.TestCase):
    def test_morning_time(self) -> None:
        self.assertEqual(parse_record_time("9:05 AM"), 545)

    def test_noon_and_midnight(self) -> None:
        self.assertEqual(parse_record_time("12:00 PM"), 720)
        self.assertEqual(parse_record_time("12:30 AM"), 30)

    def test_afternoon_time_is_shifted(self) -> None:
        self.assertEqual(parse_record_time("2:15 pm"), 855)

    def test_time_embedded_in_text(self) -> None:
        self.assertEqual(parse_record_time("Arrive by 10:45AM please"), 645)

    def test_unparseable_time(self) -> None:
        for value in (None, "", "garbage", "14:00", "9 AM"):
            with self.subTest(value=value):
                self.assertIsNone(parse_record_time(value))


class ExplicitTimeParsingTests(unittest.TestCase):
    def test_twenty_four_hour_clock(self) -> None:
        self.assertEqual(parse_explicit_time("00:00"), 0)
        self.assertEqual(parse_explicit_time("13:45"), 825)

    def test_invalid_clock_values(self) -> None:
        for value in (None, "", "1345", "24:00", "12:60", "ab:cd", "10:30:00"):
            with self.subTest(value=value):
                self.assertIsNone(parse_explicit_time(value))


class DayBoundaryTests(unittest.TestCase):
    def test_start_and_end_of_day(self) -> None:
        moment = datetime(2024, 6, 1, 15, 42, 7, 123456)

        self.assertEqual(start_of_day(moment), datetime(2024, 6, 1))
        self.assertEqual(end_of_day(moment), datetime(2024, 6, 1, 23, 59, 59, 999000))

    def test_same_calendar_day_ignores_time(self) -> None:
        self.assertTrue(is_same_calendar_day(datetime(2024, 6, 1, 0, 0), datetime(2024, 6, 1, 23, 59)))
        self.assertFalse(is_same_calendar_day(datetime(2024, 6, 1, 23, 59), datetime(2024, 6, 2, 0, 0)))

    def test_epoch_millis(self) -> None:
        self.assertEqual(epoch_millis(None), 0)
        self.assertEqual(epoch_millis(datetime(1970, 1, 2)), 86_400_000)


if __name__ == "__main__":
    unittest.main()
