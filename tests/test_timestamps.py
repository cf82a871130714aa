import os
import time
from unittest import TestCase, skipUnless

from aqi2frame.timestamps import check_date_format, parse_timestamp, resolve_timezone, to_epoch_seconds

# 2024-05-01 10:00:00 UTC
EPOCH_UTC = 1_714_557_600


class TestParseTimestamp(TestCase):
    def test_fields_and_epoch(self):
        ts = parse_timestamp("2024:05:01 10:00:00", tz="UTC")
        self.assertTrue(ts.valid)
        self.assertEqual(
            (ts.year, ts.month, ts.day, ts.hour, ts.minute, ts.second),
            (2024, 5, 1, 10, 0, 0),
        )
        self.assertEqual(ts.epoch, EPOCH_UTC)

    def test_pinned_zone_shifts_epoch(self):
        ts = parse_timestamp("2024:05:01 10:00:00", tz="Asia/Ho_Chi_Minh")
        self.assertEqual(ts.epoch, EPOCH_UTC - 7*3600)

    def test_rejects_out_of_range_and_malformed(self):
        for text in [
            "2024:13:01 00:00:00",
            "2024:00:01 00:00:00",
            "2024:05:00 10:00:00",
            "2024:05:32 10:00:00",
            "2024:05:01 24:00:00",
            "2024:05:01 10:60:00",
            "2024:05:01 10:00:60",
            "2024-05-01 10:00:00",
            "2024:05:01 10-00:00",
            "2024:5:01 10:00:00",
            "2024:05:01T10:00:00",
            "2024:05:01 10:00:00 ",
            "",
            "not a time",
        ]:
            with self.subTest(text=text):
                ts = parse_timestamp(text, tz="UTC")
                self.assertFalse(ts.valid)
                self.assertIsNone(ts.epoch)

    def test_day_is_not_checked_against_month_length(self):
        ts = parse_timestamp("2024:02:31 00:00:00", tz="UTC")
        self.assertTrue(ts.valid)
        # rolls over like mktime: Feb 31 2024 is Mar 2 2024
        self.assertEqual(ts.epoch, parse_timestamp("2024:03:02 00:00:00", tz="UTC").epoch)

    def test_epoch_wraps_to_int32(self):
        # 2040-01-01 UTC is 2208988800, past the signed 32-bit range
        ts = parse_timestamp("2040:01:01 00:00:00", tz="UTC")
        self.assertEqual(ts.epoch, 2_208_988_800 - 2**32)

    def test_year_zero_is_invalid_in_both_modes(self):
        self.assertFalse(parse_timestamp("0000:01:01 00:00:00", tz="UTC").valid)
        self.assertFalse(parse_timestamp("0000:01:01 00:00:00").valid)
        first = parse_timestamp("0001:01:01 00:00:00", tz="UTC")
        self.assertTrue(first.valid)
        # -62135596800 wrapped to int32
        self.assertEqual(first.epoch, -2_006_054_656)

    def test_unknown_zone_raises(self):
        with self.assertRaises(ValueError):
            parse_timestamp("2024:05:01 10:00:00", tz="Not/AZone")
        with self.assertRaises(ValueError):
            resolve_timezone("Not/AZone")

    def test_check_date_format(self):
        self.assertTrue(check_date_format("2023:07:01 23:59:59"))
        self.assertFalse(check_date_format("2023:07:01 23:59"))


@skipUnless(hasattr(time, "tzset"), "needs time.tzset")
class TestLocalTime(TestCase):
    def setUp(self):
        self._old_tz = os.environ.get("TZ")

    def tearDown(self):
        if self._old_tz is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = self._old_tz
        time.tzset()

    def _set_tz(self, name):
        os.environ["TZ"] = name
        time.tzset()

    def test_local_time_follows_host_zone(self):
        self._set_tz("UTC")
        self.assertEqual(parse_timestamp("2024:05:01 10:00:00").epoch, EPOCH_UTC)
        self._set_tz("Asia/Ho_Chi_Minh")
        self.assertEqual(parse_timestamp("2024:05:01 10:00:00").epoch, EPOCH_UTC - 7*3600)

    def test_local_and_pinned_agree(self):
        self._set_tz("Europe/Berlin")
        self.assertEqual(
            to_epoch_seconds(2024, 1, 15, 8, 30, 0),
            to_epoch_seconds(2024, 1, 15, 8, 30, 0, tz="Europe/Berlin"),
        )
