import struct
import sys
from unittest import TestCase

from aqi2frame.encode import (
    compute_checksum,
    encode_field,
    host_is_little_endian,
    normalize_byte_order,
    raw_bits,
    wrap_integer,
)
from aqi2frame.formats import FieldKind


class TestEndiannessProbe(TestCase):
    def test_matches_interpreter(self):
        self.assertEqual(host_is_little_endian(), sys.byteorder == "little")

    def test_result_is_cached(self):
        self.assertIs(host_is_little_endian(), host_is_little_endian())


class TestEncodeField(TestCase):
    def test_big_endian_on_this_host(self):
        self.assertEqual(encode_field(1_714_557_600, FieldKind.TIME), struct.pack(">i", 1_714_557_600))
        self.assertEqual(encode_field(23.4, FieldKind.VALUE), struct.pack(">f", 23.4))
        self.assertEqual(encode_field(23.4, FieldKind.VALUE), bytes.fromhex("41BB3333"))
        self.assertEqual(encode_field(45, FieldKind.AQI), b"\x00\x2d")
        self.assertEqual(encode_field(-1, FieldKind.AQI), b"\xff\xff")
        self.assertEqual(encode_field(7, FieldKind.ID), b"\x07")
        self.assertEqual(encode_field(15, FieldKind.LENGTH), b"\x0f")

    def test_forced_byte_orders_are_mirror_images(self):
        cases = [
            (1_714_557_600, FieldKind.TIME),
            (-123456, FieldKind.TIME),
            (23.4, FieldKind.VALUE),
            (-0.001, FieldKind.VALUE),
            (312, FieldKind.AQI),
            (-42, FieldKind.AQI),
        ]
        for value, kind in cases:
            with self.subTest(value=value, kind=kind.name):
                as_little = encode_field(value, kind, little_endian=True)
                as_big = encode_field(value, kind, little_endian=False)
                self.assertEqual(as_little, as_big[::-1])
                self.assertNotEqual(as_little, as_big)

    def test_probe_result_gives_network_order(self):
        native_first = encode_field(0x01020304, FieldKind.TIME, little_endian=host_is_little_endian())
        self.assertEqual(native_first, b"\x01\x02\x03\x04")

    def test_narrow_fields_truncate(self):
        self.assertEqual(encode_field(256, FieldKind.ID), b"\x00")
        self.assertEqual(encode_field(257, FieldKind.ID), b"\x01")
        self.assertEqual(encode_field(40000, FieldKind.AQI), b"\x9c\x40")
        self.assertEqual(encode_field(70000, FieldKind.AQI), struct.pack(">H", 70000 & 0xFFFF))
        self.assertEqual(encode_field(2**32 + 5, FieldKind.TIME), b"\x00\x00\x00\x05")

    def test_widths(self):
        self.assertEqual(len(encode_field(1, FieldKind.ID)), 1)
        self.assertEqual(len(encode_field(1, FieldKind.TIME)), 4)
        self.assertEqual(len(encode_field(1.0, FieldKind.VALUE)), 4)
        self.assertEqual(len(encode_field(1, FieldKind.AQI)), 2)


class TestHelpers(TestCase):
    def test_wrap_integer(self):
        self.assertEqual(wrap_integer(40000, 2, signed=True), 40000 - 65536)
        self.assertEqual(wrap_integer(-1, 2, signed=False), 0xFFFF)
        self.assertEqual(wrap_integer(2**31, 4, signed=True), -2**31)
        self.assertEqual(wrap_integer(300, 1, signed=False), 44)

    def test_raw_bits_of_float(self):
        self.assertEqual(raw_bits(234.5, FieldKind.VALUE), 0x436A8000)
        self.assertEqual(raw_bits(-2.0, FieldKind.VALUE), 0xC0000000)

    def test_normalize_byte_order(self):
        self.assertEqual(normalize_byte_order(b"\x01\x02\x03", True), b"\x03\x02\x01")
        self.assertEqual(normalize_byte_order(b"\x01\x02\x03", False), b"\x01\x02\x03")


class TestChecksum(TestCase):
    def test_values(self):
        self.assertEqual(compute_checksum(b""), 0)
        self.assertEqual(compute_checksum(b"\x00\x00"), 0)
        self.assertEqual(compute_checksum(b"\x01"), 0xFF)
        self.assertEqual(compute_checksum([0x80, 0x80]), 0)
        self.assertEqual(compute_checksum(bytes.fromhex("0F016632 12A041BB 3333002D")), 0x17)

    def test_appending_checksum_zeroes_the_sum(self):
        for payload in [b"\xff" * 40, bytes(range(256)), b"\x0f\x01\x02", b"\x7a"]:
            with self.subTest(payload=payload[:8]):
                checksum = compute_checksum(payload)
                self.assertTrue(0 <= checksum <= 0xFF)
                self.assertEqual((sum(payload) + checksum) % 256, 0)
