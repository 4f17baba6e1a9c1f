"""
BinaryCursor tests: bounds checking, length prefixes, no partial advances.
"""

import unittest

from stateproof import BinaryCursor, LengthOutOfBounds, Truncated


class TestPrimitiveReads(unittest.TestCase):

    def test_read_fixed_advances_exactly(self):
        cursor = BinaryCursor(b"abcdef")
        self.assertEqual(cursor.read_fixed(4), b"abcd")
        self.assertEqual(cursor.offset, 4)
        self.assertEqual(cursor.remaining(), 2)

    def test_read_fixed_truncated_does_not_advance(self):
        cursor = BinaryCursor(b"abc")
        cursor.read_fixed(1)
        with self.assertRaises(Truncated):
            cursor.read_fixed(3)
        self.assertEqual(cursor.offset, 1)

    def test_read_zero_bytes(self):
        cursor = BinaryCursor(b"")
        self.assertEqual(cursor.read_fixed(0), b"")
        self.assertTrue(cursor.exhausted)

    def test_read_u32_big_endian(self):
        cursor = BinaryCursor(b"\x00\x00\x01\x02")
        self.assertEqual(cursor.read_u32(), 258)
        self.assertTrue(cursor.exhausted)

    def test_read_u32_truncated(self):
        cursor = BinaryCursor(b"\x00\x01\x02")
        with self.assertRaises(Truncated):
            cursor.read_u32()
        self.assertEqual(cursor.offset, 0)

    def test_read_byte(self):
        cursor = BinaryCursor(b"\x07")
        self.assertEqual(cursor.read_byte(), 7)
        with self.assertRaises(Truncated):
            cursor.read_byte()

    def test_read_u64_and_i64(self):
        cursor = BinaryCursor(b"\x00" * 7 + b"\x05" + b"\xff" * 8)
        self.assertEqual(cursor.read_u64(), 5)
        self.assertEqual(cursor.read_i64(), -1)

    def test_truncated_is_a_value_error(self):
        with self.assertRaises(ValueError):
            BinaryCursor(b"").read_byte()


class TestLengthPrefixedBlock(unittest.TestCase):

    def test_length_at_maximum_is_accepted(self):
        cursor = BinaryCursor(bytes([10]) + b"x" * 10)
        consumed, payload = cursor.read_length_prefixed_block(1, 10, include_field_size=False)
        self.assertEqual(payload, b"x" * 10)
        self.assertEqual(consumed, 10)
        self.assertTrue(cursor.exhausted)

    def test_length_one_over_maximum_is_rejected_before_reading(self):
        cursor = BinaryCursor(bytes([11]) + b"x" * 11)
        with self.assertRaises(LengthOutOfBounds):
            cursor.read_length_prefixed_block(1, 10, include_field_size=False)
        self.assertEqual(cursor.offset, 0)

    def test_over_maximum_rejected_even_when_payload_missing(self):
        # Bound check precedes the payload read
        cursor = BinaryCursor(bytes([200]))
        with self.assertRaises(LengthOutOfBounds):
            cursor.read_length_prefixed_block(1, 100, include_field_size=False)

    def test_consumed_includes_field_size(self):
        cursor = BinaryCursor(bytes([3]) + b"abc")
        consumed, payload = cursor.read_length_prefixed_block(1, 384, include_field_size=True)
        self.assertEqual(consumed, 4)
        self.assertEqual(payload, b"abc")

    def test_wide_length_field(self):
        data = (384).to_bytes(2, "big") + b"s" * 384
        consumed, payload = BinaryCursor(data).read_length_prefixed_block(2, 384, include_field_size=True)
        self.assertEqual(consumed, 386)
        self.assertEqual(len(payload), 384)

        over = (385).to_bytes(2, "big") + b"s" * 385
        with self.assertRaises(LengthOutOfBounds):
            BinaryCursor(over).read_length_prefixed_block(2, 384, include_field_size=True)

    def test_truncated_payload_restores_offset(self):
        cursor = BinaryCursor(bytes([5]) + b"abc")
        with self.assertRaises(Truncated):
            cursor.read_length_prefixed_block(1, 10, include_field_size=False)
        self.assertEqual(cursor.offset, 0)

    def test_zero_length_block(self):
        cursor = BinaryCursor(bytes([0]))
        consumed, payload = cursor.read_length_prefixed_block(1, 10, include_field_size=True)
        self.assertEqual((consumed, payload), (1, b""))

    def test_negative_maximum_rejected(self):
        with self.assertRaises(LengthOutOfBounds):
            BinaryCursor(bytes([0])).read_length_prefixed_block(1, -1, include_field_size=False)

    def test_missing_length_field(self):
        with self.assertRaises(Truncated):
            BinaryCursor(b"\x00").read_length_prefixed_block(4, 10, include_field_size=False)


if __name__ == "__main__":
    unittest.main()
