import unittest

from dlms_inspector.obis import format_instance_id
from dlms_inspector.octet_string import analyze_octet_string, decode_ascii


class OctetStringAnalysisTest(unittest.TestCase):
    def test_ascii_text(self) -> None:
        analysis = analyze_octet_string("4B464D")
        self.assertEqual(analysis.ascii_decoding, "KFM")
        self.assertEqual(analysis.primary_display, "Text: KFM")
        self.assertTrue(analysis.has_readable_interpretation)

    def test_ascii_allows_space_underscore_dash_and_dot(self) -> None:
        analysis = analyze_octet_string("76392E305F612D62")
        self.assertEqual(analysis.ascii_decoding, "v9.0_a-b")

    def test_timestamp(self) -> None:
        analysis = analyze_octet_string("07E80A13FF0C1E2D00800000")
        self.assertIsNone(analysis.ascii_decoding)
        self.assertEqual(analysis.possible_timestamp, "2024-10-19 12:30:45")
        self.assertEqual(analysis.primary_display, "Timestamp: 2024-10-19 12:30:45")
        self.assertIsNone(analysis.possible_obis_code)

    def test_timestamp_with_invalid_month_is_ignored(self) -> None:
        analysis = analyze_octet_string("07E80D13FF0C1E2D00800000")
        self.assertIsNone(analysis.possible_timestamp)

    def test_obis_code(self) -> None:
        analysis = analyze_octet_string("0100010800FF")
        self.assertEqual(analysis.possible_obis_code, "1.0.1.8.0")
        self.assertEqual(analysis.primary_display, "OBIS Code: 1.0.1.8.0")
        # the leading 0x01 also reads as an array tag, but OBIS wins the label
        self.assertEqual(analysis.structure_info, "Array type")

    def test_visible_string_tag(self) -> None:
        analysis = analyze_octet_string("0A034B464D")
        self.assertEqual(analysis.structure_info, "VisibleString type")
        self.assertEqual(analysis.primary_display, "Text: KFM")

    def test_octet_string_tag_reports_length(self) -> None:
        analysis = analyze_octet_string("09041234ABCD")
        self.assertEqual(analysis.structure_info, "OctetString type")
        self.assertEqual(analysis.primary_display, "OctetString (5 bytes of binary data)")

    def test_plain_type_tags_never_set_primary(self) -> None:
        for hex_string, label in (("0F05", "Integer type"), ("1000FF", "Long type"),
                                  ("1205", "Unsigned type"), ("1603", "Enum type")):
            with self.subTest(hex_string=hex_string):
                analysis = analyze_octet_string(hex_string)
                self.assertEqual(analysis.structure_info, label)
                self.assertIsNone(analysis.primary_display)
                self.assertFalse(analysis.has_readable_interpretation)

    def test_structure_tag(self) -> None:
        analysis = analyze_octet_string("0202")
        self.assertEqual(analysis.primary_display, "Structured data container")

    def test_short_input_is_not_analyzed(self) -> None:
        analysis = analyze_octet_string("4B")
        self.assertEqual(analysis.raw_hex, "4B")
        self.assertIsNone(analysis.ascii_decoding)
        self.assertIsNone(analysis.primary_display)
        self.assertFalse(analysis.has_readable_interpretation)

    def test_malformed_hex_is_not_interpreted(self) -> None:
        analysis = analyze_octet_string("ZZZZ")
        self.assertIsNone(analysis.structure_info)
        self.assertFalse(analysis.has_readable_interpretation)

    def test_decode_ascii(self) -> None:
        self.assertEqual(decode_ascii("4B5F4D"), "K_M")
        self.assertIsNone(decode_ascii("4B204D"))
        self.assertEqual(decode_ascii("4B204D", " "), "K M")
        self.assertIsNone(decode_ascii("4G"))


class InstanceIdFormatTest(unittest.TestCase):
    def test_formats_six_bytes(self) -> None:
        self.assertEqual(format_instance_id("00002C0000FF"), "0-0:44.0.0*255")
        self.assertEqual(format_instance_id("000081000000"), "0-0:129.0.0*0")

    def test_spaces_and_case_are_ignored(self) -> None:
        self.assertEqual(format_instance_id("01 00 01 08 00 ff"), "1-0:1.8.0*255")

    def test_other_input_is_returned_unchanged(self) -> None:
        for value in ("ABC", "00002C0000FG", "00002C0000FF00", ""):
            with self.subTest(value=value):
                self.assertEqual(format_instance_id(value), value)


if __name__ == "__main__":
    unittest.main()
