import unittest

from dlms_inspector.commands import CommandKind, dispatch_command
from dlms_inspector.errors import UnsupportedCommand, ValidationError
from dlms_inspector.hex_utils import hex_to_bytes, normalize_hex, validate_hex


class HexValidationTest(unittest.TestCase):
    def test_validate_accepts_spaced_and_lower_case(self) -> None:
        self.assertTrue(validate_hex("60 3A A1 09"))
        self.assertTrue(validate_hex("603aa109"))
        self.assertTrue(validate_hex("60\t3A\nA1 09"))

    def test_validate_rejects_bad_characters_and_odd_length(self) -> None:
        self.assertFalse(validate_hex("G0 3A A1 09"))
        self.assertFalse(validate_hex("60 3A A1 0"))
        self.assertFalse(validate_hex("INVALID_HEX"))

    def test_empty_string_is_valid_format(self) -> None:
        self.assertTrue(validate_hex(""))
        self.assertTrue(validate_hex("   "))

    def test_validate_rejects_non_strings(self) -> None:
        self.assertFalse(validate_hex(None))
        self.assertFalse(validate_hex(1234))

    def test_normalize_strips_whitespace_and_upper_cases(self) -> None:
        self.assertEqual(normalize_hex(" c0 01\n4f "), "C0014F")

    def test_hex_to_bytes(self) -> None:
        self.assertEqual(hex_to_bytes("C7 01 42 0C 00"), b"\xc7\x01\x42\x0c\x00")

    def test_hex_to_bytes_rejects_empty_input(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            hex_to_bytes("  ")
        self.assertEqual(ctx.exception.message, "Empty hex data")

    def test_hex_to_bytes_rejects_invalid_input(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            hex_to_bytes("60 3A A1 0")
        self.assertEqual(ctx.exception.message, "Invalid hex format")
        self.assertIn("60 3A A1 0", ctx.exception.detail)


class CommandDispatchTest(unittest.TestCase):
    def test_known_command_bytes(self) -> None:
        expected = {
            0x60: "AARQ",
            0x61: "AARE",
            0xC0: "GetRequest",
            0xC4: "GetResponse",
            0xC3: "ActionRequest",
            0xC7: "ActionResponse",
            0xC1: "SetRequest",
            0xC5: "SetResponse",
            0x05: "ReadRequest",
            0x0C: "ReadResponse",
            0x06: "WriteRequest",
            0x0D: "WriteResponse",
        }
        for byte, message_type in expected.items():
            with self.subTest(byte=byte):
                self.assertEqual(dispatch_command(byte).message_type, message_type)
        self.assertEqual(len(CommandKind), len(expected))

    def test_unknown_command_names_the_byte(self) -> None:
        with self.assertRaises(UnsupportedCommand) as ctx:
            dispatch_command(0xFF)
        self.assertEqual(ctx.exception.message, "Unsupported DLMS command: 0xFF")
        self.assertEqual(ctx.exception.command_byte, 0xFF)

    def test_single_digit_byte_is_zero_padded(self) -> None:
        with self.assertRaises(UnsupportedCommand) as ctx:
            dispatch_command(0x01)
        self.assertIn("0x01", ctx.exception.message)


if __name__ == "__main__":
    unittest.main()
