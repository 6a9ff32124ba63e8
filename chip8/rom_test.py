import os
import tempfile
import unittest

from chip8.config import MAX_ROM_SIZE
from chip8.errors import RomTooLarge
from chip8.rom import get_args, listing, read_rom


class TestReadRom(unittest.TestCase):
    def write(self, data):
        fd, path = tempfile.mkstemp(suffix=".ch8")
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        self.addCleanup(os.remove, path)
        return path

    def test_read(self):
        self.assertEqual(read_rom(self.write(b"\x00\xe0")), b"\x00\xe0")

    def test_too_large(self):
        with self.assertRaises(RomTooLarge):
            read_rom(self.write(bytes(MAX_ROM_SIZE + 2)))


class TestListing(unittest.TestCase):
    def test_listing(self):
        self.assertEqual(list(listing(b"\x00\xe0\x23\x00\x5a\xb1\x07")), [
            "0x0200  00e0  CLS",
            "0x0202  2300  CALL 0x300",
            "0x0204  5ab1  DW 0x5ab1",
            "0x0206  07    DB 0x07",
        ])


class TestArgs(unittest.TestCase):
    def test_defaults(self):
        args = get_args(["-f", "pong.ch8"])
        self.assertEqual(args.file, "pong.ch8")
        self.assertFalse(args.disassemble)

    def test_unlimited(self):
        self.assertEqual(get_args(["--file", "x", "--hz", "0"]).hz, 0)


if __name__ == "__main__":
    unittest.main()
