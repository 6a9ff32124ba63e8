import unittest

from chip8.config import FONTS, MAX_ROM_SIZE, ROM_START_ADDRESS
from chip8.errors import OutOfBoundsAddress, RomTooLarge, StackOverflow, StackUnderflow
from chip8.memory import Memory, Stack


class TestMemory(unittest.TestCase):
    def setUp(self):
        self.mem = Memory()

    def test_fonts_loaded(self):
        self.assertEqual(self.mem[0x000:0x050], list(FONTS))
        self.assertEqual(self.mem[0x050], 0)

    def test_byte_wraps(self):
        self.mem[0x300] = 0x1FF
        self.assertEqual(self.mem[0x300], 0xFF)

    def test_read_word_big_endian(self):
        self.mem[0x300:0x302] = [0x12, 0x34]
        self.assertEqual(self.mem.read_word(0x300), 0x1234)

    def test_out_of_bounds(self):
        with self.assertRaises(OutOfBoundsAddress) as cm:
            self.mem[0x1000]
        self.assertEqual(cm.exception.address, 0x1000)
        with self.assertRaises(OutOfBoundsAddress):
            self.mem[-1] = 0
        with self.assertRaises(OutOfBoundsAddress):
            self.mem.read_word(0xFFF)
        with self.assertRaises(OutOfBoundsAddress) as cm:
            self.mem[0xFFE:0x1001] = [1, 2, 3]
        self.assertEqual(cm.exception.address, 0x1000)

    def test_out_of_bounds_slice_writes_nothing(self):
        with self.assertRaises(OutOfBoundsAddress):
            self.mem[0xFFE:0x1001] = [1, 2, 3]
        self.assertEqual(self.mem[0xFFE:0x1000], [0, 0])

    def test_load_rom(self):
        self.mem.load_rom(b"\x00\xe0\x12\x00")
        self.assertEqual(self.mem[ROM_START_ADDRESS:ROM_START_ADDRESS+4], [0x00, 0xE0, 0x12, 0x00])

    def test_load_rom_fills_memory(self):
        self.mem.load_rom(bytes([0xAA]) * MAX_ROM_SIZE)
        self.assertEqual(self.mem[0xFFF], 0xAA)

    def test_rom_too_large(self):
        with self.assertRaises(RomTooLarge) as cm:
            self.mem.load_rom(bytes(MAX_ROM_SIZE + 1))
        self.assertEqual(cm.exception.size, MAX_ROM_SIZE + 1)
        self.assertEqual(self.mem[ROM_START_ADDRESS], 0)

    def test_reset(self):
        self.mem[0x000] = 0
        self.mem[0x400] = 7
        self.mem.reset()
        self.assertEqual(self.mem[0x000], FONTS[0])
        self.assertEqual(self.mem[0x400], 0)


class TestStack(unittest.TestCase):
    def test_push_pop(self):
        stack = Stack()
        stack.append(0x202, 0x200)
        stack.append(0x304, 0x302)
        self.assertEqual(len(stack), 2)
        self.assertEqual(stack.pop(0x400), 0x304)
        self.assertEqual(stack.pop(0x306), 0x202)
        self.assertEqual(stack.sp, 0)

    def test_overflow(self):
        stack = Stack()
        for i in range(15):
            stack.append(0x200 + i * 2, 0x200)
        with self.assertRaises(StackOverflow) as cm:
            stack.append(0x300, 0x2AA)
        self.assertEqual(cm.exception.pc, 0x2AA)
        self.assertEqual(stack.sp, 15)

    def test_underflow(self):
        with self.assertRaises(StackUnderflow):
            Stack().pop(0x200)


if __name__ == "__main__":
    unittest.main()
