import logging

from .config import FONTS, FONT_START_ADDRESS, MAX_ROM_SIZE, MEMORY_SIZE, ROM_START_ADDRESS, STACK_SIZE
from .errors import OutOfBoundsAddress, RomTooLarge, StackOverflow, StackUnderflow

logger = logging.getLogger(__name__)


# ********** WRAPS A BYTEARRAY TO REPRESENT THE MAIN MEMORY WITH A LIMITED SIZE OF 4KB
class Memory:
    def __init__(self):
        self.inner = bytearray(MEMORY_SIZE)
        self.reset()

    def reset(self):
        """zero the whole memory and copy the font glyphs back at the bottom of it"""
        self.inner[:] = bytes(MEMORY_SIZE)
        self.inner[FONT_START_ADDRESS:FONT_START_ADDRESS+len(FONTS)] = bytes(FONTS)

    @staticmethod
    def check(address, length=1):
        """raise OutOfBoundsAddress unless [address, address+length) lies inside the memory"""
        if address < 0 or address >= MEMORY_SIZE:
            raise OutOfBoundsAddress(address)
        last = address + length - 1
        if last >= MEMORY_SIZE:
            raise OutOfBoundsAddress(last)

    def __len__(self):
        return MEMORY_SIZE

    def __getitem__(self, index):
        if isinstance(index, slice):
            self.check(index.start, index.stop - index.start)
            return list(self.inner[index.start:index.stop])
        self.check(index)
        return self.inner[index]

    def __setitem__(self, key, value):
        if isinstance(key, slice):
            self.check(key.start, len(value))
            self.inner[key.start:key.start+len(value)] = bytes(v & 0xFF for v in value)
            return
        self.check(key)
        self.inner[key] = value & 0xFF

    def read_word(self, address):
        """fetch the big-endian 16 bit word stored at address and address+1"""
        self.check(address, 2)
        return self.inner[address] << 8 | self.inner[address + 1]

    def load_rom(self, rom):
        """copy the ROM bytes verbatim starting at ROM_START_ADDRESS, raise RomTooLarge if they don't fit"""
        if len(rom) > MAX_ROM_SIZE:
            raise RomTooLarge(len(rom), MAX_ROM_SIZE)
        self.inner[ROM_START_ADDRESS:ROM_START_ADDRESS+len(rom)] = rom
        logger.debug(f"Loaded {len(rom)} bytes at 0x{ROM_START_ADDRESS:04x}")


# ********** WRAPS A LIST TO REPRESENT A STACK WITH A LIMITED SIZE OF 16 ADDRESSES
class Stack:
    def __init__(self):
        self.addr_list = [0] * STACK_SIZE
        self.sp = 0

    def __len__(self):
        return self.sp

    def __repr__(self):
        return f"Stack(sp={self.sp}, {[hex(a) for a in self.addr_list[:self.sp]]})"

    def reset(self):
        self.addr_list = [0] * STACK_SIZE
        self.sp = 0

    def append(self, address, pc):
        # sp is never allowed to move past the last slot index
        if self.sp >= STACK_SIZE - 1:
            raise StackOverflow(pc)
        self.addr_list[self.sp] = address & 0xFFFF
        self.sp += 1

    def pop(self, pc):
        if self.sp == 0:
            raise StackUnderflow(pc)
        self.sp -= 1
        return self.addr_list[self.sp]
