import argparse
import logging
from pathlib import Path

from .config import CPU_HZ, DEBUG, MAX_ROM_SIZE, ROM_START_ADDRESS, SCALE
from .decoder import decode, disassemble
from .errors import RomTooLarge

logger = logging.getLogger(__name__)


def read_rom(path):
    """read a ROM file from disk, raise RomTooLarge if it cannot fit above 0x200"""
    rom = Path(path).read_bytes()
    if len(rom) > MAX_ROM_SIZE:
        raise RomTooLarge(len(rom), MAX_ROM_SIZE)
    logger.debug(f"The ROM at path {path} has been read successfully ({len(rom)} bytes)")
    return rom


def get_args(argv=None):
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 virtual machine")
    parser.add_argument("-f", "--file", required=True, help="input rom file")
    parser.add_argument("--hz", type=int, default=CPU_HZ, help="instructions per second, 0 means unlimited")
    parser.add_argument("--scale", type=int, default=SCALE, help="size in screen pixels of a CHIP-8 pixel")
    parser.add_argument("--debug", action="store_true", default=DEBUG, help="log every executed instruction")
    parser.add_argument("--disassemble", action="store_true", help="print the ROM listing and exit")
    return parser.parse_args(argv)


def listing(rom, start=ROM_START_ADDRESS):
    """yield one 'address  word  asm' line per instruction word of the ROM, an odd trailing byte is shown as data"""
    for offset in range(0, len(rom) - 1, 2):
        word = rom[offset] << 8 | rom[offset + 1]
        yield f"0x{start + offset:04x}  {word:04x}  {disassemble(decode(word))}"
    if len(rom) % 2:
        yield f"0x{start + len(rom) - 1:04x}  {rom[-1]:02x}    DB 0x{rom[-1]:02x}"
