# CHIP-8 INFO
# https://chip-8.github.io/extensions/#chip-8
# http://devernay.free.fr/hacks/chip8/C8TECH10.HTM
#
# COMPATIBILITY QUIRKS TABLE
# https://games.gulrak.net/cadmium/chip8-opcode-table.html#quirk6

import os


# ******************** ARCHITECTURE
MEMORY_SIZE = 4096
REGISTER_COUNT = 16
STACK_SIZE = 16
KEY_COUNT = 16
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
ROM_START_ADDRESS = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - ROM_START_ADDRESS
FONT_START_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5     # each character font is made of 5 bytes

FONTS = (0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
         0x20, 0x60, 0x20, 0x20, 0x70,  # 1
         0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
         0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
         0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
         0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
         0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
         0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
         0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
         0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
         0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
         0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
         0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
         0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
         0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
         0xF0, 0x80, 0xF0, 0x80, 0x80)  # F


# ******************** CLOCKS
CPU_HZ = int(os.getenv('CHIP8_CPU_HZ', 500))
TIMER_HZ = 60
REFRESH_HZ = 60
MAX_BACKLOG = 0.25      # seconds of emulated time the scheduler is allowed to catch up on
BATCH_CYCLES = 1000     # cycles per host frame when the instruction clock is unlimited


# ******************** HOST
DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False
SCALE = 15
BLUE = (80, 69, 155)
LIGHT_BLUE = (136, 126, 203)
TONE_FREQUENCY = 440
SAMPLE_RATE = 22050
