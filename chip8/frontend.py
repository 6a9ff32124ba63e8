import logging
import sys
from array import array

import os
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_0, K_1, K_2, K_3,
    K_4, K_5, K_6, K_7,
    K_8, K_9, K_a, K_b,
    K_c, K_d, K_e, K_f,
)

from .clock import Scheduler
from .config import BATCH_CYCLES, BLUE, LIGHT_BLUE, REFRESH_HZ, SAMPLE_RATE, SCALE, TONE_FREQUENCY
from .cpu import Chip8
from .errors import Chip8Error
from .rom import get_args, listing, read_rom

logger = logging.getLogger(__name__)

KEY_MAPPINGS = {
    K_0: 0x0,
    K_1: 0x1,
    K_2: 0x2,
    K_3: 0x3,
    K_4: 0x4,
    K_5: 0x5,
    K_6: 0x6,
    K_7: 0x7,
    K_8: 0x8,
    K_9: 0x9,
    K_a: 0xA,
    K_b: 0xB,
    K_c: 0xC,
    K_d: 0xD,
    K_e: 0xE,
    K_f: 0xF,
}


# ******************** I/O SECTION
class Screen:
    """paint a Framebuffer onto a scaled pygame window"""

    def __init__(self, framebuffer, s=SCALE, bg_color=BLUE, fg_color=LIGHT_BLUE):
        self.framebuffer = framebuffer
        self.scale = s
        self.background = pygame.Color(*bg_color)
        self.foreground = pygame.Color(*fg_color)
        self.surface = pygame.display.set_mode(
            (framebuffer.w * self.scale, framebuffer.h * self.scale),
        )
        self.surface.fill(self.background)

    def draw(self):
        self.surface.fill(self.background)
        for y, row in enumerate(self.framebuffer.rows()):
            for x, on in enumerate(row):
                if on:
                    pygame.draw.rect(self.surface, self.foreground, (x * self.scale, y * self.scale, self.scale, self.scale))
        pygame.display.flip()


class Buzzer:
    """square wave tone looping while the sound timer is active"""

    def __init__(self, frequency=TONE_FREQUENCY, sample_rate=SAMPLE_RATE):
        self.playing = False
        self.sound = None
        try:
            pygame.mixer.init(frequency=sample_rate, size=-16, channels=1)
        except pygame.error as e:
            logger.warning(f"No audio device, the buzzer is muted: {e}")
            return
        period = sample_rate // frequency
        samples = array("h", ([8000] * (period // 2) + [-8000] * (period - period // 2)) * frequency)
        self.sound = pygame.mixer.Sound(buffer=samples.tobytes())

    def update(self, active):
        if self.sound is None or active == self.playing:
            return
        if active:
            self.sound.play(loops=-1)
        else:
            self.sound.stop()
        self.playing = active


# ******************** ENTRY POINT SECTION
def main(argv=None):
    args = get_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO, format="[%(levelname)s]:  %(message)s")
    try:
        rom = read_rom(args.file)
    except (OSError, Chip8Error) as e:
        sys.exit(f"Cannot load {args.file}: {e}")
    if args.disassemble:
        for line in listing(rom):
            print(line)
        return
    # CPU
    chip = Chip8()
    chip.load_rom(rom)
    scheduler = Scheduler(chip, cpu_hz=args.hz or None)
    # pygame initialization
    pygame.init()
    clock = pygame.time.Clock()
    pygame.display.set_caption(os.path.basename(args.file))
    # IO
    screen = Screen(chip.screen, s=args.scale)
    buzzer = Buzzer()
    # emulation loop
    run = True
    try:
        while run:
            elapsed = clock.tick(REFRESH_HZ * 4) / 1000
            # process user input, the keypad latch is only written between cycles
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    run = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        run = False
                    elif event.key in KEY_MAPPINGS:
                        chip.keypad[KEY_MAPPINGS[event.key]] = True
                elif event.type == pygame.KEYUP and event.key in KEY_MAPPINGS:
                    chip.keypad[KEY_MAPPINGS[event.key]] = False
            if scheduler.advance(elapsed, cycles=BATCH_CYCLES):
                screen.draw()
            buzzer.update(chip.tone_active)
    except Chip8Error:
        sys.exit(f"********** THE EMULATOR CRASHED WITH THE FOLLOWING STATE\n{chip}")
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
