from .config import KEY_COUNT, SCREEN_HEIGHT, SCREEN_WIDTH


# ******************** I/O SECTION
class Framebuffer:
    """64x32 one bit per pixel display memory, the host renderer reads it and consumes the dirty flag"""

    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT):
        self.w, self.h = w, h
        self.buffer = [0] * h * w
        self.dirty = False

    def read_pixel(self, x, y):
        """return 1 if pixel is ON, return 0 if pixel is OFF"""
        return self.buffer[x + y * self.w]

    def toggle_pixel(self, x, y):
        """XOR the pixel at (x, y) with 1 and return its state before the toggle"""
        i = x + y * self.w
        previous = self.buffer[i]
        self.buffer[i] = previous ^ 1
        self.dirty = True
        return previous

    def clear(self):
        self.buffer = [0] * self.h * self.w
        self.dirty = True

    def rows(self):
        """read-only view of the pixels as a tuple of rows of booleans"""
        return tuple(
            tuple(bool(p) for p in self.buffer[y * self.w:(y + 1) * self.w])
            for y in range(self.h)
        )

    def consume(self):
        """return the dirty flag and clear it, the renderer calls this once per refresh"""
        dirty, self.dirty = self.dirty, False
        return dirty

    def __str__(self):
        return "\n".join("".join("#" if p else "." for p in row) for row in self.rows())


class Keypad:
    """16 key latch written by the host between cycles"""

    def __init__(self):
        self.keys = [False] * KEY_COUNT

    def __getitem__(self, key):
        return self.keys[key & 0xF]

    def __setitem__(self, key, value):
        self.keys[key & 0xF] = bool(value)

    def untouched(self):
        return not any(self.keys)

    def first(self):
        """lowest index among the pressed keys, None if there is none"""
        for key, pressed in enumerate(self.keys):
            if pressed:
                return key
        return None

    def release_all(self):
        self.keys = [False] * KEY_COUNT

    def __repr__(self):
        return f"Keypad({[hex(k) for k, pressed in enumerate(self.keys) if pressed]})"


class Timers:
    """delay (dt) and sound (st) countdown registers, decremented by the 60Hz timer clock"""

    def __init__(self):
        self.dt = 0     # delay timer, active when non-zero
        self.st = 0     # sound timer, active when non-zero

    def tick(self):
        if self.dt > 0:
            self.dt -= 1
        if self.st > 0:
            self.st -= 1

    @property
    def tone_active(self):
        return self.st > 0

    def reset(self):
        self.dt = self.st = 0

    def __repr__(self):
        return f"Timers(dt={self.dt}, st={self.st})"
