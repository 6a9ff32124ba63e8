class Chip8Error(Exception):
    """base class of every error raised by the virtual machine"""


class FatalError(Chip8Error):
    """the machine cannot go on after one of these, it gets halted"""


class UnknownInstruction(Chip8Error):
    def __init__(self, word, address):
        self.word, self.address = word, address
        super().__init__(f"Unknown instruction 0x{word:04x} at 0x{address:04x}")


class StackOverflow(FatalError):
    def __init__(self, pc):
        self.pc = pc
        super().__init__(f"The CHIP-8 stack can contain at most 15 return addresses. Limit exceeded at pc 0x{pc:04x}")


class StackUnderflow(FatalError):
    def __init__(self, pc):
        self.pc = pc
        super().__init__(f"Return with an empty stack at pc 0x{pc:04x}")


class OutOfBoundsAddress(FatalError):
    def __init__(self, address):
        self.address = address
        super().__init__(f"Address 0x{address:04x} is outside of the 4KB memory")


class RomTooLarge(Chip8Error):
    def __init__(self, size, limit):
        self.size, self.limit = size, limit
        super().__init__(f"The ROM is {size} bytes long, at most {limit} bytes fit in memory")


class MachineHalted(Chip8Error):
    def __init__(self, fault):
        self.fault = fault
        super().__init__(f"The machine is halted: {fault}")
