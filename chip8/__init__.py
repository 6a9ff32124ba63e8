from .clock import Scheduler
from .cpu import Chip8
from .decoder import Instruction, decode, disassemble
from .errors import (Chip8Error, FatalError, MachineHalted, OutOfBoundsAddress, RomTooLarge,
                     StackOverflow, StackUnderflow, UnknownInstruction)
