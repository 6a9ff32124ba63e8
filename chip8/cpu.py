import logging
import random
from functools import wraps

from . import decoder as op
from .config import FONT_GLYPH_SIZE, FONT_START_ADDRESS, REGISTER_COUNT, ROM_START_ADDRESS
from .decoder import OPCODES, decode
from .devices import Framebuffer, Keypad, Timers
from .errors import FatalError, MachineHalted, UnknownInstruction
from .memory import Memory, Stack

logger = logging.getLogger(__name__)


# ******************** UTILITIES SECTION
def asm(msg):
    """decorator to log the ASM of the instruction being executed"""
    def decorator(fn):
        @wraps(fn)
        def wrapper_fn(*args, **kwargs):
            mem_addr = args[0].pc       # args[0] equals self of the decorated method
            vals = fn(*args, **kwargs)  # use the locals() values of each decorated function in the message
            if logger.isEnabledFor(logging.DEBUG):
                vals['mem_addr'] = mem_addr
                logger.debug(msg.format(**vals))
        return wrapper_fn
    return decorator


# ******************** CPU SECTION
class Chip8:
    def __init__(self, rng=None):
        self.mem = Memory()
        self.stack = Stack()
        self.timers = Timers()
        self.screen = Framebuffer()
        self.keypad = Keypad()
        self.random = rng or random.Random()
        self.v_regs = [0] * REGISTER_COUNT
        self.pc = ROM_START_ADDRESS
        self.idx = 0    # specify where the sprites reside in memory
        self.halted = False
        self.fault = None
        self.unknown_count = 0
        self.instructions = {
            op.SYS: self._sys,
            op.CLS: self._clear_screen,
            op.RET: self._return,
            op.JP: self._jump,
            op.CALL: self._call_addr,
            op.SE_VX_KK: self._skip_if_eq,
            op.SNE_VX_KK: self._skip_if_not_eq,
            op.SE_VX_VY: self._skip_if_eq_regs,
            op.LD_VX_KK: self._set_vk,
            op.ADD_VX_KK: self._add_to_vk,
            op.LD_VX_VY: self._set_vx_to_vy,
            op.OR: self._set_vx_or_vy,
            op.AND: self._set_vx_and_vy,
            op.XOR: self._set_vx_xor_vy,
            op.ADD_VX_VY: self._add_vx_vy,
            op.SUB: self._sub_vx_vy,
            op.SHR: self._shr,
            op.SUBN: self._subn_vx_vy,
            op.SHL: self._shl,
            op.SNE_VX_VY: self._skip_if_not_eq_regs,
            op.LD_I: self._set_idx,
            op.JP_V0: self._jump_plus,
            op.RND: self._random_byte_and,
            op.DRW: self._to_screen,
            op.SKP: self._skip_if_pressed,
            op.SKNP: self._skip_if_not_pressed,
            op.LD_VX_DT: self._set_vx_dt,
            op.LD_VX_K: self._wait_keypress,
            op.LD_DT_VX: self._set_dt_vx,
            op.LD_ST_VX: self._set_st,
            op.ADD_I_VX: self._add_to_idx,
            op.LD_F_VX: self._select_char,
            op.LD_B_VX: self._bcd_repr,
            op.LD_MEM_VX: self._store_vregs,
            op.LD_VX_MEM: self._load_vregs,
            op.UNKNOWN: self.not_implemented,
        }
        missing = OPCODES.difference(self.instructions)
        if missing:
            raise NotImplementedError(f"No handler for {sorted(missing)}")

    def __str__(self):
        registers = f"PC_REGISTER:0x{self.pc:04x} | IDX_REGISTER:0x{self.idx:04x} | VARIABLE_REGISTERS:{self.v_regs}"
        stack = f"STACK:{self.stack}"
        flags = f"TIMERS:{self.timers} | DRAW:{self.screen.dirty} | HALTED:{self.halted}"
        return f"{registers}\n{stack}\n{flags}"

    # ********** TIMERS
    @property
    def dt(self):
        return self.timers.dt

    @dt.setter
    def dt(self, value):
        self.timers.dt = value & 0xFF

    @property
    def st(self):
        return self.timers.st

    @st.setter
    def st(self, value):
        self.timers.st = value & 0xFF

    @property
    def tone_active(self):
        return self.timers.tone_active

    # ********** LIFECYCLE
    def reset(self):
        """put the machine back into its power-on state, the ROM has to be loaded again"""
        self.mem.reset()
        self.stack.reset()
        self.timers.reset()
        self.screen.clear()
        self.keypad.release_all()
        self.v_regs = [0] * REGISTER_COUNT
        self.pc = ROM_START_ADDRESS
        self.idx = 0
        self.halted = False
        self.fault = None
        self.unknown_count = 0

    def load_rom(self, rom):
        self.mem.load_rom(rom)

    def cycle(self):
        """emulate one machine cycle: fetch, decode and execute the instruction at pc"""
        if self.halted:
            raise MachineHalted(self.fault)
        try:
            # fetch (each instruction is two bytes long)
            instruction = decode(self.mem.read_word(self.pc))
            # decode + execute, the handler is the only one moving pc
            self.instructions[instruction.op](instruction)
        except UnknownInstruction as ui:
            logger.warning(f"{ui}, skipping it")
            self.unknown_count += 1
            self._goto_next_instruction()
        except FatalError as fe:
            self.halted, self.fault = True, fe
            logger.error(f"Machine halted: {fe}")
            raise

    def tick_timers(self):
        self.timers.tick()

    def not_implemented(self, ins):
        raise UnknownInstruction(ins.word, self.pc)

    def _goto_next_instruction(self):
        self.pc += 0x2

    def _skip_next_instruction(self):
        self.pc += 0x4

    # ********** FLOW CONTROL
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SYS 0x{address:03x} (ignored)")
    def _sys(self, ins):
        """jump to a machine code routine, only meaningful on the COSMAC VIP"""
        address = ins.nnn
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: CLS")
    def _clear_screen(self, ins):
        self.screen.clear()
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: RET -> 0x{address:04x}")
    def _return(self, ins):
        """return from a subroutine"""
        address = self.stack.pop(self.pc)
        self.pc = address
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: JP 0x{address:04x}")
    def _jump(self, ins):
        address = ins.nnn
        self.pc = address
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: CALL 0x{address:04x}")
    def _call_addr(self, ins):
        """push the address of the next instruction and jump to nnn"""
        address = ins.nnn
        self.stack.append(self.pc + 0x2, self.pc)
        self.pc = address
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: JP V0, 0x{address:04x}")
    def _jump_plus(self, ins):
        address = ins.nnn + self.v_regs[0x0]
        self.pc = address
        return locals()

    # ********** CONDITIONAL SKIPS
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SE V{x:X}, {comparison_value}")
    def _skip_if_eq(self, ins):
        x, comparison_value = ins.x, ins.kk
        self._skip_if(self.v_regs[x] == comparison_value)
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SNE V{x:X}, {comparison_value}")
    def _skip_if_not_eq(self, ins):
        x, comparison_value = ins.x, ins.kk
        self._skip_if(self.v_regs[x] != comparison_value)
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SE V{x:X}, V{y:X}")
    def _skip_if_eq_regs(self, ins):
        x, y = ins.x, ins.y
        self._skip_if(self.v_regs[x] == self.v_regs[y])
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SNE V{x:X}, V{y:X}")
    def _skip_if_not_eq_regs(self, ins):
        x, y = ins.x, ins.y
        self._skip_if(self.v_regs[x] != self.v_regs[y])
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SKP V{x:X} (key 0x{key:x})")
    def _skip_if_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is pressed"""
        x = ins.x
        key = self.v_regs[x]
        self._skip_if(self.keypad[key])
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SKNP V{x:X} (key 0x{key:x})")
    def _skip_if_not_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT pressed"""
        x = ins.x
        key = self.v_regs[x]
        self._skip_if(not self.keypad[key])
        return locals()

    def _skip_if(self, condition):
        if condition:
            self._skip_next_instruction()
        else:
            self._goto_next_instruction()

    # ********** REGISTERS
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x:X}, {value}")
    def _set_vk(self, ins):
        """set the value of one of the 16 variable registers, Vx"""
        x, value = ins.x, ins.kk
        self.v_regs[x] = value
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD V{x:X}, {value}")
    def _add_to_vk(self, ins):
        """add to the value already present in one of the variable registers, VF is left alone"""
        x, value = ins.x, ins.kk
        self.v_regs[x] = (self.v_regs[x] + value) & 0xFF    # keep only the lowest 8 bits from the result and store them in Vx
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x:X}, V{y:X}")
    def _set_vx_to_vy(self, ins):
        """set the value of Vx equal to that of Vy"""
        x, y = ins.x, ins.y
        self.v_regs[x] = self.v_regs[y]
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: OR V{x:X}, V{y:X}")
    def _set_vx_or_vy(self, ins):
        x, y = ins.x, ins.y
        self.v_regs[x] |= self.v_regs[y]
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: AND V{x:X}, V{y:X}")
    def _set_vx_and_vy(self, ins):
        x, y = ins.x, ins.y
        self.v_regs[x] &= self.v_regs[y]
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: XOR V{x:X}, V{y:X}")
    def _set_vx_xor_vy(self, ins):
        x, y = ins.x, ins.y
        self.v_regs[x] ^= self.v_regs[y]
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD V{x:X}, V{y:X}    carry: {carry}")
    def _add_vx_vy(self, ins):
        """set the value of Vx to Vx + Vy, VF = carry"""
        x, y = ins.x, ins.y
        total = self.v_regs[x] + self.v_regs[y]
        carry = 1 if total > 0xFF else 0
        self.v_regs[x] = total & 0xFF     # keep only the lowest 8 bits from the result and store them in Vx
        self.v_regs[0xF] = carry
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SUB V{x:X}, V{y:X}    not borrow: {not_borrow}")
    def _sub_vx_vy(self, ins):
        """set the value of Vx to Vx - Vy, VF = NOT borrow"""
        x, y = ins.x, ins.y
        not_borrow = 1 if self.v_regs[x] > self.v_regs[y] else 0
        self.v_regs[x] = (self.v_regs[x] - self.v_regs[y]) & 0xFF
        self.v_regs[0xF] = not_borrow
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SUBN V{x:X}, V{y:X}    not borrow: {not_borrow}")
    def _subn_vx_vy(self, ins):
        """set the value of Vx to Vy - Vx, VF = NOT borrow"""
        x, y = ins.x, ins.y
        not_borrow = 1 if self.v_regs[y] > self.v_regs[x] else 0
        self.v_regs[x] = (self.v_regs[y] - self.v_regs[x]) & 0xFF
        self.v_regs[0xF] = not_borrow
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SHR V{x:X}    lsb: {lsb}")
    def _shr(self, ins):
        """set Vx equal to Vx SHR 1"""
        x = ins.x
        lsb = self.v_regs[x] & 0x1
        self.v_regs[x] >>= 1
        self.v_regs[0xF] = lsb
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: SHL V{x:X}    msb: {msb}")
    def _shl(self, ins):
        """set Vx equal to Vx SHL 1"""
        x = ins.x
        msb = (self.v_regs[x] >> 7) & 0x1
        self.v_regs[x] = (self.v_regs[x] << 1) & 0xFF   # multiply by 2 and keep only the lowest 8 bits from the result
        self.v_regs[0xF] = msb
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: RND V{x:X}, 0x{kk:02x}")
    def _random_byte_and(self, ins):
        x, kk = ins.x, ins.kk
        rnd = self.random.randint(0, 255)
        self.v_regs[x] = rnd & kk
        self._goto_next_instruction()
        return locals()

    # ********** INDEX REGISTER AND MEMORY
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD I, 0x{value:03x}")
    def _set_idx(self, ins):
        """set the value of the I register"""
        value = ins.nnn
        self.idx = value
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: ADD I, V{register:X}")
    def _add_to_idx(self, ins):
        """set I = I + Vx"""
        register = ins.x
        self.idx = (self.idx + self.v_regs[register]) & 0xFFFF
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD F, V{register:X}")
    def _select_char(self, ins):
        """set I to location of sprite for digit Vx"""
        register = ins.x
        self.idx = FONT_START_ADDRESS + self.v_regs[register] * FONT_GLYPH_SIZE
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD B, V{x:X}    digits: {hundreds}{tens}{ones}")
    def _bcd_repr(self, ins):
        """takes the decimal value of Vx and the hundreds digit in memory at I, the tens digit at I+1, the ones digit at I+2"""
        x = ins.x
        hundreds = self.v_regs[x] // 100
        tens = (self.v_regs[x] // 10) % 10
        ones = self.v_regs[x] % 10
        self.mem[self.idx:self.idx+3] = [hundreds, tens, ones]
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD [I], V{x:X}")
    def _store_vregs(self, ins):
        """store registers V0 through Vx (included) in memory starting at location I"""
        x = ins.x
        self.mem[self.idx:self.idx+x+1] = self.v_regs[:x+1]
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x:X}, [I]")
    def _load_vregs(self, ins):
        """read registers V0 through Vx (included) from memory starting at location I"""
        x = ins.x
        self.v_regs[:x+1] = self.mem[self.idx:self.idx+x+1]
        self._goto_next_instruction()
        return locals()

    # ********** TIMERS AND KEYPAD
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x:X}, DT")
    def _set_vx_dt(self, ins):
        """set Vx = DT (delay timer) value"""
        x = ins.x
        self.v_regs[x] = self.dt
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD DT, V{x:X}")
    def _set_dt_vx(self, ins):
        """set DT (delay timer) = Vx"""
        x = ins.x
        self.dt = self.v_regs[x]
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD ST, V{register:X}")
    def _set_st(self, ins):
        """set ST = Vx"""
        register = ins.x
        self.st = self.v_regs[register]
        self._goto_next_instruction()
        return locals()

    @asm("mem_addr: 0x{mem_addr:04x}    instruction: LD V{x:X}, K    key: {key}")
    def _wait_keypress(self, ins):
        """wait for a key press and store its value in Vx"""
        x = ins.x
        key = self.keypad.first()
        if key is None:
            return locals()     # stay on the same instruction until a key is pressed
        self.v_regs[x] = key
        self._goto_next_instruction()
        return locals()

    # ********** DISPLAY
    @asm("mem_addr: 0x{mem_addr:04x}    instruction: DRW V{x:X}, V{y:X}, {n_bytes}    collision: {collision}")
    def _to_screen(self, ins):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        x, y, n_bytes = ins.x, ins.y, ins.n
        sprite = self.mem[self.idx:self.idx+n_bytes] if n_bytes else []
        collision = 0
        # step through each sprite byte, every row wraps around independently
        for i, sprite_byte in enumerate(sprite):
            y_coordinate = (self.v_regs[y] + i) % self.screen.h
            for j in range(8):
                if not sprite_byte & (0x80 >> j):
                    continue
                x_coordinate = (self.v_regs[x] + j) % self.screen.w
                # sprites are XORed onto the existing screen and if this
                # causes any pixel to be erased then VF=1, otherwise VF=0
                if self.screen.toggle_pixel(x_coordinate, y_coordinate):
                    collision = 1
        self.v_regs[0xF] = collision
        self.screen.dirty = True
        self._goto_next_instruction()
        return locals()
