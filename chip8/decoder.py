from collections import namedtuple


# ******************** MNEMONICS
SYS = "SYS"
CLS = "CLS"
RET = "RET"
JP = "JP"
CALL = "CALL"
SE_VX_KK = "SE_VX_KK"
SNE_VX_KK = "SNE_VX_KK"
SE_VX_VY = "SE_VX_VY"
LD_VX_KK = "LD_VX_KK"
ADD_VX_KK = "ADD_VX_KK"
LD_VX_VY = "LD_VX_VY"
OR = "OR"
AND = "AND"
XOR = "XOR"
ADD_VX_VY = "ADD_VX_VY"
SUB = "SUB"
SHR = "SHR"
SUBN = "SUBN"
SHL = "SHL"
SNE_VX_VY = "SNE_VX_VY"
LD_I = "LD_I"
JP_V0 = "JP_V0"
RND = "RND"
DRW = "DRW"
SKP = "SKP"
SKNP = "SKNP"
LD_VX_DT = "LD_VX_DT"
LD_VX_K = "LD_VX_K"
LD_DT_VX = "LD_DT_VX"
LD_ST_VX = "LD_ST_VX"
ADD_I_VX = "ADD_I_VX"
LD_F_VX = "LD_F_VX"
LD_B_VX = "LD_B_VX"
LD_MEM_VX = "LD_MEM_VX"
LD_VX_MEM = "LD_VX_MEM"
UNKNOWN = "UNKNOWN"

# WATCH OUT: masks order is important!!!
# the most specific masks come first because the lookup stops at the first match
MASKS = (
    (0xFFFF, {0x00E0: CLS, 0x00EE: RET}),
    (0xF0FF, {0xE09E: SKP, 0xE0A1: SKNP,
              0xF007: LD_VX_DT, 0xF00A: LD_VX_K, 0xF015: LD_DT_VX, 0xF018: LD_ST_VX,
              0xF01E: ADD_I_VX, 0xF029: LD_F_VX, 0xF033: LD_B_VX,
              0xF055: LD_MEM_VX, 0xF065: LD_VX_MEM}),
    (0xF00F, {0x5000: SE_VX_VY, 0x9000: SNE_VX_VY,
              0x8000: LD_VX_VY, 0x8001: OR, 0x8002: AND, 0x8003: XOR, 0x8004: ADD_VX_VY,
              0x8005: SUB, 0x8006: SHR, 0x8007: SUBN, 0x800E: SHL}),
    (0xF000, {0x0000: SYS, 0x1000: JP, 0x2000: CALL, 0x3000: SE_VX_KK, 0x4000: SNE_VX_KK,
              0x6000: LD_VX_KK, 0x7000: ADD_VX_KK, 0xA000: LD_I, 0xB000: JP_V0,
              0xC000: RND, 0xD000: DRW}),
)

OPCODES = frozenset(op for _, ops in MASKS for op in ops.values())

ASM = {
    SYS: "SYS 0x{nnn:03x}",
    CLS: "CLS",
    RET: "RET",
    JP: "JP 0x{nnn:03x}",
    CALL: "CALL 0x{nnn:03x}",
    SE_VX_KK: "SE V{x:X}, 0x{kk:02x}",
    SNE_VX_KK: "SNE V{x:X}, 0x{kk:02x}",
    SE_VX_VY: "SE V{x:X}, V{y:X}",
    LD_VX_KK: "LD V{x:X}, 0x{kk:02x}",
    ADD_VX_KK: "ADD V{x:X}, 0x{kk:02x}",
    LD_VX_VY: "LD V{x:X}, V{y:X}",
    OR: "OR V{x:X}, V{y:X}",
    AND: "AND V{x:X}, V{y:X}",
    XOR: "XOR V{x:X}, V{y:X}",
    ADD_VX_VY: "ADD V{x:X}, V{y:X}",
    SUB: "SUB V{x:X}, V{y:X}",
    SHR: "SHR V{x:X}",
    SUBN: "SUBN V{x:X}, V{y:X}",
    SHL: "SHL V{x:X}",
    SNE_VX_VY: "SNE V{x:X}, V{y:X}",
    LD_I: "LD I, 0x{nnn:03x}",
    JP_V0: "JP V0, 0x{nnn:03x}",
    RND: "RND V{x:X}, 0x{kk:02x}",
    DRW: "DRW V{x:X}, V{y:X}, {n}",
    SKP: "SKP V{x:X}",
    SKNP: "SKNP V{x:X}",
    LD_VX_DT: "LD V{x:X}, DT",
    LD_VX_K: "LD V{x:X}, K",
    LD_DT_VX: "LD DT, V{x:X}",
    LD_ST_VX: "LD ST, V{x:X}",
    ADD_I_VX: "ADD I, V{x:X}",
    LD_F_VX: "LD F, V{x:X}",
    LD_B_VX: "LD B, V{x:X}",
    LD_MEM_VX: "LD [I], V{x:X}",
    LD_VX_MEM: "LD V{x:X}, [I]",
    UNKNOWN: "DW 0x{word:04x}",
}


class Instruction(namedtuple("Instruction", "op word x y n kk nnn")):
    """a decoded instruction word, every operand field is always extracted and each handler picks the ones it needs"""
    __slots__ = ()

    @property
    def known(self):
        return self.op != UNKNOWN

    def __str__(self):
        return disassemble(self)


def fields(word):
    """split an instruction word into its (x, y, n, kk, nnn) operand fields"""
    return (word & 0x0F00) >> 8, (word & 0x00F0) >> 4, word & 0x000F, word & 0x00FF, word & 0x0FFF


def decode(word):
    """map a 16 bit instruction word to an Instruction, words matching no pattern get the UNKNOWN op"""
    word &= 0xFFFF
    op = UNKNOWN
    for mask, ops in MASKS:
        if (word & mask) in ops:
            op = ops[word & mask]
            break
    return Instruction(op, word, *fields(word))


def disassemble(instruction):
    return ASM[instruction.op].format(**instruction._asdict())
