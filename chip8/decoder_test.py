import unittest

from chip8 import decoder as op
from chip8.decoder import OPCODES, decode, disassemble


class TestFields(unittest.TestCase):
    def test_operands(self):
        ins = decode(0xD12F)
        self.assertEqual(ins.op, op.DRW)
        self.assertEqual((ins.x, ins.y, ins.n), (0x1, 0x2, 0xF))
        self.assertEqual(ins.kk, 0x2F)
        self.assertEqual(ins.nnn, 0x12F)
        self.assertEqual(ins.word, 0xD12F)


class TestDecoding(unittest.TestCase):
    def test_every_opcode(self):
        words = {
            0x0123: op.SYS, 0x00E0: op.CLS, 0x00EE: op.RET, 0x1ABC: op.JP, 0x2ABC: op.CALL,
            0x3A12: op.SE_VX_KK, 0x4A12: op.SNE_VX_KK, 0x5AB0: op.SE_VX_VY, 0x6A12: op.LD_VX_KK,
            0x7A12: op.ADD_VX_KK, 0x8AB0: op.LD_VX_VY, 0x8AB1: op.OR, 0x8AB2: op.AND, 0x8AB3: op.XOR,
            0x8AB4: op.ADD_VX_VY, 0x8AB5: op.SUB, 0x8AB6: op.SHR, 0x8AB7: op.SUBN, 0x8ABE: op.SHL,
            0x9AB0: op.SNE_VX_VY, 0xAABC: op.LD_I, 0xBABC: op.JP_V0, 0xCA12: op.RND, 0xDAB5: op.DRW,
            0xEA9E: op.SKP, 0xEAA1: op.SKNP, 0xFA07: op.LD_VX_DT, 0xFA0A: op.LD_VX_K,
            0xFA15: op.LD_DT_VX, 0xFA18: op.LD_ST_VX, 0xFA1E: op.ADD_I_VX, 0xFA29: op.LD_F_VX,
            0xFA33: op.LD_B_VX, 0xFA55: op.LD_MEM_VX, 0xFA65: op.LD_VX_MEM,
        }
        for word, expected in words.items():
            with self.subTest(word=hex(word)):
                self.assertEqual(decode(word).op, expected)
        self.assertEqual(set(words.values()), OPCODES)
        self.assertEqual(len(OPCODES), 35)

    def test_unknown(self):
        for word in (0x5AB1, 0x9AB7, 0x8AB8, 0x8ABF, 0xEA00, 0xEA9F, 0xFA00, 0xFAFF):
            with self.subTest(word=hex(word)):
                ins = decode(word)
                self.assertEqual(ins.op, op.UNKNOWN)
                self.assertFalse(ins.known)

    def test_pure(self):
        self.assertEqual(decode(0x8124), decode(0x8124))


class TestDisassemble(unittest.TestCase):
    def test_text(self):
        self.assertEqual(disassemble(decode(0x00E0)), "CLS")
        self.assertEqual(disassemble(decode(0x2300)), "CALL 0x300")
        self.assertEqual(disassemble(decode(0x8AB4)), "ADD VA, VB")
        self.assertEqual(str(decode(0xD125)), "DRW V1, V2, 5")
        self.assertEqual(disassemble(decode(0xFFFF)), "DW 0xffff")


if __name__ == "__main__":
    unittest.main()
