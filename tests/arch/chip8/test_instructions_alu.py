import random
import unittest

from chip8_tracer.arch.chip8.machine import Machine
from chip8_tracer.arch.chip8.instructions import ExecutionContext, decode_opcode, execute_instruction

class TestChip8AluInstructions(unittest.TestCase):
    def setUp(self):
        self.machine = Machine()
        self.bus = self.machine.bus
        self.state = self.machine.state
        self.ctx = ExecutionContext(rng=random.Random(0))

    def _execute(self, word, pc=0x200):
        self.state.pc = pc
        op = decode_opcode(word)
        self.assertTrue(execute_instruction(op, self.state, self.bus, self.ctx))

    def test_add_byte_wraps_without_flag(self):
        self.state.v[3] = 0xF0
        self.state.vf = 0x07
        # ADD V3, #$20
        self._execute(0x7320)
        self.assertEqual(self.state.v[3], 0x10)
        self.assertEqual(self.state.vf, 0x07)
        self.assertEqual(self.state.pc, 0x202)

    def test_ld_or_and_xor(self):
        self.state.v[1] = 0b1100
        self.state.v[2] = 0b1010
        self.state.vf = 0x55

        self._execute(0x8121)  # OR
        self.assertEqual(self.state.v[1], 0b1110)
        self._execute(0x8122)  # AND
        self.assertEqual(self.state.v[1], 0b1010)
        self._execute(0x8123)  # XOR
        self.assertEqual(self.state.v[1], 0)
        self._execute(0x8120)  # LD
        self.assertEqual(self.state.v[1], 0b1010)
        self.assertEqual(self.state.vf, 0x55)  # no flag effect
        self.assertEqual(self.state.pc, 0x202)

    def test_add_reg_with_carry(self):
        self.state.v[0] = 250
        self.state.v[1] = 10
        # ADD V0, V1
        self._execute(0x8014)
        self.assertEqual(self.state.v[0], 4)
        self.assertEqual(self.state.vf, 1)
        self.assertEqual(self.state.pc, 0x202)

    def test_add_reg_without_carry(self):
        self.state.v[0] = 0x10
        self.state.v[1] = 0x20
        self.state.vf = 1
        self._execute(0x8014)
        self.assertEqual(self.state.v[0], 0x30)
        self.assertEqual(self.state.vf, 0)

    def test_add_reg_exactly_255_has_no_carry(self):
        self.state.v[0] = 0xFF
        self.state.v[1] = 0x00
        self._execute(0x8014)
        self.assertEqual(self.state.v[0], 0xFF)
        self.assertEqual(self.state.vf, 0)

    def test_add_into_vf_keeps_sum(self):
        # 結果の書き込みがフラグより後なので、VFには合計値が残る
        self.state.vf = 0x01
        self.state.v[1] = 0x02
        self._execute(0x8F14)
        self.assertEqual(self.state.vf, 0x03)

    def test_sub_with_borrow(self):
        self.state.v[0] = 5
        self.state.v[1] = 10
        # SUB V0, V1
        self._execute(0x8015)
        self.assertEqual(self.state.v[0], 251)
        self.assertEqual(self.state.vf, 0)

    def test_sub_without_borrow(self):
        self.state.v[0] = 10
        self.state.v[1] = 3
        self._execute(0x8015)
        self.assertEqual(self.state.v[0], 7)
        self.assertEqual(self.state.vf, 1)

    def test_sub_equal_values_sets_flag_zero(self):
        self.state.v[0] = 7
        self.state.v[1] = 7
        self._execute(0x8015)
        self.assertEqual(self.state.v[0], 0)
        self.assertEqual(self.state.vf, 0)

    def test_subn(self):
        self.state.v[2] = 3
        self.state.v[4] = 10
        # SUBN V2, V4 -> V2 = V4 - V2
        self._execute(0x8247)
        self.assertEqual(self.state.v[2], 7)
        self.assertEqual(self.state.vf, 1)

        self.state.v[2] = 10
        self.state.v[4] = 3
        self._execute(0x8247)
        self.assertEqual(self.state.v[2], 249)
        self.assertEqual(self.state.vf, 0)

    def test_shr(self):
        self.state.v[5] = 0b00000011
        self._execute(0x8506)
        self.assertEqual(self.state.v[5], 1)
        self.assertEqual(self.state.vf, 1)

        self._execute(0x8506)
        self.assertEqual(self.state.v[5], 0)
        self.assertEqual(self.state.vf, 1)

        self._execute(0x8506)
        self.assertEqual(self.state.v[5], 0)
        self.assertEqual(self.state.vf, 0)

    def test_shl(self):
        self.state.v[6] = 0b10000001
        self._execute(0x860E)
        self.assertEqual(self.state.v[6], 0b00000010)
        self.assertEqual(self.state.vf, 1)

        self.state.v[6] = 0b01000000
        self._execute(0x860E)
        self.assertEqual(self.state.v[6], 0b10000000)
        self.assertEqual(self.state.vf, 0)

    def test_unknown_alu_variant_is_not_executed(self):
        op = decode_opcode(0x8128)
        self.assertIsNone(op.tag)
        self.assertFalse(execute_instruction(op, self.state, self.bus, self.ctx))
        self.assertEqual(self.state.pc, 0x200)

if __name__ == '__main__':
    unittest.main()
