import unittest
from parameterized import parameterized

from sim6502 import opcodes
from sim6502.constants import AddressingMode, ProcessorType, OPERAND_BYTES

IMP = AddressingMode.IMPLIED
ACC = AddressingMode.ACCUMULATOR
IMM = AddressingMode.IMMEDIATE
ZP = AddressingMode.ZERO_PAGE
ZPX = AddressingMode.ZERO_PAGE_X
ZPY = AddressingMode.ZERO_PAGE_Y
ABS = AddressingMode.ABSOLUTE
ABX = AddressingMode.ABSOLUTE_X
ABY = AddressingMode.ABSOLUTE_Y
IND = AddressingMode.INDIRECT
IZX = AddressingMode.INDIRECT_X
IZY = AddressingMode.INDIRECT_Y
REL = AddressingMode.RELATIVE

# (opcode, mnemonic, mode, length, cycles) for all 151 documented opcodes, from the MOS
# programming manual
GOLDEN_6502 = [
    (0x69, 'ADC', IMM, 2, 2), (0x65, 'ADC', ZP, 2, 3), (0x75, 'ADC', ZPX, 2, 4), (0x6d, 'ADC', ABS, 3, 4),
    (0x7d, 'ADC', ABX, 3, 4), (0x79, 'ADC', ABY, 3, 4), (0x61, 'ADC', IZX, 2, 6), (0x71, 'ADC', IZY, 2, 5),
    (0x29, 'AND', IMM, 2, 2), (0x25, 'AND', ZP, 2, 3), (0x35, 'AND', ZPX, 2, 4), (0x2d, 'AND', ABS, 3, 4),
    (0x3d, 'AND', ABX, 3, 4), (0x39, 'AND', ABY, 3, 4), (0x21, 'AND', IZX, 2, 6), (0x31, 'AND', IZY, 2, 5),
    (0x0a, 'ASL', ACC, 1, 2), (0x06, 'ASL', ZP, 2, 5), (0x16, 'ASL', ZPX, 2, 6), (0x0e, 'ASL', ABS, 3, 6),
    (0x1e, 'ASL', ABX, 3, 7),
    (0x90, 'BCC', REL, 2, 2), (0xb0, 'BCS', REL, 2, 2), (0xf0, 'BEQ', REL, 2, 2), (0x30, 'BMI', REL, 2, 2),
    (0xd0, 'BNE', REL, 2, 2), (0x10, 'BPL', REL, 2, 2), (0x50, 'BVC', REL, 2, 2), (0x70, 'BVS', REL, 2, 2),
    (0x24, 'BIT', ZP, 2, 3), (0x2c, 'BIT', ABS, 3, 4),
    (0x00, 'BRK', IMP, 1, 7),
    (0x18, 'CLC', IMP, 1, 2), (0xd8, 'CLD', IMP, 1, 2), (0x58, 'CLI', IMP, 1, 2), (0xb8, 'CLV', IMP, 1, 2),
    (0xc9, 'CMP', IMM, 2, 2), (0xc5, 'CMP', ZP, 2, 3), (0xd5, 'CMP', ZPX, 2, 4), (0xcd, 'CMP', ABS, 3, 4),
    (0xdd, 'CMP', ABX, 3, 4), (0xd9, 'CMP', ABY, 3, 4), (0xc1, 'CMP', IZX, 2, 6), (0xd1, 'CMP', IZY, 2, 5),
    (0xe0, 'CPX', IMM, 2, 2), (0xe4, 'CPX', ZP, 2, 3), (0xec, 'CPX', ABS, 3, 4),
    (0xc0, 'CPY', IMM, 2, 2), (0xc4, 'CPY', ZP, 2, 3), (0xcc, 'CPY', ABS, 3, 4),
    (0xc6, 'DEC', ZP, 2, 5), (0xd6, 'DEC', ZPX, 2, 6), (0xce, 'DEC', ABS, 3, 6), (0xde, 'DEC', ABX, 3, 7),
    (0xca, 'DEX', IMP, 1, 2), (0x88, 'DEY', IMP, 1, 2),
    (0x49, 'EOR', IMM, 2, 2), (0x45, 'EOR', ZP, 2, 3), (0x55, 'EOR', ZPX, 2, 4), (0x4d, 'EOR', ABS, 3, 4),
    (0x5d, 'EOR', ABX, 3, 4), (0x59, 'EOR', ABY, 3, 4), (0x41, 'EOR', IZX, 2, 6), (0x51, 'EOR', IZY, 2, 5),
    (0xe6, 'INC', ZP, 2, 5), (0xf6, 'INC', ZPX, 2, 6), (0xee, 'INC', ABS, 3, 6), (0xfe, 'INC', ABX, 3, 7),
    (0xe8, 'INX', IMP, 1, 2), (0xc8, 'INY', IMP, 1, 2),
    (0x4c, 'JMP', ABS, 3, 3), (0x6c, 'JMP', IND, 3, 5),
    (0x20, 'JSR', ABS, 3, 6),
    (0xa9, 'LDA', IMM, 2, 2), (0xa5, 'LDA', ZP, 2, 3), (0xb5, 'LDA', ZPX, 2, 4), (0xad, 'LDA', ABS, 3, 4),
    (0xbd, 'LDA', ABX, 3, 4), (0xb9, 'LDA', ABY, 3, 4), (0xa1, 'LDA', IZX, 2, 6), (0xb1, 'LDA', IZY, 2, 5),
    (0xa2, 'LDX', IMM, 2, 2), (0xa6, 'LDX', ZP, 2, 3), (0xb6, 'LDX', ZPY, 2, 4), (0xae, 'LDX', ABS, 3, 4),
    (0xbe, 'LDX', ABY, 3, 4),
    (0xa0, 'LDY', IMM, 2, 2), (0xa4, 'LDY', ZP, 2, 3), (0xb4, 'LDY', ZPX, 2, 4), (0xac, 'LDY', ABS, 3, 4),
    (0xbc, 'LDY', ABX, 3, 4),
    (0x4a, 'LSR', ACC, 1, 2), (0x46, 'LSR', ZP, 2, 5), (0x56, 'LSR', ZPX, 2, 6), (0x4e, 'LSR', ABS, 3, 6),
    (0x5e, 'LSR', ABX, 3, 7),
    (0xea, 'NOP', IMP, 1, 2),
    (0x09, 'ORA', IMM, 2, 2), (0x05, 'ORA', ZP, 2, 3), (0x15, 'ORA', ZPX, 2, 4), (0x0d, 'ORA', ABS, 3, 4),
    (0x1d, 'ORA', ABX, 3, 4), (0x19, 'ORA', ABY, 3, 4), (0x01, 'ORA', IZX, 2, 6), (0x11, 'ORA', IZY, 2, 5),
    (0x48, 'PHA', IMP, 1, 3), (0x08, 'PHP', IMP, 1, 3), (0x68, 'PLA', IMP, 1, 4), (0x28, 'PLP', IMP, 1, 4),
    (0x2a, 'ROL', ACC, 1, 2), (0x26, 'ROL', ZP, 2, 5), (0x36, 'ROL', ZPX, 2, 6), (0x2e, 'ROL', ABS, 3, 6),
    (0x3e, 'ROL', ABX, 3, 7),
    (0x6a, 'ROR', ACC, 1, 2), (0x66, 'ROR', ZP, 2, 5), (0x76, 'ROR', ZPX, 2, 6), (0x6e, 'ROR', ABS, 3, 6),
    (0x7e, 'ROR', ABX, 3, 7),
    (0x40, 'RTI', IMP, 1, 6), (0x60, 'RTS', IMP, 1, 6),
    (0xe9, 'SBC', IMM, 2, 2), (0xe5, 'SBC', ZP, 2, 3), (0xf5, 'SBC', ZPX, 2, 4), (0xed, 'SBC', ABS, 3, 4),
    (0xfd, 'SBC', ABX, 3, 4), (0xf9, 'SBC', ABY, 3, 4), (0xe1, 'SBC', IZX, 2, 6), (0xf1, 'SBC', IZY, 2, 5),
    (0x38, 'SEC', IMP, 1, 2), (0xf8, 'SED', IMP, 1, 2), (0x78, 'SEI', IMP, 1, 2),
    (0x85, 'STA', ZP, 2, 3), (0x95, 'STA', ZPX, 2, 4), (0x8d, 'STA', ABS, 3, 4), (0x9d, 'STA', ABX, 3, 5),
    (0x99, 'STA', ABY, 3, 5), (0x81, 'STA', IZX, 2, 6), (0x91, 'STA', IZY, 2, 6),
    (0x86, 'STX', ZP, 2, 3), (0x96, 'STX', ZPY, 2, 4), (0x8e, 'STX', ABS, 3, 4),
    (0x84, 'STY', ZP, 2, 3), (0x94, 'STY', ZPX, 2, 4), (0x8c, 'STY', ABS, 3, 4),
    (0xaa, 'TAX', IMP, 1, 2), (0xa8, 'TAY', IMP, 1, 2), (0xba, 'TSX', IMP, 1, 2), (0x8a, 'TXA', IMP, 1, 2),
    (0x9a, 'TXS', IMP, 1, 2), (0x98, 'TYA', IMP, 1, 2),
]

GOLDEN_65C02_ONLY = [
    (0xda, 'PHX', IMP, 1, 3), (0xfa, 'PLX', IMP, 1, 4), (0x5a, 'PHY', IMP, 1, 3), (0x7a, 'PLY', IMP, 1, 4),
    (0x64, 'STZ', ZP, 2, 3), (0x74, 'STZ', ZPX, 2, 4), (0x9c, 'STZ', ABS, 3, 4), (0x9e, 'STZ', ABX, 3, 5),
    (0x80, 'BRA', REL, 2, 3),
    (0x1a, 'INC', ACC, 1, 2), (0x3a, 'DEC', ACC, 1, 2),
    (0x04, 'TSB', ZP, 2, 5), (0x0c, 'TSB', ABS, 3, 6), (0x14, 'TRB', ZP, 2, 5), (0x1c, 'TRB', ABS, 3, 6),
]


class OpcodeRegistryTests(unittest.TestCase):
    def test_opcode_counts(self):
        self.assertEqual(opcodes.opcode_count(ProcessorType.MOS6502), 151)
        self.assertEqual(opcodes.opcode_count(ProcessorType.MOS6510), 151)
        self.assertEqual(opcodes.opcode_count(ProcessorType.WDC65C02), 151 + len(GOLDEN_65C02_ONLY))
        self.assertEqual(opcodes.opcode_count(), 151)

    def test_documented_mnemonics(self):
        mnemonics = {e.mnemonic for e in opcodes.MOS6502_OPCODES if e is not None}
        self.assertEqual(len(mnemonics), 56)

    def test_golden_table_covers_every_opcode(self):
        self.assertEqual(len(GOLDEN_6502), 151)
        self.assertEqual({row[0] for row in GOLDEN_6502},
                         {e.opcode for e in opcodes.MOS6502_OPCODES if e is not None})

    @parameterized.expand(GOLDEN_6502)
    def test_6502_entries(self, opcode, mnemonic, mode, length, cycles):
        for processor_type in ProcessorType:
            entry = opcodes.lookup(opcode, processor_type)
            self.assertIsNotNone(entry)
            self.assertEqual(entry.opcode, opcode)
            self.assertEqual(entry.mnemonic, mnemonic)
            self.assertEqual(entry.mode, mode)
            self.assertEqual(entry.length, length)
            self.assertEqual(entry.cycles, cycles)

    @parameterized.expand(GOLDEN_65C02_ONLY)
    def test_65c02_entries(self, opcode, mnemonic, mode, length, cycles):
        entry = opcodes.lookup(opcode, ProcessorType.WDC65C02)
        self.assertEqual((entry.opcode, entry.mnemonic, entry.mode, entry.length, entry.cycles),
                         (opcode, mnemonic, mode, length, cycles))

        # not available on the NMOS parts
        self.assertIsNone(opcodes.lookup(opcode, ProcessorType.MOS6502))
        self.assertIsNone(opcodes.lookup(opcode, ProcessorType.MOS6510))

    def test_illegal_opcodes(self):
        for processor_type in ProcessorType:
            self.assertIsNone(opcodes.lookup(0xff, processor_type))
            self.assertIsNone(opcodes.lookup(0x02, processor_type))

    def test_table_consistency(self):
        for processor_type in ProcessorType:
            table = opcodes.opcode_table(processor_type)
            self.assertEqual(len(table), 256)
            for i, entry in enumerate(table):
                if entry is None:
                    continue
                self.assertEqual(entry.opcode, i)
                self.assertEqual(entry.length, 1 + OPERAND_BYTES[entry.mode])
                self.assertTrue(callable(entry.handler))

    def test_65c02_shares_6502_entries(self):
        for entry in opcodes.MOS6502_OPCODES:
            if entry is not None:
                self.assertIs(opcodes.WDC65C02_OPCODES[entry.opcode], entry)
        self.assertIs(opcodes.opcode_table(ProcessorType.MOS6510), opcodes.MOS6502_OPCODES)


if __name__ == '__main__':
    unittest.main()
