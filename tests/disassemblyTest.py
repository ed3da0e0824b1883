import unittest
from parameterized import parameterized

from sim6502.constants import ProcessorType
from sim6502.disassembly import disassemble, disassemble_range, format_line


def peek_from(program, address=0x1000):
    memory = [0] * 0x10000
    memory[address:address + len(program)] = program
    return lambda a: memory[a & 0xffff]


class DisassemblyTests(unittest.TestCase):
    @parameterized.expand([
        ([0xa9, 0x42], 'LDA #$42', 2),
        ([0x85, 0x10], 'STA $10', 2),
        ([0xb5, 0x10], 'LDA $10,X', 2),
        ([0x96, 0x10], 'STX $10,Y', 2),
        ([0x8d, 0x00, 0x20], 'STA $2000', 3),
        ([0xbd, 0x34, 0x12], 'LDA $1234,X', 3),
        ([0xb9, 0x34, 0x12], 'LDA $1234,Y', 3),
        ([0x6c, 0xff, 0x10], 'JMP ($10FF)', 3),
        ([0xa1, 0x80], 'LDA ($80,X)', 2),
        ([0xb1, 0x80], 'LDA ($80),Y', 2),
        ([0x0a], 'ASL A', 1),
        ([0xea], 'NOP', 1),
        ([0xf0, 0xfe], 'BEQ $1000', 2),
        ([0xd0, 0x10], 'BNE $1012', 2),
        ([0x10, 0x80], 'BPL $0F82', 2),
        ([0xff], '.BYTE $FF', 1),
        ([0xda], '.BYTE $DA', 1),
    ])
    def test_disassemble(self, program, text, length):
        dis = disassemble(peek_from(program), 0x1000)
        self.assertEqual(dis.text, text)
        self.assertEqual(dis.length, length)
        self.assertEqual(dis.raw_bytes, program)
        self.assertEqual(dis.address, 0x1000)

    def test_65c02(self):
        peek = peek_from([0xda, 0x80, 0x02])
        self.assertEqual(disassemble(peek, 0x1000, ProcessorType.WDC65C02).text, 'PHX')
        self.assertEqual(disassemble(peek, 0x1001, ProcessorType.WDC65C02).text, 'BRA $1005')
        self.assertEqual(disassemble(peek, 0x1000, ProcessorType.MOS6502).mnemonic, '.BYTE')

    def test_format(self):
        peek = peek_from([0xa9, 0x42, 0x8d, 0x00, 0x20])
        self.assertEqual(format_line(disassemble(peek, 0x1000)), '1000  A9 42     LDA #$42')
        self.assertEqual(disassemble_range(peek, 0x1000, 0x1005), [
            '1000  A9 42     LDA #$42',
            '1002  8D 00 20  STA $2000',
        ])


if __name__ == '__main__':
    unittest.main()
