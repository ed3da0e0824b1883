# Opcode registry
#
# Two read-only tables of 256 slots, indexed by opcode byte and built once at import:
#   MOS6502_OPCODES  - the 151 documented NMOS 6502 opcodes (also used by the 6510)
#   WDC65C02_OPCODES - a copy of the 6502 table overlaid with the 65C02 additions
# Unassigned slots hold None.  Illegal/undocumented NMOS opcodes are not emulated.
#
# The cycle counts are the documented base counts.  The emulator does not add them up; it
# counts bus cycles as the handlers run, so these are for reference, disassembly and tests.

import collections
from functools import partial

from sim6502 import operations as ops
from sim6502.constants import AddressingMode, ProcessorType, OPERAND_BYTES
from sim6502.errors import Sim6502ValueError

OpcodeEntry = collections.namedtuple('OpcodeEntry', ['opcode', 'mnemonic', 'mode', 'length', 'cycles', 'handler'])

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


def _with_index_cycle(handler):
    """
    Indexed stores and read-modify-write instructions never make the page-crossing read,
    and instead always spend one extra internal cycle
    """
    def handle(cpu):
        handler(cpu)
        cpu.increment_cycle_count()
    return handle


def _standard_group(mnemonic, operation, opcodes):
    # the eight addressing modes shared by ADC, AND, CMP, EOR, LDA, ORA and SBC
    modes = (IMM, ZP, ZPX, ABS, ABX, ABY, IZX, IZY)
    cycles = (2, 3, 4, 4, 4, 4, 6, 5)
    return [(op, mnemonic, mode, cyc, partial(operation, mode=mode))
            for op, mode, cyc in zip(opcodes, modes, cycles)]


def _shift_group(mnemonic, operation, opcodes):
    # accumulator, zp, zp,X, abs, abs,X
    modes = (ACC, ZP, ZPX, ABS, ABX)
    cycles = (2, 5, 6, 6, 7)
    group = [(op, mnemonic, mode, cyc, partial(operation, mode=mode))
             for op, mode, cyc in zip(opcodes, modes, cycles)]
    op, mnemonic, mode, cyc, handler = group[-1]
    group[-1] = (op, mnemonic, mode, cyc, _with_index_cycle(handler))
    return group


def _memory_step_group(mnemonic, operation, opcodes):
    # INC and DEC: zp, zp,X, abs, abs,X
    modes = (ZP, ZPX, ABS, ABX)
    cycles = (5, 6, 6, 7)
    group = [(op, mnemonic, mode, cyc, partial(operation, mode=mode))
             for op, mode, cyc in zip(opcodes, modes, cycles)]
    op, mnemonic, mode, cyc, handler = group[-1]
    group[-1] = (op, mnemonic, mode, cyc, _with_index_cycle(handler))
    return group


def _branch(opcode, mnemonic, flag, when_set):
    return (opcode, mnemonic, REL, 2, partial(ops.branch, flag=flag, when_set=when_set))


def _mos6502_definitions():
    defs = []
    defs += _standard_group('ADC', ops.adc, (0x69, 0x65, 0x75, 0x6d, 0x7d, 0x79, 0x61, 0x71))
    defs += _standard_group('AND', ops.and_, (0x29, 0x25, 0x35, 0x2d, 0x3d, 0x39, 0x21, 0x31))
    defs += _standard_group('CMP', partial(ops.compare, register='a'),
                            (0xc9, 0xc5, 0xd5, 0xcd, 0xdd, 0xd9, 0xc1, 0xd1))
    defs += _standard_group('EOR', ops.eor, (0x49, 0x45, 0x55, 0x4d, 0x5d, 0x59, 0x41, 0x51))
    defs += _standard_group('LDA', partial(ops.load, register='a'),
                            (0xa9, 0xa5, 0xb5, 0xad, 0xbd, 0xb9, 0xa1, 0xb1))
    defs += _standard_group('ORA', ops.ora, (0x09, 0x05, 0x15, 0x0d, 0x1d, 0x19, 0x01, 0x11))
    defs += _standard_group('SBC', ops.sbc, (0xe9, 0xe5, 0xf5, 0xed, 0xfd, 0xf9, 0xe1, 0xf1))

    defs += _shift_group('ASL', ops.asl, (0x0a, 0x06, 0x16, 0x0e, 0x1e))
    defs += _shift_group('LSR', ops.lsr, (0x4a, 0x46, 0x56, 0x4e, 0x5e))
    defs += _shift_group('ROL', ops.rol, (0x2a, 0x26, 0x36, 0x2e, 0x3e))
    defs += _shift_group('ROR', ops.ror, (0x6a, 0x66, 0x76, 0x6e, 0x7e))

    defs += _memory_step_group('INC', ops.inc, (0xe6, 0xf6, 0xee, 0xfe))
    defs += _memory_step_group('DEC', ops.dec, (0xc6, 0xd6, 0xce, 0xde))

    defs += [
        _branch(0x90, 'BCC', 'carry_flag', False),
        _branch(0xb0, 'BCS', 'carry_flag', True),
        _branch(0xf0, 'BEQ', 'zero_flag', True),
        _branch(0xd0, 'BNE', 'zero_flag', False),
        _branch(0x30, 'BMI', 'negative_flag', True),
        _branch(0x10, 'BPL', 'negative_flag', False),
        _branch(0x50, 'BVC', 'overflow_flag', False),
        _branch(0x70, 'BVS', 'overflow_flag', True),

        (0x24, 'BIT', ZP, 3, partial(ops.bit, mode=ZP)),
        (0x2c, 'BIT', ABS, 4, partial(ops.bit, mode=ABS)),

        (0x00, 'BRK', IMP, 7, ops.brk),

        (0x18, 'CLC', IMP, 2, partial(ops.set_flag, flag='carry_flag', value=False)),
        (0xd8, 'CLD', IMP, 2, partial(ops.set_flag, flag='decimal_flag', value=False)),
        (0x58, 'CLI', IMP, 2, partial(ops.set_flag, flag='interrupt_disable_flag', value=False)),
        (0xb8, 'CLV', IMP, 2, partial(ops.set_flag, flag='overflow_flag', value=False)),
        (0x38, 'SEC', IMP, 2, partial(ops.set_flag, flag='carry_flag', value=True)),
        (0xf8, 'SED', IMP, 2, partial(ops.set_flag, flag='decimal_flag', value=True)),
        (0x78, 'SEI', IMP, 2, partial(ops.set_flag, flag='interrupt_disable_flag', value=True)),

        (0xe0, 'CPX', IMM, 2, partial(ops.compare, mode=IMM, register='x')),
        (0xe4, 'CPX', ZP, 3, partial(ops.compare, mode=ZP, register='x')),
        (0xec, 'CPX', ABS, 4, partial(ops.compare, mode=ABS, register='x')),
        (0xc0, 'CPY', IMM, 2, partial(ops.compare, mode=IMM, register='y')),
        (0xc4, 'CPY', ZP, 3, partial(ops.compare, mode=ZP, register='y')),
        (0xcc, 'CPY', ABS, 4, partial(ops.compare, mode=ABS, register='y')),

        (0xca, 'DEX', IMP, 2, partial(ops.increment_register, register='x', delta=-1)),
        (0x88, 'DEY', IMP, 2, partial(ops.increment_register, register='y', delta=-1)),
        (0xe8, 'INX', IMP, 2, partial(ops.increment_register, register='x', delta=1)),
        (0xc8, 'INY', IMP, 2, partial(ops.increment_register, register='y', delta=1)),

        (0x4c, 'JMP', ABS, 3, partial(ops.jmp, mode=ABS)),
        (0x6c, 'JMP', IND, 5, partial(ops.jmp, mode=IND)),
        (0x20, 'JSR', ABS, 6, ops.jsr),
        (0x60, 'RTS', IMP, 6, ops.rts),
        (0x40, 'RTI', IMP, 6, ops.rti),

        (0xa2, 'LDX', IMM, 2, partial(ops.load, mode=IMM, register='x')),
        (0xa6, 'LDX', ZP, 3, partial(ops.load, mode=ZP, register='x')),
        (0xb6, 'LDX', ZPY, 4, partial(ops.load, mode=ZPY, register='x')),
        (0xae, 'LDX', ABS, 4, partial(ops.load, mode=ABS, register='x')),
        (0xbe, 'LDX', ABY, 4, partial(ops.load, mode=ABY, register='x')),
        (0xa0, 'LDY', IMM, 2, partial(ops.load, mode=IMM, register='y')),
        (0xa4, 'LDY', ZP, 3, partial(ops.load, mode=ZP, register='y')),
        (0xb4, 'LDY', ZPX, 4, partial(ops.load, mode=ZPX, register='y')),
        (0xac, 'LDY', ABS, 4, partial(ops.load, mode=ABS, register='y')),
        (0xbc, 'LDY', ABX, 4, partial(ops.load, mode=ABX, register='y')),

        (0xea, 'NOP', IMP, 2, ops.nop),

        (0x48, 'PHA', IMP, 3, partial(ops.push_register, register='a')),
        (0x08, 'PHP', IMP, 3, ops.php),
        (0x68, 'PLA', IMP, 4, partial(ops.pull_register, register='a')),
        (0x28, 'PLP', IMP, 4, ops.plp),

        (0x85, 'STA', ZP, 3, partial(ops.store, mode=ZP, register='a')),
        (0x95, 'STA', ZPX, 4, partial(ops.store, mode=ZPX, register='a')),
        (0x8d, 'STA', ABS, 4, partial(ops.store, mode=ABS, register='a')),
        (0x9d, 'STA', ABX, 5, _with_index_cycle(partial(ops.store, mode=ABX, register='a'))),
        (0x99, 'STA', ABY, 5, _with_index_cycle(partial(ops.store, mode=ABY, register='a'))),
        (0x81, 'STA', IZX, 6, partial(ops.store, mode=IZX, register='a')),
        (0x91, 'STA', IZY, 6, _with_index_cycle(partial(ops.store, mode=IZY, register='a'))),
        (0x86, 'STX', ZP, 3, partial(ops.store, mode=ZP, register='x')),
        (0x96, 'STX', ZPY, 4, partial(ops.store, mode=ZPY, register='x')),
        (0x8e, 'STX', ABS, 4, partial(ops.store, mode=ABS, register='x')),
        (0x84, 'STY', ZP, 3, partial(ops.store, mode=ZP, register='y')),
        (0x94, 'STY', ZPX, 4, partial(ops.store, mode=ZPX, register='y')),
        (0x8c, 'STY', ABS, 4, partial(ops.store, mode=ABS, register='y')),

        (0xaa, 'TAX', IMP, 2, partial(ops.transfer, source='a', dest='x')),
        (0xa8, 'TAY', IMP, 2, partial(ops.transfer, source='a', dest='y')),
        (0xba, 'TSX', IMP, 2, partial(ops.transfer, source='sp', dest='x')),
        (0x8a, 'TXA', IMP, 2, partial(ops.transfer, source='x', dest='a')),
        (0x9a, 'TXS', IMP, 2, partial(ops.transfer, source='x', dest='sp')),
        (0x98, 'TYA', IMP, 2, partial(ops.transfer, source='y', dest='a')),
    ]
    return defs


def _wdc65c02_definitions():
    return [
        (0xda, 'PHX', IMP, 3, partial(ops.push_register, register='x')),
        (0xfa, 'PLX', IMP, 4, partial(ops.pull_register, register='x')),
        (0x5a, 'PHY', IMP, 3, partial(ops.push_register, register='y')),
        (0x7a, 'PLY', IMP, 4, partial(ops.pull_register, register='y')),

        (0x64, 'STZ', ZP, 3, partial(ops.store_zero, mode=ZP)),
        (0x74, 'STZ', ZPX, 4, partial(ops.store_zero, mode=ZPX)),
        (0x9c, 'STZ', ABS, 4, partial(ops.store_zero, mode=ABS)),
        (0x9e, 'STZ', ABX, 5, _with_index_cycle(partial(ops.store_zero, mode=ABX))),

        (0x80, 'BRA', REL, 3, ops.bra),

        (0x1a, 'INC', ACC, 2, partial(ops.inc, mode=ACC)),
        (0x3a, 'DEC', ACC, 2, partial(ops.dec, mode=ACC)),

        (0x04, 'TSB', ZP, 5, partial(ops.tsb, mode=ZP)),
        (0x0c, 'TSB', ABS, 6, partial(ops.tsb, mode=ABS)),
        (0x14, 'TRB', ZP, 5, partial(ops.trb, mode=ZP)),
        (0x1c, 'TRB', ABS, 6, partial(ops.trb, mode=ABS)),
    ]


def _build_table(definitions, base=None):
    table = [None] * 256 if base is None else list(base)
    for opcode, mnemonic, mode, cycles, handler in definitions:
        if base is None and table[opcode] is not None:
            raise Sim6502ValueError("Error: opcode $%02X registered twice" % opcode)
        table[opcode] = OpcodeEntry(opcode, mnemonic, mode, 1 + OPERAND_BYTES[mode], cycles, handler)
    return tuple(table)


MOS6502_OPCODES = _build_table(_mos6502_definitions())
WDC65C02_OPCODES = _build_table(_wdc65c02_definitions(), base=MOS6502_OPCODES)

# the 6510 shares the 6502 instruction set
_TABLES = {
    False: MOS6502_OPCODES,
    True: WDC65C02_OPCODES,
}


def opcode_table(processor_type=ProcessorType.MOS6502):
    """
    Get the 256-slot opcode table for a processor type

    :param processor_type: processor type
    :type processor_type: ProcessorType
    :return: table indexed by opcode byte, None for unassigned opcodes
    :rtype: tuple of OpcodeEntry
    """
    return _TABLES[processor_type.cmos_extensions]


def lookup(opcode, processor_type=ProcessorType.MOS6502):
    """
    Look up an opcode byte

    :param opcode: opcode byte
    :type opcode: int
    :param processor_type: processor type
    :type processor_type: ProcessorType
    :return: the opcode's entry, or None if the processor does not implement it
    :rtype: OpcodeEntry
    """
    return _TABLES[processor_type.cmos_extensions][opcode & 0xff]


def opcode_count(processor_type=ProcessorType.MOS6502):
    return sum(1 for entry in _TABLES[processor_type.cmos_extensions] if entry is not None)
