# Single-instruction disassembler
#
# Works from a peek-style callable, so disassembling never consumes cycles or triggers
# memory-mapped side effects.

import collections

from sim6502 import opcodes
from sim6502.constants import AddressingMode, DEFAULT_PROCESSOR_TYPE
from sim6502.byte_util import signed_byte

Disassembly = collections.namedtuple('Disassembly', ['address', 'raw_bytes', 'mnemonic', 'operand', 'text', 'length'])

# operand formats by addressing mode; {b} is the one-byte operand, {w} the two-byte operand
_OPERAND_FORMATS = {
    AddressingMode.IMPLIED: '',
    AddressingMode.ACCUMULATOR: 'A',
    AddressingMode.IMMEDIATE: '#${b:02X}',
    AddressingMode.ZERO_PAGE: '${b:02X}',
    AddressingMode.ZERO_PAGE_X: '${b:02X},X',
    AddressingMode.ZERO_PAGE_Y: '${b:02X},Y',
    AddressingMode.ABSOLUTE: '${w:04X}',
    AddressingMode.ABSOLUTE_X: '${w:04X},X',
    AddressingMode.ABSOLUTE_Y: '${w:04X},Y',
    AddressingMode.INDIRECT: '(${w:04X})',
    AddressingMode.INDIRECT_X: '(${b:02X},X)',
    AddressingMode.INDIRECT_Y: '(${b:02X}),Y',
    AddressingMode.RELATIVE: '${w:04X}',
}


def disassemble(peek, address, processor_type=DEFAULT_PROCESSOR_TYPE):
    """
    Disassemble the instruction at an address

    Opcodes the processor does not implement come back as a one-byte ``.BYTE`` directive.

    :param peek: callable taking an address and returning the byte there without side effects
    :type peek: function
    :param address: address of the opcode
    :type address: int
    :param processor_type: processor whose instruction set to use
    :type processor_type: ProcessorType
    :return: the disassembled instruction
    :rtype: Disassembly
    """
    address &= 0xffff
    opcode = peek(address)
    entry = opcodes.lookup(opcode, processor_type)
    if entry is None:
        operand = '$%02X' % opcode
        return Disassembly(address, [opcode], '.BYTE', operand, '.BYTE ' + operand, 1)

    raw_bytes = [peek((address + i) & 0xffff) for i in range(entry.length)]
    b = raw_bytes[1] if entry.length > 1 else 0
    w = raw_bytes[1] | (raw_bytes[2] << 8) if entry.length > 2 else b
    if entry.mode == AddressingMode.RELATIVE:
        w = (address + 2 + signed_byte(b)) & 0xffff

    operand = _OPERAND_FORMATS[entry.mode].format(b=b, w=w)
    text = entry.mnemonic if not operand else '%s %s' % (entry.mnemonic, operand)
    return Disassembly(address, raw_bytes, entry.mnemonic, operand, text, entry.length)


def disassemble_range(peek, start, end, processor_type=DEFAULT_PROCESSOR_TYPE):
    """
    Disassemble consecutive instructions from start up to (not including) end

    :return: one formatted line per instruction, e.g. '1000  A9 42     LDA #$42'
    :rtype: list of str
    """
    lines = []
    address = start
    while address < end:
        dis = disassemble(peek, address, processor_type)
        lines.append(format_line(dis))
        address += dis.length
    return lines


def format_line(dis):
    raw = ' '.join('%02X' % b for b in dis.raw_bytes)
    return '%04X  %-8s  %s' % (dis.address, raw, dis.text)
