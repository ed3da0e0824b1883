# Constants for sim6502
#

from enum import Enum
from dataclasses import dataclass

from sim6502.errors import Sim6502ValueError


# Version information.  Update BUILD_VERSION with every significant bugfix;
# update MINOR_VERSION with every feature addition
MAJOR_VERSION = 0
MINOR_VERSION = 4
BUILD_VERSION = 0

SIM6502_VERSION = f"{MAJOR_VERSION}.{MINOR_VERSION}.{BUILD_VERSION}"
SIM6502_RELEASE = f"{MAJOR_VERSION}.{MINOR_VERSION}"

MEMORY_SIZE = 0x10000
STACK_BASE = 0x0100

# 6502 vector locations
NMI_VECTOR = 0xfffa
RESET_VECTOR = 0xfffc
IRQ_VECTOR = 0xfffe  # shared by IRQ and BRK

# status register bits
FN = 0b10000000  # Negative
FV = 0b01000000  # oVerflow
FU = 0b00100000  # Unused (always reads as 1)
FB = 0b00010000  # Break (only exists on the stack copy)
FD = 0b00001000  # Decimal
FI = 0b00000100  # Interrupt disable
FZ = 0b00000010  # Zero
FC = 0b00000001  # Carry

# 6510 on-chip I/O port
IO_PORT_DDR = 0x0000   # data direction register
IO_PORT_DATA = 0x0001  # data port register

# stack pointer value after a reset
RESET_STACK_POINTER = 0xfd


@dataclass(frozen=True)
class ProcessorInfo:
    display_name: str       #: name used in messages and traces
    has_io_port: bool       #: True if $00/$01 are the on-chip I/O port registers
    cmos_extensions: bool   #: True if the WDC 65C02 opcodes are available


class ProcessorType(Enum):
    """
    Supported members of the 65xx family
    """
    MOS6502 = ProcessorInfo('6502', False, False)    #: original NMOS processor (default)
    MOS6510 = ProcessorInfo('6510', True, False)     #: 6502 plus I/O port at $00-$01 (C64)
    WDC65C02 = ProcessorInfo('65C02', False, True)   #: CMOS variant with additional opcodes

    @property
    def display_name(self):
        return self.value.display_name

    @property
    def has_io_port(self):
        return self.value.has_io_port

    @property
    def cmos_extensions(self):
        return self.value.cmos_extensions

    @classmethod
    def from_name(cls, name):
        """
        Look up a processor type by a loose name such as '6502', 'mos6510' or '65c02'

        :param name: processor name
        :type name: str
        :return: the matching processor type
        :rtype: ProcessorType
        """
        key = name.strip().upper()
        for member in cls:
            if key in (member.name, member.display_name, 'MOS' + member.display_name,
                       'WDC' + member.display_name):
                return member
        raise Sim6502ValueError('Error: unknown processor type "%s"' % name)


DEFAULT_PROCESSOR_TYPE = ProcessorType.MOS6502


class AddressingMode(Enum):
    IMPLIED = 'implied'
    ACCUMULATOR = 'accumulator'
    IMMEDIATE = 'immediate'
    ZERO_PAGE = 'zero page'
    ZERO_PAGE_X = 'zero page,x'
    ZERO_PAGE_Y = 'zero page,y'
    ABSOLUTE = 'absolute'
    ABSOLUTE_X = 'absolute,x'
    ABSOLUTE_Y = 'absolute,y'
    INDIRECT = 'indirect'
    INDIRECT_X = '(indirect,x)'
    INDIRECT_Y = '(indirect),y'
    RELATIVE = 'relative'


# Number of operand bytes that follow the opcode for each addressing mode
OPERAND_BYTES = {
    AddressingMode.IMPLIED: 0,
    AddressingMode.ACCUMULATOR: 0,
    AddressingMode.IMMEDIATE: 1,
    AddressingMode.ZERO_PAGE: 1,
    AddressingMode.ZERO_PAGE_X: 1,
    AddressingMode.ZERO_PAGE_Y: 1,
    AddressingMode.ABSOLUTE: 2,
    AddressingMode.ABSOLUTE_X: 2,
    AddressingMode.ABSOLUTE_Y: 2,
    AddressingMode.INDIRECT: 2,
    AddressingMode.INDIRECT_X: 1,
    AddressingMode.INDIRECT_Y: 1,
    AddressingMode.RELATIVE: 1,
}

# Read-modify-write and store opcodes that never pay the absolute,X page-crossing read
# ASL, ROL, LSR, ROR, DEC, INC abs,X; STA abs,X; STZ abs,X (65C02)
PAGE_CROSS_EXEMPT_X = frozenset((0x1e, 0x3e, 0x5e, 0x7e, 0xde, 0xfe, 0x9d, 0x9e))

# STA abs,Y
PAGE_CROSS_EXEMPT_Y = frozenset((0x99,))

# STA (zp),Y
PAGE_CROSS_EXEMPT_INDIRECT_Y = frozenset((0x91,))
