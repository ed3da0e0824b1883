# Memory maps: the bus a processor reads and writes through
#
# A memory map separates two kinds of access:
# - read()/write() are bus accesses.  Each one costs a processor cycle, which the map reports
#   through its increment_cycle_count callable (installed by the processor that owns it).
# - peek()/poke() inspect or change memory without touching the cycle count.
#
# Banking policies (ROM overlays and the like) are left to subclasses; the maps here are the
# generic flat-RAM systems.

import logging

from sim6502 import constants
from sim6502.constants import ProcessorType, MEMORY_SIZE, IO_PORT_DDR, IO_PORT_DATA
from sim6502.errors import Sim6502ValueError, Sim6502NotImplemented

logger = logging.getLogger(__name__)


def _no_cycle():
    pass


class MemoryMap:
    """
    Interface for a 64K address space
    """
    def __init__(self):
        self.increment_cycle_count = _no_cycle  #: called once for every read() and write()

    def read(self, address):
        """
        Bus read: costs one cycle

        :param address: 16-bit address
        :type address: int
        :return: byte at address
        :rtype: int
        """
        self.increment_cycle_count()
        return self.peek(address)

    def write(self, address, value):
        """
        Bus write: costs one cycle

        :param address: 16-bit address
        :type address: int
        :param value: byte to write
        :type value: int
        """
        self.increment_cycle_count()
        self.poke(address, value)

    def peek(self, address):
        raise Sim6502NotImplemented(f"{type(self).__name__}.peek() not implemented")

    def poke(self, address, value):
        raise Sim6502NotImplemented(f"{type(self).__name__}.poke() not implemented")

    def load_rom(self, name, data):
        logger.warning("load_rom('%s') ignored: %s has no ROM support", name, type(self).__name__)

    def load(self, address, data):
        """
        Copy bytes into RAM without costing cycles

        :param address: starting address
        :type address: int
        :param data: bytes to copy
        :type data: bytes-like or list of ints
        :raises Sim6502ValueError: if the data runs past $FFFF
        """
        if not 0 <= address < MEMORY_SIZE or address + len(data) > MEMORY_SIZE:
            raise Sim6502ValueError(
                "Error: program at $%04X with size %d exceeds 64KB address space" % (address, len(data)))
        for i, a_byte in enumerate(data):
            self.poke(address + i, a_byte)
        logger.debug("Loaded %d bytes at $%04X", len(data), address)

    def get_ram(self):
        raise Sim6502NotImplemented(f"{type(self).__name__}.get_ram() not implemented")

    def reset(self):
        raise Sim6502NotImplemented(f"{type(self).__name__}.reset() not implemented")


class GenericMemoryMap(MemoryMap):
    """
    64K of flat RAM
    """
    def __init__(self):
        super().__init__()
        self.ram = MEMORY_SIZE * [0x00]

    def peek(self, address):
        return self.ram[address & 0xffff]

    def poke(self, address, value):
        self.ram[address & 0xffff] = value & 0xff

    def get_ram(self):
        return self.ram

    def reset(self):
        self.ram = MEMORY_SIZE * [0x00]
        logger.debug("Memory reset to all zeros")


class Generic6510MemoryMap(GenericMemoryMap):
    """
    64K of flat RAM with the 6510's on-chip I/O port at $00 (data direction) and $01 (data port)

    The port registers hide the RAM beneath them.
    """
    def __init__(self):
        super().__init__()
        self.data_direction = 0x00
        self.data_port = 0x00

    def peek(self, address):
        address &= 0xffff
        if address == IO_PORT_DDR:
            return self.data_direction
        if address == IO_PORT_DATA:
            return self.data_port
        return self.ram[address]

    def poke(self, address, value):
        address &= 0xffff
        value &= 0xff
        if address == IO_PORT_DDR:
            self.data_direction = value
            logger.debug("6510 DDR = $%02X", value)
        elif address == IO_PORT_DATA:
            self.data_port = value
            logger.debug("6510 data port = $%02X", value)
        else:
            self.ram[address] = value

    def reset(self):
        super().reset()
        self.data_direction = 0x00
        self.data_port = 0x00
        logger.debug("6510 I/O registers reset")


def create_memory_map(processor_type=constants.DEFAULT_PROCESSOR_TYPE):
    """
    Build the generic memory map that matches a processor type

    :param processor_type: processor the map is for
    :type processor_type: ProcessorType
    :return: a new memory map
    :rtype: MemoryMap
    """
    if processor_type == ProcessorType.MOS6510:
        return Generic6510MemoryMap()
    return GenericMemoryMap()
