# Execution backend for test runners
#
# A thin facade over Cpu6502Emulator for code that drives tests: it loads binaries, pokes
# and peeks memory, gets and sets registers and flags by name, and calls subroutines.
# None of the memory accessors here use cycles.

import logging

from sim6502.base import Sim6502Base
from sim6502.byte_util import hex_to_int, little_endian_bytes, little_endian_int, read_binary_file, write_binary_file
from sim6502.constants import DEFAULT_PROCESSOR_TYPE, ProcessorType
from sim6502.emulator_6502 import Cpu6502Emulator
from sim6502.errors import Sim6502ValueError
from sim6502.memory_map import create_memory_map

logger = logging.getLogger(__name__)

REGISTERS = ('a', 'x', 'y', 'pc', 'sp')

FLAGS = {
    'c': 'carry_flag',
    'z': 'zero_flag',
    'n': 'negative_flag',
    'v': 'overflow_flag',
    'd': 'decimal_flag',
}


class SimulatorBackend(Sim6502Base):
    def __init__(self, processor_type=DEFAULT_PROCESSOR_TYPE, memory_map=None, **kwargs):
        """
        Constructor

        :param processor_type: processor to emulate, or a name such as '6510' or '65c02'
        :type processor_type: ProcessorType or str
        :param memory_map: memory map; if None, the generic map for the processor type is used
        :type memory_map: MemoryMap
        :param kwargs: options (see options_with_defaults)
        """
        Sim6502Base.__init__(self)

        self.options_with_defaults = dict(
            trace=False,        # record a trace line for every instruction executed
            max_cycles=None,    # cycle budget for each execute_jsr(); None = unlimited
        )
        self.set_options(**self.options_with_defaults)
        self.set_options(**kwargs)

        if isinstance(processor_type, str):
            processor_type = ProcessorType.from_name(processor_type)
        if memory_map is None:
            memory_map = create_memory_map(processor_type)
        self.memory_map = memory_map
        self.processor = Cpu6502Emulator(processor_type, memory_map)
        self.processor.trace_enabled = self.get_option('trace')
        self.processor.reset()

    def set_options(self, **kwargs):
        """
        Sets options for this module, with validation when required

        :param kwargs: keyword arguments for options
        :type kwargs: keyword arguments
        """
        Sim6502Base.set_options(self, **kwargs)
        if 'trace' in self._options and hasattr(self, 'processor'):
            self.processor.trace_enabled = self._options['trace']

    def load_binary(self, data, address):
        self.processor.load_program(address, data)

    def load_file(self, filename, address=None, strip_header=False):
        """
        Load a program or ROM image from disk

        C64-style .prg files start with a two byte little-endian load address.  When no
        address is given, that header supplies it and is not loaded.

        :param filename: file to load
        :type filename: str
        :param address: load address; an int or a hex string such as '$C000'
        :type address: int or str
        :param strip_header: drop the first two bytes before loading at an explicit address
        :type strip_header: bool
        :return: the load address used
        :rtype: int
        :raises Sim6502ValueError: if the file can't be found or has no header to read
        """
        binary = read_binary_file(filename)
        if binary is None:
            raise Sim6502ValueError("Error: could not find %s" % filename)

        if address is None:
            if len(binary) < 2:
                raise Sim6502ValueError("Error: %s has no load address header" % filename)
            address = little_endian_int(binary[0:2])
            strip_header = True
        elif isinstance(address, str):
            address = hex_to_int(address)

        if strip_header:
            binary = binary[2:]
        self.load_binary(binary, address)
        logger.debug("Loaded %s at $%04X", filename, address)
        return address

    def save_file(self, filename, address, length, add_header=False):
        """
        Write a block of memory to disk, optionally as a .prg with a load address header

        :param filename: output file
        :type filename: str
        :param address: first address to save
        :type address: int
        :param length: number of bytes to save
        :type length: int
        :param add_header: prefix the data with its little-endian load address
        :type add_header: bool
        """
        binary = bytearray(self.processor.peek(address + i) for i in range(length))
        if add_header:
            binary = little_endian_bytes(address) + binary
        write_binary_file(filename, binary)

    def write_byte(self, address, value):
        self.processor.poke(address, value)

    def write_word(self, address, value):
        self.processor.poke_word(address, value)

    def read_byte(self, address):
        return self.processor.peek(address)

    def read_word(self, address):
        return self.processor.peek_word(address)

    def get_register(self, name):
        """
        Get a register by name: a, x, y, pc or sp (case insensitive)
        """
        return getattr(self.processor, self._register_attr(name))

    def set_register(self, name, value):
        setattr(self.processor, self._register_attr(name), value)

    def get_flag(self, name):
        """
        Get a flag by name: c, z, n, v or d (case insensitive)
        """
        return getattr(self.processor, self._flag_attr(name))

    def set_flag(self, name, value):
        setattr(self.processor, self._flag_attr(name), bool(value))

    @staticmethod
    def _register_attr(name):
        key = name.lower()
        if key not in REGISTERS:
            raise Sim6502ValueError("Error: Unknown register: %s" % name)
        return key

    @staticmethod
    def _flag_attr(name):
        key = name.lower()
        if key not in FLAGS:
            raise Sim6502ValueError("Error: Unknown flag: %s" % name)
        return FLAGS[key]

    def execute_jsr(self, address, stop_on_address=0, stop_on_rts=True, fail_on_brk=True):
        """
        Call a subroutine and run it to completion

        :return: the outcome of the run
        :rtype: ExecutionOutcome
        """
        outcome = self.processor.run_routine(
            address, stop_on_address, stop_on_rts, fail_on_brk, max_cycles=self.get_option('max_cycles'))
        logger.debug("JSR $%04X: %s", address, outcome)
        return outcome

    def get_cycles(self):
        return self.processor.cycle_count

    def reset_cycle_count(self):
        self.processor.reset_cycle_count()

    def reset(self):
        self.processor.reset()

    @property
    def trace_enabled(self):
        return self.processor.trace_enabled

    @trace_enabled.setter
    def trace_enabled(self, value):
        self.set_options(trace=value)

    def get_trace_buffer(self):
        return self.processor.get_trace_buffer()

    def clear_trace_buffer(self):
        self.processor.clear_trace_buffer()
