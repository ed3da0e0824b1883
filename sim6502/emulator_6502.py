# 6502 cycle-level emulation
#
# This module emulates 6502-family machine language execution.  Instructions run one at a
# time, but every bus access inside an instruction is modelled (including the dummy reads
# and writes the real chip makes), so cycle counts and interrupt timing come out as on
# hardware.
#
# Memory is accessed through two families of methods:
# - read()/write() cost one cycle each and sample the interrupt lines
# - peek()/poke() cost nothing; they are for setting up and inspecting a test
#
# run_routine() calls a machine language subroutine and returns when it finishes.  Exit
# conditions:
# - the subroutine's own RTS (nested JSR/RTS pairs are tracked)
# - BRK
# - an optional stop address
# - an optional cycle budget
#
# Code references used during development:
# 1) https://www.nesdev.org/6502_cpu.txt
# 2) http://www.6502.org/tutorials/interrupts.html
# 3) http://www.6502.org/tutorials/65c02opcodes.html

import logging

from sim6502 import opcodes
from sim6502.constants import (
    DEFAULT_PROCESSOR_TYPE, AddressingMode, MEMORY_SIZE, STACK_BASE, NMI_VECTOR, RESET_VECTOR,
    IRQ_VECTOR, RESET_STACK_POINTER, IO_PORT_DDR, IO_PORT_DATA, FN, FV, FU, FB, FD, FI, FZ, FC,
    PAGE_CROSS_EXEMPT_X, PAGE_CROSS_EXEMPT_Y, PAGE_CROSS_EXEMPT_INDIRECT_Y)
from sim6502.disassembly import disassemble
from sim6502.errors import Sim6502DecodeError, Sim6502AddressingModeError, Sim6502ValueError
from sim6502.execution_result import ExecutionOutcome, StopReason
from sim6502.operations import push_interrupt_frame
from sim6502.byte_util import hexdump

logger = logging.getLogger(__name__)

OPCODE_BRK = 0x00
OPCODE_JSR = 0x20
OPCODE_RTS = 0x60


class Cpu6502Emulator:
    def __init__(self, processor_type=DEFAULT_PROCESSOR_TYPE, memory_map=None):
        """
        Constructor

        :param processor_type: which member of the 6502 family to emulate
        :type processor_type: ProcessorType
        :param memory_map: optional memory map to do all address decoding; if None, the
            processor owns a flat 64K of RAM
        :type memory_map: MemoryMap
        """
        self.processor_type = processor_type
        self.memory_map = memory_map
        if memory_map is not None:
            memory_map.increment_cycle_count = self.increment_cycle_count

        self.memory = MEMORY_SIZE * [0x00]  # 64K memory as integers (unused with a memory map)
        self.io_port_ddr = 0x00             # 6510 data direction register ($00)
        self.io_port_data = 0x00            # 6510 data port register ($01)

        self.a = 0                          # accumulator (byte)
        self.x = 0                          # x register (byte)
        self.y = 0                          # y register (byte)
        self._pc = 0                        # program counter (16-bit)
        self._sp = 0                        # stack pointer (byte)

        self.carry_flag = False
        self.zero_flag = False
        self.interrupt_disable_flag = False
        self.decimal_flag = False
        self.overflow_flag = False
        self.negative_flag = False

        self.cycle_count = 0                # count of cpu cycles processed
        self.current_opcode = 0             # opcode being executed
        self.cycle_callback = None          # optional callable, invoked once per cycle

        self.trigger_nmi = False            # NMI line raised; cleared once serviced
        self.trigger_irq = False            # IRQ line raised; waits while interrupts are disabled
        self._interrupt = False             # interrupt seen on the current cycle
        self._previous_interrupt = False    # interrupt seen on the previous cycle

        self.trace_enabled = False
        self._trace_buffer = []

    # ---------------------------------------------------------------------------
    # Registers and flags

    @property
    def pc(self):
        return self._pc

    @pc.setter
    def pc(self, value):
        self._pc = value & 0xffff

    @property
    def sp(self):
        return self._sp

    @sp.setter
    def sp(self, value):
        # wraps -1 to 255 and 256 to 0, as it should
        self._sp = value & 0xff

    def get_status_byte(self, set_break=False):
        """
        Pack the flags into the processor status byte

        :param set_break: True to set the break bit (only ever seen in stack copies)
        :type set_break: bool
        :return: status byte
        :rtype: int
        """
        flags = FU
        if self.carry_flag:
            flags |= FC
        if self.zero_flag:
            flags |= FZ
        if self.interrupt_disable_flag:
            flags |= FI
        if self.decimal_flag:
            flags |= FD
        if set_break:
            flags |= FB
        if self.overflow_flag:
            flags |= FV
        if self.negative_flag:
            flags |= FN
        return flags

    def set_status_byte(self, flags):
        # bits 4 and 5 are not stored
        self.carry_flag = bool(flags & FC)
        self.zero_flag = bool(flags & FZ)
        self.interrupt_disable_flag = bool(flags & FI)
        self.decimal_flag = bool(flags & FD)
        self.overflow_flag = bool(flags & FV)
        self.negative_flag = bool(flags & FN)

    @property
    def flags(self):
        return self.get_status_byte()

    @flags.setter
    def flags(self, value):
        self.set_status_byte(value)

    # ---------------------------------------------------------------------------
    # Cycles and interrupts

    def increment_cycle_count(self):
        """
        Advance one cycle.  Every bus access comes through here, as do the internal cycles
        that touch no memory.  The interrupt lines are sampled on each cycle; an interrupt is
        serviced after an instruction if it was pending on the instruction's next-to-last cycle.
        """
        self.cycle_count += 1
        if self.cycle_callback is not None:
            self.cycle_callback()

        self._previous_interrupt = self._interrupt
        self._interrupt = self.trigger_nmi or (self.trigger_irq and not self.interrupt_disable_flag)

    def reset_cycle_count(self):
        self.cycle_count = 0

    def clear_interrupt_latch(self):
        self._previous_interrupt = False

    def nmi(self):
        """
        Raise the non-maskable interrupt line
        """
        self.trigger_nmi = True

    def interrupt_request(self):
        """
        Raise the maskable interrupt (IRQ) line.  It is serviced once interrupts are enabled.
        """
        self.trigger_irq = True

    # ---------------------------------------------------------------------------
    # Memory access

    def peek(self, address):
        """
        Read a byte without using a cycle

        :param address: memory location
        :type address: int
        :return: byte at address
        :rtype: int
        """
        address &= 0xffff
        if self.memory_map is not None:
            return self.memory_map.peek(address)
        if self.processor_type.has_io_port:
            if address == IO_PORT_DDR:
                return self.io_port_ddr
            if address == IO_PORT_DATA:
                return self.io_port_data
        return self.memory[address]

    def poke(self, address, value):
        """
        Write a byte without using a cycle

        :param address: memory location
        :type address: int
        :param value: value to store (masked to a byte)
        :type value: int
        """
        address &= 0xffff
        value &= 0xff
        if self.memory_map is not None:
            self.memory_map.poke(address, value)
            return
        if self.processor_type.has_io_port:
            if address == IO_PORT_DDR:
                self.io_port_ddr = value
                logger.debug("6510 DDR = $%02X", value)
                return
            if address == IO_PORT_DATA:
                self.io_port_data = value
                logger.debug("6510 data port = $%02X", value)
                return
        self.memory[address] = value

    def read(self, address):
        """
        Read a byte over the bus (one cycle)
        """
        address &= 0xffff
        if self.memory_map is not None:
            return self.memory_map.read(address)
        self.increment_cycle_count()
        return self.peek(address)

    def write(self, address, value):
        """
        Write a byte over the bus (one cycle)
        """
        address &= 0xffff
        if self.memory_map is not None:
            self.memory_map.write(address, value & 0xff)
            return
        self.increment_cycle_count()
        self.poke(address, value)

    def peek_word(self, address):
        """
        Get a little-endian 16-bit value from a given memory loc, without using cycles

        :param address: location from which to retrieve 16-bit value
        :type address: int
        :return: 16-bit le value at address
        :rtype: int
        """
        return self.peek(address) | (self.peek(address + 1) << 8)

    def read_word(self, address):
        lo = self.read(address)
        hi = self.read(address + 1)
        return lo | (hi << 8)

    def poke_word(self, address, word):
        """
        Set a little-endian 16-bit value at the given memory loc, without using cycles

        :param address: location at which to set 16-bit value
        :type address: int
        :param word: value to store in memory
        :type word: int
        """
        if not 0 <= word <= 0xffff:
            raise Sim6502ValueError('Error: word value "%s" out of range' % word)
        self.poke(address, word & 0xff)
        self.poke(address + 1, word >> 8)

    def poke_stack(self, value):
        self.poke(STACK_BASE + self.sp, value)

    def peek_stack(self):
        return self.peek(STACK_BASE + self.sp)

    def get_ram(self):
        if self.memory_map is not None:
            return self.memory_map.get_ram()
        return self.memory

    def load_program(self, offset, program, new_pc=None):
        """
        Copy a program into memory (no cycles used)

        :param offset: load address
        :type offset: int
        :param program: program bytes
        :type program: bytes-like or list of ints
        :param new_pc: if not None, written to the reset vector, followed by a reset()
        :type new_pc: int
        :raises Sim6502ValueError: if the program does not fit below $10000
        """
        if self.memory_map is not None:
            self.memory_map.load(offset, program)
        else:
            if not 0 <= offset < MEMORY_SIZE or offset + len(program) > MEMORY_SIZE:
                raise Sim6502ValueError(
                    "Error: program at $%04X with size %d exceeds 64KB address space" % (offset, len(program)))
            for i, a_byte in enumerate(program):
                self.poke(offset + i, a_byte)
            logger.debug("Loaded %d bytes at $%04X", len(program), offset)

        if new_pc is not None:
            self.poke_word(RESET_VECTOR, new_pc)
            self.reset()

    def clear_memory(self):
        if self.memory_map is not None:
            self.memory_map.reset()
            return
        self.memory = MEMORY_SIZE * [0x00]
        self.io_port_ddr = 0x00
        self.io_port_data = 0x00

    def dump_memory(self):
        """
        :return: a copy of all 64K of RAM
        :rtype: bytes
        """
        return bytes(self.get_ram())

    def hexdump(self, start, length):
        """
        Utility for debugging: hexdump lines of memory as seen by peek()
        """
        return hexdump([self.peek(start + i) for i in range(length)], start)

    # ---------------------------------------------------------------------------
    # Reset

    def reset(self):
        """
        Power-on style reset: PC from the reset vector, SP to $FD, interrupts disabled
        and the interrupt lines cleared.  The other flags and registers are left alone.
        """
        self.cycle_count = 0
        self.sp = RESET_STACK_POINTER
        self.pc = self.peek_word(RESET_VECTOR)
        self.current_opcode = self.peek(self.pc)

        self.interrupt_disable_flag = True
        self._interrupt = False
        self._previous_interrupt = False
        self.trigger_nmi = False
        self.trigger_irq = False

        if self.memory_map is None and self.processor_type.has_io_port:
            self.io_port_ddr = 0x00
            self.io_port_data = 0x00

        logger.debug("%s reset, PC=$%04X", self.processor_type.display_name, self.pc)

    # ---------------------------------------------------------------------------
    # Addressing

    def get_address(self, mode):
        """
        Resolve the effective address for an addressing mode, consuming the operand bytes
        (and their cycles) and leaving the program counter after them.  Indexed modes make
        the dummy reads the hardware makes.

        Relative mode returns the address of the offset byte without consuming it.

        :param mode: addressing mode
        :type mode: AddressingMode
        :return: effective address
        :rtype: int
        :raises Sim6502AddressingModeError: for implied and accumulator modes
        """
        if mode == AddressingMode.ABSOLUTE:
            return self._fetch_operand() | (self._fetch_operand() << 8)

        if mode == AddressingMode.ABSOLUTE_X or mode == AddressingMode.ABSOLUTE_Y:
            lo = self._fetch_operand()
            hi = self._fetch_operand()
            if mode == AddressingMode.ABSOLUTE_X:
                index, exempt = self.x, PAGE_CROSS_EXEMPT_X
            else:
                index, exempt = self.y, PAGE_CROSS_EXEMPT_Y
            base = (hi << 8) | lo
            if lo + index > 0xff and self.current_opcode not in exempt:
                # read from the address before the high byte is fixed up
                self.read((base + index - 0x100) & 0xffff)
            return (base + index) & 0xffff

        if mode == AddressingMode.IMMEDIATE:
            address = self.pc
            self.pc += 1
            return address

        if mode == AddressingMode.ZERO_PAGE:
            return self._fetch_operand()

        if mode == AddressingMode.ZERO_PAGE_X or mode == AddressingMode.ZERO_PAGE_Y:
            address = self._fetch_operand()
            self.read(address)
            index = self.x if mode == AddressingMode.ZERO_PAGE_X else self.y
            return (address + index) & 0xff  # zero page wrapping

        if mode == AddressingMode.INDIRECT:
            pointer = self._fetch_operand() | (self._fetch_operand() << 8)
            lo = self.read(pointer)
            if (pointer & 0xff) == 0xff:
                # 6502 bug: the high byte comes from the start of the same page
                hi = self.read(pointer & 0xff00)
            else:
                hi = self.read(pointer + 1)
            return (hi << 8) | lo

        if mode == AddressingMode.INDIRECT_X:
            address = self._fetch_operand()
            self.read(address)
            address += self.x
            return self.read(address & 0xff) | (self.read((address + 1) & 0xff) << 8)

        if mode == AddressingMode.INDIRECT_Y:
            address = self._fetch_operand()
            base = self.read(address) | (self.read((address + 1) & 0xff) << 8)
            if (base & 0xff) + self.y > 0xff and self.current_opcode not in PAGE_CROSS_EXEMPT_INDIRECT_Y:
                self.read((base + self.y - 0x100) & 0xffff)
            return (base + self.y) & 0xffff

        if mode == AddressingMode.RELATIVE:
            return self.pc

        raise Sim6502AddressingModeError(
            "Error: the addressing mode '%s' does not have an address" % mode.value)

    def _fetch_operand(self):
        value = self.read(self.pc)
        self.pc += 1
        return value

    # ---------------------------------------------------------------------------
    # Execution

    def next_step(self):
        """
        Execute one instruction, then service a pending interrupt if there is one

        :raises Sim6502DecodeError: if the opcode is not in the processor's instruction set
        """
        address = self.pc
        self.current_opcode = self.peek(address)
        if self.trace_enabled:
            self._trace_instruction(address)

        self.current_opcode = self.read(address)
        self.pc += 1

        entry = opcodes.lookup(self.current_opcode, self.processor_type)
        if entry is None:
            raise Sim6502DecodeError(self.current_opcode, address, self.processor_type)
        entry.handler(self)

        if not self._previous_interrupt:
            return

        if self.trigger_nmi:
            self._service_interrupt(NMI_VECTOR, 'NMI')
            self.trigger_nmi = False
        elif self.trigger_irq and not self.interrupt_disable_flag:
            self._service_interrupt(IRQ_VECTOR, 'IRQ')
            self.trigger_irq = False

    def single_step(self):
        """
        Execute exactly one instruction (plus any interrupt it lets in)

        :return: cycles used
        :rtype: int
        """
        start = self.cycle_count
        self.next_step()
        return self.cycle_count - start

    def _service_interrupt(self, vector, name):
        # two dummy reads of the next opcode, then the BRK push sequence with the break bit
        # clear: seven cycles in all
        self.read(self.pc)
        self.read(self.pc)
        push_interrupt_frame(self, vector, set_break=False)
        self.current_opcode = self.peek(self.pc)
        if self.trace_enabled:
            self._trace_buffer.append(
                "{:08d},{} -> ${:04x}".format(self.cycle_count, name, self.pc))

    def run_routine(self, address, stop_on_address=0, stop_on_rts=True, fail_on_brk=True, max_cycles=None):
        """
        Run machine language code as a subroutine call

        Before each instruction, the opcode about to run is checked: JSR deepens the call
        depth, RTS makes it shallower.  The run ends on the RTS that brings the depth to zero
        (when stop_on_rts is set), on BRK, or when the program counter reaches
        stop_on_address.  The instruction that ends the run is still executed.

        :param address: where to start running
        :type address: int
        :param stop_on_address: stop when the program counter gets here (ignored unless > 0)
        :type stop_on_address: int
        :param stop_on_rts: stop on the routine's own RTS
        :type stop_on_rts: bool
        :param fail_on_brk: report a BRK as an unclean exit
        :type fail_on_brk: bool
        :param max_cycles: cycle budget for this run; None for no limit
        :type max_cycles: int
        :return: why and where the run stopped, and the cycles it took
        :rtype: ExecutionOutcome
        """
        depth = 1
        exited_cleanly = True
        reason = None
        start_cycles = self.cycle_count
        self.pc = address

        while reason is None:
            if max_cycles is not None and self.cycle_count - start_cycles >= max_cycles:
                exited_cleanly = False
                reason = StopReason.TIMEOUT
                logger.debug("Routine at $%04X timed out after %d cycles", address, max_cycles)
                break

            opcode = self.peek(self.pc)
            if opcode == OPCODE_JSR:
                depth += 1
            elif opcode == OPCODE_RTS:
                depth -= 1
                if depth == 0 and stop_on_rts:
                    reason = StopReason.RTS
            elif opcode == OPCODE_BRK:
                reason = StopReason.BRK
                if fail_on_brk:
                    exited_cleanly = False

            if stop_on_address > 0 and self.pc == stop_on_address and reason is None:
                reason = StopReason.STOP_ADDRESS

            self.next_step()

        return ExecutionOutcome(exited_cleanly, reason, self.cycle_count - start_cycles, self.pc)

    # ---------------------------------------------------------------------------
    # Trace

    def _trace_instruction(self, address):
        dis = disassemble(self.peek, address, self.processor_type)
        raw = ' '.join('{:02x}'.format(b) for b in dis.raw_bytes)
        self._trace_buffer.append(
            "{:08d},PC=${:04x},A=${:02x},X=${:02x},Y=${:02x},SP=${:02x},P=%{:08b},{:8} {}".format(
                self.cycle_count, address, self.a, self.x, self.y, self.sp, self.flags, raw, dis.text))

    def get_trace_buffer(self):
        """
        :return: a copy of the trace lines recorded so far
        :rtype: list of str
        """
        return list(self._trace_buffer)

    def clear_trace_buffer(self):
        self._trace_buffer.clear()

    def print_stack(self):
        """
        Utility for debugging:  Print the stack ($100 to $1FF)
        """
        for line in self.hexdump(STACK_BASE, 256):
            print(line)
        print('current stack pointer ${:02x}'.format(self.sp))
