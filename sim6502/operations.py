# 6502 operation handlers
#
# Each handler runs after the opcode fetch, with the program counter pointing at the first
# operand byte.  Handlers resolve their operand through cpu.get_address(), which consumes the
# operand bytes.  All bus traffic goes through cpu.read()/cpu.write() (one cycle each), and
# internal cycles that touch no memory go through cpu.increment_cycle_count(), so the number
# of cycles an instruction takes falls out of the bus activity it performs.
#
# Code references used during development:
# 1) http://www.6502.org/tutorials/vflag.html (overflow)
# 2) http://www.6502.org/tutorials/decimal_mode.html (BCD)
# 3) https://www.nesdev.org/6502_cpu.txt (per-cycle bus activity, dummy reads/writes)

from sim6502.constants import AddressingMode, IRQ_VECTOR
from sim6502.byte_util import from_bcd, signed_byte


def _bcd_encode(value):
    # decimal results above 99 only happen for non-BCD inputs; keep the low digits
    return (((value // 10) << 4) | (value % 10)) & 0xff


def set_nz(cpu, value):
    cpu.zero_flag = value == 0
    cpu.negative_flag = value > 127


# ---------------------------------------------------------------------------
# Arithmetic and logic

def adc(cpu, mode):
    """
    Add with carry.  In decimal mode both operands are taken as packed BCD; a sum over 99
    carries.  Overflow always comes from the binary sum.
    """
    data = cpu.read(cpu.get_address(mode))
    carry_in = 1 if cpu.carry_flag else 0
    temp = cpu.a + data + carry_in

    cpu.overflow_flag = bool((cpu.a ^ temp) & 0x80) and not ((cpu.a ^ data) & 0x80)

    if cpu.decimal_flag:
        temp = from_bcd(cpu.a) + from_bcd(data) + carry_in
        if temp > 99:
            cpu.carry_flag = True
            temp -= 100
        else:
            cpu.carry_flag = False
        temp = _bcd_encode(temp)
    else:
        cpu.carry_flag = temp > 0xff
        temp &= 0xff

    set_nz(cpu, temp)
    cpu.a = temp


def sbc(cpu, mode):
    """
    Subtract with borrow (carry clear means borrow).  In decimal mode a negative difference
    borrows 100.  The overflow flag is only updated in binary mode.
    """
    data = cpu.read(cpu.get_address(mode))
    borrow = 0 if cpu.carry_flag else 1

    if cpu.decimal_flag:
        temp = from_bcd(cpu.a) - from_bcd(data) - borrow
        cpu.carry_flag = temp >= 0
        if temp < 0:
            temp += 100
        temp = _bcd_encode(temp)
    else:
        temp = cpu.a - data - borrow
        cpu.carry_flag = temp >= 0
        cpu.overflow_flag = bool((cpu.a ^ temp) & 0x80) and bool((cpu.a ^ data) & 0x80)
        temp &= 0xff

    set_nz(cpu, temp)
    cpu.a = temp


def and_(cpu, mode):
    cpu.a &= cpu.read(cpu.get_address(mode))
    set_nz(cpu, cpu.a)


def ora(cpu, mode):
    cpu.a |= cpu.read(cpu.get_address(mode))
    set_nz(cpu, cpu.a)


def eor(cpu, mode):
    cpu.a ^= cpu.read(cpu.get_address(mode))
    set_nz(cpu, cpu.a)


def bit(cpu, mode):
    data = cpu.read(cpu.get_address(mode))
    cpu.overflow_flag = bool(data & 0x40)
    cpu.negative_flag = bool(data & 0x80)
    cpu.zero_flag = (data & cpu.a) == 0


def compare(cpu, mode, register):
    """
    CMP, CPX and CPY: flags from register - memory

    :param register: 'a', 'x' or 'y'
    :type register: str
    """
    reg_value = getattr(cpu, register)
    data = cpu.read(cpu.get_address(mode))
    temp = reg_value - data
    cpu.carry_flag = data <= reg_value
    cpu.zero_flag = temp == 0
    cpu.negative_flag = bool(temp & 0x80)


# ---------------------------------------------------------------------------
# Increments, decrements, shifts and rotates

def _read_modify_write(cpu, mode, modify):
    # accumulator forms make one dummy read of the next instruction byte; memory forms
    # write back the unmodified value before the real write
    if mode == AddressingMode.ACCUMULATOR:
        cpu.read(cpu.pc)
        cpu.a = modify(cpu.a)
        return
    address = cpu.get_address(mode)
    data = cpu.read(address)
    cpu.write(address, data)
    cpu.write(address, modify(data))


def asl(cpu, mode):
    def modify(data):
        cpu.carry_flag = bool(data & 0x80)
        result = (data << 1) & 0xfe
        set_nz(cpu, result)
        return result
    _read_modify_write(cpu, mode, modify)


def lsr(cpu, mode):
    def modify(data):
        cpu.carry_flag = bool(data & 0x01)
        result = data >> 1
        set_nz(cpu, result)
        return result
    _read_modify_write(cpu, mode, modify)


def rol(cpu, mode):
    def modify(data):
        result = ((data << 1) & 0xfe) | (1 if cpu.carry_flag else 0)
        cpu.carry_flag = bool(data & 0x80)
        set_nz(cpu, result)
        return result
    _read_modify_write(cpu, mode, modify)


def ror(cpu, mode):
    def modify(data):
        result = (data >> 1) | (0x80 if cpu.carry_flag else 0)
        cpu.carry_flag = bool(data & 0x01)
        set_nz(cpu, result)
        return result
    _read_modify_write(cpu, mode, modify)


def inc(cpu, mode):
    def modify(data):
        result = (data + 1) & 0xff
        set_nz(cpu, result)
        return result
    if mode == AddressingMode.ACCUMULATOR:  # 65C02 INC A
        cpu.increment_cycle_count()
        cpu.a = modify(cpu.a)
    else:
        _read_modify_write(cpu, mode, modify)


def dec(cpu, mode):
    def modify(data):
        result = (data - 1) & 0xff
        set_nz(cpu, result)
        return result
    if mode == AddressingMode.ACCUMULATOR:  # 65C02 DEC A
        cpu.increment_cycle_count()
        cpu.a = modify(cpu.a)
    else:
        _read_modify_write(cpu, mode, modify)


def increment_register(cpu, register, delta):
    """
    INX, INY, DEX and DEY
    """
    value = (getattr(cpu, register) + delta) & 0xff
    set_nz(cpu, value)
    cpu.increment_cycle_count()
    setattr(cpu, register, value)


# ---------------------------------------------------------------------------
# Loads, stores and transfers

def load(cpu, mode, register):
    value = cpu.read(cpu.get_address(mode))
    setattr(cpu, register, value)
    set_nz(cpu, value)


def store(cpu, mode, register):
    cpu.write(cpu.get_address(mode), getattr(cpu, register))


def store_zero(cpu, mode):
    cpu.write(cpu.get_address(mode), 0x00)


def transfer(cpu, source, dest):
    """
    TAX, TAY, TXA, TYA and TSX set N and Z; TXS does not
    """
    cpu.increment_cycle_count()
    value = getattr(cpu, source)
    setattr(cpu, dest, value)
    if dest != 'sp':
        set_nz(cpu, value)


def set_flag(cpu, flag, value):
    setattr(cpu, flag, value)
    cpu.increment_cycle_count()


def nop(cpu):
    cpu.increment_cycle_count()


# ---------------------------------------------------------------------------
# Stack

def push_register(cpu, register):
    """
    PHA, PHX and PHY
    """
    cpu.read(cpu.pc)
    cpu.poke_stack(getattr(cpu, register))
    cpu.sp -= 1
    cpu.increment_cycle_count()


def pull_register(cpu, register):
    """
    PLA, PLX and PLY
    """
    cpu.read(cpu.pc)
    cpu.sp += 1
    cpu.increment_cycle_count()
    value = cpu.peek_stack()
    setattr(cpu, register, value)
    set_nz(cpu, value)
    cpu.increment_cycle_count()


def php(cpu):
    cpu.read(cpu.pc)
    cpu.poke_stack(cpu.get_status_byte(set_break=True))
    cpu.sp -= 1
    cpu.increment_cycle_count()


def plp(cpu):
    cpu.read(cpu.pc)
    cpu.sp += 1
    cpu.increment_cycle_count()
    cpu.set_status_byte(cpu.peek_stack())
    cpu.increment_cycle_count()


# ---------------------------------------------------------------------------
# Flow control

def move_program_counter(cpu, offset):
    """
    Take a relative branch.  cpu.pc points at the offset byte.  Costs one cycle, plus one
    more when the target is on a different page than the next instruction.
    """
    next_instruction = (cpu.pc + 1) & 0xffff
    target = (next_instruction + signed_byte(offset)) & 0xffff
    if (next_instruction ^ target) & 0xff00:
        cpu.increment_cycle_count()
    cpu.pc = target
    cpu.read(cpu.pc)


def branch(cpu, flag, when_set):
    """
    Conditional branch on a status flag

    :param flag: flag attribute name, e.g. 'carry_flag'
    :type flag: str
    :param when_set: branch if the flag equals this value
    :type when_set: bool
    """
    offset = cpu.read(cpu.get_address(AddressingMode.RELATIVE))
    if getattr(cpu, flag) != when_set:
        cpu.pc += 1
        return
    move_program_counter(cpu, offset)


def bra(cpu):
    offset = cpu.read(cpu.get_address(AddressingMode.RELATIVE))
    move_program_counter(cpu, offset)


def jmp(cpu, mode):
    cpu.pc = cpu.get_address(mode)


def jsr(cpu):
    # pushes the address of the JSR's last byte; RTS adds one
    cpu.increment_cycle_count()
    return_address = (cpu.pc + 1) & 0xffff

    cpu.poke_stack(return_address >> 8)
    cpu.sp -= 1
    cpu.increment_cycle_count()

    cpu.poke_stack(return_address & 0xff)
    cpu.sp -= 1
    cpu.increment_cycle_count()

    cpu.pc = cpu.get_address(AddressingMode.ABSOLUTE)


def rts(cpu):
    cpu.read(cpu.pc)
    cpu.sp += 1
    cpu.increment_cycle_count()

    lo = cpu.peek_stack()
    cpu.sp += 1
    cpu.increment_cycle_count()

    hi = cpu.peek_stack()
    cpu.increment_cycle_count()

    cpu.pc = ((hi << 8) | lo) + 1
    cpu.increment_cycle_count()


def rti(cpu):
    # unlike RTS, the popped address is used as is
    cpu.read(cpu.pc)
    cpu.sp += 1
    cpu.increment_cycle_count()

    cpu.set_status_byte(cpu.peek_stack())
    cpu.sp += 1
    cpu.increment_cycle_count()

    lo = cpu.peek_stack()
    cpu.sp += 1
    cpu.increment_cycle_count()

    hi = cpu.peek_stack()
    cpu.increment_cycle_count()

    cpu.pc = (hi << 8) | lo


def push_interrupt_frame(cpu, vector, set_break):
    """
    Push PC and the status byte, set interrupt-disable, and load PC from a vector.
    Shared by BRK and hardware interrupt servicing.  Costs five cycles.

    :param vector: address of the little-endian vector to jump through
    :type vector: int
    :param set_break: True to push the status byte with the break bit set (BRK only)
    :type set_break: bool
    """
    cpu.poke_stack(cpu.pc >> 8)
    cpu.sp -= 1
    cpu.increment_cycle_count()

    cpu.poke_stack(cpu.pc & 0xff)
    cpu.sp -= 1
    cpu.increment_cycle_count()

    cpu.poke_stack(cpu.get_status_byte(set_break=set_break))
    cpu.sp -= 1
    cpu.increment_cycle_count()

    cpu.interrupt_disable_flag = True

    lo = cpu.read(vector)
    hi = cpu.read(vector + 1)
    cpu.pc = (hi << 8) | lo

    cpu.clear_interrupt_latch()


def brk(cpu):
    # the byte after BRK is padding; the pushed return address skips it
    cpu.pc += 1
    cpu.read(cpu.pc)
    push_interrupt_frame(cpu, IRQ_VECTOR, set_break=True)


# ---------------------------------------------------------------------------
# 65C02 test-and-modify

def tsb(cpu, mode):
    address = cpu.get_address(mode)
    data = cpu.read(address)
    cpu.zero_flag = (data & cpu.a) == 0
    cpu.write(address, data)
    cpu.write(address, data | cpu.a)


def trb(cpu, mode):
    address = cpu.get_address(mode)
    data = cpu.read(address)
    cpu.zero_flag = (data & cpu.a) == 0
    cpu.write(address, data)
    cpu.write(address, data & ~cpu.a & 0xff)
