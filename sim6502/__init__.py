from .constants import ProcessorType, AddressingMode
from .emulator_6502 import Cpu6502Emulator
from .execution_result import ExecutionOutcome, StopReason
from .memory_map import MemoryMap, GenericMemoryMap, Generic6510MemoryMap, create_memory_map
from .simulator_backend import SimulatorBackend
from .disassembly import disassemble
