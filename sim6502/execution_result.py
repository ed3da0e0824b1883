from dataclasses import dataclass
from enum import Enum


class StopReason(Enum):
    RTS = 'rts'                       #: the routine's final RTS was reached
    BRK = 'brk'                       #: a BRK instruction was reached
    STOP_ADDRESS = 'stop address'     #: the program counter reached the requested stop address
    TIMEOUT = 'timeout'               #: the cycle budget ran out


@dataclass
class ExecutionOutcome:
    exited_cleanly: bool = True        #: False for a failing BRK or a timeout
    reason: StopReason = StopReason.RTS
    cycles_elapsed: int = 0            #: cycles consumed by this run
    program_counter: int = 0           #: program counter when the run stopped

    def __str__(self):
        return "%s after %d cycles at $%04X (%s)" % (
            self.reason.value, self.cycles_elapsed, self.program_counter,
            'clean exit' if self.exited_cleanly else 'failed')
