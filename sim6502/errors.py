'''
Exceptions for the sim6502 library
'''


class Sim6502Exception(Exception):
    """
    Generic base class for sim6502 exceptions
    """
    pass


class Sim6502ValueError(Sim6502Exception, ValueError):
    """
    Value error
    """
    pass


class Sim6502DecodeError(Sim6502Exception):
    """
    Opcode not present in the active processor's opcode table
    """
    def __init__(self, opcode, address, processor_type=None):
        self.opcode = opcode
        self.address = address
        self.processor_type = processor_type
        variant = '' if processor_type is None else ' on %s' % processor_type.display_name
        super().__init__(
            "Error: the opcode $%02X @ address $%04X is not supported%s" % (opcode, address, variant))


class Sim6502AddressingModeError(Sim6502Exception):
    """
    An addressing mode was asked for an address it does not have (implied, accumulator)
    """
    pass


class Sim6502NotImplemented(Sim6502Exception):
    """
    Not implemented error
    """
    pass
