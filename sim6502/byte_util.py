# Common byte functions

from more_itertools import chunked

from sim6502.errors import Sim6502ValueError


def hex_to_int(a_hex):
    a_hex = a_hex.strip()
    if a_hex.startswith('$'):
        a_hex = a_hex[1:]
    elif a_hex.startswith('\\x') or a_hex.startswith('0x'):
        a_hex = a_hex[2:]
    return int(a_hex, 16)


def little_endian_bytes(a_num, min_bytes=2):
    retval = bytearray()
    remaining = a_num
    while remaining != 0:
        retval.append(remaining & 0xFF)
        remaining >>= 8
    while len(retval) < min_bytes:
        retval.append(0)
    return retval


def little_endian_int(a_bytearray, signed=False):
    return int.from_bytes(a_bytearray, byteorder='little', signed=signed)


def signed_byte(a_byte):
    """
    Interpret a byte as a two's complement value (-128 to 127)
    """
    return a_byte - 0x100 if a_byte & 0x80 else a_byte


def to_bcd(a_num):
    """
    Encode 0-99 as a packed binary coded decimal byte
    """
    if not 0 <= a_num <= 99:
        raise Sim6502ValueError("Error: %d can't be encoded as a BCD byte" % a_num)
    return ((a_num // 10) << 4) | (a_num % 10)


def from_bcd(a_byte):
    """
    Decode a packed BCD byte digit-wise.  Nibbles above 9 are taken at face value, so $1F
    decodes as 1 * 10 + 15.
    """
    return (a_byte >> 4) * 10 + (a_byte & 0x0f)


def hexdump(data, start=0):
    """
    Format bytes as hexdump lines: address, 16 hex bytes (in two groups of 8), and printable text

    :param data: bytes to dump
    :type data: bytes-like or list of ints
    :param start: address of the first byte
    :type start: int
    :return: hexdump lines
    :rtype: list of str
    """
    lines = []
    for i, row in enumerate(chunked(data, 16)):
        hex_part = '  '.join(' '.join('{:02X}'.format(c) for c in half) for half in chunked(row, 8))
        chr_part = ''.join(chr(c) if 32 <= c < 127 else '.' for c in row)
        lines.append('{:04X}: {:48}  {:16}'.format(i * 16 + start, hex_part, chr_part))
    return lines


def read_binary_file(path_and_filename):
    try:
        with open(path_and_filename, mode='rb') as in_file:
            return in_file.read()
    except FileNotFoundError:
        return None


def write_binary_file(path_and_filename, binary):
    with open(path_and_filename, 'wb') as out_file:
        out_file.write(binary)
