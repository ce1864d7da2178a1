"""
Binary container layout (little-endian, 32-bit signed ints):

    int32   valid bit count of the packed payload
    int32   code table entry count
    per entry:
        byte    symbol
        int32   code length
        byte[]  code as ASCII '0'/'1'
    int32   payload byte count
    byte[]  packed payload
"""
import struct

from .errors import MalformedContainer

CONTAINER_EXTENSION = '.lzh'

INT32 = struct.Struct('<i')


def write_container(valid_bits, huffman_codes, payload):
    """Assembles the container bytes. Code table entries go out in symbol order."""
    out = bytearray()
    out += INT32.pack(valid_bits)
    out += INT32.pack(len(huffman_codes))

    for symbol in sorted(huffman_codes):
        code = huffman_codes[symbol]
        out.append(symbol)
        out += INT32.pack(len(code))
        out += code.encode('ascii')

    out += INT32.pack(len(payload))
    out += payload
    return bytes(out)


class _Reader:
    """Cursor over the container bytes; every read is bounds-checked."""

    def __init__(self, data):
        self.data = data
        self.pos = 0

    def take(self, count, what):
        if count < 0 or self.pos + count > len(self.data):
            raise MalformedContainer(f"Container truncated while reading {what}")
        chunk = self.data[self.pos:self.pos + count]
        self.pos += count
        return chunk

    def int32(self, what):
        return INT32.unpack(self.take(INT32.size, what))[0]

    def remaining(self):
        return len(self.data) - self.pos


def read_container(data):
    """
    Parses container bytes into (valid_bits, huffman_codes, payload).
    Raises MalformedContainer on any inconsistency.
    """
    reader = _Reader(data)

    # --- PHASE 1: Header ---
    valid_bits = reader.int32("valid bit count")
    if valid_bits < 0:
        raise MalformedContainer(f"Negative valid bit count ({valid_bits})")

    entry_count = reader.int32("code table size")
    if entry_count < 0 or entry_count > 256:
        raise MalformedContainer(f"Impossible code table size ({entry_count})")

    # --- PHASE 2: Code table ---
    huffman_codes = {}
    for _ in range(entry_count):
        symbol = reader.take(1, "code table symbol")[0]
        code_length = reader.int32("code length")
        if code_length <= 0:
            raise MalformedContainer(f"Invalid code length ({code_length}) for symbol {symbol}")

        code = reader.take(code_length, "code bits")
        if code.translate(None, b'01'):
            raise MalformedContainer(f"Code for symbol {symbol} contains characters other than '0'/'1'")
        if symbol in huffman_codes:
            raise MalformedContainer(f"Duplicate code table entry for symbol {symbol}")

        huffman_codes[symbol] = code.decode('ascii')

    # --- PHASE 3: Payload ---
    payload_size = reader.int32("payload size")
    if payload_size < 0:
        raise MalformedContainer(f"Negative payload size ({payload_size})")

    payload = reader.take(payload_size, "payload")
    if reader.remaining():
        raise MalformedContainer(f"{reader.remaining()} unexpected bytes after payload")
    if valid_bits > payload_size * 8:
        raise MalformedContainer(
            f"Valid bit count {valid_bits} exceeds payload of {payload_size} bytes"
        )

    return valid_bits, huffman_codes, bytes(payload)
