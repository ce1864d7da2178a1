from collections import namedtuple

from .errors import MalformedContainer

# --- CONSTANTS ---
SEARCH_WINDOW_SIZE = 4096
MAX_MATCH_LENGTH = 18

FIELD_SEPARATOR = ord(',')
RECORD_SEPARATOR = ord(';')
# offset and length are int32 values in the original format
MAX_NUMBER_DIGITS = len(str(2 ** 31 - 1))

# literal is an int byte, or None when the match runs to the end of input
LZ77Match = namedtuple('LZ77Match', ['offset', 'length', 'literal'])


# --- CORE LZ77 LOGIC ---

def find_longest_match(data, i, window_size=SEARCH_WINDOW_SIZE, max_length=MAX_MATCH_LENGTH):
    """
    Searches data[max(0, i - window_size):i] for the longest run matching
    the bytes starting at i. A match never reaches into position i or
    beyond, so it only copies bytes the decoder already has.

    Returns (offset, length); (0, 0) when nothing matches.
    """
    n = len(data)
    best_offset = 0
    best_length = 0
    first_byte = data[i]

    for j in range(max(0, i - window_size), i):
        # First-byte filtering
        if data[j] != first_byte:
            continue

        length = 0
        while (length < max_length
               and j + length < i
               and i + length < n
               and data[j + length] == data[i + length]):
            length += 1

        # Strictly longer only: on a tie the earliest start is kept
        if length > best_length:
            best_length = length
            best_offset = i - j

    return best_offset, best_length


def encode_lz77(data, window_size=SEARCH_WINDOW_SIZE, max_length=MAX_MATCH_LENGTH):
    """Encodes a byte string into a list of LZ77Match tokens."""
    matches = []
    i = 0
    n = len(data)

    while i < n:
        offset, length = find_longest_match(data, i, window_size, max_length)
        literal = data[i + length] if i + length < n else None
        matches.append(LZ77Match(offset, length, literal))
        i += length + 1

    return matches


def decode_lz77(matches, max_length=MAX_MATCH_LENGTH):
    """
    Replays matches against a growing output buffer: copy `length` bytes
    starting `offset` back from the end, then append the literal.
    """
    output = bytearray()

    for offset, length, literal in matches:
        if length > max_length:
            raise MalformedContainer(f"Match length {length} exceeds the maximum of {max_length}")
        if length > 0:
            if offset <= 0 or offset > len(output):
                raise MalformedContainer(
                    f"Invalid distance ({offset}) pointing outside the decoded buffer of {len(output)} bytes"
                )
            start = len(output) - offset
            for k in range(length):
                output.append(output[start + k])

        if literal is not None:
            output.append(literal)

    return bytes(output)


# --- TOKEN TEXT CODEC ---

def serialize_tokens(matches):
    """
    Renders matches as 'offset,length,literal;' records. The literal is the
    raw byte; the end-of-input sentinel leaves the literal field empty.
    """
    text = bytearray()
    for offset, length, literal in matches:
        text += b'%d,%d,' % (offset, length)
        if literal is not None:
            text.append(literal)
        text.append(RECORD_SEPARATOR)
    return bytes(text)


def _read_number(text, pos):
    """Reads decimal digits up to the next ',' and returns (value, position after ',')."""
    start = pos
    while pos < len(text) and 0x30 <= text[pos] <= 0x39:
        pos += 1

    if pos == start:
        raise MalformedContainer(f"Expected a number at token offset {start}")
    if pos - start > MAX_NUMBER_DIGITS:
        raise MalformedContainer(f"Number at token offset {start} is longer than {MAX_NUMBER_DIGITS} digits")
    if pos >= len(text) or text[pos] != FIELD_SEPARATOR:
        raise MalformedContainer(f"Expected ',' at token offset {pos}")

    return int(text[start:pos]), pos + 1


def parse_tokens(text):
    """
    Parses token text back into LZ77Match tuples.

    Records are read left to right: two numbers each closed by ',', then
    exactly one literal byte and ';'. Since the literal always occupies one
    byte, digits, ',' and ';' are valid literals. Only the final record may
    have an empty literal field (the end-of-input sentinel).
    """
    matches = []
    pos = 0
    n = len(text)

    while pos < n:
        offset, pos = _read_number(text, pos)
        length, pos = _read_number(text, pos)

        if pos == n - 1 and text[pos] == RECORD_SEPARATOR:
            matches.append(LZ77Match(offset, length, None))
            pos += 1
            break

        if pos + 1 >= n or text[pos + 1] != RECORD_SEPARATOR:
            raise MalformedContainer(f"Unterminated token record at offset {pos}")

        matches.append(LZ77Match(offset, length, text[pos]))
        pos += 2

    return matches
