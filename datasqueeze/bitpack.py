from .errors import MalformedContainer


def bits_to_bytes(bitstring):
    """
    Packs a string of '0'/'1' characters into bytes, MSB first.
    The last group is padded with '0' up to a full byte.
    """
    packed = bytearray()
    for i in range(0, len(bitstring), 8):
        byte = bitstring[i:i + 8].ljust(8, '0')
        packed.append(int(byte, 2))
    return bytes(packed)


def bytes_to_bits(data, valid_bits):
    """
    Expands bytes back into a '0'/'1' string and drops the padding,
    keeping only the first valid_bits characters.
    """
    if valid_bits < 0 or valid_bits > len(data) * 8:
        raise MalformedContainer(
            f"Valid bit count {valid_bits} does not fit {len(data)} payload bytes"
        )

    bits = ''.join(format(byte, '08b') for byte in data)
    return bits[:valid_bits]
