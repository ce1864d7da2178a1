import os
import tempfile

from . import bitpack, huffman, lz77
from .container import read_container, write_container
from .errors import (
    CompressionError,
    EmptyInput,
    InputNotFound,
    MalformedContainer,
    OutputNotWritable,
)


# --- IN-MEMORY PIPELINE ---

def compress(data):
    """
    LZ77 -> token text -> Huffman -> bit packing -> container bytes.
    Raises EmptyInput when there is nothing to compress.
    """
    if not data:
        raise EmptyInput("Input is empty")

    matches = lz77.encode_lz77(data)
    token_text = lz77.serialize_tokens(matches)

    root = huffman.build_tree(huffman.calculate_frequency(token_text))
    huffman_codes = huffman.generate_codes(root)
    bitstring = huffman.encode(token_text, huffman_codes)

    payload = bitpack.bits_to_bytes(bitstring)
    return write_container(len(bitstring), huffman_codes, payload)


def decompress(blob):
    """
    Reverses compress(). Every inconsistency in the container raises
    MalformedContainer before any output is produced.
    """
    valid_bits, huffman_codes, payload = read_container(blob)
    if not huffman_codes:
        raise MalformedContainer("Container has an empty code table")

    root = huffman.rebuild_tree(huffman_codes)
    bitstring = bitpack.bytes_to_bits(payload, valid_bits)
    token_text = huffman.decode(bitstring, root)
    if not token_text:
        raise MalformedContainer("Container payload is empty")

    matches = lz77.parse_tokens(token_text)
    return lz77.decode_lz77(matches)


def compression_stats(original_size, compressed_size):
    """Size statistics in the same shape the web routes report."""
    saved = original_size - compressed_size
    ratio = compressed_size / original_size if original_size else 0
    saved_percent = round((1 - ratio) * 100, 2) if original_size else 0
    return {
        "original_size": original_size,
        "compressed_size": compressed_size,
        "saved": saved,
        "saved_percent": saved_percent,
        "ratio": ratio,
    }


# --- FILE BOUNDARY ---

def _read_input(input_path):
    try:
        with open(input_path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise InputNotFound(f"Could not open input file {input_path}: {e}") from e


def _write_output(output_path, data):
    """
    Writes to a temporary file next to output_path and renames it into
    place, so output_path is either complete or absent.
    """
    directory = os.path.dirname(os.path.abspath(output_path))
    try:
        fd, temp_path = tempfile.mkstemp(dir=directory, prefix='.datasqueeze-', suffix='.tmp')
    except OSError as e:
        raise OutputNotWritable(f"Could not create output file {output_path}: {e}") from e

    replaced = False
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(temp_path, output_path)
        replaced = True
    except OSError as e:
        raise OutputNotWritable(f"Could not create output file {output_path}: {e}") from e
    finally:
        if not replaced and os.path.exists(temp_path):
            os.remove(temp_path)


def _failure(error):
    return {"success": False, "error": error.kind, "message": str(error)}


def compress_file(input_path, output_path):
    """
    Compresses input_path into a container at output_path.
    Returns a result dict; failures are reported, never raised.
    """
    try:
        data = _read_input(input_path)
        container = compress(data)
        _write_output(output_path, container)
    except CompressionError as e:
        return _failure(e)

    result = {"success": True, "output_path": output_path}
    result.update(compression_stats(len(data), len(container)))
    return result


def decompress_file(input_path, output_path):
    """
    Restores the original bytes of the container at input_path into
    output_path. Returns a result dict like compress_file().
    """
    try:
        blob = _read_input(input_path)
        data = decompress(blob)
        _write_output(output_path, data)
    except CompressionError as e:
        return _failure(e)

    result = {"success": True, "output_path": output_path}
    result.update(compression_stats(len(data), len(blob)))
    return result
