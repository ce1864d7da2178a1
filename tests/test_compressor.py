import os
import random
import struct

import pytest

from datasqueeze import bitpack, compressor, huffman
from datasqueeze import compress, decompress, compress_file, decompress_file
from datasqueeze.compressor import compression_stats
from datasqueeze.container import read_container, write_container
from datasqueeze.errors import EmptyInput, MalformedContainer


ROUND_TRIP_INPUTS = [
    b"A",
    b"AAAA",
    b"\x00",
    b"1,2;3,4;;,,\x00\x00;",
    bytes(range(256)),
    b"The quick brown fox jumps over the lazy dog. " * 30,
    "Grüße, 世界; 12,34".encode("utf-8") * 5,
]


@pytest.mark.parametrize("data", ROUND_TRIP_INPUTS)
def test_round_trip(data):
    assert decompress(compress(data)) == data


def test_round_trip_random_bytes():
    rng = random.Random(42)
    data = bytes(rng.getrandbits(8) for _ in range(1500))
    assert decompress(compress(data)) == data


def test_compression_is_deterministic():
    data = b"abracadabra " * 10
    assert compress(data) == compress(data)


def test_repetitive_text_shrinks():
    data = b"The quick brown fox jumps over the lazy dog. " * 100
    assert len(compress(data)) < len(data)


def test_empty_input_raises():
    with pytest.raises(EmptyInput):
        compress(b"")


def _payload_count_offset(blob):
    _, _, payload = read_container(blob)
    return len(blob) - len(payload) - 4


def test_truncated_payload_is_malformed():
    blob = compress(b"Hello World " * 20)
    with pytest.raises(MalformedContainer):
        decompress(blob[:-3])


@pytest.mark.parametrize("delta", [-1, 1, 1000])
def test_wrong_payload_count_is_malformed(delta):
    blob = bytearray(compress(b"Hello World " * 20))
    pos = _payload_count_offset(bytes(blob))
    count = struct.unpack_from("<i", blob, pos)[0]
    struct.pack_into("<i", blob, pos, count + delta)
    with pytest.raises(MalformedContainer):
        decompress(bytes(blob))


def test_payload_ending_mid_code_is_malformed():
    blob = bytearray(compress(b"Hello World " * 20))
    valid_bits = struct.unpack_from("<i", blob, 0)[0]
    struct.pack_into("<i", blob, 0, valid_bits - 1)
    with pytest.raises(MalformedContainer):
        decompress(bytes(blob))


def test_garbage_is_malformed():
    for blob in (b"", b"\x00", b"not a container at all"):
        with pytest.raises(MalformedContainer):
            decompress(blob)


def test_compression_stats():
    stats = compression_stats(200, 50)
    assert stats == {
        "original_size": 200,
        "compressed_size": 50,
        "saved": 150,
        "saved_percent": 75.0,
        "ratio": 0.25,
    }


# --- FILE BOUNDARY ---

def test_compress_and_decompress_files(tmp_path):
    source = tmp_path / "notes.txt"
    source.write_bytes(b"to be or not to be, that is the question; " * 10)
    packed = tmp_path / "notes.txt.lzh"
    restored = tmp_path / "restored.txt"

    result = compress_file(str(source), str(packed))
    assert result["success"] is True
    assert result["original_size"] == source.stat().st_size
    assert result["compressed_size"] == packed.stat().st_size

    result = decompress_file(str(packed), str(restored))
    assert result["success"] is True
    assert restored.read_bytes() == source.read_bytes()
    assert sorted(os.listdir(tmp_path)) == ["notes.txt", "notes.txt.lzh", "restored.txt"]


def test_empty_file_creates_no_output(tmp_path):
    source = tmp_path / "empty.txt"
    source.write_bytes(b"")
    target = tmp_path / "empty.lzh"

    result = compress_file(str(source), str(target))
    assert result["success"] is False
    assert result["error"] == "EmptyInput"
    assert not target.exists()


def test_missing_input(tmp_path):
    result = compress_file(str(tmp_path / "missing.txt"), str(tmp_path / "out.lzh"))
    assert result["error"] == "InputNotFound"
    result = decompress_file(str(tmp_path / "missing.lzh"), str(tmp_path / "out.txt"))
    assert result["error"] == "InputNotFound"


def test_unwritable_output(tmp_path):
    source = tmp_path / "in.txt"
    source.write_bytes(b"data")
    target = tmp_path / "no" / "such" / "dir" / "out.lzh"

    result = compress_file(str(source), str(target))
    assert result["success"] is False
    assert result["error"] == "OutputNotWritable"
    assert not target.exists()


def test_malformed_container_leaves_no_output(tmp_path):
    source = tmp_path / "broken.lzh"
    source.write_bytes(compress(b"some text to squeeze")[:-2])
    target = tmp_path / "broken.txt"

    result = decompress_file(str(source), str(target))
    assert result["success"] is False
    assert result["error"] == "MalformedContainer"
    assert not target.exists()
    assert os.listdir(tmp_path) == ["broken.lzh"]


def _container_for_token_text(token_text):
    codes = huffman.generate_codes(huffman.build_tree(huffman.calculate_frequency(token_text)))
    bits = huffman.encode(token_text, codes)
    return write_container(len(bits), codes, bitpack.bits_to_bytes(bits))


def test_overlong_offset_field_is_malformed(tmp_path):
    blob = _container_for_token_text(b"1" * 5000 + b",0,A;")
    with pytest.raises(MalformedContainer):
        decompress(blob)

    source = tmp_path / "digits.lzh"
    source.write_bytes(blob)
    target = tmp_path / "digits.txt"
    result = decompress_file(str(source), str(target))
    assert result["success"] is False
    assert result["error"] == "MalformedContainer"
    assert not target.exists()


def test_interrupted_write_leaves_no_temp_file(tmp_path, monkeypatch):
    source = tmp_path / "in.txt"
    source.write_bytes(b"interrupt me, interrupt me")

    def interrupted_replace(src, dst):
        raise KeyboardInterrupt

    monkeypatch.setattr(compressor.os, "replace", interrupted_replace)
    with pytest.raises(KeyboardInterrupt):
        compress_file(str(source), str(tmp_path / "in.lzh"))

    assert os.listdir(tmp_path) == ["in.txt"]
