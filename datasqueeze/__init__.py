"""DataSqueeze: LZ77 + Huffman text compression."""

from .errors import (
    CompressionError,
    InputNotFound,
    EmptyInput,
    OutputNotWritable,
    MalformedContainer,
)
from .compressor import compress, decompress, compress_file, decompress_file

__version__ = "1.0.0"
