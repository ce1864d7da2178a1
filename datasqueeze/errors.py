class CompressionError(Exception):
    """Base class for every failure reported by compress/decompress."""

    @property
    def kind(self):
        return type(self).__name__


class InputNotFound(CompressionError):
    """The source path could not be opened for reading."""


class EmptyInput(CompressionError):
    """The source has zero bytes, nothing to compress."""


class OutputNotWritable(CompressionError):
    """The destination file could not be created."""


class MalformedContainer(CompressionError):
    """Header, code table or payload of a container are inconsistent."""
