'''Immutable, sentinel-terminated byte buffer that a suffix tree is built over.'''
from loguru import logger

from ..config import DEFAULT_CONFIG, SuffixTreeConfig
from ..errors import InputTooLarge, InvalidSentinel


def to_bytes(value, encoding: str = "utf-8") -> bytes:
    """Converts a text or pattern argument into bytes.

    Args:
        value: A `bytes`-like object or a `str`.
        encoding: Codec used for `str` values.

    Returns:
        The value as an immutable `bytes` object.

    Raises:
        TypeError: If the value is neither bytes-like nor a string.
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode(encoding)
    raise TypeError(f"Expected bytes or str, got {type(value).__name__}")


class TextBuffer:
    """A fixed-length text terminated by a sentinel byte that occurs nowhere else.

    The sentinel guarantees that no suffix is a prefix of another, so every
    suffix ends at its own leaf.

    Attributes:
        data (bytes): The text followed by the sentinel.
        sentinel (int): The sentinel byte value.
    """
    __slots__ = ('data', 'sentinel')

    def __init__(self, text, max_length: int | None = None, config: SuffixTreeConfig = DEFAULT_CONFIG):
        """Validates the text and appends the sentinel.

        Args:
            text: The input text as bytes or str.
            max_length: Maximum text length in bytes, not counting the sentinel.
                        Defaults to `config.max_text_length`.
            config: Supplies the sentinel, the encoding and the default maximum.

        Raises:
            InputTooLarge: If the text is longer than `max_length`.
            InvalidSentinel: If the sentinel byte already occurs in the text.
        """
        raw = to_bytes(text, config.encoding)
        limit = config.max_text_length if max_length is None else max_length

        if len(raw) > limit:
            logger.warning(f"Rejecting text of {len(raw)} bytes (limit {limit})")
            raise InputTooLarge(len(raw), limit)

        position = raw.find(config.sentinel)
        if position != -1:
            logger.warning(f"Rejecting text: sentinel {config.sentinel!r} found at offset {position}")
            raise InvalidSentinel(f"Sentinel {config.sentinel!r} already occurs in the text at offset {position}.")

        object.__setattr__(self, 'data', raw + config.sentinel)
        object.__setattr__(self, 'sentinel', config.sentinel_byte)

    def __setattr__(self, name, value):
        raise AttributeError("TextBuffer is read-only")

    def __len__(self) -> int:
        return len(self.data)

    @property
    def text(self) -> bytes:
        """The text without its sentinel."""
        return self.data[:-1]

    def label(self, start: int, end: int) -> bytes:
        """Returns the bytes between `start` and `end`, both inclusive."""
        return self.data[start:end + 1]

    def __repr__(self) -> str:
        return f"TextBuffer(length={len(self.data)}, sentinel={bytes([self.sentinel])!r})"
