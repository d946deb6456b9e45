'''Exception types raised by the suffix tree package.

Construction-time validation failures (`InputTooLarge`, `InvalidSentinel`) are fatal to
the `build` call that raised them: no partial tree is ever returned. A pattern that does
not occur in the text is a normal outcome of `SuffixTree.search`, not an exception.
'''


class SuffixTreeError(Exception):
    """Base class for all errors raised by this package."""


class InputTooLarge(SuffixTreeError, ValueError):
    """The input text is longer than the configured maximum."""

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(f"Text length {length} exceeds the maximum of {max_length} bytes.")


class InvalidSentinel(SuffixTreeError, ValueError):
    """The sentinel byte is malformed or already occurs in the text."""


class PatternEmpty(SuffixTreeError, ValueError):
    """An empty pattern was passed to a search."""


class PatternTooLarge(SuffixTreeError, ValueError):
    """The pattern is longer than the configured maximum pattern length."""

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(f"Pattern length {length} exceeds the maximum of {max_length} bytes.")


class ConfigError(SuffixTreeError, ValueError):
    """A configuration value is invalid."""


class AllocationFailure(SuffixTreeError, MemoryError):
    """Memory ran out while building or querying a tree."""


class TreeStateError(SuffixTreeError, RuntimeError):
    """The tree was used in a state that does not allow the operation.

    Raised when a frozen tree is mutated, when suffix indices are assigned twice,
    or when a released tree is queried.
    """
