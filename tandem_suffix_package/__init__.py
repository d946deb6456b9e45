'''Initialize the tandem_suffix_package, exposing suffix tree construction, search and tandem repeat detection.'''

from .config import SuffixTreeConfig, load_config
from .errors import (
    AllocationFailure, ConfigError, InputTooLarge, InvalidSentinel,
    PatternEmpty, PatternTooLarge, SuffixTreeError, TreeStateError
)
from .suffix_tree import PatternReport, SearchResult, SuffixTree, build

__all__ = [
    'build', 'SuffixTree', 'SearchResult', 'PatternReport',
    'SuffixTreeConfig', 'load_config',
    'SuffixTreeError', 'InputTooLarge', 'InvalidSentinel', 'PatternEmpty',
    'PatternTooLarge', 'ConfigError', 'AllocationFailure', 'TreeStateError'
]
