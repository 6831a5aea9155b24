from .trie import Trie
from . import sequences

__version__ = "1.0.0"

__all__ = [
    "Trie",
    "sequences",
]
