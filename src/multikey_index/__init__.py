"""multikey-index -- one in-memory collection, looked up by any of several keys.

Public API::

    from multikey_index import MultiKeyIndex
    from multikey_index.extractors import field, attribute, item
    from multikey_index.loader import load_index
"""

from multikey_index.config import FacetSpec, IndexConfig
from multikey_index.errors import DuplicateKeyError, ExtractionError, MultiKeyIndexError
from multikey_index.index import MultiKeyIndex

__all__ = [
    "DuplicateKeyError",
    "ExtractionError",
    "FacetSpec",
    "IndexConfig",
    "MultiKeyIndex",
    "MultiKeyIndexError",
]
__version__ = "0.1.0"
