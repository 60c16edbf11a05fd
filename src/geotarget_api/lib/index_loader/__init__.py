"""Index loader library — CSV parsing for the address index and address batches.

Public API:
    - parse_index_csv: Chunked reader for index files
    - normalize_index_row: Strip, uppercase, and validate one index row
    - parse_address_csv: Read address records for coverage validation
"""

from geotarget_api.lib.index_loader.parser import (
    ADDRESS_COLUMNS,
    INDEX_COLUMNS,
    REQUIRED_INDEX_COLUMNS,
    normalize_index_row,
    parse_address_csv,
    parse_index_csv,
)

__all__ = [
    "ADDRESS_COLUMNS",
    "INDEX_COLUMNS",
    "REQUIRED_INDEX_COLUMNS",
    "normalize_index_row",
    "parse_address_csv",
    "parse_index_csv",
]
