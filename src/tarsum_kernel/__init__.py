"""
tarsum-kernel: Versioned canonicalization of tar entry headers.

Selects, orders and encodes the metadata fields of each archive entry so
that archives with identical content hash identically regardless of
header layout. Checksum labels embed the scheme version, so old sums
stay reproducible as the rules evolve.
"""

from .canonical import (
    PAX_SCHILY_XATTR,
    merge_xattrs,
    v0_select_headers,
    v1_select_headers,
)
from .checksum import (
    DEFAULT_HASH,
    SUPPORTED_HASHES,
    combine_entry_sums,
    format_checksum,
    header_checksum,
    header_digest,
    write_header,
    write_v1_header,
)
from .errors import (
    ErrorCode,
    TarSumError,
    UnimplementedVersion,
    UnrecognizedVersionLabel,
    UnsupportedHash,
)
from .header import EntryHeader
from .versioning import (
    Version,
    all_versions,
    get_version_from_checksum,
    label_for,
    selector_for,
    version_for,
    version_label_for_checksum,
)

__version__ = "0.1.0"
__all__ = [
    # Headers
    "EntryHeader",
    # Selection
    "PAX_SCHILY_XATTR",
    "merge_xattrs",
    "v0_select_headers",
    "v1_select_headers",
    # Versions
    "Version",
    "all_versions",
    "label_for",
    "version_for",
    "selector_for",
    "version_label_for_checksum",
    "get_version_from_checksum",
    # Checksums
    "DEFAULT_HASH",
    "SUPPORTED_HASHES",
    "write_header",
    "write_v1_header",
    "header_digest",
    "header_checksum",
    "format_checksum",
    "combine_entry_sums",
    # Errors
    "ErrorCode",
    "TarSumError",
    "UnrecognizedVersionLabel",
    "UnimplementedVersion",
    "UnsupportedHash",
]
