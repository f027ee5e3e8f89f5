"""
Header hashing and checksum-tag formatting for tarsum-kernel.

Uses hashlib for all digests. Content bytes are never read here; the
caller hashes entry content and hands over the per-entry hex digests.
"""

import hashlib
from typing import Iterable, Protocol

from .errors import UnimplementedVersion, UnsupportedHash
from .header import EntryHeader, encode_field
from .versioning import Version, label_for, selector_for


DEFAULT_HASH = "sha256"

SUPPORTED_HASHES = ("md5", "sha1", "sha224", "sha256", "sha384", "sha512")


class Writer(Protocol):
    def write(self, data: bytes, /) -> object: ...


class _HashWriter:
    """Writer adapter feeding a hashlib object."""

    def __init__(self, h):
        self._h = h

    def write(self, data: bytes) -> None:
        self._h.update(data)


def _new_hash(hash_id: str):
    """Internal: fresh hashlib object for a supported hash identifier."""
    if hash_id not in SUPPORTED_HASHES:
        raise UnsupportedHash(
            f"Unsupported hash: {hash_id}",
            details={"hash_id": hash_id, "supported": list(SUPPORTED_HASHES)},
        )
    return hashlib.new(hash_id)


def write_header(
    header: EntryHeader,
    writer: Writer,
    version: Version = Version.V1,
) -> None:
    """
    Write the canonical header pairs of an entry to a writer.

    Each pair is written as name followed by value, with no separator
    between fields and no trailing newline.

    Raises:
        UnimplementedVersion: If the version has no registered selector
    """
    for name, value in selector_for(version)(header):
        writer.write(encode_field(name + value))


def write_v1_header(header: EntryHeader, writer: Writer) -> None:
    """Write a header to a writer in V1 tarsum format."""
    write_header(header, writer, Version.V1)


def header_digest(
    header: EntryHeader,
    version: Version = Version.V1,
    hash_id: str = DEFAULT_HASH,
) -> str:
    """
    Hex digest of the canonical header of one entry.

    Args:
        header: Entry header
        version: TarSum version whose selection rule applies
        hash_id: Name of the hash, one of SUPPORTED_HASHES

    Returns:
        Lowercase hex digest
    """
    h = _new_hash(hash_id)
    write_header(header, _HashWriter(h), version)
    return h.hexdigest()


def format_checksum(version: Version, hash_id: str, hex_digest: str) -> str:
    """
    Build a checksum tag: "{label}+{hash_id}:{hex_digest}".

    Raises:
        UnimplementedVersion: If the version has no label
    """
    label = label_for(version)
    if not label:
        raise UnimplementedVersion(
            "TarSum Version is not yet implemented",
            details={"version": int(version)},
        )
    return f"{label}+{hash_id}:{hex_digest}"


def header_checksum(
    header: EntryHeader,
    version: Version = Version.V1,
    hash_id: str = DEFAULT_HASH,
) -> str:
    """Checksum tag of a single entry header."""
    return format_checksum(version, hash_id, header_digest(header, version, hash_id))


def combine_entry_sums(
    entry_sums: Iterable[str],
    version: Version = Version.V1,
    hash_id: str = DEFAULT_HASH,
    extra: bytes = b"",
) -> str:
    """
    Compute the whole-archive checksum from per-entry digests.

    archive = HASH(extra || concatenation of entry hex digests, sorted).
    Sorting makes the result independent of entry order.

    Args:
        entry_sums: Hex digest of each entry (header and content)
        version: TarSum version the entry digests were computed under
        hash_id: Name of the hash, one of SUPPORTED_HASHES
        extra: Optional bytes hashed ahead of the entry digests

    Returns:
        Checksum tag for the archive
    """
    h = _new_hash(hash_id)
    if extra:
        h.update(extra)
    for entry_sum in sorted(entry_sums):
        h.update(entry_sum.encode("ascii"))
    return format_checksum(version, hash_id, h.hexdigest())
