"""
Canonical header selection for TarSum.

A header selector maps one EntryHeader to an ordered list of
(field-name, field-value) pairs. The list is hashed verbatim, so both the
order and the string encoding of every field are part of a version's
checksum identity and MUST NOT change for a released version.

Rules:
- v0: twelve fixed fields, including mtime
- v1 / dev: the v0 fields minus mtime, then extended attributes sorted
  by the bytes of their key
- Field values are never validated; whatever the header holds is emitted
"""

import math
from datetime import datetime, timezone
from typing import Callable, Mapping

from .header import ENCODING, ERRORS, EntryHeader, encode_field


# PAX namespace under which extended attributes are mirrored
PAX_SCHILY_XATTR = "SCHILY.xattr."

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

OrderedFieldList = list[tuple[str, str]]
HeaderSelector = Callable[[EntryHeader], OrderedFieldList]


def _epoch_seconds(mtime: datetime | int | float) -> int:
    """
    Convert a modification time to whole Unix seconds in UTC.

    Naive datetimes are taken to be UTC. Fractions are floored so that
    pre-epoch times round toward negative infinity.
    """
    if isinstance(mtime, datetime):
        if mtime.tzinfo is None:
            mtime = mtime.replace(tzinfo=timezone.utc)
        delta = mtime.astimezone(timezone.utc) - _EPOCH
        return delta.days * 86400 + delta.seconds
    return math.floor(mtime)


def _typeflag_char(header: EntryHeader) -> str:
    """Interpret the type flag byte as a one-character string."""
    return bytes([header.typeflag_byte]).decode(ENCODING, ERRORS)


def v0_select_headers(header: EntryHeader) -> OrderedFieldList:
    """
    Select headers for TarSum version 0.

    Args:
        header: Entry header to canonicalize

    Returns:
        Exactly twelve (name, value) pairs in canonical order
    """
    return [
        ("name", header.name),
        ("mode", str(header.mode)),
        ("uid", str(header.uid)),
        ("gid", str(header.gid)),
        ("size", str(header.size)),
        ("mtime", str(_epoch_seconds(header.mtime))),
        ("typeflag", _typeflag_char(header)),
        ("linkname", header.linkname),
        ("uname", header.uname),
        ("gname", header.gname),
        ("devmajor", str(header.devmajor)),
        ("devminor", str(header.devminor)),
    ]


def _byte_key(pair: tuple[str, str]) -> bytes:
    return encode_field(pair[0])


def merge_xattrs(
    pax_records: Mapping[str, str],
    xattrs: Mapping[str, str],
) -> OrderedFieldList:
    """
    Reconcile extended attributes held in PAX records and in a direct map.

    Every SCHILY.xattr.* PAX record contributes its bare key; when the same
    key is also in xattrs, the xattrs value takes precedence, as it does
    when such archives are written. Keys found only in xattrs are added
    too. Keys compare byte-exactly.

    Args:
        pax_records: Raw PAX records, possibly holding SCHILY.xattr.* keys
        xattrs: Extended attributes keyed by bare name

    Returns:
        One (key, value) pair per distinct key, sorted by key bytes
    """
    merged: OrderedFieldList = []

    for key, value in pax_records.items():
        if not key.startswith(PAX_SCHILY_XATTR):
            continue
        xattr = key[len(PAX_SCHILY_XATTR):]
        merged.append((xattr, xattrs.get(xattr, value)))

    for key, value in xattrs.items():
        if PAX_SCHILY_XATTR + key not in pax_records:
            merged.append((key, value))

    # Neither source mapping has a meaningful iteration order.
    merged.sort(key=_byte_key)
    return merged


def v1_select_headers(header: EntryHeader) -> OrderedFieldList:
    """
    Select headers for TarSum version 1 (and the current dev version).

    mtime is dropped so that touching timestamps does not change the sum.

    Args:
        header: Entry header to canonicalize

    Returns:
        Eleven base pairs followed by the sorted extended attributes
    """
    v0_headers = v0_select_headers(header)
    ordered = v0_headers[:5] + v0_headers[6:]
    ordered.extend(merge_xattrs(header.pax_records, header.xattrs))
    return ordered
