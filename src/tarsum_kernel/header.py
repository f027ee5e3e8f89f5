"""
Entry header value type consumed by the header selectors.

The fields mirror a tar header. Text fields follow the stdlib tarfile
convention of utf-8 with surrogateescape, so raw bytes survive a
decode/encode round trip.
"""

import tarfile
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping


ENCODING = "utf-8"
ERRORS = "surrogateescape"


def _frozen(mapping: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class EntryHeader:
    """
    Metadata of a single archive entry.

    pax_records holds the raw PAX key/value records; xattrs holds extended
    attributes keyed by bare attribute name. The two may overlap.

    typeflag must be exactly one byte: a length-1 bytes value or an int in
    0-255. Headers compare by value but are not hashable.
    """
    name: str = ""
    mode: int = 0
    uid: int = 0
    gid: int = 0
    size: int = 0
    mtime: datetime | int | float = 0
    typeflag: bytes | int = tarfile.REGTYPE
    linkname: str = ""
    uname: str = ""
    gname: str = ""
    devmajor: int = 0
    devminor: int = 0
    pax_records: Mapping[str, str] = field(default_factory=dict)
    xattrs: Mapping[str, str] = field(default_factory=dict)

    # Mapping fields are unhashable.
    __hash__ = None

    def __post_init__(self) -> None:
        if isinstance(self.typeflag, int):
            if not 0 <= self.typeflag <= 255:
                raise ValueError(f"typeflag out of byte range: {self.typeflag}")
        elif len(self.typeflag) != 1:
            raise ValueError(f"typeflag must be a single byte: {self.typeflag!r}")
        # Snapshot; later edits to the caller's dicts must not be visible.
        object.__setattr__(self, "pax_records", _frozen(self.pax_records))
        object.__setattr__(self, "xattrs", _frozen(self.xattrs))

    @property
    def typeflag_byte(self) -> int:
        if isinstance(self.typeflag, int):
            return self.typeflag
        return self.typeflag[0]

    @classmethod
    def from_tarinfo(
        cls,
        info: tarfile.TarInfo,
        xattrs: Mapping[str, str] | None = None,
    ) -> "EntryHeader":
        """
        Build an EntryHeader from a stdlib TarInfo.

        TarInfo exposes extended attributes only through pax_headers, so a
        separate xattrs mapping may be supplied by the caller.
        """
        return cls(
            name=info.name,
            mode=info.mode,
            uid=info.uid,
            gid=info.gid,
            size=info.size,
            mtime=info.mtime,
            typeflag=info.type,
            linkname=info.linkname,
            uname=info.uname,
            gname=info.gname,
            devmajor=info.devmajor,
            devminor=info.devminor,
            pax_records=info.pax_headers,
            xattrs=xattrs or {},
        )


def encode_field(text: str) -> bytes:
    """Encode a field name or value back to its raw header bytes."""
    return text.encode(ENCODING, ERRORS)
