"""
TarSum versions, their registry, and checksum label parsing.

Checksums have the form "{label}+{hash}:{hex}", e.g.
"tarsum+sha256:e58fcf7418d4390dec8e8fb69d88c06ec07039d651fedd3aa72af9972e7d046b".

CRITICAL: The labels below are a stable contract. Changing one breaks
every checksum already issued under it.
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType

from .canonical import HeaderSelector, v0_select_headers, v1_select_headers
from .errors import UnimplementedVersion, UnrecognizedVersionLabel


logger = logging.getLogger(__name__)


class Version(IntEnum):
    """
    TarSum algorithm version.

    DEV is either the latest or an unsettled next version. It currently
    shares V1's rule but carries its own label, so changing DEV never
    alters V1 checksums.
    """
    V0 = 0
    V1 = 1
    DEV = 2

    def __str__(self) -> str:
        return label_for(self)

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)


@dataclass(frozen=True)
class Registration:
    """A registered version: its checksum label and header selector."""
    label: str
    selector: HeaderSelector


_REGISTRY = MappingProxyType({
    Version.V0: Registration("tarsum", v0_select_headers),
    Version.V1: Registration("tarsum.v1", v1_select_headers),
    Version.DEV: Registration("tarsum.dev", v1_select_headers),
})

_VERSIONS_BY_LABEL = MappingProxyType({
    registration.label: version for version, registration in _REGISTRY.items()
})


def all_versions() -> frozenset[Version]:
    """All registered versions. Unordered."""
    return frozenset(_REGISTRY)


def label_for(version: Version) -> str:
    """Label used in checksum tags; empty for an unregistered version."""
    registration = _REGISTRY.get(version)
    return registration.label if registration else ""


def version_for(label: str) -> Version:
    """
    Look up a version by its checksum label.

    Raises:
        UnrecognizedVersionLabel: If no registered version has this label
    """
    try:
        return _VERSIONS_BY_LABEL[label]
    except KeyError:
        logger.debug("rejected tarsum version label %r", label)
        raise UnrecognizedVersionLabel(
            "string does not include a TarSum Version",
            details={"label": label},
        ) from None


def selector_for(version: Version) -> HeaderSelector:
    """
    Header selector registered for a version.

    Raises:
        UnimplementedVersion: If the version has no registered selector
    """
    registration = _REGISTRY.get(version)
    if registration is None:
        logger.debug("no header selector registered for %r", version)
        raise UnimplementedVersion(
            "TarSum Version is not yet implemented",
            details={"version": int(version)},
        )
    return registration.selector


def version_label_for_checksum(checksum: str) -> str:
    """
    Label of a checksum: everything before the first '+', or an empty
    string if there is no separator. The remainder is not inspected.
    """
    sep_index = checksum.find("+")
    if sep_index < 0:
        return ""
    return checksum[:sep_index]


def get_version_from_checksum(checksum: str) -> Version:
    """
    Version named by a checksum string.

    The string is cut at the first '+'; without one the whole string is
    treated as the label. The hash and digest parts are not validated.

    Raises:
        UnrecognizedVersionLabel: If the label is not registered
    """
    label, _, _ = checksum.partition("+")
    return version_for(label)
