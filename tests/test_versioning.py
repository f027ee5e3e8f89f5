"""
Version registry, checksum label parsing, and header checksum tests.
"""

import hashlib
import io
import tarfile
from pathlib import Path

import pytest

# Add parent src to path for development
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tarsum_kernel import (
    EntryHeader,
    ErrorCode,
    UnimplementedVersion,
    UnrecognizedVersionLabel,
    UnsupportedHash,
    Version,
    all_versions,
    combine_entry_sums,
    format_checksum,
    get_version_from_checksum,
    header_checksum,
    header_digest,
    label_for,
    selector_for,
    v1_select_headers,
    version_for,
    version_label_for_checksum,
    write_header,
    write_v1_header,
)


def _header() -> EntryHeader:
    return EntryHeader(
        name="usr/bin/tool",
        mode=0o755,
        size=1024,
        mtime=1700000000,
        typeflag=tarfile.REGTYPE,
        uname="root",
        gname="root",
        pax_records={"SCHILY.xattr.user.tag": "v"},
    )


class TestRegistry:
    """Test the version registry."""

    def test_labels(self):
        """Labels are a stable public contract."""
        assert label_for(Version.V0) == "tarsum"
        assert label_for(Version.V1) == "tarsum.v1"
        assert label_for(Version.DEV) == "tarsum.dev"

    def test_str_is_label(self):
        """str() of a version is its label."""
        assert str(Version.V1) == "tarsum.v1"

    def test_format_is_label(self):
        """Formatting a version yields its label."""
        assert f"{Version.V1}" == "tarsum.v1"
        assert "{:>11}".format(Version.V0) == "     tarsum"

    def test_all_versions(self):
        """Every enum member is registered."""
        assert all_versions() == frozenset(Version)

    def test_registry_complete(self):
        """Every registered version has a selector."""
        for version in all_versions():
            assert callable(selector_for(version))

    def test_version_for(self):
        """Labels map back to their versions."""
        for version in all_versions():
            assert version_for(label_for(version)) is version

    def test_unknown_label(self):
        """Unknown labels raise UnrecognizedVersionLabel."""
        with pytest.raises(UnrecognizedVersionLabel) as exc_info:
            version_for("tarsum.v9")
        assert exc_info.value.code == ErrorCode.NOT_VERSION
        assert exc_info.value.to_dict()["details"] == {"label": "tarsum.v9"}

    def test_unregistered_version(self):
        """A version without a selector raises UnimplementedVersion."""
        with pytest.raises(UnimplementedVersion) as exc_info:
            selector_for(7)
        assert exc_info.value.code == ErrorCode.VERSION_NOT_IMPLEMENTED

    def test_unregistered_label_empty(self):
        """An unregistered version has an empty label."""
        assert label_for(7) == ""

    def test_v1_and_dev_distinct(self):
        """Dev shares the v1 rule but not its label."""
        assert selector_for(Version.DEV) is selector_for(Version.V1)
        assert label_for(Version.DEV) != label_for(Version.V1)


class TestChecksumLabels:
    """Test parsing the version label out of checksum strings."""

    def test_label_for_checksum(self):
        """The label is everything before the first '+'."""
        assert version_label_for_checksum("tarsum.v1+sha256:abc") == "tarsum.v1"

    def test_label_without_separator(self):
        """No '+' yields an empty label."""
        assert version_label_for_checksum("nodelimiterhere") == ""

    def test_label_first_separator(self):
        """Only the first '+' splits."""
        assert version_label_for_checksum("a+b+c") == "a"

    def test_version_from_checksum(self):
        """Checksum strings resolve to their version."""
        assert get_version_from_checksum("tarsum+sha256:abc") is Version.V0
        assert get_version_from_checksum("tarsum.dev+sha512:abc") is Version.DEV

    def test_version_without_separator(self):
        """A bare label with no '+' still resolves."""
        assert get_version_from_checksum("tarsum.v1") is Version.V1

    def test_bogus_version(self):
        """Unknown labels fail."""
        with pytest.raises(UnrecognizedVersionLabel):
            get_version_from_checksum("bogus+sha256:abc")

    def test_digest_not_validated(self):
        """The hash and digest parts are not inspected."""
        assert get_version_from_checksum("tarsum+???") is Version.V0


class TestHeaderChecksum:
    """Test writing and hashing canonical headers."""

    def test_write_v1_header(self):
        """Pairs are written as name+value with no separators."""
        header = _header()
        buf = io.BytesIO()
        write_v1_header(header, buf)
        expected = "".join(name + value for name, value in v1_select_headers(header))
        assert buf.getvalue() == expected.encode("utf-8")
        assert buf.getvalue().startswith(b"nameusr/bin/toolmode493uid0")

    def test_write_header_v0_includes_mtime(self):
        """The v0 rule writes the mtime field."""
        buf = io.BytesIO()
        write_header(_header(), buf, Version.V0)
        assert b"mtime1700000000" in buf.getvalue()

    def test_header_digest_v0(self):
        """The digest follows the requested version's written header."""
        header = _header()
        buf = io.BytesIO()
        write_header(header, buf, Version.V0)
        expected = hashlib.sha1(buf.getvalue()).hexdigest()
        assert header_digest(header, Version.V0, "sha1") == expected

    def test_raw_bytes_preserved(self):
        """Surrogate-escaped names encode back to their raw bytes."""
        name = b"caf\xe9".decode("utf-8", "surrogateescape")
        buf = io.BytesIO()
        write_v1_header(EntryHeader(name=name), buf)
        assert buf.getvalue().startswith(b"namecaf\xe9mode")

    def test_header_digest(self):
        """The digest hashes the written header."""
        header = _header()
        buf = io.BytesIO()
        write_v1_header(header, buf)
        assert header_digest(header) == hashlib.sha256(buf.getvalue()).hexdigest()

    def test_header_checksum_round_trip(self):
        """Checksum tags carry a parseable version label."""
        for version in all_versions():
            checksum = header_checksum(_header(), version, "sha512")
            assert checksum.startswith(f"{label_for(version)}+sha512:")
            assert get_version_from_checksum(checksum) is version

    def test_unsupported_hash(self):
        """Unknown hash identifiers are rejected."""
        with pytest.raises(UnsupportedHash) as exc_info:
            header_digest(_header(), hash_id="crc32")
        assert exc_info.value.code == ErrorCode.UNSUPPORTED_HASH

    def test_format_checksum(self):
        """Tags have the form label+hash:hex."""
        assert format_checksum(Version.V0, "sha256", "ab12") == "tarsum+sha256:ab12"

    def test_format_unregistered_version(self):
        """Formatting an unregistered version fails."""
        with pytest.raises(UnimplementedVersion):
            format_checksum(7, "sha256", "ab12")


class TestCombineEntrySums:
    """Test whole-archive checksum combination."""

    def test_order_independent(self):
        """Entry order does not change the archive checksum."""
        sums = ["cc", "aa", "bb"]
        assert combine_entry_sums(sums) == combine_entry_sums(reversed(sums))

    def test_value(self):
        """Sorted entry sums are concatenated after extra."""
        expected = hashlib.sha256(b"xaabb").hexdigest()
        result = combine_entry_sums(["bb", "aa"], Version.V0, extra=b"x")
        assert result == f"tarsum+sha256:{expected}"

    def test_empty_archive(self):
        """An archive with no entries hashes the empty string."""
        expected = hashlib.sha256(b"").hexdigest()
        assert combine_entry_sums([]) == f"tarsum.v1+sha256:{expected}"
