"""Tests for the envelope header and page table reader."""

import gzip

import pytest

from owl_fts.codec.byte_cursor import ByteCursor
from owl_fts.codec.envelope import (
    MAGIC,
    check_magic,
    decode_base64,
    decompress_payload,
    open_envelope,
    read_compressed_payload,
    read_page_table,
)
from owl_fts.errors import (
    DecodeError,
    DecompressionFailure,
    InvalidEncoding,
    InvalidFormat,
    InvalidInputEncoding,
    UnexpectedEnd,
)
from tests.fixtures.envelopes import build_payload, encode_cluster, to_base64, wrap_payload


class TestBase64:
    def test_rejects_invalid_base64(self):
        with pytest.raises(InvalidInputEncoding):
            decode_base64("not base64!!")

    def test_rejects_non_ascii_text(self):
        with pytest.raises(InvalidInputEncoding):
            decode_base64("b3dsé")

    def test_decodes_to_cursor(self):
        cursor = decode_base64(to_base64(b"\x01\x02"))
        assert cursor.to_bytes() == b"\x01\x02"


class TestMagic:
    def test_accepts_valid_magic(self):
        cursor = ByteCursor(MAGIC + b"\x00")
        check_magic(cursor)
        assert cursor.position == len(MAGIC)

    @pytest.mark.parametrize("raw", [b"", b"owl", MAGIC[:4], MAGIC])
    def test_rejects_short_buffers(self, raw):
        with pytest.raises(InvalidFormat):
            check_magic(ByteCursor(raw))

    def test_rejects_wrong_version(self):
        with pytest.raises(InvalidFormat):
            check_magic(ByteCursor(b"owl\x00\x02" + b"\x00" * 8))

    def test_short_input_through_pipeline_is_invalid_format(self):
        with pytest.raises(InvalidFormat):
            open_envelope(to_base64(b"owl"))


class TestCompressedPayload:
    def test_extracts_declared_length(self):
        cursor = ByteCursor(b"\x00\x00\x00\x02abc")
        payload = read_compressed_payload(cursor)
        assert payload.to_bytes() == b"ab"

    def test_declared_length_beyond_input(self):
        cursor = ByteCursor(b"\x00\x00\x00\x10abc")
        with pytest.raises(UnexpectedEnd):
            read_compressed_payload(cursor)

    def test_declared_length_beyond_input_through_pipeline(self):
        raw = wrap_payload(build_payload(["p"]), declared_length=10_000)
        with pytest.raises(UnexpectedEnd):
            open_envelope(to_base64(raw))

    def test_missing_length_reads_as_zero(self):
        cursor = ByteCursor(b"\x00\x01")
        assert len(read_compressed_payload(cursor)) == 0

    def test_corrupt_gzip(self):
        with pytest.raises(DecompressionFailure):
            decompress_payload(ByteCursor(b"definitely not gzip"))

    def test_truncated_gzip(self):
        compressed = gzip.compress(b"\x02\x03" * 50)
        with pytest.raises(DecompressionFailure):
            decompress_payload(ByteCursor(compressed[:-6]))

    def test_bytes_after_gzip_stream_are_ignored(self):
        compressed = gzip.compress(b"\x02page\x00\x03", mtime=0) + b"\xff\xff"
        assert decompress_payload(ByteCursor(compressed)).to_bytes() == b"\x02page\x00\x03"

    def test_only_first_gzip_member_is_read(self):
        compressed = gzip.compress(b"\x02a\x00\x03") + gzip.compress(b"\x02b\x00\x03")
        assert decompress_payload(ByteCursor(compressed)).to_bytes() == b"\x02a\x00\x03"

    def test_empty_payload_inflates_to_nothing(self):
        assert len(decompress_payload(ByteCursor(b""))) == 0

    def test_zero_declared_length_fails_on_page_table(self):
        raw = MAGIC + b"\x00\x00\x00\x00"
        with pytest.raises(InvalidFormat):
            open_envelope(to_base64(raw))


class TestPageTable:
    def test_reads_names_in_order(self):
        cursor = ByteCursor(b"\x02zeta\x00alpha\x00\x03rest")
        assert read_page_table(cursor) == ("zeta", "alpha")
        assert cursor.remaining() == 4

    def test_empty_table(self):
        assert read_page_table(ByteCursor(b"\x02\x03")) == ()

    def test_missing_marker(self):
        with pytest.raises(InvalidFormat):
            read_page_table(ByteCursor(b"\x01a\x00\x03"))

    def test_empty_payload_has_no_marker(self):
        with pytest.raises(InvalidFormat):
            read_page_table(ByteCursor())

    def test_unterminated_table(self):
        with pytest.raises(UnexpectedEnd):
            read_page_table(ByteCursor(b"\x02a\x00b\x00c"))

    def test_invalid_utf8_name(self):
        with pytest.raises(InvalidEncoding):
            read_page_table(ByteCursor(b"\x02\xff\xfe\x00\x03"))

    def test_unicode_names(self):
        cursor = ByteCursor(b"\x02" + "café".encode() + b"\x00\x03")
        assert read_page_table(cursor) == ("café",)

    def test_trailing_unterminated_name_is_dropped(self):
        assert read_page_table(ByteCursor(b"\x02a\x00bc\x03")) == ("a",)


class TestOpenEnvelope:
    def test_body_starts_after_page_table(self):
        cluster = encode_cluster({"cat": [(0, 5)]})
        envelope = open_envelope(to_base64(wrap_payload(build_payload(["home", "about"], cluster))))

        assert envelope.pages == ("home", "about")
        assert envelope.body.remaining() == len(cluster)

    def test_trailing_bytes_after_payload_are_ignored(self):
        raw = wrap_payload(build_payload(["home"])) + b"garbage"
        assert open_envelope(to_base64(raw)).pages == ("home",)

    def test_all_failures_share_base_class(self):
        with pytest.raises(DecodeError):
            open_envelope("@@@")
