"""Tests for in-memory and placeholder resources."""

import io

import pytest

from resource_kit.exceptions import AlreadyConsumedError
from resource_kit.exceptions import NotFoundError
from resource_kit.exceptions import NotResolvableError
from resource_kit.resources import ByteArrayResource
from resource_kit.resources import DescriptiveResource
from resource_kit.resources import InputStreamResource


class TestByteArrayResource:
    """Tests for ByteArrayResource."""

    def test_exists_and_content(self):
        resource = ByteArrayResource(b"hello")
        assert resource.exists()
        assert resource.is_readable()
        assert not resource.is_open()
        assert not resource.is_file()
        assert resource.content_length() == 5
        assert resource.get_content_as_string() == "hello"

    def test_stream_can_be_opened_repeatedly(self):
        resource = ByteArrayResource(b"abc")
        for _ in range(2):
            with resource.get_input_stream() as stream:
                assert stream.read() == b"abc"

    def test_later_changes_to_source_do_not_show(self):
        data = bytearray(b"abc")
        resource = ByteArrayResource(data)
        data[0] = ord("x")
        assert resource.get_content_as_bytes() == b"abc"

    def test_content_is_a_fresh_copy(self):
        data = b"abc"
        resource = ByteArrayResource(data)
        content = resource.get_content_as_bytes()
        assert content == data
        assert content is not data
        assert resource.get_content_as_bytes() is not content

    def test_description(self):
        assert ByteArrayResource(b"").get_description() == "Byte array resource [resource loaded from byte array]"
        assert ByteArrayResource(b"", "defaults").get_description() == "Byte array resource [defaults]"
        assert str(ByteArrayResource(b"", "defaults")) == "Byte array resource [defaults]"

    def test_equality_by_content(self):
        assert ByteArrayResource(b"a", "one") == ByteArrayResource(b"a", "two")
        assert hash(ByteArrayResource(b"a")) == hash(ByteArrayResource(b"a"))
        assert ByteArrayResource(b"a") != ByteArrayResource(b"b")

    def test_not_resolvable_to_url_or_file(self):
        resource = ByteArrayResource(b"a")
        with pytest.raises(NotResolvableError, match="cannot be resolved to URL"):
            resource.get_url()
        with pytest.raises(NotResolvableError, match="cannot be resolved to absolute file path"):
            resource.get_file()
        with pytest.raises(NotFoundError):
            resource.last_modified()

    def test_no_relative_resources(self):
        with pytest.raises(NotFoundError, match="Cannot create a relative resource"):
            ByteArrayResource(b"a").create_relative("b")
        assert ByteArrayResource(b"a").get_filename() is None

    def test_rejects_none(self):
        with pytest.raises(ValueError):
            ByteArrayResource(None)


class TestInputStreamResource:
    """Tests for the single-use InputStreamResource."""

    def test_stream_is_handed_out_once(self):
        stream = io.BytesIO(b"once")
        resource = InputStreamResource(stream)
        assert resource.exists()
        assert resource.is_open()
        assert resource.get_input_stream() is stream
        with pytest.raises(AlreadyConsumedError):
            resource.get_input_stream()

    def test_consumed_after_content_read(self):
        resource = InputStreamResource(io.BytesIO(b"once"))
        assert resource.get_content_as_bytes() == b"once"
        with pytest.raises(RuntimeError):
            resource.get_content_as_bytes()

    def test_content_length_drains_stream(self):
        resource = InputStreamResource(io.BytesIO(b"x" * 20_000))
        assert resource.content_length() == 20_000

    def test_equality_by_stream_identity(self):
        stream = io.BytesIO(b"a")
        assert InputStreamResource(stream, "one") == InputStreamResource(stream, "two")
        assert InputStreamResource(io.BytesIO(b"a")) != InputStreamResource(io.BytesIO(b"a"))

    def test_description(self):
        resource = InputStreamResource(io.BytesIO(b""), "upload")
        assert resource.get_description() == "InputStream resource [upload]"


class TestDescriptiveResource:
    """Tests for DescriptiveResource."""

    def test_never_exists(self):
        resource = DescriptiveResource("defined in code")
        assert not resource.exists()
        assert not resource.is_readable()
        assert resource.get_description() == "defined in code"

    def test_stream_fails(self):
        with pytest.raises(NotFoundError, match="defined in code"):
            DescriptiveResource("defined in code").get_input_stream()

    def test_equality(self):
        assert DescriptiveResource("a") == DescriptiveResource("a")
        assert DescriptiveResource("a") != DescriptiveResource("b")
