"""Streaming multipart/form-data encoder used for file uploads.

A `Form` is an ordered list of named `Part`s sharing one boundary. The form
is consumed once through `Form.stream()`, which yields the body lazily, part
by part, so large file parts are read from disk in bounded chunks while the
transport sends them.

Typical usage:
```python
form = (
    Form()
    .text("version", "1.2")
    .part("filedata", Part.file("mod.zip").mime("application/octet-stream"))
)
request = httpx.Request(
    "POST", url, content=form.stream(), headers={"Content-Type": form.content_type()}
)
```
"""

import os
import random
import re
import threading
from collections.abc import AsyncIterable, AsyncIterator, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Self
from urllib.parse import quote

from aiofile import async_open

from .constants import DEFAULT_FILE_READ_CHUNK_SIZE
from .exceptions import BodyStreamError, FormConsumedError, InvalidHeaderError
from .log_config import logger

BOUNDARY_LENGTH = 67
"""Length of a generated boundary: four 16 digit hex groups and three dashes."""

_CONTENT_DISPOSITION = b"Content-Disposition: form-data; "
_CRLF = b"\r\n"

# https://url.spec.whatwg.org/#path-percent-encode-set plus '/' and '%'
_PATH_SEGMENT_SAFE = "!$&'()*+,:;=@[\\]^|"
# https://tools.ietf.org/html/rfc8187#section-3.2.1
_ATTR_CHAR_SAFE = "!#$&+^`|"

_HEADER_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

_rng_local = threading.local()


def _thread_rng() -> random.Random:
    rng = getattr(_rng_local, "rng", None)
    if rng is None:
        rng = random.Random()
        _rng_local.rng = rng
    return rng


def generate_boundary(rng: random.Random | None = None) -> str:
    """Generates a multipart boundary from 256 random bits.

    The boundary only has to avoid colliding with body content. It is not a
    security token, so a per-thread `random.Random` is used unless `rng` is
    given.

    Args:
        rng: Optional random source, mostly useful for deterministic tests.

    Returns:
        str: Four 64 bit values as lowercase hex joined with dashes.
    """
    rng = rng or _thread_rng()
    a, b, c, d = (rng.getrandbits(64) for _ in range(4))
    return f"{a:016x}-{b:016x}-{c:016x}-{d:016x}"


class PercentEncoding(Enum):
    """How field names are percent-encoded in the Content-Disposition header."""

    PATH_SEGMENT = "path_segment"
    ATTR_CHAR = "attr_char"
    NOOP = "noop"

    def encode(self, value: str) -> str:
        if self is PercentEncoding.PATH_SEGMENT:
            return quote(value, safe=_PATH_SEGMENT_SAFE)
        if self is PercentEncoding.ATTR_CHAR:
            return quote(value, safe=_ATTR_CHAR_SAFE)
        return value


def _validate_header_value(value: str) -> bytes:
    for char in value:
        if (ord(char) < 0x20 and char != "\t") or ord(char) == 0x7F:
            raise InvalidHeaderError(f"Invalid character {char!r} in header value {value!r}")
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError as e:
        raise InvalidHeaderError(f"Header value {value!r} is not latin-1 encodable") from e


# --- Body sources ---


@dataclass(frozen=True)
class BytesBody:
    """A body already resident in memory."""

    value: bytes


@dataclass(frozen=True)
class StreamBody:
    """A fallible byte sequence, produced lazily while the form is streamed."""

    source: AsyncIterable[bytes] | Iterable[bytes]


BodySource = BytesBody | StreamBody


async def iter_source(source: AsyncIterable[bytes] | Iterable[bytes]) -> AsyncIterator[bytes]:
    if isinstance(source, AsyncIterable):
        async for chunk in source:
            yield bytes(chunk)
    else:
        for chunk in source:
            yield bytes(chunk)


async def read_file_chunks(
    path: str | os.PathLike,
    chunk_size: int = DEFAULT_FILE_READ_CHUNK_SIZE,
    *,
    offset: int = 0,
    length: int | None = None,
) -> AsyncIterator[bytes]:
    """Reads a local file in bounded chunks.

    Args:
        path: The file to read.
        chunk_size: Maximum size of each yielded chunk.
        offset: Byte position to start reading from.
        length: Maximum number of bytes to read, or None to read to the end.

    Yields:
        bytes: The next chunk of the file.
    """
    remaining = length
    async with async_open(str(path), "rb") as afp:
        if offset:
            afp.seek(offset)
        while remaining is None or remaining > 0:
            size = chunk_size if remaining is None else min(chunk_size, remaining)
            chunk = await afp.read(size)
            if not chunk:
                break
            if remaining is not None:
                remaining -= len(chunk)
            yield chunk


# --- Parts and forms ---


@dataclass
class Part:
    """One named field of a multipart body.

    Use the constructors `text`, `bytes`, `stream`, `stream_with_length` and
    `file` rather than instantiating directly.
    """

    body: BodySource
    length: int | None = None
    mime_type: str | None = None
    filename: str | None = None
    headers: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def text(cls, value: str) -> "Part":
        return cls.bytes(value.encode("utf-8"))

    @classmethod
    def stream(cls, source: AsyncIterable[bytes] | Iterable[bytes]) -> "Part":
        """A streamed body of unknown length; the form falls back to chunked transfer."""
        return cls(body=StreamBody(source))

    @classmethod
    def stream_with_length(
        cls, source: AsyncIterable[bytes] | Iterable[bytes], length: int
    ) -> "Part":
        """A streamed body whose exact length is known in advance."""
        return cls(body=StreamBody(source), length=length)

    @classmethod
    def file(
        cls,
        path: str | os.PathLike,
        filename: str | None = None,
        *,
        chunk_size: int = DEFAULT_FILE_READ_CHUNK_SIZE,
    ) -> "Part":
        """A part streamed from a local file.

        The file name sent is the base name of `path`, falling back to
        `filename` when the path has none. The file is opened only when the
        form is streamed.
        """
        name = Path(path).name or filename
        part = cls.stream(read_file_chunks(path, chunk_size))
        if name:
            part.file_name(name)
        return part

    def mime(self, mime_type: str) -> Self:
        _validate_header_value(mime_type)
        self.mime_type = mime_type
        return self

    def file_name(self, filename: str) -> Self:
        self.filename = filename
        return self

    def header(self, name: str, value: str) -> Self:
        if not _HEADER_NAME_RE.match(name):
            raise InvalidHeaderError(f"Invalid header name {name!r}")
        _validate_header_value(value)
        self.headers.append((name, value))
        return self

    def header_block(self, name: str, encoding: PercentEncoding) -> bytes:
        """Renders the part headers, without the trailing blank line."""
        buf = bytearray(_CONTENT_DISPOSITION)
        encoded = encoding.encode(name)
        if encoded == name:
            buf += b'name="' + name.encode("utf-8") + b'"'
        else:
            buf += b"name*=utf8''" + encoded.encode("ascii")

        if self.filename is not None:
            legal_filename = (
                self.filename.replace("\\", "\\\\")
                .replace('"', '\\"')
                .replace("\r", "\\\r")
                .replace("\n", "\\\n")
            )
            buf += b'; filename="' + legal_filename.encode("utf-8") + b'"'
        if self.mime_type is not None:
            buf += b"\r\nContent-type: " + self.mime_type.encode("latin-1")
        for key, value in self.headers:
            buf += _CRLF + key.encode("ascii") + b": " + value.encode("latin-1")
        return bytes(buf)

    # Defined last so the name does not shadow the builtin for the methods above.
    @classmethod
    def bytes(cls, value: bytes) -> "Part":
        value = bytes(value)
        return cls(body=BytesBody(value), length=len(value))


class Form:
    """An ordered multipart/form-data body.

    Fields are emitted on the wire in the order they were added. A form is
    consumed by `stream()` and cannot be streamed twice.
    """

    def __init__(self, boundary: str | None = None):
        self.boundary: str = boundary or generate_boundary()
        self.percent_encoding = PercentEncoding.PATH_SEGMENT
        self.fields: list[tuple[str, Part]] = []
        self._consumed = False

    def __repr__(self) -> str:
        names = [name for name, _ in self.fields]
        return f"Form(boundary={self.boundary!r}, fields={names!r})"

    def text(self, name: str, value: str) -> Self:
        return self.part(name, Part.text(value))

    def part(self, name: str, part: Part) -> Self:
        self.fields.append((name, part))
        return self

    def percent_encode_path_segment(self) -> Self:
        self.percent_encoding = PercentEncoding.PATH_SEGMENT
        return self

    def percent_encode_attr_chars(self) -> Self:
        self.percent_encoding = PercentEncoding.ATTR_CHAR
        return self

    def percent_encode_noop(self) -> Self:
        self.percent_encoding = PercentEncoding.NOOP
        return self

    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def compute_length(self) -> int | None:
        """Computes the exact size of the encoded body.

        Returns:
            int | None: The byte count `stream()` will produce, or None when
                any part has an unknown length.
        """
        boundary_len = len(self.boundary.encode("ascii"))
        total = 0
        for name, part in self.fields:
            if part.length is None:
                return None
            header = part.header_block(name, self.percent_encoding)
            total += 2 + boundary_len + 2 + len(header) + 4 + part.length + 2
        if self.fields:
            total += 2 + boundary_len + 4
        return total

    def stream(self) -> AsyncIterator[bytes]:
        """Consumes the form into a lazy, ordered byte sequence.

        Raises:
            FormConsumedError: If the form was already streamed.
        """
        if self._consumed:
            raise FormConsumedError("Multipart form has already been consumed.")
        self._consumed = True
        logger.debug(f"Streaming multipart form with {len(self.fields)} field(s)")
        return self._generate()

    async def _generate(self) -> AsyncIterator[bytes]:
        if not self.fields:
            return
        boundary = self.boundary.encode("ascii")
        delimiter = b"--" + boundary + _CRLF
        for name, part in self.fields:
            yield delimiter + part.header_block(name, self.percent_encoding) + _CRLF + _CRLF
            if isinstance(part.body, BytesBody):
                if part.body.value:
                    yield part.body.value
            else:
                try:
                    async for chunk in iter_source(part.body.source):
                        if chunk:
                            yield chunk
                except Exception as e:
                    logger.error(f"Body stream of multipart field '{name}' failed: {e}")
                    raise BodyStreamError(
                        f"Failed to stream multipart field '{name}': {e}"
                    ) from e
            yield _CRLF
        yield b"--" + boundary + b"--" + _CRLF
