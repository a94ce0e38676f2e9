"""
multipart/related encoding for the Cloud Storage upload API.

A multipart upload carries two parts: a JSON metadata document naming the
object, then the raw object bytes. The upload endpoint's parser is strict
about framing, so the body is assembled segment by segment and rendered in
one pass. Given a fixed boundary the output is byte-for-byte reproducible.
"""

import json
import secrets
from dataclasses import dataclass, field
from typing import Optional, Union

from .models import UploadArtifact


CRLF = "\r\n"


def _base36(value: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


def generate_boundary(words: int = 4) -> str:
    """Boundary built from random 32-bit words rendered in base 36."""
    return "".join(_base36(secrets.randbits(32)) for _ in range(words))


@dataclass(frozen=True)
class TextSegment:
    text: str

    def render(self) -> bytes:
        return self.text.encode("utf-8")


@dataclass(frozen=True)
class BinarySegment:
    data: bytes

    def render(self) -> bytes:
        return self.data


Segment = Union[TextSegment, BinarySegment]


@dataclass
class MultipartBuilder:
    """
    Append-only list of body segments.

    Parts are opened with add_part() and the body is closed with finish();
    render() concatenates whatever has been appended so far.
    """
    boundary: str
    segments: list[Segment] = field(default_factory=list)

    def text(self, value: str) -> "MultipartBuilder":
        self.segments.append(TextSegment(value))
        return self

    def binary(self, value: bytes) -> "MultipartBuilder":
        self.segments.append(BinarySegment(value))
        return self

    def add_part(self, content_type: str, body: Union[str, bytes]) -> "MultipartBuilder":
        # Every part after the first starts on the CRLF that ends the previous one
        if self.segments:
            self.text(CRLF)
        self.text(f"--{self.boundary}{CRLF}Content-Type: {content_type}{CRLF}{CRLF}")
        if isinstance(body, bytes):
            self.binary(body)
        else:
            self.text(body)
        return self

    def finish(self) -> "MultipartBuilder":
        return self.text(f"{CRLF}--{self.boundary}--")

    def render(self) -> bytes:
        return b"".join(segment.render() for segment in self.segments)


@dataclass(frozen=True)
class EncodedUpload:
    """A rendered multipart body and the header that describes it."""
    body: bytes
    boundary: str

    @property
    def content_type(self) -> str:
        return f"multipart/related; boundary={self.boundary}"


def build_metadata(artifact: UploadArtifact) -> str:
    """Object resource sent as the first part."""
    return json.dumps(
        {"name": artifact.object_name, "contentType": artifact.content_type},
        separators=(",", ":"),
    )


def encode_upload(artifact: UploadArtifact, boundary: Optional[str] = None) -> EncodedUpload:
    """Encode an artifact as a metadata + media multipart/related body."""
    if boundary is None:
        boundary = generate_boundary()

    body = (
        MultipartBuilder(boundary)
        .add_part("application/json", build_metadata(artifact))
        .add_part(artifact.content_type, artifact.content)
        .finish()
        .render()
    )
    return EncodedUpload(body=body, boundary=boundary)
