"""
Unbound Python SDK - Multipart Encoder

Builds ``multipart/form-data`` payloads for uploads. In a server process the
payload is assembled byte by byte with a random boundary; in a browser page
the parts are handed to httpx's own multipart builder, which supplies the
boundary header itself. Both paths carry the same parts.
"""

from __future__ import annotations

import json
import mimetypes
import os
import secrets
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from unbound.environment import Environment


DEFAULT_CONTENT_TYPE = "application/octet-stream"

MimeResolver = Callable[[str], Optional[str]]

# Used when the resolver does not know an extension
BUILTIN_MIME_TYPES: Dict[str, str] = {
    # Documents
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".odt": "application/vnd.oasis.opendocument.text",
    ".rtf": "application/rtf",
    # Images
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".heic": "image/heic",
    # Audio
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    ".m4a": "audio/mp4",
    ".aac": "audio/aac",
    ".flac": "audio/flac",
    ".weba": "audio/webm",
    # Video
    ".mp4": "video/mp4",
    ".m4v": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".webm": "video/webm",
    ".mkv": "video/x-matroska",
    ".mpeg": "video/mpeg",
    # Archives
    ".zip": "application/zip",
    ".gz": "application/gzip",
    ".tar": "application/x-tar",
    ".rar": "application/vnd.rar",
    ".7z": "application/x-7z-compressed",
    # Text
    ".txt": "text/plain",
    ".csv": "text/csv",
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".md": "text/markdown",
    ".xml": "application/xml",
    ".json": "application/json",
    ".js": "text/javascript",
}


def guess_mimetype(filename: str) -> Optional[str]:
    """Default resolver backed by the ``mimetypes`` registry."""
    return mimetypes.guess_type(filename)[0]


def resolve_content_type(filename: str, resolver: Optional[MimeResolver] = guess_mimetype) -> str:
    """
    Pick a content type for a file name.

    The resolver is consulted first, then the built-in extension map;
    unknown extensions are sent as ``application/octet-stream``.
    """
    if resolver is not None:
        resolved = resolver(filename)
        if resolved:
            return resolved
    extension = os.path.splitext(filename)[1].lower()
    return BUILTIN_MIME_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


@dataclass
class FilePart:
    """
    A binary part of a multipart payload.

    Attributes:
        content: Raw file bytes
        filename: File name sent in the Content-Disposition header
        name: Form field name
        content_type: Explicit content type; resolved from the file name if omitted
    """
    content: bytes
    filename: str
    name: str = "files"
    content_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: Union[str, "os.PathLike[str]"], name: str = "files") -> "FilePart":
        """Read a file from disk into a part."""
        with open(path, "rb") as fh:
            content = fh.read()
        return cls(content=content, filename=os.path.basename(os.fspath(path)), name=name)

    @classmethod
    def coerce(cls, value: Any, name: str = "files") -> "FilePart":
        """
        Accept the file shapes callers commonly have at hand: a FilePart, a
        path, a ``(filename, content[, content_type])`` tuple or an open
        binary file object.
        """
        if isinstance(value, FilePart):
            return value
        if isinstance(value, (str, os.PathLike)):
            return cls.from_path(value, name=name)
        if isinstance(value, tuple) and len(value) in (2, 3):
            filename, content = value[0], value[1]
            content_type = value[2] if len(value) == 3 else None
            if hasattr(content, "read"):
                content = content.read()
            return cls(content=bytes(content), filename=filename, name=name, content_type=content_type)
        if hasattr(value, "read"):
            filename = os.path.basename(getattr(value, "name", "") or "file")
            return cls(content=value.read(), filename=filename, name=name)
        raise TypeError(
            "Invalid file format. Expected a FilePart, a path, a (filename, content) tuple "
            "or a binary file object"
        )


@dataclass
class MultipartBody:
    """
    An encoded multipart payload ready for dispatch.

    Server payloads carry ``content`` and the matching ``content_type``.
    Browser payloads carry ``files`` and ``data`` for httpx to encode, and
    leave ``content_type`` unset so the runtime supplies the boundary.
    """
    content: Optional[bytes] = None
    content_type: Optional[str] = None
    files: List[Tuple[str, Tuple[Any, ...]]] = field(default_factory=list)
    data: Dict[str, Union[str, List[str]]] = field(default_factory=dict)

    @property
    def is_native(self) -> bool:
        """True when the HTTP library builds the payload itself."""
        return self.content is None

    @property
    def headers(self) -> Dict[str, str]:
        if self.content_type:
            return {"Content-Type": self.content_type}
        return {}


def _field_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _quote(value: str) -> str:
    return value.replace("\r", "%0D").replace("\n", "%0A").replace('"', "%22")


class MultipartEncoder:
    """
    Collects file and text parts and encodes them for the current
    environment.

    Example:
        >>> body = (
        ...     MultipartEncoder()
        ...     .add_file(FilePart(b"%PDF-1.7", "report.pdf"))
        ...     .add_field("classification", "invoice")
        ...     .encode()
        ... )
        >>> body.content_type.startswith("multipart/form-data; boundary=")
        True
    """

    def __init__(
        self,
        environment: Environment = Environment.SERVER,
        resolver: Optional[MimeResolver] = guess_mimetype,
        boundary: Optional[str] = None,
    ) -> None:
        self.environment = environment
        self.resolver = resolver
        self.boundary = boundary or f"----UnboundFormBoundary{secrets.token_hex(16)}"
        self._files: List[FilePart] = []
        self._fields: List[Tuple[str, str]] = []

    def add_file(self, part: FilePart) -> "MultipartEncoder":
        self._files.append(part)
        return self

    def add_field(self, name: str, value: Any) -> "MultipartEncoder":
        self._fields.append((name, _field_value(value)))
        return self

    def _content_type_for(self, part: FilePart) -> str:
        return part.content_type or resolve_content_type(part.filename, self.resolver)

    def encode(self) -> MultipartBody:
        if not self._files and not self._fields:
            raise ValueError("A multipart payload needs at least one part")
        if self.environment is Environment.BROWSER:
            return self._encode_native()
        return self._encode_bytes()

    def _encode_bytes(self) -> MultipartBody:
        dash_boundary = f"--{self.boundary}".encode("ascii")
        chunks: List[bytes] = []

        for part in self._files:
            chunks.append(dash_boundary + b"\r\n")
            chunks.append(
                (
                    f'Content-Disposition: form-data; name="{_quote(part.name)}"; '
                    f'filename="{_quote(part.filename)}"\r\n'
                    f"Content-Type: {self._content_type_for(part)}\r\n\r\n"
                ).encode("utf-8")
            )
            chunks.append(bytes(part.content))
            chunks.append(b"\r\n")

        for name, value in self._fields:
            chunks.append(dash_boundary + b"\r\n")
            chunks.append(f'Content-Disposition: form-data; name="{_quote(name)}"\r\n\r\n'.encode("utf-8"))
            chunks.append(value.encode("utf-8"))
            chunks.append(b"\r\n")

        chunks.append(dash_boundary + b"--\r\n")
        return MultipartBody(
            content=b"".join(chunks),
            content_type=f"multipart/form-data; boundary={self.boundary}",
        )

    def _encode_native(self) -> MultipartBody:
        files = [
            (part.name, (part.filename, bytes(part.content), self._content_type_for(part)))
            for part in self._files
        ]
        if not files:
            # httpx falls back to a urlencoded form unless a file tuple is present
            files = [(name, (None, value.encode("utf-8"))) for name, value in self._fields]
            return MultipartBody(files=files, data={})

        data: Dict[str, Union[str, List[str]]] = {}
        for name, value in self._fields:
            if name in data:
                existing = data[name]
                data[name] = (existing if isinstance(existing, list) else [existing]) + [value]
            else:
                data[name] = value
        return MultipartBody(files=files, data=data)


def encode_multipart(
    files: List[FilePart],
    fields: Optional[Dict[str, Any]] = None,
    environment: Environment = Environment.SERVER,
    resolver: Optional[MimeResolver] = guess_mimetype,
) -> MultipartBody:
    """Encode files and text fields in one call."""
    encoder = MultipartEncoder(environment=environment, resolver=resolver)
    for part in files:
        encoder.add_file(part)
    for name, value in (fields or {}).items():
        if value is not None:
            encoder.add_field(name, value)
    return encoder.encode()
