"""Data models for the storage bridge.

Examples:
    >>> from mediabridge.storage.models import StorageRequest
    >>> request = StorageRequest(
    ...     file_name="report.pdf",
    ...     mime_type="application/pdf",
    ...     subfolder="Invoices",
    ...     payload=b"%PDF-1.7",
    ... )
    >>> request.subfolder
    'Invoices'
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mediabridge.storage.errors import InvalidInputError

DEFAULT_MIME_TYPE = "image/png"
UNKNOWN_MIME_TYPE = "*/*"

# Fixed-length names of in-progress files, independent of the final name
PENDING_PREFIX = ".pending-"
PARTIAL_SUFFIX = ".partial"


def is_in_progress(name: str) -> bool:
    """True for pending catalog files and partial direct writes."""
    return name.startswith(PENDING_PREFIX) or (
        name.startswith(".") and name.endswith(PARTIAL_SUFFIX)
    )


class ContentCategory(str, Enum):
    """Top-level shared storage folder a file is published under."""

    PICTURES = "Pictures"
    DOCUMENTS = "Documents"

    @property
    def collection(self) -> str:
        """Catalog collection the category's entries are inserted into."""
        return "images" if self is ContentCategory.PICTURES else "files"


def validate_file_name(file_name: str) -> str:
    """Check that a file name is a single, non-empty path segment.

    Raises:
        InvalidInputError: If the name is empty or contains separators.
    """
    if not file_name or not file_name.strip():
        raise InvalidInputError("fileName must not be empty")
    if "/" in file_name or "\\" in file_name or file_name in (".", ".."):
        raise InvalidInputError(
            f"fileName must not contain path separators: {file_name}",
            details={"fileName": file_name},
        )
    return file_name


def normalize_subfolder(subfolder: str | None) -> str | None:
    """Strip surrounding separators; reject absolute or parent segments."""
    if subfolder is None:
        return None
    cleaned = subfolder.strip().strip("/")
    if not cleaned:
        return None
    parts = PurePosixPath(cleaned).parts
    if any(part in (".", "..") for part in parts) or "\\" in cleaned:
        raise InvalidInputError(
            f"subfolder must be a relative folder path: {subfolder}",
            details={"subfolder": subfolder},
        )
    return "/".join(parts)


class StorageRequest(BaseModel):
    """A logical file to publish into shared storage."""

    file_name: str
    mime_type: str = DEFAULT_MIME_TYPE
    subfolder: str | None = None
    payload: bytes = b""

    @field_validator("file_name")
    @classmethod
    def _check_file_name(cls, v: str) -> str:
        try:
            return validate_file_name(v)
        except InvalidInputError as e:
            raise ValueError(e.message) from e

    @field_validator("subfolder")
    @classmethod
    def _check_subfolder(cls, v: str | None) -> str | None:
        try:
            return normalize_subfolder(v)
        except InvalidInputError as e:
            raise ValueError(e.message) from e

    @classmethod
    def build(
        cls,
        file_name: str,
        mime_type: str | None = None,
        subfolder: str | None = None,
        payload: bytes = b"",
    ) -> StorageRequest:
        """Construct a request, raising InvalidInputError instead of ValidationError."""
        try:
            return cls(
                file_name=file_name,
                mime_type=DEFAULT_MIME_TYPE if mime_type is None else mime_type,
                subfolder=subfolder,
                payload=payload,
            )
        except ValidationError as e:
            first = e.errors()[0]
            message = str(first.get("msg", "invalid request")).removeprefix("Value error, ")
            raise InvalidInputError(message) from e


class ResolvedDestination(BaseModel):
    """Logical public-storage destination for a file."""

    model_config = ConfigDict(frozen=True)

    category: ContentCategory
    relative_path: str


class PublishedArtifact(BaseModel):
    """Reference to a durable artifact in shared storage.

    Attributes:
        reference: Catalog entry id (indirect) or absolute path (direct).
        is_pending: True only while the write protocol is running.
        protocol: Write protocol that produced the artifact.
    """

    reference: str
    is_pending: bool = False
    protocol: Literal["indirect", "direct"]


class LocatedFile(BaseModel):
    """Most recently modified regular file found in a directory."""

    path: Path
    last_modified: datetime


class ShareTicket(BaseModel):
    """Bundle handed to the external share chooser."""

    reference: str
    mime_type: str = UNKNOWN_MIME_TYPE
    subject: str
    body: str
    chooser_title: str = "Share file"
    grant_read: bool = Field(default=True, description="Grant read access to the receiver")
    file_name: str
