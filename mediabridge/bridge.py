"""Method bridge between the host application and the storage service.

The host sends a method name and an argument mapping on a named channel and
gets back a success value, a structured error or "not implemented". Every
failure is converted into an error result at this boundary.

Channels:
    <APP_ID>/media_store   saveToPublicStorage(fileName, mimeType, subfolder?, bytes)
    <APP_ID>/file_manager  openFolder(path), openFile(path)

Examples:
    >>> bridge = create_bridge(service, settings)
    >>> result = await bridge.invoke(
    ...     "com.mediabridge.app/file_manager",
    ...     MethodCall(method="openFile", arguments={"path": "/tmp/a.pdf"}),
    ... )
    >>> result.status
    <ResultStatus.SUCCESS: 'success'>

Tests:
    - tests/unit/test_bridge.py
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from mediabridge.config import Settings
from mediabridge.storage.errors import (
    DirectoryNotFoundError,
    InvalidInputError,
    MediaBridgeError,
    SharedFileNotFoundError,
)
from mediabridge.storage.models import StorageRequest
from mediabridge.storage.service import StorageService

logger = logging.getLogger(__name__)

SAVE_TO_PUBLIC_STORAGE = "saveToPublicStorage"
OPEN_FOLDER = "openFolder"
OPEN_FILE = "openFile"


class ResultStatus(str, Enum):
    """Outcome of a method call."""

    SUCCESS = "success"
    ERROR = "error"
    NOT_IMPLEMENTED = "not_implemented"


class MethodError(BaseModel):
    """Structured error returned to the host."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class MethodResult(BaseModel):
    """Response for one method call."""

    status: ResultStatus
    value: str | None = None
    error: MethodError | None = None

    @classmethod
    def success(cls, value: str) -> "MethodResult":
        return cls(status=ResultStatus.SUCCESS, value=value)

    @classmethod
    def failure(
        cls,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "MethodResult":
        return cls(
            status=ResultStatus.ERROR,
            error=MethodError(code=code, message=message, details=details),
        )

    @classmethod
    def not_implemented(cls) -> "MethodResult":
        return cls(status=ResultStatus.NOT_IMPLEMENTED)


class MethodCall(BaseModel):
    """A method invocation from the host."""

    method: str
    arguments: dict[str, Any] = Field(default_factory=dict)

    def argument(self, key: str, default: Any = None) -> Any:
        """Argument value, ``default`` when absent or null."""
        value = self.arguments.get(key)
        return default if value is None else value


MethodHandler = Callable[[MethodCall], Awaitable[MethodResult]]


def coerce_payload(value: Any) -> bytes:
    """Accept raw bytes, a list of byte values or a base64 string.

    Raises:
        InvalidInputError: Value cannot be read as bytes.
    """
    if value is None:
        return b""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidInputError(f"bytes is not valid base64: {e}") from e
    if isinstance(value, list):
        try:
            return bytes(value)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"bytes must hold values 0-255: {e}") from e
    raise InvalidInputError(f"Unsupported bytes argument: {type(value).__name__}")


def _error_details(exc: Exception) -> dict[str, Any]:
    if isinstance(exc, MediaBridgeError):
        return {"kind": exc.kind, **exc.details}
    return {"kind": type(exc).__name__}


class MediaStoreHandler:
    """Handles the public storage channel."""

    def __init__(self, service: StorageService) -> None:
        self.service = service

    async def __call__(self, call: MethodCall) -> MethodResult:
        if call.method != SAVE_TO_PUBLIC_STORAGE:
            return MethodResult.not_implemented()
        try:
            request = StorageRequest.build(
                file_name=call.argument("fileName", ""),
                mime_type=call.argument("mimeType"),
                subfolder=call.argument("subfolder"),
                payload=coerce_payload(call.argument("bytes", call.argument("payload"))),
            )
            artifact = await self.service.save(request)
        except MediaBridgeError as e:
            logger.error(f"Error saving file: {e}")
            return MethodResult.failure("SAVE_ERROR", e.message, _error_details(e))
        except Exception as e:
            logger.error(f"Error saving file: {e}", exc_info=True)
            return MethodResult.failure("SAVE_ERROR", str(e), _error_details(e))
        return MethodResult.success(artifact.reference)


class FileManagerHandler:
    """Handles the open/share channel."""

    def __init__(self, service: StorageService) -> None:
        self.service = service

    async def __call__(self, call: MethodCall) -> MethodResult:
        if call.method == OPEN_FOLDER:
            opener = self.service.open_folder
        elif call.method == OPEN_FILE:
            opener = self.service.open_file
        else:
            return MethodResult.not_implemented()

        path = call.argument("path")
        if not isinstance(path, str):
            return MethodResult.failure("INVALID_PATH", "Path is null")

        try:
            outcome = await opener(path)
        except InvalidInputError as e:
            return MethodResult.failure("INVALID_PATH", e.message, _error_details(e))
        except DirectoryNotFoundError as e:
            return MethodResult.failure("FOLDER_NOT_FOUND", e.message, _error_details(e))
        except SharedFileNotFoundError as e:
            return MethodResult.failure("FILE_NOT_FOUND", e.message, _error_details(e))
        except Exception as e:
            logger.error(f"{call.method} failed for {path}: {e}", exc_info=True)
            return MethodResult.failure("ERROR", f"Error: {e}", _error_details(e))
        return MethodResult.success(outcome.message)


class MethodBridge:
    """Registry of named channels and their handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, MethodHandler] = {}

    @property
    def channels(self) -> list[str]:
        return sorted(self._handlers)

    def register(self, channel: str, handler: MethodHandler) -> None:
        """Attach ``handler`` to ``channel``, replacing any previous handler."""
        self._handlers[channel] = handler

    async def invoke(self, channel: str, call: MethodCall) -> MethodResult:
        """Route a call to its channel handler."""
        handler = self._handlers.get(channel)
        if handler is None:
            logger.warning(f"No handler for channel {channel}")
            return MethodResult.not_implemented()
        result = await handler(call)
        logger.debug(f"{channel}.{call.method} -> {result.status.value}")
        return result


def create_bridge(service: StorageService, settings: Settings) -> MethodBridge:
    """Register the storage channels for ``service``."""
    bridge = MethodBridge()
    bridge.register(settings.media_store_channel, MediaStoreHandler(service))
    bridge.register(settings.file_manager_channel, FileManagerHandler(service))
    return bridge
