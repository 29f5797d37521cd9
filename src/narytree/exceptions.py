# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tree exceptions."""

from __future__ import annotations


class TreeError(Exception):
    """Base exception for Tree errors."""

    pass


class AlreadyInitializedError(TreeError):
    """Raised when a root is set on a tree that already has one."""

    pass


class NoSuchNodeError(TreeError, KeyError):
    """Raised when an identity does not name a live node of the tree."""

    def __init__(self, identity: object, message: str | None = None) -> None:
        self.identity = identity
        super().__init__(message or f"Node with identity {identity!r} does not exist")

    def __str__(self) -> str:
        # KeyError would quote the message
        return str(self.args[0])


class IllegalOperationError(TreeError):
    """Raised for structurally forbidden operations, such as removing the root."""

    pass


class IncompatibleValueTypeError(TreeError, TypeError):
    """Raised when a value type, or a value given to a tree, does not match its text codec."""

    pass


class InvalidValueError(TreeError, ValueError):
    """Raised when a value cannot be stored because it would not read back from text."""

    pass


class DeserializationError(TreeError):
    """Base exception for errors raised while decoding serialized text.

    Attributes:
        line_number: 1-based line of the input where the error was detected,
            or None when the error concerns the input as a whole.
    """

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)


class MalformedInputError(DeserializationError):
    """Raised when a line matches neither the value nor the end-marker shape."""

    pass


class DecodeFailureError(DeserializationError):
    """Raised when a value line's payload cannot be decoded into the value type."""

    pass


class StructuralMismatchError(DeserializationError):
    """Raised when end-markers and values do not nest into a single tree."""

    pass
