# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Value-type contract for tree values.

A Tree stores values of a single type, fixed when the tree is created. The
serialized form is line oriented, so the value type must be able to turn an
instance into one line of text and back. Two kinds of types qualify:

- Types implementing the TreeValue protocol: a ``to_text()`` method, a
  ``from_text(text)`` classmethod, equality, and a no-argument constructor
  producing the default instance.
- The builtin scalars ``str``, ``int``, ``float`` and ``bool``, through the
  codecs registered in this module.

Example:
    >>> codec = codec_for(int)
    >>> codec.encode(42)
    '42'
    >>> codec.decode('42')
    42
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

from .exceptions import IncompatibleValueTypeError, InvalidValueError

# Exceptions a decoder may raise for text it cannot read.
DECODE_ERRORS = (TypeError, ValueError, LookupError, AttributeError)


class TreeValue(Protocol):
    """Protocol for custom tree value types.

    from_text() signals unreadable text by raising one of DECODE_ERRORS,
    normally ValueError. Any other exception propagates unchanged.
    """

    def to_text(self) -> str:
        ...

    @classmethod
    def from_text(cls, text: str) -> Any:
        ...


class ValueCodec:
    """Encode, decode and default-construct values of one type.

    Args:
        value_type: The type this codec handles.
        encode: Callable turning a value into a single line of text.
        decode: Callable turning that text back into a value. Must raise
            one of DECODE_ERRORS when the text cannot be decoded.
        default: Callable producing the default instance.
    """

    __slots__ = ('value_type', 'encode', 'decode', 'default')

    def __init__(
        self,
        value_type: type,
        encode: Callable[[Any], str],
        decode: Callable[[str], Any],
        default: Callable[[], Any],
    ) -> None:
        self.value_type = value_type
        self.encode = encode
        self.decode = decode
        self.default = default

    def __repr__(self) -> str:
        return f"ValueCodec({self.value_type.__name__})"


def _decode_bool(text: str) -> bool:
    if text == 'True':
        return True
    if text == 'False':
        return False
    raise ValueError(f"invalid bool literal: {text!r}")


_BUILTIN_CODECS: dict[type, ValueCodec] = {
    str: ValueCodec(str, str, str, str),
    int: ValueCodec(int, str, int, int),
    float: ValueCodec(float, repr, float, float),
    bool: ValueCodec(bool, str, _decode_bool, bool),
}


def codec_for(value_type: type) -> ValueCodec:
    """Return the codec for a value type.

    Args:
        value_type: A builtin scalar type or a TreeValue implementation.

    Returns:
        ValueCodec for the type.

    Raises:
        IncompatibleValueTypeError: If the type is neither a registered
            builtin nor a TreeValue implementation.
    """
    if not isinstance(value_type, type):
        raise IncompatibleValueTypeError(
            f"value_type must be a type, not {type(value_type).__name__}"
        )
    if value_type in _BUILTIN_CODECS:
        return _BUILTIN_CODECS[value_type]
    if not (callable(getattr(value_type, 'to_text', None))
            and callable(getattr(value_type, 'from_text', None))):
        raise IncompatibleValueTypeError(
            f"{value_type.__name__} must define to_text() and from_text(text) "
            f"to be stored in a Tree"
        )
    return ValueCodec(
        value_type,
        encode=lambda value: value.to_text(),
        decode=value_type.from_text,
        default=value_type,
    )


def check_value_type(value_type: type) -> ValueCodec:
    """Validate a value type with a one-time round trip and return its codec.

    Encodes a default instance, decodes the text back and compares the two
    for equality.

    Raises:
        IncompatibleValueTypeError: If the default instance cannot be built,
            encoded, decoded, or does not compare equal after the round trip,
            or if its encoding spans more than one line.
    """
    codec = codec_for(value_type)
    name = getattr(value_type, '__name__', repr(value_type))
    try:
        original = codec.default()
        text = codec.encode(original)
        restored = codec.decode(text)
    except DECODE_ERRORS as exc:
        raise IncompatibleValueTypeError(
            f"{name} failed the encode/decode round trip: {exc}"
        ) from exc

    if not isinstance(text, str):
        raise IncompatibleValueTypeError(
            f"{name}.to_text() must return str, not {type(text).__name__}"
        )
    if '\n' in text or '\r' in text:
        raise IncompatibleValueTypeError(
            f"{name} encodes to more than one line: {text!r}"
        )
    if not restored == original:
        raise IncompatibleValueTypeError(
            f"{name} does not round trip: encoding then decoding the default "
            f"instance gave {restored!r}, expected {original!r}. Ensure from_text() "
            f"inverts to_text() and that equality compares the decoded fields."
        )
    return codec


def check_value(codec: ValueCodec, value: Any) -> str:
    """Check that a single value can be stored under a codec.

    Args:
        codec: Codec of the tree receiving the value.
        value: The value about to be stored.

    Returns:
        The encoded text of the value.

    Raises:
        IncompatibleValueTypeError: If value is not an instance of the
            codec's value type.
        InvalidValueError: If the encoding contains a line break, or the
            value does not compare equal after an encode/decode round trip.
    """
    value_type = codec.value_type
    if not isinstance(value, value_type):
        raise IncompatibleValueTypeError(
            f"Expected a value of type {value_type.__name__}, got {type(value).__name__}: {value!r}"
        )
    try:
        text = codec.encode(value)
        restored = codec.decode(text) if isinstance(text, str) else None
    except DECODE_ERRORS as exc:
        raise InvalidValueError(f"{value!r} cannot be stored as text: {exc}") from exc

    if not isinstance(text, str):
        raise InvalidValueError(
            f"{value!r} must encode to str, not {type(text).__name__}"
        )
    if '\n' in text or '\r' in text:
        raise InvalidValueError(
            f"{value!r} contains a line break and cannot be stored on one line"
        )
    if not restored == value:
        raise InvalidValueError(
            f"{value!r} does not round trip: it reads back as {restored!r}"
        )
    return text
