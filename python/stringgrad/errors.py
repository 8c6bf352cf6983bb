"""Exception classes for stringgrad's string ops.

Every error carries the flat index of the element that failed, when it is known.
"""
from __future__ import annotations


class StringOpError(Exception):
  """Base exception class for all string op errors."""
  def __init__(self, msg:str, index:int|None=None):
    super().__init__(msg)
    self.msg, self.index = msg, index
  def with_index(self, index:int) -> StringOpError:
    self.index = index
    return self
  def __str__(self): return self.msg if self.index is None else f"element {self.index}: {self.msg}"


class InputTypeError(StringOpError, TypeError):
  """Raised when a string op receives a tensor, or an element, that is not textual."""


class EncodeError(StringOpError, ValueError):
  """Raised when an element has no UTF-8 representation (lone surrogates)."""


class DecodeError(StringOpError, ValueError):
  """Raised when an element is not valid base64, or its bytes are not valid UTF-8."""
