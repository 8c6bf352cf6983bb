from __future__ import annotations
import functools
from typing import Callable, TypeVar
from stringgrad.helpers import DEBUG, Timing, colored

F = TypeVar("F", bound=Callable)
OPS: dict[str, Callable] = {}

def op(fxn:F) -> F:
  """
  op() registers an op implementation under its public name (a trailing underscore is dropped, encode_base64_ -> encode_base64).
  with DEBUG>=1 every call prints the op name and how long it took.
  """
  name = fxn.__name__[:-1] if fxn.__name__.endswith("_") else fxn.__name__
  if name in OPS: raise ValueError(f"op {name!r} is already registered")

  @functools.wraps(fxn)
  def wrapper(*args, **kwargs):
    with Timing(colored(f"{name:<16s}", "green"), enabled=DEBUG >= 1): return fxn(*args, **kwargs)
  wrapper.__name__ = wrapper.__qualname__ = name
  OPS[name] = wrapper
  return wrapper # type: ignore[return-value]
