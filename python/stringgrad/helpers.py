from __future__ import annotations
import operator
import contextlib, functools, os, time
from typing import Any, Iterable, Sequence, TypeGuard, TypeVar, overload

T = TypeVar("T")
def prod(input:Iterable[T]) -> T|int: return functools.reduce(operator.mul, input, 1) # NOTE: it returns int 1 if x is empty regardless of the type of x
def all_same(items:tuple[T, ...]|list[T]): return all(x == items[0] for x in items)
def all_int(t:Sequence[Any]) -> TypeGuard[tuple[int, ...]]: return all(isinstance(s, int) for s in t)

def normalize_shape(*args) -> tuple[int, ...]:
  if args and args[0].__class__ in (tuple, list):
    if len(args) != 1: raise ValueError(f"bad arg {args}") # i.e (1,2), 3
    return tuple(args[0])
  return args

def fully_flatten(l) -> list:
  if hasattr(l, "__len__") and hasattr(l, "__getitem__") and not isinstance(l, (str, bytes)):
    if hasattr(l, "shape") and l.shape == (): return [l[()]]
    flattened = []
    for li in l: flattened.extend(fully_flatten(li))
    return flattened
  return [l]

def get_shape(x) -> tuple[int, ...]:
  # NOTE: str is special because __getitem__ on a str is still a str
  if not hasattr(x, "__len__") or not hasattr(x, "__getitem__") or isinstance(x, (str, bytes)) or (hasattr(x, "shape") and x.shape == ()): return ()
  if not all_same(subs:=[get_shape(xi) for xi in x]): raise ValueError(f"inhomogeneous shape from {x}")
  return (len(subs),) + (subs[0] if subs else ())

@overload
def getenv(key:str) -> int: ...
@overload
def getenv(key:str, default:T) -> T: ...
@functools.cache
def getenv(key:str, default:Any=0): return type(default)(os.getenv(key, default))

# read once at import. the codec strategy is a startup option, not a per call one
DEBUG = getenv("DEBUG", 0)
B64CODEC = getenv("B64CODEC", "native")
SHARD, WORKERS = getenv("SHARD", 0), getenv("WORKERS", 0)

def colored(st, color:str|None, background=False): # replace the termcolor library
  colors = ['black', 'red', 'green', 'yellow', 'blue', 'magenta', 'cyan', 'white']
  return f"\u001b[{10*background+60*(color.upper() == color)+30+colors.index(color.lower())}m{st}\u001b[0m" if color is not None else st

class Timing(contextlib.ContextDecorator):
  def __init__(self, prefix="", enabled=True): self.prefix, self.enabled = prefix, enabled
  def __enter__(self): self.st = time.perf_counter_ns()
  def __exit__(self, *exc):
    self.et = time.perf_counter_ns() - self.st
    if self.enabled: print(f"{self.prefix}{self.et*1e-6:6.2f} ms")
