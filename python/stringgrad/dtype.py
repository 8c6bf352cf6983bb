from __future__ import annotations
from typing import Final, Literal
from dataclasses import dataclass

ConstType = float|int|bool|str
FmtStr = Literal['?', 'i', 'q', 'f', 'd']

# ************ DTypes ************
# all DTypes should only be created once
class DTypeMetaClass(type):
  dcache: dict[tuple, DType] = {}
  def __call__(cls, *args, **kwargs):
    if (ret:=DTypeMetaClass.dcache.get(args, None)) is not None: return ret
    DTypeMetaClass.dcache[args] = ret = super().__call__(*args)
    return ret

@dataclass(frozen=True, eq=False)
class DType(metaclass=DTypeMetaClass):
  priority: int  # this determines when things get upcasted
  itemsize: int  # 0 for variable length payloads
  name: str
  fmt: FmtStr|None
  def __repr__(self): return f"dtypes.{INVERSE_DTYPES_DICT[self.name]}"
DTypeLike = str|DType

class dtypes:
  @staticmethod
  def is_string(x:DType) -> bool: return x == dtypes.string
  @staticmethod
  def from_py(x) -> DType:
    if isinstance(x, str): return dtypes.string # numpy.str_ is a str too
    if x.__class__ is float: return dtypes.default_float
    if x.__class__ is int: return dtypes.default_int
    if x.__class__ is bool: return dtypes.bool
    # put this in the last since this is the most expensive check. str is not a sequence element type here
    if x.__class__ in (list, tuple) and len(x) > 0:
      return max((dtypes.from_py(xi) for xi in x), key=lambda dt: dt.priority)
    raise RuntimeError(f"could not infer dtype of {x} with type {type(x)}")
  bool: Final[DType] = DType(0, 1, "bool", '?')
  int32: Final[DType] = DType(5, 4, "int", 'i')
  int64: Final[DType] = DType(7, 8, "long", 'q')
  float32: Final[DType] = DType(13, 4, "float", 'f')
  float64: Final[DType] = DType(14, 8, "double", 'd')
  # strings never upcast into or out of numbers, so they sit above every numeric priority
  string: Final[DType] = DType(100, 0, "string", None)
  default_float: Final[DType] = float32
  default_int: Final[DType] = int32
  floats = (float32, float64)
  ints = (int32, int64)
  all = floats + ints + (bool, string) # noqa: A003

DTYPES_DICT = {k: v for k, v in dtypes.__dict__.items() if isinstance(v, DType) and not k.startswith(("default", "void"))}
INVERSE_DTYPES_DICT = {**{v.name:k for k,v in DTYPES_DICT.items()}}

def to_dtype(dtype:DTypeLike) -> DType:
  if isinstance(dtype, DType): return dtype
  if (ret:=DTYPES_DICT.get(dtype)) is None: raise ValueError(f"unknown dtype {dtype!r}, expected one of {sorted(DTYPES_DICT)}")
  return ret
