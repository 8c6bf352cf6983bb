# inspired by https://github.com/tinygrad/tinygrad/blob/master/tinygrad/tensor.py
from __future__ import annotations
import math
from typing import Any, Callable, Sequence, get_args
import numpy as np
from stringgrad import helpers
from stringgrad.dtype import ConstType, DType, DTypeLike, dtypes, to_dtype
from stringgrad.engine.evaluator import map_elementwise
from stringgrad.errors import InputTypeError
from stringgrad.helpers import DEBUG, all_int, fully_flatten, get_shape, prod

NP_DTYPES: dict[np.dtype, DType] = {np.dtype(np.bool_): dtypes.bool, np.dtype(np.int32): dtypes.int32, np.dtype(np.int64): dtypes.int64,
                                    np.dtype(np.float32): dtypes.float32, np.dtype(np.float64): dtypes.float64}
INVERSE_NP_DTYPES = {v:k for k,v in NP_DTYPES.items()}

def strides_for(shape:tuple[int, ...]) -> tuple[int, ...]: return tuple(math.prod(shape[i+1:]) for i in range(len(shape))) # math.prod([]) produces 1

class Tensor:
  """
  the Tensor class is a host side ndarray of python values: a shape, its row major stride, and a flat storage list.
  ops never write into an existing Tensor. they allocate a new one with the same shape through .map_storage(),
  so an op only has to know how to transform a flat list of elements.
  """

  # ************ Tensor Data + Constructors ************
  __slots__ = "shape", "stride", "storage", "dtype"

  def __init__(self, data:ConstType|list|tuple|np.ndarray|Tensor, dtype:DTypeLike|None=None, shape:tuple[int, ...]|None=None):
    if isinstance(data, Tensor):                    in_shape, storage, in_dtype = data.shape, list(data.storage), data.dtype
    elif isinstance(data, np.ndarray):              in_shape, storage, in_dtype = Tensor._np_to_storage(data)
    elif isinstance(data, (list, tuple)):
      in_shape, storage = get_shape(data), fully_flatten(data)
      in_dtype = dtypes.from_py(storage) if storage else None
    elif isinstance(data, get_args(ConstType)):     in_shape, storage, in_dtype = (), [data], dtypes.from_py(data)
    else: raise RuntimeError(f"can't create Tensor from {data!r} with type {type(data)}")

    self.dtype: DType = to_dtype(dtype) if dtype is not None else (in_dtype or dtypes.default_float)
    self.shape: tuple[int, ...] = in_shape
    self.stride: tuple[int, ...] = strides_for(in_shape)
    if dtypes.is_string(self.dtype): storage = [str(v) if isinstance(v, str) else v for v in storage] # plain str, not numpy.str_
    self.storage: list = storage
    if shape is not None:
      ret = self.reshape(shape)
      self.shape, self.stride = ret.shape, ret.stride
    if DEBUG >= 3: print(f"Tensor.__init__() shape={self.shape} dtype={self.dtype}")

  @staticmethod
  def _from_storage(shape:tuple[int, ...], storage:list, dtype:DType) -> Tensor:
    assert prod(shape) == len(storage), f"storage of {len(storage)} elements does not fit shape {shape}"
    ret = Tensor.__new__(Tensor)
    ret.shape, ret.stride, ret.storage, ret.dtype = shape, strides_for(shape), storage, dtype
    return ret

  @staticmethod
  def _np_to_storage(x:np.ndarray) -> tuple[tuple[int, ...], list, DType|None]:
    if x.dtype.kind == "U": return x.shape, [str(v) for v in x.reshape(-1).tolist()], dtypes.string
    if x.dtype.kind == "S":
      storage = []
      for i,v in enumerate(x.reshape(-1).tolist()):
        try: storage.append(v.decode("utf-8"))
        except UnicodeDecodeError as e: raise InputTypeError(f"bytes element is not utf-8 text: {e.reason} at offset {e.start}", index=i) from e
      return x.shape, storage, dtypes.string
    if x.dtype.kind == "O":
      storage = x.reshape(-1).tolist()
      return x.shape, storage, dtypes.from_py(storage) if storage else None
    if (dtype:=NP_DTYPES.get(x.dtype)) is None: raise ValueError(f"unsupported numpy dtype {x.dtype}")
    return x.shape, x.reshape(-1).tolist(), dtype

  @staticmethod
  def scalar(x:ConstType, dtype:DTypeLike|None=None) -> Tensor:
    if not isinstance(x, get_args(ConstType)): raise ValueError(f"scalar expects a python scalar, got {type(x)}")
    return Tensor(x, dtype)
  @staticmethod
  def full(shape:tuple[int, ...]|int, fill:ConstType, dtype:DTypeLike|None=None) -> Tensor:
    shape = helpers.normalize_shape(shape)
    return Tensor._from_storage(shape, [fill]*prod(shape), to_dtype(dtype) if dtype is not None else dtypes.from_py(fill))

  @property
  def numel(self) -> int: return prod(self.shape) # np (and thus jax) call this .size
  @property
  def ndim(self) -> int: return len(self.shape)
  def size(self, dim:int|None=None) -> int|tuple[int, ...]: return self.shape if dim is None else self.shape[dim]
  def __len__(self) -> int:
    if not self.shape: raise TypeError("len() of a 0-d tensor")
    return self.shape[0]

  def tolist(self) -> Any: return Tensor.chunk(self.storage, self.shape)
  def item(self) -> ConstType:
    assert self.numel == 1, "must have one element for item"
    return self.storage[0]
  def numpy(self) -> np.ndarray:
    np_dtype = object if dtypes.is_string(self.dtype) else INVERSE_NP_DTYPES[self.dtype] # fixed width str_ drops trailing NULs
    return np.array(self.storage, dtype=np_dtype).reshape(self.shape)

  @staticmethod
  def chunk(flat:list, shape:tuple[int, ...]) -> Any:
    if len(shape) == 0: return flat[0]
    if len(shape) == 1: return flat[:shape[0]]
    if shape[0] == 0: return []
    size = len(flat) // shape[0]
    return [Tensor.chunk(flat[i*size:(i+1)*size], shape[1:]) for i in range(shape[0])]

  def __repr__(self) -> str: return f"Tensor({self.tolist()!r}, dtype={self.dtype})"

  # ************ Movement ************
  def reshape(self, *shape) -> Tensor:
    new_shape = helpers.normalize_shape(*shape)
    if not all_int(new_shape): raise ValueError(f"shape must be ints, getting {new_shape}")
    if new_shape.count(-1) > 1: raise ValueError(f"only one dimension can be inferred, getting {new_shape}")
    if -1 in new_shape:
      known = prod(s for s in new_shape if s != -1)
      if known == 0 or self.numel % known != 0: raise ValueError(f"cannot infer -1 in {new_shape} for {self.numel} elements")
      new_shape = tuple(self.numel // known if s == -1 else s for s in new_shape)
    if any(s < 0 for s in new_shape) or prod(new_shape) != self.numel:
      raise ValueError(f"cannot reshape tensor of shape {self.shape} ({self.numel} elements) into {new_shape}")
    return Tensor._from_storage(new_shape, list(self.storage), self.dtype)

  # ************ Element-wise ************
  def map_storage(self, fxn:Callable[[list], list], dtype:DTypeLike|None=None) -> Tensor:
    """
    map_storage() hands the flat storage to fxn and wraps what comes back in a new Tensor with this Tensor's shape.
    fxn must return exactly one output per input, in input order.
    """
    out = fxn(self.storage)
    if len(out) != self.numel: raise RuntimeError(f"element-wise transform returned {len(out)} elements for {self.numel} inputs")
    return Tensor._from_storage(self.shape, list(out), to_dtype(dtype) if dtype is not None else self.dtype)
  def map(self, fxn:Callable[[Any], Any], dtype:DTypeLike|None=None) -> Tensor: return self.map_storage(lambda s: map_elementwise(fxn, s), dtype)

  # ************ Tensor Sugar ************
  def encode_base64(self, pad:bool=False) -> Tensor:
    from stringgrad.string_ops import encode_base64
    return encode_base64(self, pad)
  def decode_base64(self) -> Tensor:
    from stringgrad.string_ops import decode_base64
    return decode_base64(self)

def convert_to_tensor(x:Tensor|ConstType|Sequence|np.ndarray, arg_name:str, op_name:str, parse_as_dtype:DTypeLike|None=None) -> Tensor:
  """
  convert_to_tensor() is the host side check every op runs on its inputs before touching storage.
  non-Tensor inputs are wrapped. with parse_as_dtype=string, the result must be a string tensor whose elements are all str.
  """
  if not isinstance(x, Tensor):
    try: x = Tensor(x)
    except (RuntimeError, ValueError) as e:
      raise InputTypeError(f"Argument '{arg_name}' passed to '{op_name}' must be a Tensor or TensorLike, but got {type(x).__name__}") from e
    if x.numel == 0 and parse_as_dtype is not None: x = Tensor(x, dtype=parse_as_dtype) # nothing to infer a dtype from
  if parse_as_dtype is None: return x

  if x.dtype != (want:=to_dtype(parse_as_dtype)):
    raise InputTypeError(f"Argument '{arg_name}' passed to '{op_name}' must be {want.name} tensor, but got {x.dtype.name} tensor")
  if dtypes.is_string(want) and (bad:=next((i for i,v in enumerate(x.storage) if not isinstance(v, str)), None)) is not None:
    raise InputTypeError(f"Argument '{arg_name}' passed to '{op_name}' holds {type(x.storage[bad]).__name__}, not str", index=bad)
  return x

__all__ = ["Tensor", "convert_to_tensor"]
