from __future__ import annotations
import functools
from typing import Sequence
import numpy as np
from stringgrad.dtype import dtypes
from stringgrad.engine import codec
from stringgrad.op import op
from stringgrad.tensor import Tensor, convert_to_tensor

def encode_base64_(x:Tensor|str|Sequence|np.ndarray, pad:bool=False) -> Tensor:
  """
  Encodes the values of a string Tensor to web-safe base64.

  Web-safe means the encoder uses `-` and `_` instead of `+` and `/`. The result has the shape and dtype of `x`.

  ```python
  x = Tensor(["Hello World!"])
  x.encode_base64().tolist() # ['SGVsbG8gV29ybGQh']
  ```
  pad: whether to keep the `=` padding at the end of each encoded value.
  """
  x = convert_to_tensor(x, "str", "encode_base64", dtypes.string)
  return x.map_storage(functools.partial(codec.encode, pad=pad))

def decode_base64_(x:Tensor|str|Sequence|np.ndarray) -> Tensor:
  """
  Decodes the values of a string Tensor from web-safe base64. Padded and unpadded values are both accepted.

  ```python
  y = Tensor("YW55dGhpbmcgZWxzZSBmb3IgeW91IGdvaW5nIG9uIGhlcmU_")
  y.decode_base64().item() # 'anything else for you going on here?'
  ```
  raises DecodeError (with the flat index of the element) when a value is not base64 or not utf-8 once decoded.
  """
  x = convert_to_tensor(x, "str", "decode_base64", dtypes.string)
  return x.map_storage(codec.decode)

encode_base64, decode_base64 = op(encode_base64_), op(decode_base64_)

__all__ = ["encode_base64", "decode_base64"]
