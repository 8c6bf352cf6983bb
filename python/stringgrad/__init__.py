"""
stringgrad is a small host side ndarray for string payloads and the string ops that run over it, which consists of a
1. tensor: domain specific ndarray (python `Tensor`) holding a shape, a row major stride and a flat storage list
2. string ops: `encode_base64`/`decode_base64`, web-safe base64 applied element-wise, preserving shape and dtype
3. engine: the byte codecs (`B64CODEC=native|bitpack`) and the element-wise evaluator (`SHARD=n WORKERS=m` to shard across threads)

  >>> from stringgrad import Tensor
  >>> Tensor([["Hello TensorFlow.js!", "𝌆"]]).encode_base64().tolist()
  [['SGVsbG8gVGVuc29yRmxvdy5qcyE', '8J2Mhg']]

set DEBUG=1 to trace op calls, DEBUG=2 to trace shards.
"""
from stringgrad.dtype import dtypes
from stringgrad.errors import DecodeError, EncodeError, InputTypeError, StringOpError
from stringgrad.tensor import Tensor
from stringgrad.string_ops import decode_base64, encode_base64

__version__ = "0.1.0"
__all__ = ["Tensor", "dtypes", "encode_base64", "decode_base64", "StringOpError", "InputTypeError", "EncodeError", "DecodeError"]
