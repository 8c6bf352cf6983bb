"""
web-safe base64 over utf-8 text.

a value is encoded by taking its utf-8 bytes, base64 encoding them with the RFC 4648 alphabet,
swapping + and / for - and _, and (unless pad is set) dropping the trailing = padding.
decoding reverses the swap, restores any missing padding, and reads the bytes back as utf-8.

the text <-> bytes step has two strategies which accept and reject exactly the same inputs:
  - NativeCodec  ("native"):  python's own utf-8 codec
  - BitpackCodec ("bitpack"): explicit code point bit packing, for hosts whose base64 primitive sees 16 bit units instead of bytes
the strategy is picked once at startup with B64CODEC=native|bitpack.
"""
from __future__ import annotations
import base64, binascii, functools
from typing import Sequence
from stringgrad.engine.evaluator import map_elementwise
from stringgrad.errors import DecodeError, EncodeError
from stringgrad.helpers import B64CODEC, DEBUG

URL_SAFE, URL_UNSAFE = str.maketrans("+/", "-_"), str.maketrans("-_", "+/")
def to_url_safe(s:str) -> str: return s.translate(URL_SAFE)
def from_url_safe(s:str) -> str: return s.translate(URL_UNSAFE)

# ************ utf-8 bit packing ************
# https://en.wikipedia.org/wiki/UTF-8#Description
def utf8_pack(text:str) -> bytes:
  out = bytearray()
  for i,ch in enumerate(text):
    cp = ord(ch)
    if cp < 0x80: out.append(cp) # one byte
    elif cp < 0x800: out += bytes((0xc0 | (cp >> 6), 0x80 | (cp & 0x3f))) # two bytes
    elif 0xd800 <= cp <= 0xdfff: raise EncodeError(f"lone surrogate {cp:#06x} at position {i} has no utf-8 encoding")
    elif cp < 0x10000: out += bytes((0xe0 | (cp >> 12), 0x80 | ((cp >> 6) & 0x3f), 0x80 | (cp & 0x3f))) # three bytes
    else: out += bytes((0xf0 | (cp >> 18), 0x80 | ((cp >> 12) & 0x3f), 0x80 | ((cp >> 6) & 0x3f), 0x80 | (cp & 0x3f))) # four bytes
  return bytes(out)

# (lead mask, lead pattern, payload mask, continuation bytes, smallest code point) per multibyte length
UTF8_LEADS = ((0xe0, 0xc0, 0x1f, 1, 0x80), (0xf0, 0xe0, 0x0f, 2, 0x800), (0xf8, 0xf0, 0x07, 3, 0x10000))

def utf8_unpack(data:bytes) -> str:
  out, i = [], 0
  while i < len(data):
    if (b:=data[i]) < 0x80: # one byte
      out.append(chr(b))
      i += 1
      continue
    for mask, lead, payload, count, smallest in UTF8_LEADS:
      if b & mask == lead: break
    else: raise DecodeError(f"invalid utf-8 start byte {b:#04x} at offset {i}")
    if len(seq:=data[i+1:i+1+count]) < count or any(c & 0xc0 != 0x80 for c in seq):
      raise DecodeError(f"invalid utf-8 continuation after {b:#04x} at offset {i}")
    cp = functools.reduce(lambda acc, c: (acc << 6) | (c & 0x3f), seq, b & payload)
    if cp < smallest: raise DecodeError(f"overlong utf-8 sequence at offset {i}")
    if 0xd800 <= cp <= 0xdfff or cp > 0x10ffff: raise DecodeError(f"utf-8 sequence at offset {i} decodes to invalid code point {cp:#x}")
    out.append(chr(cp))
    i += 1 + count
  return "".join(out)

# ************ byte codecs ************
class ByteCodec:
  name: str = ""
  def to_bytes(self, text:str) -> bytes: raise NotImplementedError("need to_bytes")
  def from_bytes(self, data:bytes) -> str: raise NotImplementedError("need from_bytes")

  def encode_one(self, value:str, pad:bool=False) -> str:
    encoded = to_url_safe(base64.b64encode(self.to_bytes(value)).decode("ascii"))
    return encoded if pad else encoded.rstrip("=")

  def decode_one(self, value:str) -> str:
    value = from_url_safe(value)
    value += "=" * (-len(value) % 4) # padding is optional on the way in
    try: data = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e: raise DecodeError(f"invalid base64 {value!r}: {e}") from e
    return self.from_bytes(data)

  def __repr__(self): return f"<{self.__class__.__name__} {self.name!r}>"

class NativeCodec(ByteCodec):
  name = "native"
  def to_bytes(self, text:str) -> bytes:
    try: return text.encode("utf-8")
    except UnicodeEncodeError as e: raise EncodeError(f"lone surrogate {ord(text[e.start]):#06x} at position {e.start} has no utf-8 encoding") from e
  def from_bytes(self, data:bytes) -> str:
    try: return data.decode("utf-8")
    except UnicodeDecodeError as e: raise DecodeError(f"decoded bytes are not utf-8: {e.reason} at offset {e.start}") from e

class BitpackCodec(ByteCodec):
  name = "bitpack"
  def to_bytes(self, text:str) -> bytes: return utf8_pack(text)
  def from_bytes(self, data:bytes) -> str: return utf8_unpack(data)

CODECS: dict[str, ByteCodec] = {c.name: c for c in (NativeCodec(), BitpackCodec())}
def get_codec(name:str) -> ByteCodec:
  if (codec:=CODECS.get(name)) is None: raise ValueError(f"unknown base64 codec {name!r}, expected one of {sorted(CODECS)}")
  return codec

CODEC: ByteCodec = get_codec(B64CODEC)
if DEBUG >= 1: print(f"codec: using {CODEC.__class__.__name__}")

# ************ collections ************
def encode(values:Sequence[str], pad:bool=False) -> list[str]: return map_elementwise(functools.partial(CODEC.encode_one, pad=pad), values)
def decode(values:Sequence[str]) -> list[str]: return map_elementwise(CODEC.decode_one, values)

__all__ = ["ByteCodec", "NativeCodec", "BitpackCodec", "CODECS", "get_codec", "encode", "decode",
           "to_url_safe", "from_url_safe", "utf8_pack", "utf8_unpack"]
