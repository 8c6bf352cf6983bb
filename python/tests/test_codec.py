import base64
import pytest
from stringgrad.engine import codec
from stringgrad.engine.codec import BitpackCodec, NativeCodec, utf8_pack, utf8_unpack
from stringgrad.errors import DecodeError, EncodeError

STRATEGIES = [NativeCodec(), BitpackCodec()]
SAMPLES = ["", "a", "ab", "abc", "Hello TensorFlow.js!", "\x7f\x80", "\u07ff\u0800", "\uffff\U00010000", "\U0010ffff",
           "\U0001d306", "你好, 世界", "~~~", "???", "tab\there\nnewline", "\x00nul"]

def b64url(raw:bytes) -> str: return codec.to_url_safe(base64.b64encode(raw).decode("ascii")).rstrip("=")

@pytest.mark.parametrize("c", STRATEGIES, ids=lambda c: c.name)
def test_literals(c):
  assert c.encode_one("Hello TensorFlow.js!") == "SGVsbG8gVGVuc29yRmxvdy5qcyE"
  assert c.encode_one("Hello TensorFlow.js!", pad=True) == "SGVsbG8gVGVuc29yRmxvdy5qcyE="
  assert c.encode_one("\U0001d306") == "8J2Mhg"
  assert c.encode_one("你好, 世界", pad=True) == "5L2g5aW9LCDkuJbnlYw="
  assert c.decode_one("SGVsbG8gVGVuc29yRmxvdy5qcyE") == "Hello TensorFlow.js!"
  assert c.encode_one("") == c.encode_one("", pad=True) == ""

@pytest.mark.parametrize("c", STRATEGIES, ids=lambda c: c.name)
def test_round_trip(c):
  for s in SAMPLES:
    assert c.decode_one(c.encode_one(s)) == s
    assert c.decode_one(c.encode_one(s, pad=True)) == s

@pytest.mark.parametrize("c", STRATEGIES, ids=lambda c: c.name)
def test_padding_only_touches_the_tail(c):
  for s in SAMPLES:
    padded, unpadded = c.encode_one(s, pad=True), c.encode_one(s)
    assert len(padded) % 4 == 0
    assert padded.rstrip("=") == unpadded
    assert "=" not in unpadded

@pytest.mark.parametrize("c", STRATEGIES, ids=lambda c: c.name)
def test_url_safe(c):
  assert c.encode_one("~~~") == "fn5-"
  assert c.encode_one("???") == "Pz8_"
  for s in SAMPLES: assert "+" not in c.encode_one(s) and "/" not in c.encode_one(s)
  assert c.decode_one("fn5-") == c.decode_one("fn5+") == "~~~"

def test_strategies_agree():
  native, bitpack = STRATEGIES
  for s in SAMPLES:
    assert native.encode_one(s) == bitpack.encode_one(s)
    assert utf8_pack(s) == s.encode("utf-8")
    assert utf8_unpack(s.encode("utf-8")) == s

def test_utf8_byte_lengths():
  assert [len(utf8_pack(chr(cp))) for cp in (0x00, 0x7f, 0x80, 0x7ff, 0x800, 0xffff, 0x10000, 0x10ffff)] == [1, 1, 2, 2, 3, 3, 4, 4]

@pytest.mark.parametrize("c", STRATEGIES, ids=lambda c: c.name)
@pytest.mark.parametrize("bad", ["ab$d", "abcde", "SGVs bG8", "a=bc", "é"])
def test_decode_rejects_bad_base64(c, bad):
  with pytest.raises(DecodeError):
    c.decode_one(bad)

@pytest.mark.parametrize("c", STRATEGIES, ids=lambda c: c.name)
@pytest.mark.parametrize("raw", [b"\xff", b"\x80", b"\xe4\xbd", b"\xc0\x80", b"\xed\xa0\x80", b"\xf4\x90\x80\x80", b"a\xe4b"],
                         ids=["bad-start", "stray-continuation", "truncated", "overlong", "surrogate", "above-max", "interrupted"])
def test_decode_rejects_bad_utf8(c, raw):
  with pytest.raises(DecodeError):
    c.decode_one(b64url(raw))

@pytest.mark.parametrize("c", STRATEGIES, ids=lambda c: c.name)
def test_encode_rejects_lone_surrogates(c):
  with pytest.raises(EncodeError):
    c.encode_one("ok\ud800")

def test_get_codec():
  assert isinstance(codec.get_codec("native"), NativeCodec)
  assert isinstance(codec.get_codec("bitpack"), BitpackCodec)
  with pytest.raises(ValueError):
    codec.get_codec("base32")

def test_collection_encode_decode():
  values = ["Hello TensorFlow.js!", "", "\U0001d306"]
  encoded = codec.encode(values)
  assert encoded == ["SGVsbG8gVGVuc29yRmxvdy5qcyE", "", "8J2Mhg"]
  assert codec.encode(values, pad=True) == ["SGVsbG8gVGVuc29yRmxvdy5qcyE=", "", "8J2Mhg=="]
  assert codec.decode(encoded) == values
  assert codec.encode(()) == []

def test_collection_decode_fails_fast_with_index():
  with pytest.raises(DecodeError) as e:
    codec.decode(["8J2Mhg", "8J2Mhg", b64url(b"\xff"), "not$valid"])
  assert e.value.index == 2
