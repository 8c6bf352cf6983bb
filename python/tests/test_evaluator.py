import functools
import time
import pytest
from stringgrad.engine import codec
from stringgrad.engine.evaluator import map_elementwise, shards
from stringgrad.errors import DecodeError

VALUES = [f"value {i} \U0001d306" * (i % 5) for i in range(103)]

def test_shards_cover_in_order():
  got = list(shards(list(range(10)), 4))
  assert got == [(0, [0, 1, 2, 3]), (4, [4, 5, 6, 7]), (8, [8, 9])]

def test_sequential_map():
  assert map_elementwise(str.upper, ["a", "b", "c"], shard=0) == ["A", "B", "C"]
  assert map_elementwise(str.upper, iter(["a", "b"]), shard=0) == ["A", "B"]

@pytest.mark.parametrize("shard,workers", [(1, 4), (7, 3), (50, 0), (103, 2), (500, 2)])
def test_sharded_map_matches_sequential(shard, workers):
  fxn = functools.partial(codec.CODEC.encode_one, pad=True)
  assert map_elementwise(fxn, VALUES, shard=shard, workers=workers) == map_elementwise(fxn, VALUES, shard=0)

def test_sharded_error_reports_global_index():
  encoded = map_elementwise(codec.CODEC.encode_one, VALUES, shard=0)
  encoded[61] = "%%%"
  encoded[90] = "%%%"
  with pytest.raises(DecodeError) as e:
    map_elementwise(codec.CODEC.decode_one, encoded, shard=10, workers=4)
  assert e.value.index == 61

def test_other_errors_propagate_unchanged():
  def boom(x):
    if x == 2: raise ZeroDivisionError("boom")
    return x
  with pytest.raises(ZeroDivisionError):
    map_elementwise(boom, [0, 1, 2, 3], shard=2, workers=2)

def test_sharded_failure_does_not_wait_for_queued_shards():
  ran = []
  def slow(x):
    if x == 0: raise DecodeError("bad")
    time.sleep(0.01)
    ran.append(x)
    return x
  with pytest.raises(DecodeError) as e:
    map_elementwise(slow, list(range(200)), shard=1, workers=1)
  assert e.value.index == 0
  assert len(ran) < 199
