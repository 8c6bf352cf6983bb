from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator, Sequence, TypeVar
from stringgrad.errors import StringOpError
from stringgrad.helpers import DEBUG, SHARD, WORKERS, colored

T = TypeVar("T")
U = TypeVar("U")

# ************ element-wise map ************
# every output element depends on exactly one input element, so any contiguous split of the
# storage can be evaluated independently. executor.map yields in submission order, which keeps output[i] <-> input[i]
def shards(values:Sequence[T], size:int) -> Iterator[tuple[int, Sequence[T]]]:
  assert size > 0, f"shard size must be positive, getting {size}"
  for offset in range(0, len(values), size): yield offset, values[offset:offset+size]

def _eval_shard(fxn:Callable[[T], U], values:Sequence[T], offset:int=0) -> list[U]:
  out: list[U] = []
  for i,v in enumerate(values):
    try: out.append(fxn(v))
    except StringOpError as e:
      if e.index is None: e.with_index(offset+i) # report the global position, not the shard local one
      raise
  return out

def map_elementwise(fxn:Callable[[T], U], values:Sequence[T], shard:int=SHARD, workers:int=WORKERS) -> list[U]:
  """
  map_elementwise() applies fxn to every element of values and returns a new list in the same order.
  it fails fast on the first failing element. with shard > 0, collections longer than one shard are split into
  contiguous shards that run on a thread pool of `workers` threads (0 lets the executor pick).
  """
  values = values if isinstance(values, (list, tuple)) else list(values)
  if shard <= 0 or len(values) <= shard: return _eval_shard(fxn, values)

  if DEBUG >= 2: print(colored(f"map_elementwise: {len(values)} elements in {-(-len(values)//shard)} shards of {shard}", "cyan"))
  executor = ThreadPoolExecutor(max_workers=workers or None)
  try:
    results = executor.map(lambda s: _eval_shard(fxn, s[1], s[0]), shards(values, shard))
    out = [v for chunk in results for v in chunk]
  except Exception:
    executor.shutdown(wait=False, cancel_futures=True) # don't wait on shards queued behind the failure
    raise
  executor.shutdown()
  return out

__all__ = ["map_elementwise", "shards"]
