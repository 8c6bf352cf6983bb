from .evaluator import map_elementwise, shards
from .codec import ByteCodec, NativeCodec, BitpackCodec, CODECS, get_codec

__all__ = ["map_elementwise", "shards", "ByteCodec", "NativeCodec", "BitpackCodec", "CODECS", "get_codec"]
