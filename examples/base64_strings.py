import numpy as np
import stringgrad
from stringgrad import Tensor

def encode_a_batch():
    print("web-safe base64 over a (2, 2) string tensor: stringgrad.encode_base64")
    x = Tensor([["Hello TensorFlow.js!", "\U0001d306"], ["你好, 世界", "https://www.tensorflow.org/js"]])
    print(x.encode_base64())
    print(x.encode_base64(pad=True))

def decode_from_numpy():
    print("decoding an ndarray and back to numpy: stringgrad.decode_base64")
    y = stringgrad.decode_base64(np.array(["SGVsbG8gVGVuc29yRmxvdy5qcyE", "5L2g5aW9LCDkuJbnlYw="]))
    print(y.numpy())

def reject_garbage():
    print("malformed input is an error, never a guess: stringgrad.DecodeError")
    try: stringgrad.decode_base64(["8J2Mhg", "not base64!"])
    except stringgrad.DecodeError as e: print(f"DecodeError: {e}")

def main():
    encode_a_batch()
    decode_from_numpy()
    reject_garbage()

if __name__ == "__main__":
    main()
