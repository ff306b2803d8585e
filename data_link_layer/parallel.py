# data_link_layer/parallel.py
from __future__ import annotations
from threading import Thread
from typing import List, Tuple
import numpy as np

from data_link_layer.hamming import (
    NIBBLE_LEN, CODEWORD_LEN, encode_block_array, decode_block_array,
    encoded_length, decoded_length,
)

def _partition(n_blocks: int, workers: int) -> List[Tuple[int, int]]:
    """Split [0, n_blocks) into at most `workers` contiguous, non-empty ranges."""
    workers = max(1, min(int(workers), n_blocks))
    step, rem = divmod(n_blocks, workers)
    ranges = []
    start = 0
    for w in range(workers):
        end = start + step + (1 if w < rem else 0)
        ranges.append((start, end))
        start = end
    return ranges

def _run(fn, src: np.ndarray, out: np.ndarray, in_len: int, out_len: int, workers: int) -> np.ndarray:
    n_blocks = len(src) // in_len
    if workers <= 1 or n_blocks <= 1:
        return fn(src, out)
    threads = []
    errors: List[BaseException] = []

    def worker(src_part, out_part):
        try:
            fn(src_part, out_part)
        except BaseException as e:
            errors.append(e)

    # each thread owns out[a*out_len:b*out_len]; no two slices overlap
    for a, b in _partition(n_blocks, workers):
        t = Thread(target=worker, args=(src[a*in_len:b*in_len], out[a*out_len:b*out_len]))
        t.start()
        threads.append(t)
    for t in threads:
        t.join()
    if errors:
        raise errors[0]
    return out

def parallel_encode(bits, workers: int = 4) -> np.ndarray:
    """Same result as encode_block_array, computed by `workers` threads on disjoint slices."""
    src = np.asarray(bits, dtype=np.uint8).reshape(-1)
    if len(src) % NIBBLE_LEN != 0:
        raise ValueError(f"input length {len(src)} is not a multiple of {NIBBLE_LEN}")
    out = np.zeros(encoded_length(len(src)), dtype=np.uint8)
    return _run(encode_block_array, src, out, NIBBLE_LEN, CODEWORD_LEN, workers)

def parallel_decode(bits, workers: int = 4) -> np.ndarray:
    """Same result as decode_block_array, computed by `workers` threads on disjoint slices."""
    src = np.asarray(bits, dtype=np.uint8).reshape(-1)
    if len(src) % CODEWORD_LEN != 0:
        raise ValueError(f"input length {len(src)} is not a multiple of {CODEWORD_LEN}")
    out = np.zeros(decoded_length(len(src)), dtype=np.uint8)
    return _run(decode_block_array, src, out, CODEWORD_LEN, NIBBLE_LEN, workers)
