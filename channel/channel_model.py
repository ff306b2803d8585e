# channel/channel_model.py
from __future__ import annotations
from typing import Iterable
import numpy as np

__all__ = ["flip_bits", "bsc_channel", "burst_channel"]

def flip_bits(bits, positions: Iterable[int]) -> np.ndarray:
    """Return a copy of `bits` with every listed index inverted."""
    out = np.array(bits, dtype=np.uint8).reshape(-1)
    for i in positions:
        out[int(i)] ^= 1
    return out

def bsc_channel(bits, flip_prob: float, seed: int | None = None) -> np.ndarray:
    """
    Binary symmetric channel: each bit is inverted independently with probability flip_prob.
    """
    if not 0.0 <= flip_prob <= 1.0:
        raise ValueError(f"flip_prob must be in [0, 1], got {flip_prob}")
    b = np.array(bits, dtype=np.uint8).reshape(-1)
    if b.size == 0:
        return b
    rng = np.random.default_rng(seed)
    err = (rng.random(b.size) < flip_prob).astype(np.uint8)
    return b ^ err

def burst_channel(bits, flip_prob: float, burst_len: int = 3, seed: int | None = None) -> np.ndarray:
    """
    Burst errors: a burst starts at each bit with probability flip_prob and inverts
    the next burst_len bits. Bursts longer than one bit usually put 2+ errors in a
    Hamming(7,4) block, which the code cannot correct.
    """
    if not 0.0 <= flip_prob <= 1.0:
        raise ValueError(f"flip_prob must be in [0, 1], got {flip_prob}")
    burst_len = max(1, int(burst_len))
    b = np.array(bits, dtype=np.uint8).reshape(-1)
    N = b.size
    if N == 0:
        return b
    rng = np.random.default_rng(seed)
    starts = np.flatnonzero(rng.random(N) < flip_prob)
    err = np.zeros(N, dtype=np.uint8)
    for s in starts:
        err[s:s + burst_len] = 1
    return b ^ err
