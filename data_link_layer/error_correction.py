# ==========================
# ./data_link_layer/error_correction.py
# ==========================
# Error correction schemes over 0/1 bit arrays:
#   None / Repeat / Hamming(7,4)
# ==========================
from __future__ import annotations
import numpy as np

from common.utils import pad_bits_to_multiple
from data_link_layer.hamming import (
    NIBBLE_LEN, CODEWORD_LEN, encode_block_array, decode_block_array, block_syndromes,
)
from data_link_layer.parallel import parallel_encode, parallel_decode

# ---------- Base ----------
class FECBase:
    name = "base"
    code_rate = 1.0
    def encode(self, bits: np.ndarray) -> np.ndarray:
        return np.asarray(bits, dtype=np.uint8)
    def decode(self, bits: np.ndarray) -> np.ndarray:
        return np.asarray(bits, dtype=np.uint8)
    def decode_with_stats(self, bits: np.ndarray) -> tuple[np.ndarray, int]:
        return self.decode(bits), 0

# ---------- None ----------
class NoFEC(FECBase):
    name = "none"
    code_rate = 1.0

# ---------- Repetition ----------
class RepetitionFEC(FECBase):
    def __init__(self, k: int = 3):
        if not isinstance(k, int) or k < 1:
            raise ValueError(f"repeat_k must be a positive int, got {k!r}")
        self.k = k
        self.name = f"repeat{self.k}"
        self.code_rate = 1.0 / k
    def encode(self, bits: np.ndarray) -> np.ndarray:
        bits = np.asarray(bits, dtype=np.uint8).reshape(-1, 1)
        return np.repeat(bits, self.k, axis=1).reshape(-1)
    def decode(self, bits: np.ndarray) -> np.ndarray:
        bits = np.asarray(bits, dtype=np.uint8)
        if len(bits) % self.k != 0:
            bits = bits[: (len(bits) // self.k) * self.k]
        grp = bits.reshape(-1, self.k)
        s = np.sum(grp, axis=1)
        return (s >= (self.k // 2 + 1)).astype(np.uint8)

# ---------- Hamming(7,4) ----------
class Hamming74FEC(FECBase):
    """
    Hamming(7,4) with codeword [p1 p2 d1 p3 d2 d3 d4] (parity at 1-based powers of two).
    encode() zero-pads the input to a multiple of 4; decode() drops a trailing partial
    7-bit group. Callers keep the original bit length to strip the padding.
    """
    name = "hamming74"
    code_rate = NIBBLE_LEN / CODEWORD_LEN
    def __init__(self, workers: int = 1):
        self.workers = max(1, int(workers))
    def encode(self, bits: np.ndarray) -> np.ndarray:
        b, _ = pad_bits_to_multiple(bits, NIBBLE_LEN)
        if self.workers > 1:
            return parallel_encode(b, self.workers)
        return encode_block_array(b)
    def decode(self, bits: np.ndarray) -> np.ndarray:
        c = self._whole_blocks(bits)
        if self.workers > 1:
            return parallel_decode(c, self.workers)
        return decode_block_array(c)
    def decode_with_stats(self, bits: np.ndarray) -> tuple[np.ndarray, int]:
        """Decode and count the blocks that carried a non-zero syndrome."""
        c = self._whole_blocks(bits)
        n_corrected = int(np.count_nonzero(block_syndromes(c)))
        return self.decode(c), n_corrected
    @staticmethod
    def _whole_blocks(bits: np.ndarray) -> np.ndarray:
        c = np.asarray(bits, dtype=np.uint8).reshape(-1)
        L = (len(c) // CODEWORD_LEN) * CODEWORD_LEN
        return c[:L]

# ---------- Factory ----------
def make_fec(scheme: str, repeat_k: int = 3, workers: int = 1) -> FECBase:
    s = scheme.lower()
    if s == "none":          return NoFEC()
    if s == "repeat":        return RepetitionFEC(k=repeat_k)
    if s == "hamming74":     return Hamming74FEC(workers=workers)
    raise ValueError(f"Unknown FEC scheme: {scheme}")
