# data_link_layer/hamming.py
"""
Hamming(7,4) bit-level codec.

Codeword layout (0-based index -> 1-based position):
    idx : 0  1  2  3  4  5  6
    pos : 1  2  3  4  5  6  7
    role: p1 p2 d1 p3 d2 d3 d4

Parity positions are the 1-based powers of two. Parity group p covers every
1-based position with bit p set, so a single flipped bit at position s makes
exactly the checks named by the bits of s fail, and the syndrome equals s.

Only single-bit errors per 7-bit block are corrected. Two flipped bits give a
non-zero syndrome pointing at a third position; the decoder then "corrects"
that bit and returns wrong data without any signal. Use an outer check
(e.g. CRC-32) when double errors must be detected.
"""

from __future__ import annotations
from typing import Sequence
import numpy as np

NIBBLE_LEN = 4
CODEWORD_LEN = 7
N_PARITY = 3

# ---------- Bit-index predicates ----------
def is_parity_index(i: int) -> bool:
    """True for 0-based indices whose 1-based position is a power of two (0, 1, 3, 7, ...)."""
    return (i & (i + 1)) == 0

def in_parity_group(i: int, p: int) -> bool:
    """True if 0-based index i is covered by parity group p."""
    return ((i + 1) & (1 << p)) != 0

def parity_index(p: int) -> int:
    """0-based index holding the parity bit of group p."""
    return (1 << p) - 1

PARITY_INDICES = tuple(i for i in range(CODEWORD_LEN) if is_parity_index(i))      # (0, 1, 3)
DATA_INDICES = tuple(i for i in range(CODEWORD_LEN) if not is_parity_index(i))    # (2, 4, 5, 6)
# codeword columns summed by each parity check: ((0,2,4,6), (1,2,5,6), (3,4,5,6))
GROUP_INDICES = tuple(tuple(i for i in range(CODEWORD_LEN) if in_parity_group(i, p))
                      for p in range(N_PARITY))

def _new_buffer(n: int, out):
    if out is None:
        return np.zeros(n, dtype=np.uint8)
    if len(out) != n:
        raise ValueError(f"output buffer must hold {n} bits, got {len(out)}")
    return out

# ---------- Parity / syndrome ----------
def parity_check(bits: Sequence[int], p: int) -> int:
    """Even parity (XOR) over parity group p of `bits`. Empty group -> 0."""
    acc = 0
    for i in range(parity_index(p), len(bits)):
        if in_parity_group(i, p):
            acc ^= int(bits[i])
    return acc

def calculate_syndrome(bits: Sequence[int]) -> int:
    """
    Run every parity check that fits in len(bits) and pack the results,
    check p going to bit p. 0 means consistent; otherwise the value is the
    1-based position of the single inconsistent bit.
    """
    n = len(bits)
    syndrome = 0
    p = 0
    while (1 << p) <= n:
        if parity_index(p) >= n:
            break
        syndrome |= parity_check(bits, p) << p
        p += 1
    return syndrome

# ---------- Single block ----------
def encode_nibble(nibble: Sequence[int], out=None):
    """
    Encode 4 data bits [d1, d2, d3, d4] into a 7-bit codeword.
    `out` (length 7) is fully overwritten and returned; allocated if None.
    """
    if len(nibble) != NIBBLE_LEN:
        raise ValueError(f"nibble must have {NIBBLE_LEN} bits, got {len(nibble)}")
    out = _new_buffer(CODEWORD_LEN, out)
    for i in range(CODEWORD_LEN):
        out[i] = 0

    j = 0
    for i in range(CODEWORD_LEN):
        if is_parity_index(i):
            continue
        out[i] = nibble[j]
        j += 1

    # parity slots are still 0 while their own group is summed
    for p in range(N_PARITY):
        out[parity_index(p)] = parity_check(out, p)
    return out

def decode_nibble(codeword, out=None):
    """
    Decode a 7-bit codeword into 4 data bits.
    A single flipped bit is corrected IN PLACE in `codeword` before the data
    bits (indices 2, 4, 5, 6) are copied to `out`.
    """
    if len(codeword) != CODEWORD_LEN:
        raise ValueError(f"codeword must have {CODEWORD_LEN} bits, got {len(codeword)}")
    out = _new_buffer(NIBBLE_LEN, out)

    syndrome = calculate_syndrome(codeword)
    if syndrome != 0:
        error_pos = syndrome - 1
        # unreachable for 0/1 input; out-of-range bit values can push it outside the block
        if 0 <= error_pos < CODEWORD_LEN:
            codeword[error_pos] ^= 1

    for k, i in enumerate(DATA_INDICES):
        out[k] = codeword[i]
    return out

# ---------- Block arrays ----------
def encoded_length(total_bits: int) -> int:
    return (total_bits // NIBBLE_LEN) * CODEWORD_LEN

def decoded_length(total_bits: int) -> int:
    return (total_bits // CODEWORD_LEN) * NIBBLE_LEN

def _as_blocks(bits, width: int) -> np.ndarray:
    """View `bits` as an (n_blocks, width) integer matrix."""
    a = np.asarray(bits).reshape(-1)
    if a.dtype.kind not in "iu":
        a = a.astype(np.int64)
    if len(a) % width != 0:
        raise ValueError(f"input length {len(a)} is not a multiple of {width}")
    return a.reshape(-1, width)

def _syndromes(C: np.ndarray) -> np.ndarray:
    s = np.zeros(C.shape[0], dtype=np.int64)
    for p, cols in enumerate(GROUP_INDICES):
        s |= np.bitwise_xor.reduce(C[:, list(cols)], axis=1).astype(np.int64) << p
    return s

def encode_block_array(bits, out=None):
    """Encode every consecutive 4-bit group of `bits` into 7 bits of `out`."""
    D = _as_blocks(bits, NIBBLE_LEN)
    out = _new_buffer(D.shape[0] * CODEWORD_LEN, out)

    C = np.zeros((D.shape[0], CODEWORD_LEN), dtype=D.dtype)
    C[:, list(DATA_INDICES)] = D
    # parity columns are still 0 while their own group is summed
    for p, cols in enumerate(GROUP_INDICES):
        C[:, parity_index(p)] = np.bitwise_xor.reduce(C[:, list(cols)], axis=1)
    out[:] = C.reshape(-1)
    return out

def decode_block_array(bits, out=None):
    """
    Decode every consecutive 7-bit group of `bits` into 4 bits of `out`.
    Corrections are applied to a copy; `bits` itself is left untouched.
    """
    C = _as_blocks(bits, CODEWORD_LEN).copy()
    out = _new_buffer(C.shape[0] * NIBBLE_LEN, out)

    s = _syndromes(C)
    rows = np.flatnonzero((s > 0) & (s <= CODEWORD_LEN))
    C[rows, s[rows] - 1] ^= 1
    out[:] = C[:, list(DATA_INDICES)].reshape(-1)
    return out

def block_syndromes(bits) -> np.ndarray:
    """Syndrome of every 7-bit group (no correction applied)."""
    return _syndromes(_as_blocks(bits, CODEWORD_LEN))
