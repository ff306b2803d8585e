# common/utils.py
"""
General helpers: bit/byte/nibble conversions, padding, CRC.
"""

from __future__ import annotations
import numpy as np
import binascii

# ----------------- Bits/Bytes -----------------
def bytes_to_bits(b: bytes) -> np.ndarray:
    """Convert bytes to a 1-D np.uint8 array of 0/1 bits (MSB first)."""
    if isinstance(b, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(b, dtype=np.uint8)
    elif isinstance(b, np.ndarray) and b.dtype == np.uint8:
        arr = b
    else:
        arr = np.array(list(b), dtype=np.uint8)
    return np.unpackbits(arr)

def bits_to_bytes(bits: np.ndarray) -> bytes:
    """Convert a 1-D bits array (0/1) to bytes. Pads to a multiple of 8 with zeros."""
    bits = np.asarray(bits, dtype=np.uint8).reshape(-1)
    pad = (-len(bits)) % 8
    if pad:
        bits = np.concatenate([bits, np.zeros(pad, dtype=np.uint8)])
    return np.packbits(bits).tobytes()

def pad_bits_to_multiple(bits: np.ndarray, m: int) -> tuple[np.ndarray, int]:
    """Pad with zeros so len(bits) is a multiple of m. Return (padded_bits, pad_len)."""
    bits = np.asarray(bits, dtype=np.uint8).reshape(-1)
    pad = (-len(bits)) % m
    if pad:
        bits = np.concatenate([bits, np.zeros(pad, dtype=np.uint8)])
    return bits, pad

# ----------------- Nibbles -----------------
def nibble_to_bits(nib: int, out=None):
    """Split the low 4 bits of `nib` into [b3, b2, b1, b0] (MSB first)."""
    if out is None:
        out = np.zeros(4, dtype=np.uint8)
    out[0] = (nib >> 3) & 1
    out[1] = (nib >> 2) & 1
    out[2] = (nib >> 1) & 1
    out[3] = nib & 1
    return out

def bits_to_nibble(bits) -> int:
    """Inverse of nibble_to_bits."""
    return (int(bits[0]) << 3) | (int(bits[1]) << 2) | (int(bits[2]) << 1) | int(bits[3])

# ----------------- CRC -----------------
def crc32_bytes(data: bytes) -> int:
    """CRC-32 for a bytes payload (unsigned)."""
    return binascii.crc32(data) & 0xFFFFFFFF

def append_crc32(payload: bytes) -> bytes:
    c = crc32_bytes(payload)
    return payload + c.to_bytes(4, 'big')

def verify_and_strip_crc32(data_with_crc: bytes) -> tuple[bool, bytes]:
    if len(data_with_crc) < 4:
        return False, b""
    payload, crc = data_with_crc[:-4], data_with_crc[-4:]
    ok = (crc32_bytes(payload) == int.from_bytes(crc, 'big'))
    return ok, payload

# ----------------- Metrics -----------------
def bit_error_rate(a: np.ndarray, b: np.ndarray) -> float:
    """Fraction of differing bits over the common prefix; length mismatch counts as errors."""
    a = np.asarray(a, dtype=np.uint8).reshape(-1)
    b = np.asarray(b, dtype=np.uint8).reshape(-1)
    n = min(len(a), len(b))
    total = max(len(a), len(b))
    if total == 0:
        return 0.0
    errs = int(np.count_nonzero(a[:n] != b[:n])) + (total - n)
    return errs / total
