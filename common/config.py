"""
Configuration dataclasses for the Hamming(7,4) link simulation.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal

# ---------- Codec / Channel ----------
@dataclass
class CodecConfig:
    fec_scheme: Literal["none", "repeat", "hamming74"] = "hamming74"
    repeat_k: int = 3
    # threads for the block codec (1 = serial)
    workers: int = 1
    # append CRC-32 before FEC so uncorrectable (2+ bit) blocks are detected
    append_crc: bool = True

@dataclass
class ChannelConfig:
    channel_type: Literal["bsc", "burst"] = "bsc"
    flip_prob: float = 1e-2
    burst_len: int = 3
    seed: int | None = 12345

# ---------- Simulation ----------
@dataclass
class SimulationConfig:
    payload_bytes: int = 1024
    payload_seed: int | None = 2024
    codec: CodecConfig = field(default_factory=CodecConfig)
    chan: ChannelConfig = field(default_factory=ChannelConfig)
    output_root: str = "outputs"
    verbose: bool = False
