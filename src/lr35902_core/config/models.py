from dataclasses import dataclass, field
from typing import List

from lr35902_core.transport.bus import ADDRESS_SPACE_SIZE

@dataclass
class ProgramImage:
    path: str
    format: str = "binary"  # "binary", "ihex"
    offset: int = 0x0000  # binaryのみ

@dataclass
class CpuInitialState:
    pc: int = 0x0000
    sp: int = 0x0000
    registers: dict = field(default_factory=dict)

@dataclass
class SystemConfig:
    memory_size: int = ADDRESS_SPACE_SIZE
    images: List[ProgramImage] = field(default_factory=list)
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
