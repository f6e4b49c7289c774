from dataclasses import dataclass, field
from typing import Dict, Optional

from chip8_tracer.arch.chip8.state import PROGRAM_START

@dataclass
class CpuInitialState:
    pc: int = PROGRAM_START
    i: int = 0x000
    registers: Dict[str, int] = field(default_factory=dict)  # 例: {"v0": 0x10, "vf": 1}

@dataclass
class MachineConfig:
    random_seed: Optional[int] = None
    couple_timers: bool = True  # タイマーを命令ステップごとに減算する
    history_limit: int = 10000  # デバッガの履歴保持数
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
