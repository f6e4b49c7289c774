# chip8_tracer/arch/chip8/state.py
"""
CHIP-8 固有の状態定義。

メモリ本体はBus上のデバイスが保持し、それ以外のマシン状態
（レジスタ、スタック、タイマー、フレームバッファ、キーパッド、再描画ラッチ）をここで保持します。
"""
from dataclasses import dataclass, field, replace
from typing import List

from chip8_tracer.core.state import CpuState

# @intent:constant メモリマップと各資源のサイズ。
MEMORY_SIZE = 0x1000
ADDRESS_MASK = MEMORY_SIZE - 1
PROGRAM_START = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START  # 3584 bytes
REGISTER_COUNT = 16
STACK_SIZE = 16
KEY_COUNT = 16
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
INSTRUCTION_LENGTH = 2

# @intent:constant キャリー・ボロー・衝突フラグとして使われるレジスタ番号 (VF)。
FLAG_REGISTER = 0xF

# @intent:responsibility CHIP-8 マシンの全ての可変状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 のマシン状態を保持するデータクラス。
    spはスタックに積まれているアドレスの個数 (0..16) を表します。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)  # V0-VF
    i: int = 0x0000  # Index Register
    stack: List[int] = field(default_factory=lambda: [0] * STACK_SIZE)
    delay_timer: int = 0
    sound_timer: int = 0
    framebuffer: bytearray = field(default_factory=lambda: bytearray(SCREEN_WIDTH * SCREEN_HEIGHT))
    keys: List[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    redraw_pending: bool = False

    # @intent:accessor フラグレジスタ(VF)へのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    def copy(self) -> "Chip8CpuState":
        return replace(
            self,
            v=list(self.v),
            stack=list(self.stack),
            framebuffer=bytearray(self.framebuffer),
            keys=list(self.keys),
        )
