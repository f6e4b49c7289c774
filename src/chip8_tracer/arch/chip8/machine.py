# src/chip8_tracer/arch/chip8/machine.py
"""
CHIP-8 マシン (ホスト向けファサード)。

バス、フォント、CPUを組み立て、ホストが必要とする操作
（ROMロード、ステップ実行、キー入力、フレームバッファ取得、再描画ラッチ、サウンド判定）のみを公開します。
グローバルなインスタンスは持たず、複数のマシンを独立して生成できます。
"""
import random
from typing import Optional

from chip8_tracer.common.types import UnknownOpcodeHandler
from chip8_tracer.transport.bus import Bus, RAM, ROM
from chip8_tracer.loader.loader import RomData, RomLoader
from chip8_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_tracer.arch.chip8.font import FONT_START, FONTSET
from chip8_tracer.arch.chip8.state import (
    Chip8CpuState, ADDRESS_MASK, MAX_ROM_SIZE, MEMORY_SIZE, PROGRAM_START,
)
from chip8_tracer.arch.chip8 import display, keypad

# @intent:responsibility 4KBのアドレス空間を構築します。0x000-0x1FFはフォントを格納した書き込み禁止領域です。
def build_bus() -> Bus:
    bus = Bus(address_mask=ADDRESS_MASK)
    interpreter_area = ROM(PROGRAM_START)
    for offset, value in enumerate(FONTSET):
        interpreter_area.load_data(FONT_START + offset, value)
    bus.register_device(0x000, PROGRAM_START - 1, interpreter_area)
    bus.register_device(PROGRAM_START, MEMORY_SIZE - 1, RAM(MEMORY_SIZE - PROGRAM_START))
    return bus

class Machine:
    """
    ホストが所有する唯一のCHIP-8マシン。
    スレッドセーフではありません。step、set_key、load_romを並行して呼び出す場合は
    ホスト側で同期してください。
    """
    def __init__(self, rng: Optional[random.Random] = None, couple_timers: bool = True,
                 on_unknown_opcode: Optional[UnknownOpcodeHandler] = None):
        self._bus = build_bus()
        self._cpu = Chip8Cpu(self._bus, rng=rng, couple_timers=couple_timers,
                             on_unknown_opcode=on_unknown_opcode)
        self._loader = RomLoader(PROGRAM_START, MAX_ROM_SIZE)

    @property
    def cpu(self) -> Chip8Cpu:
        return self._cpu

    @property
    def bus(self) -> Bus:
        return self._bus

    @property
    def state(self) -> Chip8CpuState:
        return self._cpu.get_state()

    # @intent:responsibility ROMを0x200からコピーします。サイズ超過時はOversizeRomErrorで、状態は変化しません。
    def load_rom(self, data: RomData) -> None:
        self._loader.load(data, self._bus)

    # @intent:responsibility 1命令を実行します。未知の命令でも失敗しません。
    def step(self) -> None:
        self._cpu.step()

    # @intent:responsibility キーの押下状態を設定します。0-15以外のインデックスは無視されます。
    def set_key(self, index: int, pressed: bool) -> None:
        keypad.set_key(self.state, index, pressed)

    # @intent:responsibility 2048要素 (y * 64 + x) のピクセルのスナップショットを返します。
    def get_framebuffer(self) -> bytes:
        return display.get_framebuffer(self.state)

    # @intent:responsibility 前回の呼び出し以降に描画があったかを返し、ラッチをクリアします。
    def consume_redraw(self) -> bool:
        return display.consume_redraw(self.state)

    @property
    def sound_timer(self) -> int:
        return self.state.sound_timer

    # @intent:responsibility サウンドタイマーが0でなければトーンを鳴らすべきことを示します。
    @property
    def sound_active(self) -> bool:
        return self.state.sound_timer != 0

    @property
    def delay_timer(self) -> int:
        return self.state.delay_timer

    def tick_timers(self) -> None:
        self._cpu.tick_timers()

    # @intent:responsibility プログラム領域を消去し、CPUを初期状態 (PC=0x200) に戻します。フォントは保持されます。
    def reset(self) -> None:
        for offset in range(MAX_ROM_SIZE):
            self._bus.load(PROGRAM_START + offset, 0)
        self._cpu.reset()
