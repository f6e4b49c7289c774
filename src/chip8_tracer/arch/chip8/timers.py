"""
タイマーサブシステム。

ディレイタイマーとサウンドタイマーは独立した8bitのダウンカウンタです。
"""
from chip8_tracer.arch.chip8.state import Chip8CpuState

# @intent:utility_function カウンタを1減らします。0の場合はそのまま0を返します。
def decrement(value: int) -> int:
    return value - 1 if value > 0 else 0

# @intent:responsibility 両タイマーを1回ずつ減算します。
def tick_timers(state: Chip8CpuState) -> None:
    state.delay_timer = decrement(state.delay_timer)
    state.sound_timer = decrement(state.sound_timer)

def set_delay_timer(state: Chip8CpuState, value: int) -> None:
    state.delay_timer = value & 0xFF

def set_sound_timer(state: Chip8CpuState, value: int) -> None:
    state.sound_timer = value & 0xFF
