"""
画面命令（消去、スプライト描画）の実装。描画自体はディスプレイエンジンに委譲します。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8 import display
from .base import ExecutionContext, advance, fields_of

# --- CLS (00E0) ---
def execute_cls(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    display.clear_screen(state)
    advance(state)

# --- DRW Vx, Vy, n (Dxyn) ---
def execute_drw(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    display.draw_sprite(state, bus, f.x, f.y, f.n)
    advance(state)
