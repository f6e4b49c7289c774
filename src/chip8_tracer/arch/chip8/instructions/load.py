"""
ロード/ストア命令（レジスタ、インデックス、タイマー、メモリ転送）の実装。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8 import timers
from chip8_tracer.arch.chip8.font import glyph_address
from .base import ExecutionContext, advance, fields_of

# --- LD Vx, byte (6xkk) ---
def execute_ld_byte(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] = f.kk
    advance(state)

# --- LD I, addr (Annn) ---
def execute_ld_i(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    state.i = fields_of(op).nnn
    advance(state)

# --- RND Vx, byte (Cxkk) ---
# @intent:responsibility 一様乱数の1バイトと即値の論理積をVxに格納します。
def execute_rnd(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] = ctx.rng.randrange(256) & f.kk
    advance(state)

# --- LD Vx, DT (Fx07) ---
def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    state.v[fields_of(op).x] = state.delay_timer
    advance(state)

# --- LD DT, Vx (Fx15) ---
def execute_ld_dt_vx(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    timers.set_delay_timer(state, state.v[fields_of(op).x])
    advance(state)

# --- LD ST, Vx (Fx18) ---
def execute_ld_st_vx(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    timers.set_sound_timer(state, state.v[fields_of(op).x])
    advance(state)

# --- ADD I, Vx (Fx1E) ---
# @intent:responsibility Iは16bitレジスタとして扱い、0xFFFFでラップします。VFは変化しません。
def execute_add_i_vx(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    state.i = (state.i + state.v[fields_of(op).x]) & 0xFFFF
    advance(state)

# --- LD F, Vx (Fx29) ---
# @intent:responsibility IをVxの数字のフォントグリフのアドレス (5 * Vx) に設定します。
def execute_ld_f_vx(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    state.i = glyph_address(state.v[fields_of(op).x])
    advance(state)

# --- LD B, Vx (Fx33) ---
# @intent:responsibility Vxの10進表現の百・十・一の位を I, I+1, I+2 に格納します。
def execute_ld_b_vx(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    value = state.v[fields_of(op).x]
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)
    advance(state)

# --- LD [I], Vx (Fx55) ---
# @intent:responsibility V0からVxまでを昇順にIから始まるメモリへ格納します。Iは変化しません。
def execute_ld_mem_vx(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    for reg in range(fields_of(op).x + 1):
        bus.write(state.i + reg, state.v[reg])
    advance(state)

# --- LD Vx, [I] (Fx65) ---
# @intent:responsibility Iから始まるメモリをV0からVxまで昇順に読み込みます。Iは変化しません。
def execute_ld_vx_mem(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    for reg in range(fields_of(op).x + 1):
        state.v[reg] = bus.read(state.i + reg)
    advance(state)
