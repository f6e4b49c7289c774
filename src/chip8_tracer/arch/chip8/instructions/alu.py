"""
算術論理演算命令の実装。

フラグ(VF)は結果を書き込む前に設定されます。xがFの場合は結果の書き込みがフラグを上書きします。
"""
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState
from .base import ExecutionContext, advance, fields_of

# --- ADD Vx, byte (7xkk) ---
# @intent:responsibility 即値を加算します。桁あふれは8bitに切り詰められ、フラグは変化しません。
def execute_add_byte(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] = (state.v[f.x] + f.kk) & 0xFF
    advance(state)

# --- LD Vx, Vy (8xy0) ---
def execute_ld_reg(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] = state.v[f.y]
    advance(state)

# --- OR Vx, Vy (8xy1) ---
def execute_or(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] |= state.v[f.y]
    advance(state)

# --- AND Vx, Vy (8xy2) ---
def execute_and(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] &= state.v[f.y]
    advance(state)

# --- XOR Vx, Vy (8xy3) ---
def execute_xor(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    state.v[f.x] ^= state.v[f.y]
    advance(state)

# --- ADD Vx, Vy (8xy4) ---
# @intent:responsibility 加算結果が255を超えればVF=1、そうでなければVF=0とし、下位8bitをVxに格納します。
def execute_add_reg(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    total = state.v[f.x] + state.v[f.y]
    state.vf = 1 if total > 0xFF else 0
    state.v[f.x] = total & 0xFF
    advance(state)

# --- SUB Vx, Vy (8xy5) ---
# @intent:responsibility Vx = Vx - Vy。VFは減算前に Vx > Vy なら1 (NOT borrow)。
def execute_sub(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    state.vf = 1 if state.v[f.x] > state.v[f.y] else 0
    state.v[f.x] = (state.v[f.x] - state.v[f.y]) & 0xFF
    advance(state)

# --- SHR Vx (8xy6) ---
# @intent:responsibility 右シフトし、押し出された最下位ビットをVFに格納します。
def execute_shr(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    state.vf = state.v[f.x] & 0x01
    state.v[f.x] = state.v[f.x] >> 1
    advance(state)

# --- SUBN Vx, Vy (8xy7) ---
# @intent:responsibility Vx = Vy - Vx。VFは減算前に Vy > Vx なら1。
def execute_subn(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    state.vf = 1 if state.v[f.y] > state.v[f.x] else 0
    state.v[f.x] = (state.v[f.y] - state.v[f.x]) & 0xFF
    advance(state)

# --- SHL Vx (8xyE) ---
# @intent:responsibility 左シフトし、押し出された最上位ビットをVFに格納します。
def execute_shl(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    state.vf = (state.v[f.x] & 0x80) >> 7
    state.v[f.x] = (state.v[f.x] << 1) & 0xFF
    advance(state)
