"""
制御命令（ジャンプ、サブルーチン、条件スキップ、キー待ち）の実装。
各ハンドラは自身でPCを進めます。
"""
from chip8_tracer.common.errors import StackOverflowError, StackUnderflowError
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState, STACK_SIZE
from chip8_tracer.arch.chip8 import keypad
from .base import ExecutionContext, advance, fields_of, jump_to, skip_if

# --- RET (00EE) ---
# @intent:responsibility スタックから呼び出し元のアドレスを取り出し、その次の命令へ戻ります。
# @intent:rationale スタックに積まれているのはCALL命令自身のアドレスなので、復帰後に+2します。
def execute_ret(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    if state.sp == 0:
        raise StackUnderflowError(f"RET with empty stack at PC {state.pc:#05x}")
    state.sp -= 1
    state.pc = state.stack[state.sp]
    advance(state)

# --- JP addr (1nnn) ---
def execute_jp(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    jump_to(state, fields_of(op).nnn)

# --- CALL addr (2nnn) ---
# @intent:responsibility 現在のPC（CALL命令自身のアドレス）をプッシュしてからジャンプします。
# @intent:pre-condition スタックに空きがあること。満杯の場合は状態を変更せずにStackOverflowErrorを送出します。
def execute_call(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    if state.sp >= STACK_SIZE:
        raise StackOverflowError(f"CALL nesting exceeds {STACK_SIZE} levels at PC {state.pc:#05x}")
    state.stack[state.sp] = state.pc
    state.sp += 1
    jump_to(state, fields_of(op).nnn)

# --- SE Vx, byte (3xkk) ---
def execute_se_byte(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    skip_if(state, state.v[f.x] == f.kk)

# --- SNE Vx, byte (4xkk) ---
def execute_sne_byte(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    skip_if(state, state.v[f.x] != f.kk)

# --- SE Vx, Vy (5xy0) ---
def execute_se_reg(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    skip_if(state, state.v[f.x] == state.v[f.y])

# --- SNE Vx, Vy (9xy0) ---
def execute_sne_reg(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    f = fields_of(op)
    skip_if(state, state.v[f.x] != state.v[f.y])

# --- JP V0, addr (Bnnn) ---
def execute_jp_v0(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    jump_to(state, fields_of(op).nnn + state.v[0])

# --- SKP Vx (Ex9E) ---
def execute_skp(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    skip_if(state, keypad.is_pressed(state, state.v[fields_of(op).x]))

# --- SKNP Vx (ExA1) ---
def execute_sknp(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    skip_if(state, not keypad.is_pressed(state, state.v[fields_of(op).x]))

# --- LD Vx, K (Fx0A) ---
# @intent:responsibility キー入力を待ちます。
# @intent:rationale スレッドを止める代わりにPCを進めないことで、次のstepで同じ命令が再実行されます。
def execute_ld_vx_k(state: Chip8CpuState, bus: Bus, ctx: ExecutionContext, op: Operation) -> None:
    key = keypad.first_pressed(state)
    if key is None:
        return
    state.v[fields_of(op).x] = key
    advance(state)
