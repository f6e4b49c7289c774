# src/chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 インタプリタの中心モジュール。
"""
import logging
import random
from typing import Dict, List, Optional, Tuple

from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo, UnknownOpcodeHandler
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState, REGISTER_COUNT
from chip8_tracer.arch.chip8.instructions import ExecutionContext, decode_opcode, execute_instruction
from chip8_tracer.arch.chip8.instructions.base import advance
from chip8_tracer.arch.chip8 import disassembler, timers

logger = logging.getLogger(__name__)

# @intent:responsibility CHIP-8 の具体的なエミュレーションロジック（フェッチ、デコード、実行、タイマー更新）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 インタプリタ。
    各命令は自身でPCを進めるため、エンジン側での既定のPC更新は行いません。
    """
    def __init__(self, bus: Bus, rng: Optional[random.Random] = None,
                 couple_timers: bool = True,
                 on_unknown_opcode: Optional[UnknownOpcodeHandler] = None):
        super().__init__(bus)
        self._context = ExecutionContext(rng=rng if rng is not None else random.Random())
        self._couple_timers = couple_timers
        self._on_unknown_opcode = on_unknown_opcode

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility 保存された状態を復元します。キーパッドはホストの入力なので現在の押下状態を維持します。
    def restore_state(self, state: Chip8CpuState) -> None:
        keys = list(self._state.keys)
        super().restore_state(state)
        self._state.keys = keys

    # @intent:responsibility PCとPC+1の2バイトをビッグエンディアンで結合した命令ワードを読み込みます。
    # @intent:rationale アドレスはBusのアドレスマスクで4KB空間内にラップされます。
    def _fetch(self) -> int:
        pc = self._state.pc
        return (self._bus.read(pc) << 8) | self._bus.read(pc + 1)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    # @intent:responsibility 命令ハンドラがPCを管理するため、何もしません。
    def _update_pc(self, operation: Operation) -> None:
        pass

    # @intent:responsibility 命令を実行します。未知の命令は診断を出して読み飛ばします。
    def _execute(self, operation: Operation) -> None:
        if execute_instruction(operation, self._state, self._bus, self._context):
            return
        pc = self._state.pc
        logger.warning("Unknown opcode %s at PC %#05x", operation.opcode_hex, pc)
        if self._on_unknown_opcode is not None:
            self._on_unknown_opcode(operation.word, pc)
        advance(self._state)

    # @intent:responsibility 命令実行後、タイマーが命令に同期する設定であれば両タイマーを1つ減らします。
    def _after_execute(self, operation: Operation) -> None:
        if self._couple_timers:
            timers.tick_timers(self._state)

    # @intent:responsibility 両タイマーを1回減算します。60Hzなど独立したクロックで駆動するホスト向けです。
    def tick_timers(self) -> None:
        timers.tick_timers(self._state)

    @property
    def couple_timers(self) -> bool:
        return self._couple_timers

    @property
    def rng(self) -> random.Random:
        return self._context.rng

    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer
        })
        return registers

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{index:X}", 8) for index in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Index/Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    # @intent:responsibility フラグ表示用に、VFが立っているか（キャリー・非ボロー・衝突）を返します。
    def get_flag_state(self) -> Dict[str, bool]:
        return {"VF": self._state.vf != 0}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
