# chip8_tracer/debugger/debugger.py
"""
デバッガモジュール。

コアエンジンの実行を制御し、ユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。実行履歴を保持し、ステップバックもサポートします。
"""
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Dict, List, Optional

from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import Snapshot, BusAccessType
from chip8_tracer.core.state import CpuState

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10000

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した
    UNKNOWN_OPCODE = "UNKNOWN_OPCODE"   # 未知の命令を実行した

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    register_nameはCPUのget_register_map()のキー（"V0", "I", "DT"など）です。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用
    enabled: bool = True

# @intent:responsibility コアエンジンの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    CPUの実行を制御し、ブレークポイントの管理を行うクラス。
    """
    def __init__(self, cpu: AbstractCpu, history_limit: int = DEFAULT_HISTORY_LIMIT):
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_registers: Dict[str, int] = cpu.get_register_map()
        self._last_snapshot: Optional[Snapshot] = None
        # @intent:responsibility 実行履歴を保持します。上限を超えると古いものから破棄されます。
        self._history: Deque[Snapshot] = deque(maxlen=history_limit)
        # @intent:responsibility 履歴が尽きた時に戻るための状態を保持します。
        self._initial_state: CpuState = cpu.get_state().copy()

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    @property
    def running(self) -> bool:
        return self._running

    # @intent:responsibility 指定されたPCにPC_MATCHブレークポイントがあるかを返します。
    def _pc_breakpoint_at(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    def _check_other_breakpoints(self, snapshot: Snapshot, registers: Dict[str, int],
                                 previous_registers: Dict[str, int]) -> bool:
        """
        Snapshotに基づいてPC_MATCH以外のブレークポイントをチェックします。
        """
        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.READ and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.WRITE and access.address == bp.address:
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name in registers and registers[bp.register_name] == bp.value:
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                name = bp.register_name
                if name in registers and name in previous_registers:
                    if registers[name] != previous_registers[name]:
                        return True
            elif bp.condition_type == BreakpointConditionType.UNKNOWN_OPCODE:
                if snapshot.operation.tag is None:
                    return True
        return False

    # @intent:responsibility CPUを1命令分実行し、その結果のSnapshotを履歴に追加して返します。
    def step_instruction(self) -> Snapshot:
        self._previous_registers = self._cpu.get_register_map()
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot
        self._history.append(snapshot)
        return snapshot

    # @intent:responsibility 実行履歴を1つ戻り、CPUとメモリの状態を復元します。
    # @intent:return 復元後の最新Snapshot。履歴が尽きて初期状態に戻った場合はNone。
    def step_back(self) -> Optional[Snapshot]:
        if not self._history:
            return None

        snapshot_to_revert = self._history.pop()

        # メモリ書き込みを逆順に取り消す (ROM領域への無視された書き込みも同じ値で書き戻るだけ)
        bus = self._cpu.bus
        for access in reversed(snapshot_to_revert.bus_activity):
            if access.access_type == BusAccessType.WRITE and access.previous_data is not None:
                bus.load(access.address, access.previous_data)

        if self._history:
            previous_snapshot = self._history[-1]
            self._cpu.restore_state(previous_snapshot.state)
            self._last_snapshot = previous_snapshot
            return previous_snapshot

        # @intent:rationale 履歴上限で古いSnapshotが破棄されている場合、ここで戻る状態は
        #                  デバッガ生成時の状態であり、メモリとは一致しない可能性があります。
        self._cpu.restore_state(self._initial_state)
        self._last_snapshot = None
        return None

    # @intent:responsibility ブレークポイントにヒットするか、stop()が呼ばれるか、max_stepsに達するまで実行します。
    # @intent:return 実行したステップ数。
    def run(self, max_steps: int) -> int:
        """
        CHIP-8にはHALT命令がないため、max_stepsによる上限が必須です。
        開始位置にあるPC_MATCHブレークポイントでは停止せず、少なくとも1命令を実行します。
        """
        self._running = True
        steps = 0

        while self._running and steps < max_steps:
            current_pc = self._cpu.get_state().pc
            if steps > 0 and self._pc_breakpoint_at(current_pc):
                self._running = False
                logger.info("Breakpoint hit at PC: %#06x", current_pc)
                break

            snapshot = self.step_instruction()
            steps += 1

            if self._check_other_breakpoints(snapshot, self._cpu.get_register_map(), self._previous_registers):
                self._running = False
                logger.info("Breakpoint hit at PC: %#06x", snapshot.state.pc)

        self._running = False
        return steps

    # @intent:responsibility CPUの実行を逆方向（過去）へ連続的に戻します。
    def run_back(self) -> None:
        self._running = True

        while self._running:
            registers_before = self._cpu.get_register_map()
            snapshot = self.step_back()

            if snapshot is None:
                self._running = False
                logger.info("Reached start of history.")
                return

            current_pc = snapshot.state.pc
            if self._pc_breakpoint_at(current_pc):
                self._running = False
                logger.info("Reverse breakpoint hit at PC: %#06x", current_pc)
                return

            # 戻った時点のSnapshot（＝その命令実行直後の状態）で評価する
            if self._check_other_breakpoints(snapshot, self._cpu.get_register_map(), registers_before):
                self._running = False
                logger.info("Reverse breakpoint hit at PC: %#06x", current_pc)

    def stop(self) -> None:
        self._running = False
