# tests/core/test_cpu.py
"""
chip8_tracer.core.cpuモジュールの単体テスト。
"""
import pytest
from typing import Dict, List, Tuple

from chip8_tracer.core.state import CpuState
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import Snapshot, Operation
from chip8_tracer.transport.bus import Bus, BusAccessType, RAM
from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo

# @intent:test_suite CPUの状態管理と抽象CPUのTemplate Methodの動作を検証します。

class StubCpu(AbstractCpu):
    """1バイト命令を読み、0x0020に0xFFを書き込むだけのテスト用CPU。"""
    def __init__(self, bus: Bus, initial_pc: int = 0x0000, initial_sp: int = 0x0000):
        self._initial_pc = initial_pc
        self._initial_sp = initial_sp
        super().__init__(bus)
        self.after_execute_calls = 0

    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=self._initial_pc, sp=self._initial_sp)

    def _fetch(self) -> int:
        return self._bus.read(self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        if opcode == 0x00:
            return Operation(opcode_hex="00", mnemonic="NOP", length=1)
        return Operation(opcode_hex=f"{opcode:02X}", mnemonic="UNKNOWN", length=1)

    def _execute(self, operation: Operation) -> None:
        self._bus.write(0x0020, 0xFF)

    def _after_execute(self, operation: Operation) -> None:
        self.after_execute_calls += 1

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc, "SP": self._state.sp}

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [RegisterLayoutInfo("Test Group", [RegisterInfo("PC", 16), RegisterInfo("SP", 16)])]

    def get_flag_state(self) -> Dict[str, bool]:
        return {"Z": False}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return [(start_addr + i, "00", "NOP") for i in range(length)]

class TestCpuState:
    def test_cpu_state_init_default(self):
        state = CpuState()
        assert state.pc == 0x0000
        assert state.sp == 0x0000

    # @intent:test_case_copy copyが独立したインスタンスを返すことを検証します。
    def test_cpu_state_copy_is_independent(self):
        state = CpuState(pc=0x1234)
        clone = state.copy()
        clone.pc = 0x0000
        assert state.pc == 0x1234
        assert clone == CpuState(pc=0x0000)

class TestAbstractCpu:
    @pytest.fixture
    def setup_cpu(self):
        bus = Bus()
        ram = RAM(256)
        bus.register_device(0x0000, 0x00FF, ram)
        cpu = StubCpu(bus, initial_pc=0x0010, initial_sp=0x00F0)
        return cpu, bus, ram

    def test_abstract_cpu_reset(self, setup_cpu):
        cpu, _, _ = setup_cpu
        cpu.get_state().pc = 0xAAAA
        cpu.reset()
        assert cpu.get_state().pc == 0x0010
        assert cpu.get_state().sp == 0x00F0

    # @intent:test_case_step フェッチ→デコード→PC更新→実行→後処理→Snapshot生成の流れを検証します。
    def test_abstract_cpu_step(self, setup_cpu):
        cpu, bus, _ = setup_cpu
        bus.write(0x0010, 0x12)
        bus.get_and_clear_activity_log()

        snapshot = cpu.step()

        assert cpu.get_state().pc == 0x0011
        assert cpu.after_execute_calls == 1
        assert isinstance(snapshot, Snapshot)
        assert snapshot.operation.mnemonic == "UNKNOWN"
        assert snapshot.metadata.cycle_count == 1
        assert snapshot.metadata.symbol_info == "UNKNOWN"

        assert len(snapshot.bus_activity) == 2
        assert snapshot.bus_activity[0].access_type == BusAccessType.READ
        assert snapshot.bus_activity[0].address == 0x0010
        assert snapshot.bus_activity[1].access_type == BusAccessType.WRITE
        assert snapshot.bus_activity[1].address == 0x0020

    # @intent:test_case_snapshot_copy Snapshotの状態が後続のstepで変化しないことを検証します。
    def test_snapshot_state_is_a_copy(self, setup_cpu):
        cpu, _, _ = setup_cpu
        first = cpu.step()
        cpu.step()
        assert first.state.pc == 0x0011
        assert cpu.get_state().pc == 0x0012

    def test_restore_state(self, setup_cpu):
        cpu, _, _ = setup_cpu
        saved = cpu.step().state
        cpu.step()
        cpu.restore_state(saved)
        assert cpu.get_state().pc == 0x0011
        assert cpu.get_state() is not saved

    def test_inspector_api(self, setup_cpu):
        cpu, _, _ = setup_cpu
        assert cpu.get_register_map()["PC"] == 0x0010
        assert cpu.get_register_layout()[0].group_name == "Test Group"
        assert cpu.get_flag_state()["Z"] is False
        assert cpu.disassemble(0x0000, 2)[0] == (0x0000, "00", "NOP")
