# tests/core/test_snapshot.py
"""
chip8_tracer.core.snapshotモジュールの単体テスト。
"""
import pytest
from chip8_tracer.core.state import CpuState
from chip8_tracer.core.snapshot import (
    BusAccessType,
    BusAccess,
    Operation,
    Metadata,
    Snapshot,
)

# @intent:test_suite 命令とバスの状態を記録する不変スナップショットデータ構造の検証。

class TestBusAccess:
    # @intent:test_case_immutability BusAccessが不変であることを検証します。
    def test_bus_access_immutability(self):
        access = BusAccess(address=0x200, data=0xAA, access_type=BusAccessType.READ)
        assert access.previous_data is None
        with pytest.raises(AttributeError):
            access.address = 0x300

class TestOperation:
    # @intent:test_case_defaults CHIP-8の命令長(2)とタグなしがデフォルトであることを検証します。
    def test_operation_defaults(self):
        op = Operation(opcode_hex="00E0", mnemonic="CLS")
        assert op.operands == []
        assert op.length == 2
        assert op.tag is None
        assert op.word == 0

    def test_operation_immutability(self):
        op = Operation(opcode_hex="1200", mnemonic="JP", operands=["$200"])
        with pytest.raises(AttributeError):
            op.mnemonic = "CALL"

class TestMetadata:
    def test_metadata_init_no_symbol(self):
        meta = Metadata(cycle_count=100)
        assert meta.cycle_count == 100
        assert meta.symbol_info is None

class TestSnapshot:
    @pytest.fixture
    def sample_data(self):
        state = CpuState(pc=0x200, sp=0)
        operation = Operation(opcode_hex="1200", mnemonic="JP", operands=["$200"])
        bus_activity = [BusAccess(address=0x200, data=0x12, access_type=BusAccessType.READ)]
        metadata = Metadata(cycle_count=1, symbol_info="JP $200")
        return state, operation, bus_activity, metadata

    def test_snapshot_immutability(self, sample_data):
        state, operation, bus_activity, metadata = sample_data
        snapshot = Snapshot(state=state, operation=operation, bus_activity=bus_activity, metadata=metadata)

        with pytest.raises(AttributeError):
            snapshot.state = CpuState(pc=0x300)
        with pytest.raises(AttributeError):
            snapshot.bus_activity = []

    # @intent:test_case_default_factory_bus_activity 独立したリストインスタンスが生成されることを検証します。
    def test_snapshot_default_factory_bus_activity(self):
        state = CpuState()
        operation = Operation(opcode_hex="00E0", mnemonic="CLS")
        metadata = Metadata(cycle_count=1)

        snapshot1 = Snapshot(state=state, operation=operation, metadata=metadata)
        snapshot2 = Snapshot(state=state, operation=operation, metadata=metadata)
        assert snapshot1.bus_activity is not snapshot2.bus_activity
