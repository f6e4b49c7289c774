import random

from chip8_tracer.common.errors import ConfigError
from chip8_tracer.arch.chip8.machine import Machine
from chip8_tracer.arch.chip8.state import ADDRESS_MASK, REGISTER_COUNT
from chip8_tracer.debugger.debugger import Debugger
from .models import MachineConfig, CpuInitialState

# @intent:responsibility 設定（Config）に基づいてMachineを生成し、初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: MachineConfig) -> Machine:
        rng = random.Random(config.random_seed) if config.random_seed is not None else None
        machine = Machine(rng=rng, couple_timers=config.couple_timers)
        self.apply_initial_state(machine, config.initial_state)
        return machine

    # @intent:responsibility Machineに接続したDebuggerを、Configの履歴保持数で生成します。
    def build_debugger(self, machine: Machine, config: MachineConfig) -> Debugger:
        return Debugger(machine.cpu, history_limit=config.history_limit)

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    # @intent:pre-condition レジスタ名は "v0" から "vf" のいずれかである必要があります。
    def apply_initial_state(self, machine: Machine, config_state: CpuInitialState) -> None:
        """
        CPUをリセットし、Configから指定されたPC、I、汎用レジスタを設定します。
        """
        machine.cpu.reset()
        state = machine.state

        state.pc = config_state.pc & ADDRESS_MASK
        state.i = config_state.i & 0xFFFF
        for reg_name, value in config_state.registers.items():
            index = self._register_index(reg_name)
            state.v[index] = value & 0xFF

    def _register_index(self, name: str) -> int:
        if len(name) == 2 and name[0] == "v":
            try:
                index = int(name[1], 16)
            except ValueError:
                index = -1
            if 0 <= index < REGISTER_COUNT:
                return index
        raise ConfigError(f"Unknown register: {name}")
