import yaml
from typing import Any, Dict

from chip8_tracer.common.errors import ConfigError
from .models import MachineConfig, CpuInitialState

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self.parse(data or {})

    def parse(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping, got {type(data).__name__}")

        seed = data.get("random_seed")
        history_limit = self._parse_int(data.get("history_limit", 10000))
        if history_limit <= 0:
            raise ConfigError(f"history_limit must be positive: {history_limit}")

        # Parse Initial State
        initial_state_data = data.get("initial_state") or {}
        registers = {
            str(name).lower(): self._parse_int(value)
            for name, value in (initial_state_data.get("registers") or {}).items()
        }
        initial_state = CpuInitialState(
            pc=self._parse_int(initial_state_data.get("pc", CpuInitialState.pc)),
            i=self._parse_int(initial_state_data.get("i", 0)),
            registers=registers,
        )

        return MachineConfig(
            random_seed=self._parse_int(seed) if seed is not None else None,
            couple_timers=self._parse_bool(data.get("couple_timers", True)),
            history_limit=history_limit,
            initial_state=initial_state,
        )

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ConfigError(f"Invalid integer format: {value}")

    # YAMLの真偽値のみを受け付けます。"false" のような文字列はエラーになります。
    def _parse_bool(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        raise ConfigError(f"Invalid boolean format: {value!r}")
