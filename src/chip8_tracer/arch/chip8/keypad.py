"""
キーパッドレジストリ。

16個の論理キーの押下状態を保持します。書き込むのはホストのみで、
読み出すのは命令デコーダのみです。
"""
from typing import Optional

from chip8_tracer.arch.chip8.state import Chip8CpuState, KEY_COUNT

# @intent:responsibility キーの押下状態を設定します。
# @intent:rationale 範囲外のインデックスはホスト側のキーマッピングに寛容であるため、エラーにせず無視します。
def set_key(state: Chip8CpuState, index: int, pressed: bool) -> None:
    if 0 <= index < KEY_COUNT:
        state.keys[index] = bool(pressed)

# @intent:responsibility キーが押されているかを返します。範囲外のインデックスは「押されていない」とみなします。
def is_pressed(state: Chip8CpuState, index: int) -> bool:
    return 0 <= index < KEY_COUNT and state.keys[index]

# @intent:responsibility 押されているキーのうち最小のインデックスを返します。なければNone。
def first_pressed(state: Chip8CpuState) -> Optional[int]:
    for index, pressed in enumerate(state.keys):
        if pressed:
            return index
    return None
