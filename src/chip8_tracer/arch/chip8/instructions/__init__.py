"""
CHIP-8命令セット実装パッケージ。
"""
from chip8_tracer.transport.bus import Bus
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.state import Chip8CpuState, INSTRUCTION_LENGTH
from .base import ExecutionContext, OpTag, split_fields
from .maps import EXECUTE_MAP, OPERAND_FORMATS, resolve_tag

# @intent:responsibility 16bitの命令ワードをデコードし、Operationオブジェクトを返します。
def decode_opcode(word: int) -> Operation:
    """
    未知の命令は mnemonic="UNKNOWN", tag=None のOperationになります。
    """
    raw = [(word >> 8) & 0xFF, word & 0xFF]
    tag = resolve_tag(word)
    if tag is None:
        return Operation(opcode_hex=f"{word:04X}", mnemonic="UNKNOWN", operands=[f"${word:04X}"],
                         operand_bytes=raw, length=INSTRUCTION_LENGTH, word=word)
    operands = OPERAND_FORMATS[tag](split_fields(word))
    return Operation(opcode_hex=f"{word:04X}", mnemonic=tag.mnemonic, operands=operands,
                     operand_bytes=raw, length=INSTRUCTION_LENGTH, tag=tag, word=word)

# @intent:responsibility デコードされた命令を実行します。
# @intent:return 実行関数が見つかった場合True。未知の命令ではFalseを返し、状態は変更しません。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus, ctx: ExecutionContext) -> bool:
    executor = EXECUTE_MAP.get(operation.tag)
    if executor is None:
        return False
    executor(state, bus, ctx, operation)
    return True

__all__ = ["decode_opcode", "execute_instruction", "ExecutionContext", "OpTag"]
