"""
CHIP-8 Disassembler

メモリ上のバイナリデータを2バイト単位で解析し、ニーモニックに変換します。
Instruction Layerのデコードロジックを再利用し、バスアクセスログを汚さないようにpeekで読み込みます。
"""
from typing import List, Tuple

from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import MEMORY_SIZE, INSTRUCTION_LENGTH
from chip8_tracer.arch.chip8.instructions import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを逆アセンブルします。

    Returns:
        List of (address, hex_word, mnemonic) tuples.
    """
    result = []
    end_addr = min(start_addr + length, MEMORY_SIZE)

    for address in range(start_addr, end_addr, INSTRUCTION_LENGTH):
        if address + 1 >= MEMORY_SIZE:
            break
        word = (bus.peek(address) << 8) | bus.peek(address + 1)
        operation = decode_opcode(word)

        text = operation.mnemonic
        if operation.operands:
            text += " " + ", ".join(operation.operands)
        result.append((address, operation.opcode_hex, text))

    return result
