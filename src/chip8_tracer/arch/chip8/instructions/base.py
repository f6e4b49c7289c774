"""
CHIP-8命令実装用の共通ユーティリティ。
"""
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.state import Chip8CpuState, ADDRESS_MASK, INSTRUCTION_LENGTH

# @intent:responsibility 命令テーブルの各エントリを識別するタグ。値は (ニーモニック, 命令パターン) です。
class OpTag(Enum):
    CLS = ("CLS", "00E0")
    RET = ("RET", "00EE")
    JP = ("JP", "1nnn")
    CALL = ("CALL", "2nnn")
    SE_BYTE = ("SE", "3xkk")
    SNE_BYTE = ("SNE", "4xkk")
    SE_REG = ("SE", "5xy0")
    LD_BYTE = ("LD", "6xkk")
    ADD_BYTE = ("ADD", "7xkk")
    LD_REG = ("LD", "8xy0")
    OR = ("OR", "8xy1")
    AND = ("AND", "8xy2")
    XOR = ("XOR", "8xy3")
    ADD_REG = ("ADD", "8xy4")
    SUB = ("SUB", "8xy5")
    SHR = ("SHR", "8xy6")
    SUBN = ("SUBN", "8xy7")
    SHL = ("SHL", "8xyE")
    SNE_REG = ("SNE", "9xy0")
    LD_I = ("LD", "Annn")
    JP_V0 = ("JP", "Bnnn")
    RND = ("RND", "Cxkk")
    DRW = ("DRW", "Dxyn")
    SKP = ("SKP", "Ex9E")
    SKNP = ("SKNP", "ExA1")
    LD_VX_DT = ("LD", "Fx07")
    LD_VX_K = ("LD", "Fx0A")
    LD_DT_VX = ("LD", "Fx15")
    LD_ST_VX = ("LD", "Fx18")
    ADD_I_VX = ("ADD", "Fx1E")
    LD_F_VX = ("LD", "Fx29")
    LD_B_VX = ("LD", "Fx33")
    LD_MEM_VX = ("LD", "Fx55")
    LD_VX_MEM = ("LD", "Fx65")

    @property
    def mnemonic(self) -> str:
        return self.value[0]

    @property
    def pattern(self) -> str:
        return self.value[1]

# @intent:data_structure 命令ワードから切り出した、互いに重なり合う5つのフィールド。
class Fields(NamedTuple):
    family: int  # 上位ニブル
    nnn: int     # 下位12bit (アドレス)
    n: int       # 下位ニブル
    x: int       # bit 8-11 (レジスタ番号X)
    y: int       # bit 4-7 (レジスタ番号Y)
    kk: int      # 下位バイト (即値)

# @intent:utility_function 命令ワードを各フィールドに分解します。
def split_fields(word: int) -> Fields:
    return Fields(
        family=(word >> 12) & 0xF,
        nnn=word & 0x0FFF,
        n=word & 0x000F,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        kk=word & 0x00FF,
    )

def fields_of(op: Operation) -> Fields:
    return split_fields(op.word)

# @intent:responsibility 命令ハンドラが参照するレジスタ・メモリ以外の資源を保持します。
@dataclass
class ExecutionContext:
    rng: random.Random = field(default_factory=random.Random)

# @intent:utility_function PCを指定バイト数進めます。アドレス空間は12bitでラップします。
def advance(state: Chip8CpuState, count: int = INSTRUCTION_LENGTH) -> None:
    state.pc = (state.pc + count) & ADDRESS_MASK

# @intent:utility_function 条件が成立すれば次の命令をスキップ (+4)、そうでなければ次へ (+2) 進めます。
def skip_if(state: Chip8CpuState, condition: bool) -> None:
    advance(state, 2 * INSTRUCTION_LENGTH if condition else INSTRUCTION_LENGTH)

def jump_to(state: Chip8CpuState, address: int) -> None:
    state.pc = address & ADDRESS_MASK
