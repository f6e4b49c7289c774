"""
命令ワードと命令実装のマッピング定義。

上位ニブルで命令ファミリーを選び、0/8/E/F の各ファミリーについては
下位ワード・下位ニブル・下位バイトによる二次テーブルで命令を確定します。
"""
from typing import Callable, Dict, List, Optional, Tuple

from . import alu
from . import control
from . import graphics
from . import load
from .base import Fields, OpTag, split_fields

# @intent:map 上位ニブルだけで命令が確定するファミリー。
PRIMARY_MAP: Dict[int, OpTag] = {
    0x1: OpTag.JP,
    0x2: OpTag.CALL,
    0x3: OpTag.SE_BYTE,
    0x4: OpTag.SNE_BYTE,
    0x5: OpTag.SE_REG,
    0x6: OpTag.LD_BYTE,
    0x7: OpTag.ADD_BYTE,
    0x9: OpTag.SNE_REG,
    0xA: OpTag.LD_I,
    0xB: OpTag.JP_V0,
    0xC: OpTag.RND,
    0xD: OpTag.DRW,
}

# @intent:map 0ファミリー: 命令ワード全体で識別します。0nnn (SYS) は未サポートです。
SYSTEM_MAP: Dict[int, OpTag] = {
    0x00E0: OpTag.CLS,
    0x00EE: OpTag.RET,
}

# @intent:map 8ファミリー: 下位ニブルで識別します。
ALU_MAP: Dict[int, OpTag] = {
    0x0: OpTag.LD_REG,
    0x1: OpTag.OR,
    0x2: OpTag.AND,
    0x3: OpTag.XOR,
    0x4: OpTag.ADD_REG,
    0x5: OpTag.SUB,
    0x6: OpTag.SHR,
    0x7: OpTag.SUBN,
    0xE: OpTag.SHL,
}

# @intent:map Eファミリー: 下位バイトで識別します。
KEY_MAP: Dict[int, OpTag] = {
    0x9E: OpTag.SKP,
    0xA1: OpTag.SKNP,
}

# @intent:map Fファミリー: 下位バイトで識別します。
MISC_MAP: Dict[int, OpTag] = {
    0x07: OpTag.LD_VX_DT,
    0x0A: OpTag.LD_VX_K,
    0x15: OpTag.LD_DT_VX,
    0x18: OpTag.LD_ST_VX,
    0x1E: OpTag.ADD_I_VX,
    0x29: OpTag.LD_F_VX,
    0x33: OpTag.LD_B_VX,
    0x55: OpTag.LD_MEM_VX,
    0x65: OpTag.LD_VX_MEM,
}

# @intent:map 二次テーブルを持つファミリーと、その検索キーの取り出し方。
SECONDARY_MAPS: Dict[int, Tuple[Callable[[int, Fields], int], Dict[int, OpTag]]] = {
    0x0: (lambda word, f: word, SYSTEM_MAP),
    0x8: (lambda word, f: f.n, ALU_MAP),
    0xE: (lambda word, f: f.kk, KEY_MAP),
    0xF: (lambda word, f: f.kk, MISC_MAP),
}

# @intent:responsibility 命令ワードを命令タグに解決します。未知の命令ではNoneを返します。
def resolve_tag(word: int) -> Optional[OpTag]:
    f = split_fields(word)
    secondary = SECONDARY_MAPS.get(f.family)
    if secondary:
        select, table = secondary
        return table.get(select(word, f))
    return PRIMARY_MAP.get(f.family)

def _vx(f: Fields) -> str:
    return f"V{f.x:X}"

def _vy(f: Fields) -> str:
    return f"V{f.y:X}"

def _addr(f: Fields) -> str:
    return f"${f.nnn:03X}"

def _byte(f: Fields) -> str:
    return f"#${f.kk:02X}"

# @intent:map 命令タグから表示用オペランドを生成する関数へのマッピング。
OPERAND_FORMATS: Dict[OpTag, Callable[[Fields], List[str]]] = {
    OpTag.CLS: lambda f: [],
    OpTag.RET: lambda f: [],
    OpTag.JP: lambda f: [_addr(f)],
    OpTag.CALL: lambda f: [_addr(f)],
    OpTag.SE_BYTE: lambda f: [_vx(f), _byte(f)],
    OpTag.SNE_BYTE: lambda f: [_vx(f), _byte(f)],
    OpTag.SE_REG: lambda f: [_vx(f), _vy(f)],
    OpTag.LD_BYTE: lambda f: [_vx(f), _byte(f)],
    OpTag.ADD_BYTE: lambda f: [_vx(f), _byte(f)],
    OpTag.LD_REG: lambda f: [_vx(f), _vy(f)],
    OpTag.OR: lambda f: [_vx(f), _vy(f)],
    OpTag.AND: lambda f: [_vx(f), _vy(f)],
    OpTag.XOR: lambda f: [_vx(f), _vy(f)],
    OpTag.ADD_REG: lambda f: [_vx(f), _vy(f)],
    OpTag.SUB: lambda f: [_vx(f), _vy(f)],
    OpTag.SHR: lambda f: [_vx(f)],
    OpTag.SUBN: lambda f: [_vx(f), _vy(f)],
    OpTag.SHL: lambda f: [_vx(f)],
    OpTag.SNE_REG: lambda f: [_vx(f), _vy(f)],
    OpTag.LD_I: lambda f: ["I", _addr(f)],
    OpTag.JP_V0: lambda f: ["V0", _addr(f)],
    OpTag.RND: lambda f: [_vx(f), _byte(f)],
    OpTag.DRW: lambda f: [_vx(f), _vy(f), str(f.n)],
    OpTag.SKP: lambda f: [_vx(f)],
    OpTag.SKNP: lambda f: [_vx(f)],
    OpTag.LD_VX_DT: lambda f: [_vx(f), "DT"],
    OpTag.LD_VX_K: lambda f: [_vx(f), "K"],
    OpTag.LD_DT_VX: lambda f: ["DT", _vx(f)],
    OpTag.LD_ST_VX: lambda f: ["ST", _vx(f)],
    OpTag.ADD_I_VX: lambda f: ["I", _vx(f)],
    OpTag.LD_F_VX: lambda f: ["F", _vx(f)],
    OpTag.LD_B_VX: lambda f: ["B", _vx(f)],
    OpTag.LD_MEM_VX: lambda f: ["[I]", _vx(f)],
    OpTag.LD_VX_MEM: lambda f: [_vx(f), "[I]"],
}

# @intent:map 命令タグから実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Graphics
    OpTag.CLS: graphics.execute_cls,
    OpTag.DRW: graphics.execute_drw,

    # Control
    OpTag.RET: control.execute_ret,
    OpTag.JP: control.execute_jp,
    OpTag.CALL: control.execute_call,
    OpTag.SE_BYTE: control.execute_se_byte,
    OpTag.SNE_BYTE: control.execute_sne_byte,
    OpTag.SE_REG: control.execute_se_reg,
    OpTag.SNE_REG: control.execute_sne_reg,
    OpTag.JP_V0: control.execute_jp_v0,
    OpTag.SKP: control.execute_skp,
    OpTag.SKNP: control.execute_sknp,
    OpTag.LD_VX_K: control.execute_ld_vx_k,

    # ALU
    OpTag.ADD_BYTE: alu.execute_add_byte,
    OpTag.LD_REG: alu.execute_ld_reg,
    OpTag.OR: alu.execute_or,
    OpTag.AND: alu.execute_and,
    OpTag.XOR: alu.execute_xor,
    OpTag.ADD_REG: alu.execute_add_reg,
    OpTag.SUB: alu.execute_sub,
    OpTag.SHR: alu.execute_shr,
    OpTag.SUBN: alu.execute_subn,
    OpTag.SHL: alu.execute_shl,

    # Load/Store
    OpTag.LD_BYTE: load.execute_ld_byte,
    OpTag.LD_I: load.execute_ld_i,
    OpTag.RND: load.execute_rnd,
    OpTag.LD_VX_DT: load.execute_ld_vx_dt,
    OpTag.LD_DT_VX: load.execute_ld_dt_vx,
    OpTag.LD_ST_VX: load.execute_ld_st_vx,
    OpTag.ADD_I_VX: load.execute_add_i_vx,
    OpTag.LD_F_VX: load.execute_ld_f_vx,
    OpTag.LD_B_VX: load.execute_ld_b_vx,
    OpTag.LD_MEM_VX: load.execute_ld_mem_vx,
    OpTag.LD_VX_MEM: load.execute_ld_vx_mem,
}
