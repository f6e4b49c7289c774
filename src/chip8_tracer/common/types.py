"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import Callable, List, NamedTuple

# @intent:data_structure 未知のオペコードを検出した際に呼び出されるコールバックの型。
# 引数は (命令ワード, 命令のアドレス) です。
UnknownOpcodeHandler = Callable[[int, int], None]

# @intent:data_structure 単一のレジスタの表示定義。インスペクタが動的にフィールドを生成するために使用される。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure レジスタグループの表示定義。関連するレジスタ（例: "General", "Timers"）をまとめる。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
