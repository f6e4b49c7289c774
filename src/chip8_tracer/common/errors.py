"""
例外クラスの定義。

ホストへ伝播すべき失敗（ROMサイズ超過、スタック破綻、設定不備）を表します。
未知のオペコードは例外ではなく、ログとコールバックで通知されます。
"""

# @intent:responsibility このパッケージが送出する全ての例外の基底クラス。
class Chip8Error(Exception):
    pass

# @intent:responsibility プログラム領域に収まらないROMのロードを表します。
# @intent:rationale ValueErrorを継承し、入力値の不正として扱えるようにします。
class OversizeRomError(Chip8Error, ValueError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"ROM too large: {size} bytes (max {limit})")
        self.size = size
        self.limit = limit

# @intent:responsibility サブルーチンスタックの破綻を表す基底クラス。
class StackFault(Chip8Error):
    pass

class StackOverflowError(StackFault):
    """CALLのネストがスタック深さを超えた。"""

class StackUnderflowError(StackFault):
    """空のスタックに対してRETが実行された。"""

# @intent:responsibility 設定ファイルの内容の不備を表します。
class ConfigError(Chip8Error, ValueError):
    pass
