# chip8_tracer/loader/loader.py
"""
ROMローダーモジュール。

ROMのバイト列をプログラム領域 (0x200-) にコピーします。
ROMの内容は検証せず、サイズのみを検証します。
"""
from typing import Iterable, Union

from chip8_tracer.common.errors import OversizeRomError
from chip8_tracer.transport.bus import Bus

RomData = Union[bytes, bytearray, memoryview, Iterable[int]]

class RomLoader:
    """
    生のバイナリROMをバスにロードするローダー。
    """
    def __init__(self, start_address: int, capacity: int):
        self._start_address = start_address
        self._capacity = capacity

    # @intent:responsibility ROMをプログラム領域へコピーします。
    # @intent:pre-condition len(data) <= capacity。超過した場合はメモリに一切触れずにOversizeRomErrorを送出します。
    def load(self, data: RomData, bus: Bus) -> int:
        """
        ロードしたバイト数を返します。8bitに収まらない値が含まれる場合はValueErrorになります。
        """
        payload = bytes(data)
        if len(payload) > self._capacity:
            raise OversizeRomError(len(payload), self._capacity)

        for offset, value in enumerate(payload):
            bus.load(self._start_address + offset, value)
        return len(payload)
