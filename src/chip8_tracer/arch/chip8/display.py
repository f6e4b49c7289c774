"""
ディスプレイ / スプライトエンジン。

64x32のモノクロフレームバッファに対して、XOR合成と衝突検出を伴うスプライト描画を行います。
ピクセルは行優先 (index = y * 64 + x) で格納され、値は常に0か1です。
"""
from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.state import Chip8CpuState, SCREEN_WIDTH, SCREEN_HEIGHT

SPRITE_WIDTH = 8

# @intent:responsibility フレームバッファを全消去し、再描画ラッチを立てます。
def clear_screen(state: Chip8CpuState) -> None:
    state.framebuffer[:] = bytes(len(state.framebuffer))
    state.redraw_pending = True

# @intent:responsibility レジスタVx, Vyが示す座標に、Iから読んだheight行のスプライトを描画します。
# @intent:post-condition VFは衝突があれば1、なければ0。redraw_pendingは常にTrue。
def draw_sprite(state: Chip8CpuState, bus: Bus, x_reg: int, y_reg: int, height: int) -> None:
    """
    原点座標は描画開始時に画面サイズでラップし、各ピクセルの配置も個別にラップします。
    そのため画面端をまたぐスプライトは反対側の端に続けて描画されます。
    スプライトの0のビットはフレームバッファに触れません。
    """
    # 衝突フラグは座標の読み出しより先にリセットする (Vx/VyがVFの場合も同様)
    state.vf = 0

    x_origin = state.v[x_reg] % SCREEN_WIDTH
    y_origin = state.v[y_reg] % SCREEN_HEIGHT

    for row in range(height):
        sprite_byte = bus.read(state.i + row)
        screen_y = (y_origin + row) % SCREEN_HEIGHT
        for col in range(SPRITE_WIDTH):
            if not sprite_byte & (0x80 >> col):
                continue
            screen_x = (x_origin + col) % SCREEN_WIDTH
            index = screen_y * SCREEN_WIDTH + screen_x
            if state.framebuffer[index] == 1:
                state.vf = 1
            state.framebuffer[index] ^= 1

    state.redraw_pending = True

# @intent:responsibility 描画用にフレームバッファの読み取り専用コピーを返します。
def get_framebuffer(state: Chip8CpuState) -> bytes:
    return bytes(state.framebuffer)

# @intent:responsibility 前回の呼び出し以降に描画が行われたかを返し、ラッチをクリアします。
def consume_redraw(state: Chip8CpuState) -> bool:
    pending = state.redraw_pending
    state.redraw_pending = False
    return pending

def get_pixel(state: Chip8CpuState, x: int, y: int) -> int:
    return state.framebuffer[(y % SCREEN_HEIGHT) * SCREEN_WIDTH + (x % SCREEN_WIDTH)]
