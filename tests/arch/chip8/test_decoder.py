# tests/arch/chip8/test_decoder.py
"""
命令デコーダ（decode_opcode / resolve_tag）の単体テスト。
"""
import pytest

from chip8_tracer.arch.chip8.instructions import OpTag, decode_opcode
from chip8_tracer.arch.chip8.instructions.maps import EXECUTE_MAP, OPERAND_FORMATS, resolve_tag

# @intent:test_suite 命令パターンからタグへの解決と、表示用のOperation生成を検証します。

def _word_for(pattern: str) -> int:
    text = pattern.replace("nnn", "234").replace("kk", "34")
    text = text.replace("x", "1").replace("y", "2").replace("n", "3")
    return int(text, 16)

@pytest.mark.parametrize("tag", list(OpTag), ids=lambda t: t.name)
def test_every_pattern_resolves_to_its_tag(tag):
    assert resolve_tag(_word_for(tag.pattern)) is tag

@pytest.mark.parametrize("tag", list(OpTag), ids=lambda t: t.name)
def test_every_tag_has_handler_and_formatter(tag):
    assert tag in EXECUTE_MAP
    assert tag in OPERAND_FORMATS

@pytest.mark.parametrize("word", [0x0000, 0x0123, 0x00E1, 0x800F, 0xE000, 0xE19F, 0xF0FF, 0xF100])
def test_unknown_words(word):
    op = decode_opcode(word)
    assert op.tag is None
    assert op.mnemonic == "UNKNOWN"
    assert op.operands == [f"${word:04X}"]
    assert op.opcode_hex == f"{word:04X}"

# @intent:test_case_low_nibble 5xy*/9xy*は下位ニブルを無視して解決されることを検証します。
def test_register_compare_ignores_low_nibble():
    assert resolve_tag(0x5121) is OpTag.SE_REG
    assert resolve_tag(0x912F) is OpTag.SNE_REG

@pytest.mark.parametrize("word, text", [
    (0x00E0, "CLS"),
    (0x00EE, "RET"),
    (0x1ABC, "JP $ABC"),
    (0x2400, "CALL $400"),
    (0x3A05, "SE VA, #$05"),
    (0x8124, "ADD V1, V2"),
    (0x8106, "SHR V1"),
    (0xA123, "LD I, $123"),
    (0xB300, "JP V0, $300"),
    (0xD125, "DRW V1, V2, 5"),
    (0xE39E, "SKP V3"),
    (0xF40A, "LD V4, K"),
    (0xF533, "LD B, V5"),
    (0xF655, "LD [I], V6"),
    (0xF765, "LD V7, [I]"),
])
def test_operation_text(word, text):
    op = decode_opcode(word)
    rendered = op.mnemonic
    if op.operands:
        rendered += " " + ", ".join(op.operands)
    assert rendered == text

def test_operation_fields():
    op = decode_opcode(0xD125)
    assert op.word == 0xD125
    assert op.operand_bytes == [0xD1, 0x25]
    assert op.length == 2
    assert op.tag is OpTag.DRW
