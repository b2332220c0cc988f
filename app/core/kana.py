"""Hiragana/katakana folding used to make name search script-insensitive."""
import re

_KANA_OFFSET = 0x60
_HIRAGANA = re.compile("[\u3041-\u3096]")
_KATAKANA = re.compile("[\u30a1-\u30f6]")

def to_katakana(text: str) -> str:
    return _HIRAGANA.sub(lambda m: chr(ord(m.group(0)) + _KANA_OFFSET), text)

def to_hiragana(text: str) -> str:
    return _KATAKANA.sub(lambda m: chr(ord(m.group(0)) - _KANA_OFFSET), text)
