# Huff_Formats.py
"""
HuffTree formats module
Константы формата, переключатель заголовка и иерархия ошибок кодека.

Структура сжатого потока (биты, старшие первыми, без выравнивания внутри):
0..31     Magic (32 bits)              HUFF_NUMBER | HUFF_TREE | HUFF_COUNTS
32..      Header (variable)            дерево в прямом обходе или 256 счётчиков
...       Payload (variable)           коды Хаффмана исходных байт
...       Terminator (variable)        код PSEUDO_EOF, ровно один раз

Примечания:
- Узел дерева в заголовке: 0 + левое + правое для внутреннего узла,
  1 + 9-битный символ для листа.
- Последний байт дополняется нулями при закрытии битового потока.
"""
# =================================================================================================================

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

# =================================================================================================================

BITS_PER_WORD           = 8
BITS_PER_INT            = 32
ALPH_SIZE               = 1 << BITS_PER_WORD        # 256
PSEUDO_EOF              = ALPH_SIZE                 # 256
SYMBOL_BITS             = BITS_PER_WORD + 1         # 9 бит на символ листа
MAX_LEAVES              = ALPH_SIZE + 1             # 257
MAX_COUNT               = (1 << BITS_PER_INT) - 1

# Magic numbers
HUFF_NUMBER             = 0xFACE8200
HUFF_TREE               = HUFF_NUMBER | 1
HUFF_COUNTS             = HUFF_NUMBER | 2

# Признак исчерпания входного потока (не пересекается с 0..2^n-1)
END_OF_INPUT            = -1

# =================================================================================================================

class HeaderFormat(Enum):
    """Способ описания дерева в заголовке сжатого потока."""
    TREE_HEADER     = "tree"
    COUNT_HEADER    = "counts"

# =================================================================================================================

class HuffException(Exception):
    """Базовая ошибка кодека. Любая из них прерывает сжатие/распаковку целиком."""

class FormatError(HuffException):
    """Неверное магическое число или некорректное описание дерева."""

class TruncatedInputError(HuffException):
    """Битовый поток закончился внутри заголовка или до кода PSEUDO_EOF."""

class InternalTableError(HuffException):
    """Для прочитанного байта нет кода в таблице (рассогласование проходов)."""

# =================================================================================================================

@dataclass
class HuffStats:
    original_size: int      = 0
    header_bits: int        = 0
    payload_bits: int       = 0
    leaves: int             = 0

    @property
    def total_bits(self) -> int:
        return BITS_PER_INT + self.header_bits + self.payload_bits

    @property
    def compressed_size(self) -> int:
        """Размер сжатого потока в байтах с учётом дополнения последнего байта."""
        return (self.total_bits + 7) // 8

@dataclass
class HeaderInfo:
    magic: int
    header: HeaderFormat
    leaves: int             = 0
    depth: int              = 0
    codings: Dict[int, str] = field(default_factory=dict)

    def __str__(self) -> str:
        return (f"magic=0x{self.magic:08X} header={self.header.value} "
                f"leaves={self.leaves} depth={self.depth}")

# End of module
