from typing import BinaryIO, List

from Huff_Formats import END_OF_INPUT
from utils import *

"""Побитовый ввод/вывод поверх байтового потока.

Биты внутри байта идут от старшего к младшему, многобитовые поля
записываются старшими битами вперёд и не выравниваются по границе байта.

API:
    BitInputStream(f).read_bits(n) → значение | END_OF_INPUT
    BitInputStream(f).reset()      → возврат к началу потока (второй проход)
    BitOutputStream(f).write_bits(n, value)
    BitOutputStream(f).flush()     → дописывает неполный байт, дополняя нулями
"""

_CHUNK_SIZE = 1 << 16
_FLUSH_BITS = 8 * _CHUNK_SIZE

def _check_width(width: int):
    if width < 1:
        raise ValueError(f"bit width must be positive, got {width}")

# =================================================================================================================

class BitInputStream:
# -------------------------------------------------------------------------------------------------

    def __init__(self, stream: BinaryIO):
        """
        Args:
            stream (BinaryIO): Байтовый поток, открытый на чтение. Для reset() нужен seek.
        """
        self._stream = stream
        self._bits: List[int] = []
        self._pos = 0

# -------------------------------------------------------------------------------------------------

    def read_bits(self, width: int) -> int:
        """Читает следующие width бит как беззнаковое число.

        Args:
            width (int): Количество бит.

        Returns:
            int: Значение поля или END_OF_INPUT, если бит в потоке осталось меньше width.
        """
        _check_width(width)

        while len(self._bits) - self._pos < width:
            chunk = self._stream.read(_CHUNK_SIZE)
            if not chunk:
                return END_OF_INPUT

            # отбрасываем уже прочитанную часть буфера
            del self._bits[:self._pos]
            self._pos = 0
            self._bits.extend(bytes_to_bits(chunk))

        value = 0
        for bit in self._bits[self._pos:self._pos + width]:
            value = (value << 1) | bit
        self._pos += width
        return value

    def reset(self):
        """Перематывает поток в начало и сбрасывает буфер битов."""
        self._stream.seek(0)
        self._bits = []
        self._pos = 0

# =================================================================================================================

class BitOutputStream:
# -------------------------------------------------------------------------------------------------

    def __init__(self, stream: BinaryIO):
        """
        Args:
            stream (BinaryIO): Байтовый поток, открытый на запись.
        """
        self._stream = stream
        self._bits: List[int] = []
        self.bits_written = 0

    def __enter__(self) -> "BitOutputStream":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.flush()

# -------------------------------------------------------------------------------------------------

    def write_bits(self, width: int, value: int):
        """Дописывает ровно width младших бит числа value, старшими вперёд.

        Raises:
            ValueError: width < 1 или value не помещается в width бит.
        """
        _check_width(width)
        if value < 0 or value >> width:
            raise ValueError(f"value {value} does not fit in {width} bits")

        byte_to_bits(self._bits, value, width)
        self.bits_written += width

        if len(self._bits) >= _FLUSH_BITS:
            full = len(self._bits) - len(self._bits) % 8
            self._stream.write(bits_to_bytes(self._bits[:full]))
            del self._bits[:full]

    def flush(self):
        """Записывает накопленные биты. Неполный байт дополняется нулями,
        поэтому вызывается один раз, в конце записи."""
        if self._bits:
            self._stream.write(bits_to_bytes(self._bits))
            self._bits = []
        self._stream.flush()

# End of module
