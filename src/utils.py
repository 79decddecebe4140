from typing import List, Dict

from Huff_Formats import PSEUDO_EOF

def byte_to_bits(bits: List[int], byte: int, length: int):
    """Добавляет в битовый буфер двоичное представление числа фиксированной длины.

    Args:
        bits (List[int]): Целевой буфер битов.
        byte (int): Число, из которого извлекаются биты.
        length (int): Количество записываемых бит (старшие первыми).
    """
    for i in range(length - 1, -1, -1):
        bits.append((byte >> i)&1)        # захват i-того бита

def bits_to_bytes(bits: List[int]) -> bytes:
    """Преобразует массив битов в массив байтов (big-endian внутри байта).
    Неполный последний байт дополняется нулями в младших битах.

    Args:
        bits (List[int]): Список битов 0/1.

    Returns:
        bytes: Упакованные байты.
    """
    out = bytearray((len(bits)+7)//8)       # буфер с целым числом байт в большую сторону
    for i, bit in enumerate(bits):
        if bit:
            byte_id = i // 8                # счетчик байтов
            bit_id = 7 - (i % 8)            # счетчик битов
            out[byte_id] |= (1 << bit_id)

    return bytes(out)

def bytes_to_bits(b: bytes) -> List[int]:
    """Преобразует байты в последовательность битов.

    Args:
        b (bytes): Входные данные.

    Returns:
        List[int]: Список битов (0/1).
    """
    bits = []
    for byte in b:
        byte_to_bits(bits, byte, 8)
    return bits

def symbol_name(symbol: int) -> str:
    """Печатное имя символа: EOF, печатный ASCII или шестнадцатеричный код."""
    if symbol == PSEUDO_EOF:
        return "EOF"
    if 0x20 < symbol < 0x7F:
        return repr(chr(symbol))
    return f"0x{symbol:02X}"

def code_table_lines(codings: Dict[int, str]) -> List[str]:
    """Форматирует таблицу кодов для вывода: короткие коды первыми.

    Args:
        codings (Dict[int, str]): Словарь {символ: код из '0'/'1'}

    Returns:
        List[str]: Строки вида "  'A'    len=1  0"
    """
    rows = sorted(codings.items(), key=lambda x: (len(x[1]), x[0]))
    return [f"  {symbol_name(sym):<6} len={len(code):<3} {code}" for sym, code in rows]
