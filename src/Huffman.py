import io
from typing import List, Dict, Tuple

from loguru import logger

from Huff_Formats import *
from HuffTree import *
from BitIO import BitInputStream, BitOutputStream

"""Кодек Хаффмана с самоописывающимся заголовком.

Сжатие выполняется в два прохода:
    - подсчёт частот байт по всему входу
    - построение дерева, запись заголовка, перемотка входа и запись кодов

Распаковка восстанавливает дерево из заголовка и спускается по нему
побитово до листа PSEUDO_EOF.

Атрибуты:
    header (HeaderFormat): Формат заголовка, выбираемый до сжатия.

API:
    - HuffProcessor(): класс с методами compress/decompress над битовыми потоками.
    - compress_bytes()/decompress_bytes(): то же самое над bytes в памяти.
"""

class HuffProcessor:
# -------------------------------------------------------------------------------------------------

    def __init__(self, header: HeaderFormat = HeaderFormat.TREE_HEADER):
        self.header = header

    def set_header(self, header: HeaderFormat):
        self.header = header
        logger.debug(f"[HuffProcessor] header set to {header.value}")

# -------------------------------------------------------------------------------------------------

    def compress(self, bits_in: BitInputStream, bits_out: BitOutputStream) -> HuffStats:
        """Сжимает поток. Вход должен поддерживать перемотку в начало.

        Args:
            bits_in (BitInputStream): Исходные данные.
            bits_out (BitOutputStream): Приёмник сжатого потока.

        Returns:
            HuffStats: Размеры заголовка и полезной нагрузки в битах.
        """
        counts = self.read_for_counts(bits_in)
        root = make_tree_from_counts(counts)
        codings = make_codings_from_tree(root)
        logger.debug(f"[HuffProcessor] tree built: {len(codings)} leaves, depth {tree_depth(root)}")

        start = bits_out.bits_written
        if self.header is HeaderFormat.COUNT_HEADER:
            self.write_counts_header(counts, bits_out)
        else:
            self.write_header(root, bits_out)
        header_bits = bits_out.bits_written - start - BITS_PER_INT

        bits_in.reset()
        payload_bits = self.write_compressed_bits(bits_in, codings, bits_out)

        stats = HuffStats(
            original_size   = sum(counts),
            header_bits     = header_bits,
            payload_bits    = payload_bits,
            leaves          = len(codings)
        )
        logger.debug(f"[HuffProcessor] compressed {stats.original_size} bytes -> {stats.compressed_size} bytes")
        return stats

    def decompress(self, bits_in: BitInputStream, bits_out: BitOutputStream) -> int:
        """Распаковывает поток, записанный compress().

        Raises:
            FormatError: Неизвестное магическое число или испорченное дерево.
            TruncatedInputError: Поток оборвался до кода PSEUDO_EOF.

        Returns:
            int: Количество восстановленных байт.
        """
        _, _, root = self._read_magic_and_tree(bits_in)
        written = self.read_compressed_bits(bits_in, bits_out, root)
        logger.debug(f"[HuffProcessor] decompressed {written} bytes")
        return written

    def read_header_info(self, bits_in: BitInputStream) -> HeaderInfo:
        """Читает только заголовок и описывает закодированное в нём дерево."""
        header, magic, root = self._read_magic_and_tree(bits_in)
        codings = make_codings_from_tree(root)
        return HeaderInfo(
            magic   = magic,
            header  = header,
            leaves  = len(codings),
            depth   = tree_depth(root),
            codings = codings
        )

# -------------------------------------------------------------------------------------------------

    def read_for_counts(self, bits_in: BitInputStream) -> List[int]:
        """Считает вхождения каждого байта, читая поток до конца. Поток не перематывается.

        Returns:
            List[int]: 256 счётчиков, индекс = значение байта.
        """
        counts = [0] * ALPH_SIZE
        byte = bits_in.read_bits(BITS_PER_WORD)
        while byte != END_OF_INPUT:
            counts[byte] += 1
            byte = bits_in.read_bits(BITS_PER_WORD)
        return counts

# -------------------------------------------------------------------------------------------------

    def write_header(self, root: TreeNode, bits_out: BitOutputStream):
        """Пишет магическое число HUFF_NUMBER и дерево в прямом обходе."""
        bits_out.write_bits(BITS_PER_INT, HUFF_NUMBER)
        self.write_tree(root, bits_out)

    def write_tree(self, node: TreeNode, bits_out: BitOutputStream):
        """Внутренний узел: 0 + левое + правое. Лист: 1 + 9-битный символ."""
        if isinstance(node, Leaf):
            bits_out.write_bits(1, 1)
            bits_out.write_bits(SYMBOL_BITS, node.symbol)
        else:
            bits_out.write_bits(1, 0)
            self.write_tree(node.left, bits_out)
            self.write_tree(node.right, bits_out)

    def read_tree_header(self, bits_in: BitInputStream) -> TreeNode:
        """Восстанавливает дерево, записанное write_tree(). Магическое число уже прочитано.

        Разбор идёт по явному стеку незавершённых внутренних узлов, поэтому
        глубина испорченного заголовка не упирается в лимит рекурсии.

        Raises:
            TruncatedInputError: Поток закончился внутри описания дерева.
            FormatError: Повтор или недопустимый символ, нет листа PSEUDO_EOF,
                дерево из одного листа.

        Returns:
            TreeNode: Корень дерева без весов.
        """
        seen = set()
        stack: List[List[TreeNode]] = []    # дети незавершённых внутренних узлов

        while True:
            bit = bits_in.read_bits(1)
            if bit == END_OF_INPUT:
                raise TruncatedInputError("input ended inside the tree header")

            if bit == 0:
                if len(stack) >= MAX_LEAVES:
                    raise FormatError("tree header is deeper than any valid tree")
                stack.append([])
                continue

            symbol = bits_in.read_bits(SYMBOL_BITS)
            if symbol == END_OF_INPUT:
                raise TruncatedInputError("input ended inside a leaf of the tree header")
            if symbol > PSEUDO_EOF:
                raise FormatError(f"leaf symbol {symbol} out of range")
            if symbol in seen:
                raise FormatError(f"duplicate leaf symbol {symbol} in tree header")
            seen.add(symbol)

            node: TreeNode = Leaf(symbol)
            # сворачиваем внутренние узлы, у которых собраны оба ребёнка
            while stack:
                children = stack[-1]
                children.append(node)
                if len(children) < 2:
                    break
                stack.pop()
                node = Internal(children[0], children[1])
            else:
                break

        if isinstance(node, Leaf):
            raise FormatError("tree header describes a single leaf")
        if PSEUDO_EOF not in seen:
            raise FormatError("tree header has no end-of-stream leaf")
        return node

# -------------------------------------------------------------------------------------------------

    def write_counts_header(self, counts: List[int], bits_out: BitOutputStream):
        """Пишет магическое число HUFF_COUNTS и 256 счётчиков по 32 бита.

        Raises:
            ValueError: Счётчик не помещается в 32 бита.
        """
        bits_out.write_bits(BITS_PER_INT, HUFF_COUNTS)
        for sym, count in enumerate(counts):
            if count > MAX_COUNT:
                raise ValueError(f"count {count} for symbol {sym} exceeds {BITS_PER_INT} bits")
            bits_out.write_bits(BITS_PER_INT, count)

    def read_counts_header(self, bits_in: BitInputStream) -> List[int]:
        counts = []
        for _ in range(ALPH_SIZE):
            count = bits_in.read_bits(BITS_PER_INT)
            if count == END_OF_INPUT:
                raise TruncatedInputError("input ended inside the counts header")
            counts.append(count)
        return counts

    def _read_magic_and_tree(self, bits_in: BitInputStream) -> Tuple[HeaderFormat, int, TreeNode]:
        """Проверяет магическое число и строит дерево выбранным в нём способом."""
        magic = bits_in.read_bits(BITS_PER_INT)
        if magic == END_OF_INPUT:
            raise FormatError("input is too short to hold a magic number")

        if magic in (HUFF_NUMBER, HUFF_TREE):
            logger.debug(f"[HuffProcessor] magic 0x{magic:08X}: tree header")
            return HeaderFormat.TREE_HEADER, magic, self.read_tree_header(bits_in)

        if magic == HUFF_COUNTS:
            logger.debug(f"[HuffProcessor] magic 0x{magic:08X}: counts header")
            counts = self.read_counts_header(bits_in)
            return HeaderFormat.COUNT_HEADER, magic, make_tree_from_counts(counts)

        raise FormatError(f"magic number 0x{magic:08X} is not a Huffman stream")

# -------------------------------------------------------------------------------------------------

    def write_compressed_bits(self, bits_in: BitInputStream, codings: Dict[int, str],
                              bits_out: BitOutputStream) -> int:
        """Пишет код каждого байта входа, затем один раз код PSEUDO_EOF.

        Raises:
            InternalTableError: Для байта нет кода (частоты считались по другим данным).

        Returns:
            int: Количество записанных бит.
        """
        written = 0
        byte = bits_in.read_bits(BITS_PER_WORD)
        while byte != END_OF_INPUT:
            code = codings.get(byte)
            if code is None:
                raise InternalTableError(f"no code for byte 0x{byte:02X}")
            bits_out.write_bits(len(code), int(code, 2))
            written += len(code)
            byte = bits_in.read_bits(BITS_PER_WORD)

        eof_code = codings[PSEUDO_EOF]
        bits_out.write_bits(len(eof_code), int(eof_code, 2))
        return written + len(eof_code)

    def read_compressed_bits(self, bits_in: BitInputStream, bits_out: BitOutputStream,
                             root: TreeNode) -> int:
        """Спускается по дереву бит за битом; на листе пишет байт и возвращается в корень.

        Raises:
            TruncatedInputError: Поток закончился раньше кода PSEUDO_EOF.

        Returns:
            int: Количество записанных байт.
        """
        written = 0
        node = root
        while True:
            bit = bits_in.read_bits(1)
            if bit == END_OF_INPUT:
                raise TruncatedInputError(f"input ended after {written} bytes, before end-of-stream code")

            node = node.left if bit == 0 else node.right

            if isinstance(node, Leaf):
                if node.symbol == PSEUDO_EOF:
                    return written
                bits_out.write_bits(BITS_PER_WORD, node.symbol)
                written += 1
                node = root

# =================================================================================================================

def compress_bytes(data: bytes, header: HeaderFormat = HeaderFormat.TREE_HEADER) -> bytes:
    """Сжимает bytes в памяти."""
    sink = io.BytesIO()
    with BitOutputStream(sink) as bits_out:
        HuffProcessor(header).compress(BitInputStream(io.BytesIO(data)), bits_out)
    return sink.getvalue()

def decompress_bytes(blob: bytes) -> bytes:
    """Распаковывает bytes в памяти. Формат заголовка определяется по магическому числу."""
    sink = io.BytesIO()
    with BitOutputStream(sink) as bits_out:
        HuffProcessor().decompress(BitInputStream(io.BytesIO(blob)), bits_out)
    return sink.getvalue()

# End of module
