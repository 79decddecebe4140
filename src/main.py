"""
CLI codec:
Usage example:
  py src/main.py compress -i book.txt -o book.txt.hf --stats --verbose
  py src/main.py compress -i book.txt --header counts
  py src/main.py decompress -i book.txt.hf -o book.txt
  py src/main.py info -i book.txt.hf

header: "tree" (preorder tree, default) or "counts" (256 x 32-bit counts).
"""

# =================================================================================================================

import os
import sys
import tempfile
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from loguru import logger

import cli

from Huffman import *
from BitIO import *

# =================================================================================================================

@contextmanager
def atomic_output(path: str) -> Iterator[BinaryIO]:
    """Открывает временный файл рядом с path и подменяет им path после успешной записи.
    При ошибке временный файл удаляется, а path остаётся нетронутым."""

    dir_path = os.path.dirname(os.path.abspath(path))      # Обрезка названия файла
    name = os.path.basename(path)                          # Выделение названия файла
    os.makedirs(dir_path, exist_ok=True)                   # Создать директорию, если нет.

    fd, tmp = tempfile.mkstemp(dir=dir_path, prefix=name+".tmp_")
    os.close(fd)
    try:
        with open(tmp, "wb") as f:
            yield f
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise

# =================================================================================================================

def compress_file(src: str, dst: str, header: HeaderFormat = HeaderFormat.TREE_HEADER) -> HuffStats:
    """Сжимает файл src в dst.

    Args:
        src (str): путь к исходному файлу
        dst (str): путь к сжатому файлу
        header (HeaderFormat): формат заголовка

    Returns:
        HuffStats: размеры исходных и сжатых данных
    """
    logger.debug(f"[compress] {src} -> {dst} ({header.value} header)")

    with open(src, "rb") as f_in, atomic_output(dst) as f_out:
        with BitOutputStream(f_out) as bits_out:
            stats = HuffProcessor(header).compress(BitInputStream(f_in), bits_out)

    return stats

def decompress_file(src: str, dst: str) -> int:
    """Распаковывает файл src в dst. Возвращает количество восстановленных байт."""
    logger.debug(f"[decompress] {src} -> {dst}")

    with open(src, "rb") as f_in, atomic_output(dst) as f_out:
        with BitOutputStream(f_out) as bits_out:
            written = HuffProcessor().decompress(BitInputStream(f_in), bits_out)

    return written

# =================================================================================================================

def compress_mode(args):
    """Сжимает файл с параметрами командной строки."""
    dst = args.output or cli.default_output(args.input, compress=True)
    if args.verbose:
        print("[compress] input file:", args.input)
        print("[compress] output file:", dst)

    stats = compress_file(args.input, dst, HeaderFormat(args.header))

    if args.stats:
        print("\n=== Statistics ===")
        print(f"• original:   {stats.original_size} bytes")
        print(f"• compressed: {stats.compressed_size} bytes "
              f"(header {stats.header_bits} bits, payload {stats.payload_bits} bits)")
        print(f"• leaves:     {stats.leaves}")
        if stats.original_size:
            print(f"• ratio:      {stats.compressed_size / stats.original_size:.3f}")
        print("Saved to:", dst)

def decompress_mode(args):
    """Распаковывает файл с параметрами командной строки."""
    dst = args.output or cli.default_output(args.input, compress=False)
    if args.verbose:
        print("[decompress] Reading:", args.input)

    written = decompress_file(args.input, dst)
    print(f" → Saved {written} bytes to", dst)

# =================================================================================================================

def main(argv=None) -> int:

    parser = cli.init()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return 0

    cli.setup_logging(getattr(args, "verbose", False))

    try:
        args.func(args)
    except (HuffException, OSError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    return 0

# =================================================================================================================

if __name__ == "__main__":
    sys.exit(main())
