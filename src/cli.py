import argparse
import sys

from loguru import logger

import main

from Huffman import HuffProcessor
from Huff_Formats import HeaderFormat
from BitIO import BitInputStream
from utils import code_table_lines

# =================================================================================================================

COMPRESSED_SUFFIX   = ".hf"
RESTORED_SUFFIX     = ".uhf"

# =================================================================================================================

def init() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Huffman file compressor with an embedded tree header"
    )
    sub = parser.add_subparsers(dest="cmd")

    # ------------------------------------------------------------
    # compress
    # ------------------------------------------------------------
    c = sub.add_parser("compress", help="Сжать файл")
    c.add_argument("-i", "--input", required=True)
    c.add_argument("-o", "--output", help=f"По умолчанию: <input>{COMPRESSED_SUFFIX}")
    c.add_argument("--header", default=HeaderFormat.TREE_HEADER.value,
                   choices=[h.value for h in HeaderFormat])
    c.add_argument("--verbose", action="store_true")
    c.add_argument("--stats", action="store_true")
    c.set_defaults(func=main.compress_mode)

    # ------------------------------------------------------------
    # decompress
    # ------------------------------------------------------------
    d = sub.add_parser("decompress", help="Распаковать файл")
    d.add_argument("-i", "--input", required=True)
    d.add_argument("-o", "--output",
                   help=f"По умолчанию: <input> без {COMPRESSED_SUFFIX} или <input>{RESTORED_SUFFIX}")
    d.add_argument("--verbose", action="store_true")
    d.set_defaults(func=main.decompress_mode)

    # ------------------------------------------------------------
    # info
    # ------------------------------------------------------------
    t = sub.add_parser("info", help="Показать заголовок и таблицу кодов")
    t.add_argument("-i", "--input", required=True)
    t.set_defaults(func=info_mode)

    return parser

# =================================================================================================================

def info_mode(args):
    """Печатает заголовок сжатого файла и таблицу кодов."""
    print("[info] Analyzing:", args.input)
    with open(args.input, "rb") as f:
        info = HuffProcessor().read_header_info(BitInputStream(f))

    print("Header:")
    print(info)
    print("\nCodes:")
    for line in code_table_lines(info.codings):
        print(line)

# =================================================================================================================

def default_output(path: str, compress: bool) -> str:
    """Имя выходного файла, если -o не указан."""
    if compress:
        return path + COMPRESSED_SUFFIX
    if path.endswith(COMPRESSED_SUFFIX) and len(path) > len(COMPRESSED_SUFFIX):
        return path[:-len(COMPRESSED_SUFFIX)]
    return path + RESTORED_SUFFIX

def setup_logging(verbose: bool):
    """Перенастраивает loguru: DEBUG в stderr при --verbose, иначе только предупреждения."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<level>{level: <8}</level> | {name}:{function} - {message}"
    )
