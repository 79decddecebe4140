#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Тесты полного цикла сжатия/распаковки и командной строки.

Запуск:
    python -m unittest discover -v tests

Тесты:
- roundtrip: данные после compress -> decompress совпадают с исходными
  (пустой вход, один символ, все байты, случайные данные, оба формата заголовка).
- ошибки формата: чужое магическое число, испорченный или обрезанный поток.
- файлы и CLI: compress/decompress/info через main.main().
"""

from __future__ import annotations

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import contextlib
import io
import random
import tempfile
import unittest

import cli
import main
from Huffman import *


class TestRoundtrip(unittest.TestCase):
    """Полный цикл в памяти."""

    def assertRoundtrip(self, data: bytes, header=HeaderFormat.TREE_HEADER):
        blob = compress_bytes(data, header)
        self.assertEqual(decompress_bytes(blob), data)
        return blob

    def test_fixed_example(self):
        data = bytes([65, 65, 65, 66])
        blob = self.assertRoundtrip(data)
        # 32 бита magic + 32 бита дерева + 7 бит кодов = 71 бит -> 9 байт
        self.assertEqual(len(blob), 9)
        self.assertEqual(blob[:4], bytes.fromhex("face8200"))

    def test_empty_input(self):
        blob = self.assertRoundtrip(b"")
        # magic + дерево из двух листьев (21 бит) + 1 бит кода EOF
        self.assertEqual(len(blob), (32 + 21 + 1 + 7) // 8)

    def test_single_symbol(self):
        self.assertRoundtrip(b"\x00" * 1000)
        self.assertRoundtrip(b"x")

    def test_all_bytes(self):
        self.assertRoundtrip(bytes(range(256)))
        self.assertRoundtrip(bytes(range(255, -1, -1)) * 4)

    def test_random_bytes(self):
        random.seed(12345)
        data = bytes(random.getrandbits(8) for _ in range(4096))  # 4 KB случайных данных
        self.assertRoundtrip(data)

    def test_text_compresses(self):
        data = b"abracadabra " * 500
        blob = self.assertRoundtrip(data)
        self.assertLess(len(blob), len(data) // 2)

    def test_skewed_counts_long_codes(self):
        data = b"".join(bytes([i]) * (1 << i) for i in range(13))
        self.assertRoundtrip(data)

    def test_counts_header(self):
        data = b"the counts header rebuilds the same tree on both sides"
        blob = self.assertRoundtrip(data, HeaderFormat.COUNT_HEADER)
        self.assertEqual(blob[:4], bytes.fromhex("face8202"))
        self.assertRoundtrip(b"", HeaderFormat.COUNT_HEADER)

    def test_set_header(self):
        proc = HuffProcessor()
        proc.set_header(HeaderFormat.COUNT_HEADER)
        sink = io.BytesIO()
        with BitOutputStream(sink) as bits_out:
            stats = proc.compress(BitInputStream(io.BytesIO(b"abc")), bits_out)

        self.assertEqual(stats.header_bits, 256 * 32)
        self.assertEqual(decompress_bytes(sink.getvalue()), b"abc")

    def test_tree_magic_variant_accepted(self):
        data = b"HUFF_TREE magic is read as a tree header"
        blob = compress_bytes(data)
        blob = bytes.fromhex("face8201") + blob[4:]
        self.assertEqual(decompress_bytes(blob), data)

    def test_stats(self):
        sink = io.BytesIO()
        with BitOutputStream(sink) as bits_out:
            stats = HuffProcessor().compress(BitInputStream(io.BytesIO(b"AAAB")), bits_out)

        self.assertEqual(stats.original_size, 4)
        self.assertEqual(stats.leaves, 3)
        self.assertEqual(stats.header_bits, 32)
        self.assertEqual(stats.payload_bits, 7)
        self.assertEqual(stats.compressed_size, len(sink.getvalue()))

    def test_header_info(self):
        blob = compress_bytes(b"AAAB")
        info = HuffProcessor().read_header_info(BitInputStream(io.BytesIO(blob)))
        self.assertEqual(info.header, HeaderFormat.TREE_HEADER)
        self.assertEqual(info.magic, HUFF_NUMBER)
        self.assertEqual(info.leaves, 3)
        self.assertEqual(info.depth, 2)
        self.assertEqual(len(info.codings[65]), 1)


class TestMalformedInput(unittest.TestCase):
    """Испорченные потоки должны приводить к ошибке, а не к неверным данным."""

    def test_wrong_magic(self):
        blob = compress_bytes(b"some data")
        with self.assertRaises(FormatError):
            decompress_bytes(b"\x00\x01\x02\x03" + blob[4:])

    def test_empty_stream(self):
        with self.assertRaises(FormatError):
            decompress_bytes(b"")
        with self.assertRaises(FormatError):
            decompress_bytes(b"\xfa\xce")

    def test_truncated_header(self):
        blob = compress_bytes(b"hello world, hello huffman")
        with self.assertRaises(TruncatedInputError):
            decompress_bytes(blob[:6])

    def test_corrupted_header(self):
        blob = compress_bytes(b"hello world")
        with self.assertRaises(FormatError):
            decompress_bytes(blob[:4] + b"\xff" * (len(blob) - 4))

    def test_truncated_payload(self):
        blob = compress_bytes(b"abcdefgh" * 50)
        with self.assertRaises(TruncatedInputError):
            decompress_bytes(blob[:-10])

    def test_truncated_counts_header(self):
        blob = compress_bytes(b"abc", HeaderFormat.COUNT_HEADER)
        with self.assertRaises(TruncatedInputError):
            decompress_bytes(blob[:100])

    def test_errors_share_base(self):
        for exc in (FormatError, TruncatedInputError, InternalTableError):
            self.assertTrue(issubclass(exc, HuffException))


class TestFilesAndCli(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = self._tmp.name
        self.src = os.path.join(self.dir, "sample.txt")
        self.data = b"Lorem ipsum dolor sit amet, consectetur adipiscing elit.\n" * 40
        with open(self.src, "wb") as f:
            f.write(self.data)

    def tearDown(self):
        self._tmp.cleanup()

    def run_main(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(io.StringIO()):
            code = main.main(list(argv))
        return code, out.getvalue()

    def test_compress_decompress_files(self):
        packed = os.path.join(self.dir, "packed.hf")
        restored = os.path.join(self.dir, "out", "restored.txt")

        stats = main.compress_file(self.src, packed)
        self.assertEqual(stats.compressed_size, os.path.getsize(packed))
        self.assertEqual(main.decompress_file(packed, restored), len(self.data))

        with open(restored, "rb") as f:
            self.assertEqual(f.read(), self.data)

    def test_cli_roundtrip_default_names(self):
        code, out = self.run_main("compress", "-i", self.src, "--stats")
        self.assertEqual(code, 0)
        self.assertIn("Statistics", out)
        self.assertTrue(os.path.exists(self.src + ".hf"))

        os.remove(self.src)
        code, _ = self.run_main("decompress", "-i", self.src + ".hf")
        self.assertEqual(code, 0)
        with open(self.src, "rb") as f:
            self.assertEqual(f.read(), self.data)

    def test_cli_counts_header_and_info(self):
        packed = os.path.join(self.dir, "packed.hf")
        code, _ = self.run_main("compress", "-i", self.src, "-o", packed, "--header", "counts")
        self.assertEqual(code, 0)

        code, out = self.run_main("info", "-i", packed)
        self.assertEqual(code, 0)
        self.assertIn("header=counts", out)
        self.assertIn("EOF", out)

    def test_cli_rejects_foreign_file(self):
        target = os.path.join(self.dir, "never.txt")
        code, _ = self.run_main("decompress", "-i", self.src, "-o", target)
        self.assertEqual(code, 1)
        self.assertFalse(os.path.exists(target))
        # временные файлы не остаются
        self.assertEqual(sorted(os.listdir(self.dir)), ["sample.txt"])

    def test_cli_missing_input(self):
        code, _ = self.run_main("compress", "-i", os.path.join(self.dir, "absent.bin"))
        self.assertEqual(code, 1)

    def test_default_output(self):
        self.assertEqual(cli.default_output("a.txt", compress=True), "a.txt.hf")
        self.assertEqual(cli.default_output("a.txt.hf", compress=False), "a.txt")
        self.assertEqual(cli.default_output("a.bin", compress=False), "a.bin.uhf")


if __name__ == "__main__":
    # Запуск тестов командой: python -m unittest -v test_codec.py
    unittest.main(verbosity=2)
