import argparse
import logging
import os
import sys

from errors import HuffmanError
from huffman import decode, encode

logger = logging.getLogger(__name__)

COMPRESSED_EXT = ".huff"


def _remove_partial(path):
    # a failed call leaves no usable output behind
    if os.path.exists(path):
        os.remove(path)


def compress_file(input_path, output_path):
    """Compresses input_path into output_path and returns the CompressionStats."""
    with open(input_path, "rb") as fin:
        try:
            with open(output_path, "wb") as fout:
                stats = encode(fin, fout)
        except HuffmanError:
            _remove_partial(output_path)
            raise

    logger.info(
        "Compressed %s -> %s (%d -> %d bytes, %.2f%% saved)",
        input_path, output_path, stats.original_size, stats.compressed_size, stats.saved_percent,
    )
    return stats


def decompress_file(input_path, output_path):
    """Restores a file written by compress_file; returns output_path."""
    with open(input_path, "rb") as fin:
        try:
            with open(output_path, "wb") as fout:
                size = decode(fin, fout)
        except HuffmanError:
            _remove_partial(output_path)
            raise

    logger.info("Decompressed %s -> %s (%d bytes)", input_path, output_path, size)
    return output_path


### COMMAND LINE ###
def build_parser():
    parser = argparse.ArgumentParser(
        prog="huffpack",
        description="Huffman compression and decompression of arbitrary files.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log every pipeline stage")
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="compress a file")
    enc.add_argument("input_file")
    enc.add_argument("output_file")

    dec = sub.add_parser("decode", help="decompress a file")
    dec.add_argument("input_file")
    dec.add_argument("output_file")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "encode":
            compress_file(args.input_file, args.output_file)
            logger.info("Encoding completed: %s -> %s", args.input_file, args.output_file)
        else:
            decompress_file(args.input_file, args.output_file)
            logger.info("Decoding completed: %s -> %s", args.input_file, args.output_file)
    except (HuffmanError, OSError) as e:
        logger.error("%s failed: %s", args.command.capitalize(), e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
