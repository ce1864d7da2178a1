"""
Command line front end.

    datasqueeze compress INPUT OUTPUT
    datasqueeze decompress INPUT OUTPUT
    datasqueeze                       (interactive menu)

Exit status: 0 on success, 1 when the operation failed, 2 for an invalid
menu choice.
"""
import argparse
import sys

from .compressor import compress_file, decompress_file

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_CHOICE = 2


def print_statistics(result):
    print("\n=== COMPRESSION STATISTICS ===")
    print(f"Original Size: {result['original_size']} bytes")
    print(f"Compressed Size: {result['compressed_size']} bytes")
    if result['original_size'] > 0:
        print(f"Compression Ratio: {result['ratio']:.4f}")
        print(f"Space Saved: {result['saved_percent']:.2f}%")
    print("==============================")


def run_compress(input_path, output_path):
    result = compress_file(input_path, output_path)
    if not result["success"]:
        print(f"Error ({result['error']}): {result['message']}")
        print("Compression failed!")
        return EXIT_FAILURE

    print("File compressed successfully!")
    print_statistics(result)
    return EXIT_OK


def run_decompress(input_path, output_path):
    result = decompress_file(input_path, output_path)
    if not result["success"]:
        print(f"Error ({result['error']}): {result['message']}")
        print("Decompression failed!")
        return EXIT_FAILURE

    print("File decompressed successfully!")
    print(f"Check '{output_path}' for the readable content.")
    return EXIT_OK


def interactive_menu(prompt=input):
    print("Text File Compression using Huffman + LZ77")
    print("==========================================")
    print("1. Compress a file")
    print("2. Decompress a file")
    choice = prompt("Enter your choice (1-2): ").strip()

    if choice == "1":
        input_path = prompt("Enter input file name: ").strip()
        output_path = prompt("Enter compressed file name: ").strip()
        return run_compress(input_path, output_path)
    if choice == "2":
        input_path = prompt("Enter compressed file name: ").strip()
        output_path = prompt("Enter output file name: ").strip()
        return run_decompress(input_path, output_path)

    print("Invalid choice! Please enter 1 or 2.")
    return EXIT_INVALID_CHOICE


def build_parser():
    parser = argparse.ArgumentParser(
        prog="datasqueeze",
        description="Lossless LZ77 + Huffman file compression",
    )
    sub = parser.add_subparsers(dest="command")

    for name, help_text in (("compress", "compress a file"), ("decompress", "restore a compressed file")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("input", help="source file")
        cmd.add_argument("output", help="destination file")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.command == "compress":
        return run_compress(args.input, args.output)
    if args.command == "decompress":
        return run_decompress(args.input, args.output)
    return interactive_menu()


if __name__ == "__main__":
    sys.exit(main())
