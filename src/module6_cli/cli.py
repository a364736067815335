# file: module6_cli/cli.py
"""
Command-line interface.

    dendec encode "Hello"
    dendec encode --file notes.txt --as notes.txt.dna --group 8
    dendec decode --file notes.txt.dna --as notes.txt
    dendec wrap -e ./project
    dendec wrap -d git clone https://example.com/user/repo
"""

import argparse
import getpass
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from module0_common import DendecError, load_config
from module4_packet import decode_raw, encode_raw
from module5_wrap import Direction, run_wrap

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Bad invocation: missing input, password mismatch, unprintable output."""
    pass


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(verbosity: int = 0):
    """Configure logging for the command-line tool."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


# =============================================================================
# PASSWORD INPUT
# =============================================================================

def prompt_password(confirm: bool = False) -> str:
    password = getpass.getpass("Enter password: ")
    if confirm:
        again = getpass.getpass("Confirm password: ")
        if password != again:
            raise UsageError("Passwords do not match")
    if not password:
        raise UsageError("Password must not be empty")
    return password


# =============================================================================
# COMMANDS
# =============================================================================

def _write_output(data: bytes, path: Path) -> None:
    try:
        path.write_bytes(data)
    except OSError as e:
        raise UsageError(f"Cannot write {path}: {e.strerror or e}") from e
    print(f"Written to {path}", file=sys.stderr)


def _read_input(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise UsageError(f"Cannot read {path}: {e.strerror or e}") from e


def cmd_encode(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    if args.file is not None:
        plaintext = _read_input(Path(args.file))
    elif args.text is not None:
        plaintext = args.text.encode('utf-8')
    else:
        raise UsageError("Provide text as an argument or use --file PATH")

    password = prompt_password(confirm=True)
    logger.info("Encoding %d bytes", len(plaintext))
    sequence = encode_raw(plaintext, password, group=args.group, config=config)

    if args.save_as is not None:
        _write_output(sequence.encode('ascii'), Path(args.save_as))
    else:
        print(sequence)
    return 0


def cmd_decode(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    if args.file is not None:
        sequence = _read_input(Path(args.file))
    elif args.sequence is not None:
        sequence = args.sequence
    else:
        raise UsageError("Provide a symbol sequence as an argument or use --file PATH")

    password = prompt_password()
    logger.info("Decoding (up to 24 key derivations)")
    plaintext = decode_raw(sequence, password, config=config)

    if args.save_as is not None:
        _write_output(plaintext, Path(args.save_as))
        return 0

    try:
        text = plaintext.decode('utf-8')
    except UnicodeDecodeError:
        raise UsageError(
            "Decoded data is not UTF-8 text; use --as PATH to write it to a file"
        ) from None
    sys.stdout.write(text)
    sys.stdout.flush()
    return 0


def cmd_wrap(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    if not args.target:
        raise UsageError("wrap needs a directory or a command to run")

    direction = Direction.ENCODE if args.encode else Direction.DECODE
    password = prompt_password(confirm=direction is Direction.ENCODE)

    report = run_wrap(direction, args.target, password, config=config)

    if report.stream_output is not None:
        sys.stdout.flush()
        sys.stdout.buffer.write(report.stream_output)
        sys.stdout.buffer.flush()

    print(report.format_summary(), file=sys.stderr)
    return report.exit_code


# =============================================================================
# ARGUMENT PARSING
# =============================================================================

def non_negative_int(value: str) -> int:
    """argparse type for widths: an integer >= 0."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dendec',
        description='Password-based encryption rendered as a DNA-style symbol sequence',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dendec encode "Hello"
  dendec encode --file src/main.rs --as main.rs.dna
  dendec decode --file main.rs.dna --as main.rs
  dendec wrap -e ./myproject
  dendec wrap -d curl -o config.toml.dna https://example.com/config.toml.dna
        """
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to configuration YAML file (default: $DENDEC_CONFIG or built-in defaults)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Verbose logging (-vv for debug)'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    encode = subparsers.add_parser('encode', help='Encode text or a file into a symbol sequence')
    encode.add_argument('text', nargs='?', default=None, help='Inline text to encode')
    encode.add_argument('-f', '--file', default=None, metavar='PATH',
                        help='Read input bytes from this file')
    encode.add_argument('--as', dest='save_as', default=None, metavar='PATH',
                        help='Write the sequence to this file instead of stdout')
    encode.add_argument('-g', '--group', type=non_negative_int, default=None, metavar='N',
                        help='Split output into groups of N symbols')
    encode.set_defaults(handler=cmd_encode)

    decode = subparsers.add_parser('decode', help='Decode a symbol sequence')
    decode.add_argument('sequence', nargs='?', default=None, help='Inline sequence to decode')
    decode.add_argument('-f', '--file', default=None, metavar='PATH',
                        help='Read the sequence from this file')
    decode.add_argument('--as', dest='save_as', default=None, metavar='PATH',
                        help='Write decoded bytes to this file instead of stdout')
    decode.set_defaults(handler=cmd_decode)

    wrap = subparsers.add_parser(
        'wrap',
        help='Encode or decode every file a directory or command produces'
    )
    mode = wrap.add_mutually_exclusive_group(required=True)
    mode.add_argument('-e', '--encode', action='store_true', help='Transform files to .dna')
    mode.add_argument('-d', '--decode', action='store_true', help='Restore files from .dna')
    wrap.add_argument('target', nargs=argparse.REMAINDER,
                      help='Directory path, or command and its arguments')
    wrap.set_defaults(handler=cmd_wrap)

    return parser


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the dendec command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        verbosity = max(args.verbose, 1 if config['system'].get('verbose') else 0)
        setup_logging(verbosity)
        return args.handler(args, config)
    except (DendecError, UsageError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
