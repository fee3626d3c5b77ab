import argparse
import getpass
import logging
import sys
from pathlib import Path

from .clear import clear_message_file
from .config import ConfigBuilder
from .embed import hide_message_file
from .errors import CapacityError, Corrupted, FormatError, HeaderMismatch, NotFound, StegoError
from .extract import extract_message_file
from .metrics import compute_sample_change_stats
from .settings import load_settings

FORMATS = ("wav16",)

logger = logging.getLogger("stegowave")


def _setup_logging(verbose: bool):
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%H:%M:%S"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _build_config(args: argparse.Namespace):
    settings = load_settings(args.config)
    password = args.password
    if password is None:
        password = getpass.getpass("Password: ")
    builder = ConfigBuilder(settings).password(password)
    if args.lsb_depth is not None:
        builder.lsb_depth(args.lsb_depth)
    return builder.build()


def cmd_hide(args: argparse.Namespace):
    config = _build_config(args)
    if args.message is not None:
        message = args.message.encode('utf-8')
    else:
        message = Path(args.message_file).read_bytes()

    hide_message_file(args.input_file, args.output_file, message, config)
    print(f"Hidden {len(message)} bytes in {args.output_file}")

    if args.snr_against:
        stats = compute_sample_change_stats(args.input_file, args.output_file, config.lsb_depth)
        print(f"SNR: {stats['snr_db']:.2f} dB")
        print(f"Samples changed: {stats['samples_changed']} / {stats['samples_total']}")


def cmd_extract(args: argparse.Namespace):
    config = _build_config(args)
    payload = extract_message_file(args.input_file, config)
    if args.out_file:
        Path(args.out_file).write_bytes(payload)
        print(f"Wrote output to {args.out_file}")
        return
    try:
        print(payload.decode('utf-8'))
    except UnicodeDecodeError:
        print(payload)


def cmd_clear(args: argparse.Namespace):
    config = _build_config(args)
    target = args.output_file or args.input_file
    clear_message_file(args.input_file, config, args.output_file)
    print(f"Cleared hidden message, wrote {target}")


def _user_message(err: StegoError) -> str:
    if isinstance(err, NotFound):
        return f"Nothing to clear: {err}"
    if isinstance(err, HeaderMismatch):
        return f"Password is incorrect or the file holds no hidden message ({err})"
    if isinstance(err, CapacityError):
        return f"Audio file is too short for this message: {err}"
    if isinstance(err, Corrupted):
        return f"Could not receive message, file may be corrupted: {err}"
    if isinstance(err, FormatError):
        return f"Invalid file: {err}"
    return str(err)


def _add_common(p: argparse.ArgumentParser):
    p.add_argument('--input-file', required=True, type=Path, help='Path to the input WAV file')
    p.add_argument('-f', '--format', choices=FORMATS, default='wav16', help='Audio file format')
    p.add_argument('-l', '--lsb-depth', type=int, default=None,
                   help='Number of least significant bits to modify (default from settings, 1)')
    p.add_argument('-p', '--password', default=None, help='Password (prompted when omitted)')


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog='stegowave', description="StegoWave :: Audio file steganography")
    p.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    p.add_argument('--config', type=Path, default=None, help='Path to a stegowave.toml settings file')
    sub = p.add_subparsers(dest='cmd', required=True)

    ph = sub.add_parser('hide', help='Hides a secret message in an audio file')
    _add_common(ph)
    ph.add_argument('--output-file', required=True, type=Path,
                    help='Path where the audio file with the hidden text will be saved')
    gmsg = ph.add_mutually_exclusive_group(required=True)
    gmsg.add_argument('-m', '--message', type=str, help='Message text to hide')
    gmsg.add_argument('--message-file', type=Path, help='Path to file whose bytes to hide')
    ph.add_argument('--snr-against', action='store_true', help='Print SNR vs cover after hiding')
    ph.set_defaults(func=cmd_hide)

    px = sub.add_parser('extract', help='Extracts a hidden secret message from an audio file')
    _add_common(px)
    px.add_argument('--out-file', type=Path, help='Write recovered bytes to file instead of stdout')
    px.set_defaults(func=cmd_extract)

    pc = sub.add_parser('clear', help='Clear the hidden secret message from an audio file')
    _add_common(pc)
    pc.add_argument('--output-file', type=Path, default=None,
                    help='Where to save the cleaned file (defaults to overwriting the input)')
    pc.set_defaults(func=cmd_clear)
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    try:
        args.func(args)
    except StegoError as err:
        print(_user_message(err), file=sys.stderr)
        return 1
    except OSError as err:
        print(f"I/O error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
