"""Main entry point for the Zen Tuner CLI."""

import sys
import time
import argparse
from typing import Any, Dict, List, Optional

from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_types import InvalidFrameError, NoteInfo
from ..tuning import classify_deviation, format_cents, string_states

logger = get_logger(__name__)


def format_note(note: NoteInfo) -> str:
    """One-line reading: note, frequency, deviation, tuning state and matching string."""
    line = (
        f"{note.label:<4} {note.frequency:8.2f}Hz  {format_cents(note.cents_deviation):>10}"
        f"  [{classify_deviation(note.cents_deviation).value}]"
    )
    matches = [s.string.label for s in string_states(note) if s.active]
    if matches:
        line += f"  string {matches[0]}"
    return line


def positive_int(value: str) -> int:
    """argparse type for sizes that must be at least 1."""
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def create_factory(args) -> ComponentFactory:
    """Component factory reading settings from --config-dir or ~/.config/zen_tuner."""
    return ComponentFactory(ConfigManager(args.config_dir))


def mapper_overrides(args) -> Dict[str, Any]:
    """NoteMapper settings given on the command line; the rest come from config."""
    overrides: Dict[str, Any] = {}
    if args.flats:
        overrides["use_flats"] = True
    if getattr(args, "round_cents", False):
        overrides["cents_rounding"] = "round"
    return overrides


def cmd_note(args) -> int:
    mapper = create_factory(args).create_note_mapper(**mapper_overrides(args))
    try:
        note = mapper.map_frequency(args.frequency)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(format_note(note))
    return 0


def cmd_analyze(args) -> int:
    from ..audio.wav_input import WavFileInput

    factory = create_factory(args)
    frame_size = args.frame_size or factory.config_manager.get_config("audio_input")[
        "frame_size"
    ]
    try:
        source = WavFileInput(args.file, frame_size=frame_size, gain=args.gain)
    except RuntimeError as e:
        # soundfile raises LibsndfileError (a RuntimeError) for unreadable files
        print(f"Error: could not open {args.file}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    service = factory.create_tuner_service(
        mapper=factory.create_note_mapper(**mapper_overrides(args))
    )
    detected = 0
    for index, frame in enumerate(source.frames()):
        note = service.process_frame(frame)
        timestamp = index * frame_size / source.sample_rate
        if note is not None:
            detected += 1
            print(f"[{timestamp:7.3f}s] {format_note(note)}")
        else:
            print(f"[{timestamp:7.3f}s] ---  {service.last_estimate}")

    if detected == 0:
        print("\nNo notes were detected. Try a higher --gain or check the recording.")
    return 0


def cmd_listen(args) -> int:
    factory = create_factory(args)
    input_overrides: Dict[str, Any] = {"device_id": args.device}
    if args.sample_rate is not None:
        input_overrides["sample_rate"] = args.sample_rate
    if args.frame_size is not None:
        input_overrides["frame_size"] = args.frame_size

    service = factory.create_tuner_service(
        frame_source=factory.create_audio_input(**input_overrides),
        mapper=factory.create_note_mapper(**mapper_overrides(args)),
    )

    def on_note(note: NoteInfo) -> None:
        print(format_note(note))
        sys.stdout.flush()

    if not service.start(on_note):
        print(f"Error: {service.error}", file=sys.stderr)
        return 1

    print(f"Listening for {args.duration:.1f} seconds... (Ctrl+C to stop)")
    try:
        time.sleep(args.duration)
    except KeyboardInterrupt:
        print("\nStopped by user.")
    finally:
        service.stop()
    return 0


def cmd_devices(args) -> int:
    from ..audio.audio_input import list_input_devices

    print("\nAvailable audio input devices:")
    for device in list_input_devices():
        print(
            f"{device['id']}: {device['name']} "
            f"(Sample Rate: {device['default_samplerate'] / 1000:.1f}kHz)"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Zen Tuner - instrument tuner")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--config-dir",
        default=None,
        help="Directory of JSON settings (default: ~/.config/zen_tuner)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    note_parser = subparsers.add_parser("note", help="Show the note for a frequency")
    note_parser.add_argument("frequency", type=float, help="Frequency in Hz")
    note_parser.add_argument(
        "--flats", action="store_true", help="Use flat notes instead of sharps"
    )
    note_parser.add_argument(
        "--round-cents",
        action="store_true",
        help="Round the cents deviation instead of flooring it",
    )
    note_parser.set_defaults(handler=cmd_note)

    analyze_parser = subparsers.add_parser(
        "analyze", help="Detect notes frame by frame in a sound file"
    )
    analyze_parser.add_argument("file", help="Path of a WAV file")
    analyze_parser.add_argument(
        "--frame-size",
        type=positive_int,
        default=None,
        help="Samples per frame (default: from config, 2048)",
    )
    analyze_parser.add_argument(
        "--gain", type=float, default=1.0, help="Linear gain applied to the file"
    )
    analyze_parser.add_argument(
        "--flats", action="store_true", help="Use flat notes instead of sharps"
    )
    analyze_parser.set_defaults(handler=cmd_analyze)

    listen_parser = subparsers.add_parser("listen", help="Tune from the microphone")
    listen_parser.add_argument(
        "--device", type=int, default=None, help="Audio input device ID"
    )
    listen_parser.add_argument(
        "--sample-rate",
        type=positive_int,
        default=None,
        help="Audio sample rate in Hz (default: from config, 44100)",
    )
    listen_parser.add_argument(
        "--frame-size",
        type=positive_int,
        default=None,
        help="Samples per frame (default: from config, 2048)",
    )
    listen_parser.add_argument(
        "--duration", type=float, default=30.0, help="Listening time in seconds"
    )
    listen_parser.add_argument(
        "--flats", action="store_true", help="Use flat notes instead of sharps"
    )
    listen_parser.set_defaults(handler=cmd_listen)

    devices_parser = subparsers.add_parser("devices", help="List audio input devices")
    devices_parser.set_defaults(handler=cmd_devices)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    setup_logging(level="DEBUG" if parsed_args.debug else "WARNING")

    if parsed_args.command is None:
        parser.print_help()
        return 1

    try:
        return parsed_args.handler(parsed_args)
    except InvalidFrameError as e:
        logger.error(f"Invalid audio frame: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
