#!/usr/bin/env python3
"""
Canonical noise renderer.

Usage:
    noisemachine <outfile> <type> <duration> <samplerate> [options]
    python -m noisemachine.tools.render <outfile> <type> <duration> <samplerate> [options]

Arguments:
    outfile      Output path; .wav, .aif, .aiff, .aifc or .afc
    type         0 = white, 1 = pink, 2 = red/brown (names also accepted)
    duration     Whole seconds, 0-30
    samplerate   Positive integer (Hz)

Options:
    --seed <int>  Fixed seed (default: $NOISEMACHINE_SEED, else random)
    --debug       Save <outfile stem>.resolved.json with the render trace
    --qc          Run QC analysis
    -v            Verbose logging

Exit status is 0 on success and 1 on any validation, init, create, write or close error.
"""
import sys
import argparse
import logging
from pathlib import Path

from noisemachine.core.errors import ArgumentCountError, NoiseMachineError
from noisemachine.core.io import AudioIO
from noisemachine.params.resolve import validate_request
from noisemachine.params.schema import USAGE
from noisemachine.tools.render_core import render_noise

logger = logging.getLogger(__name__)

BANNER = (
    "\n*** Noise Machine ***\n"
    "A noise generator which generates clips of white, pink and red noise\n"
)


class _Parser(argparse.ArgumentParser):
    """argparse that raises instead of exiting, so every failure maps to exit 1."""

    def error(self, message):
        raise ArgumentCountError(f"{message}\n{USAGE}")


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="noisemachine", description="Render white, pink or red noise to a sound file.")
    parser.add_argument("outfile", help="Output sound file (.wav, .aif, .aiff, .aifc, .afc)")
    parser.add_argument("type", help="0 = white, 1 = pink, 2 = red/brown")
    parser.add_argument("duration", help="Duration in whole seconds (0-30)")
    parser.add_argument("samplerate", help="Sample rate in Hz (positive)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--debug", action="store_true", help="Save resolved.json render trace")
    parser.add_argument("--qc", action="store_true", help="Run QC analysis")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def cmd_render(args) -> int:
    """Validate, render and print a summary."""
    # Validation precedes any allocation; same order as the positional arguments
    request = validate_request(args.type, args.duration, args.samplerate)
    AudioIO.output_format(args.outfile)

    print(f"Generating {request.noise_type.label} Noise...\n")

    audio, debug_info = render_noise(
        request=request,
        outfile=Path(args.outfile),
        seed=args.seed,
        debug=args.debug,
        qc=args.qc,
        script_name="render.py",
    )

    print(f"{request.noise_type.label} Noise Generated!\n")
    print("=== Render Complete ===")
    print(f"Output: {debug_info['output_path']}")
    print(f"Samples: {len(audio)} @ {request.sample_rate} Hz")
    print(f"Seed: {debug_info['seed']}")
    print(f"Fingerprint SHA256: {debug_info['fingerprint']['sha256'][:16]}...")
    print(f"Peak: {debug_info['fingerprint']['peak']:.4f}, RMS: {debug_info['fingerprint']['rms']:.4f}")

    if args.debug:
        print(f"Debug JSON: {debug_info['json_path']}")

    if args.qc and debug_info.get('qc_result'):
        qc = debug_info['qc_result']
        print(f"QC Status: {qc['status']}")
        if qc['failures']:
            print("  FAILURES:")
            for f in qc['failures']:
                print(f"    - {f}")
        if qc['warnings']:
            print("  WARNINGS:")
            for w in qc['warnings']:
                print(f"    - {w}")

    return 0


def main(argv=None) -> int:
    print(BANNER)
    try:
        args = build_parser().parse_args(argv)
        logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
        return cmd_render(args)
    except NoiseMachineError as exc:
        logger.debug("Render failed", exc_info=True)
        print(f"Error! {exc}\n", file=sys.stderr)
        return exc.exit_code


if __name__ == "__main__":
    sys.exit(main())
