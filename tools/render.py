#!/usr/bin/env python3
"""
Render demonstration waves and arrangements to WAV files.

Usage:
    python tools/render.py <subcommand> [options]

Subcommands:
    tone <shape> <frequency>     Render a single oscillator tone (sine/square/saw/triangle)
    noise <color>                Render white/pink/brown noise
    mix                          Mix two tones of equal length
    compose                      Render an overlapping arrangement (bass note + melody)
    chord                        Render a chord from an arrangement JSON file

Options:
    --sample-rate <int>   Sample rate (default: LIGHTMIX_SAMPLE_RATE or 44100)
    --bits <int>          Output bit depth (default: 16)
    --output <path>       Output file (default: <subcommand>.wav)
    --decay               Apply a linear decay filter to the result
"""
import sys
import os
import json
import argparse
import logging
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from lightmix.core.config import DEFAULT_BITS, DEFAULT_SAMPLE_RATE
from lightmix.core.errors import LightmixError
from lightmix.core.types import Wave
from lightmix.dsp.composer import Composer, WaveInfo
from lightmix.dsp.filters import Filter, chain
from lightmix.dsp.noise import Noise
from lightmix.dsp.oscillators import Oscillator

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("lightmix.render")

SHAPES = {
    "sine": Oscillator.sine,
    "square": Oscillator.square,
    "saw": Oscillator.saw,
    "triangle": Oscillator.triangle,
}
NOISES = {
    "white": Noise.white,
    "pink": Noise.pink,
    "brown": Noise.brown,
}


def _note(frequency: float, duration: float, sample_rate: int) -> Wave:
    """Quiet sine with a linear fade-out, used for arrangement voices."""
    tone = Oscillator.sine(frequency, duration, sample_rate, amplitude=0.2)
    return tone.filter(Filter.linear_decay())


def _finish(wave: Wave, args) -> int:
    if args.decay:
        wave = wave.filter(Filter.linear_decay())
    output = Path(args.output or f"{args.command}.wav")
    wave.save(str(output), bits=args.bits)
    logger.info(
        "Wrote %s (%d samples, %.3f s, %d Hz, %d ch)",
        output, len(wave), wave.duration, wave.sample_rate, wave.channels,
    )
    return 0


def cmd_tone(args):
    """Render a single oscillator tone."""
    wave = SHAPES[args.shape](args.frequency, args.duration, args.sample_rate, amplitude=args.amplitude)
    return _finish(wave, args)


def cmd_noise(args):
    """Render seeded noise."""
    wave = NOISES[args.color](args.duration, args.sample_rate, amplitude=args.amplitude, seed=args.seed)
    return _finish(wave, args)


def cmd_mix(args):
    """Mix two sine tones (default A4 + E5)."""
    a = Oscillator.sine(args.freq_a, args.duration, args.sample_rate, amplitude=0.4)
    b = Oscillator.sine(args.freq_b, args.duration, args.sample_rate, amplitude=0.4)
    return _finish(a.mix(b), args)


def cmd_compose(args):
    """Bass C4 held for a second, E4 with it, G4 entering at 0.5 s."""
    sr = args.sample_rate
    half = sr // 2
    composer = Composer(sample_rate=sr, channels=1).append_slice([
        WaveInfo(_note(261.63, 1.0, sr), 0),
        WaveInfo(_note(329.63, 0.5, sr), 0),
        WaveInfo(_note(392.00, 0.5, sr), half),
    ])
    return _finish(composer.finalize(), args)


def cmd_chord(args):
    """
    Render an arrangement from JSON:
    {"notes": [{"frequency": 440.0, "duration": 0.5, "start": 0.0}, ...],
     "filters": [{"name": "gain", "gain_db": -6.0}, ...]}
    start and duration are in seconds.
    """
    with open(args.arrangement_json, "r") as f:
        spec = json.load(f)

    sr = args.sample_rate
    composer = Composer(sample_rate=sr, channels=1)
    for note in spec.get("notes", []):
        wave = _note(float(note["frequency"]), float(note["duration"]), sr)
        composer = composer.append(WaveInfo(wave, int(float(note.get("start", 0.0)) * sr)))

    filters = []
    for entry in spec.get("filters", []):
        entry = dict(entry)
        factory = getattr(Filter, entry.pop("name"))
        filters.append(factory(**entry))

    result = composer.finalize()
    if filters:
        result = result.filter(chain(*filters))
    return _finish(result, args)


def main():
    parser = argparse.ArgumentParser(description="Render lightmix demonstration waves")
    subparsers = parser.add_subparsers(dest="command", help="Subcommand")

    # Common arguments
    def add_common_args(p):
        p.add_argument("--sample-rate", type=int, default=DEFAULT_SAMPLE_RATE, help="Sample rate")
        p.add_argument("--bits", type=int, default=DEFAULT_BITS, help="Output bit depth")
        p.add_argument("--output", type=str, help="Output file (default: <subcommand>.wav)")
        p.add_argument("--decay", action="store_true", help="Apply a linear decay filter")

    p_tone = subparsers.add_parser("tone", help="Render an oscillator tone")
    p_tone.add_argument("shape", choices=sorted(SHAPES))
    p_tone.add_argument("frequency", type=float)
    p_tone.add_argument("--duration", type=float, default=1.0)
    p_tone.add_argument("--amplitude", type=float, default=0.5)
    add_common_args(p_tone)

    p_noise = subparsers.add_parser("noise", help="Render noise")
    p_noise.add_argument("color", choices=sorted(NOISES))
    p_noise.add_argument("--duration", type=float, default=1.0)
    p_noise.add_argument("--amplitude", type=float, default=0.5)
    p_noise.add_argument("--seed", type=int, default=0)
    add_common_args(p_noise)

    p_mix = subparsers.add_parser("mix", help="Mix two tones")
    p_mix.add_argument("--freq-a", type=float, default=440.0)
    p_mix.add_argument("--freq-b", type=float, default=659.25)
    p_mix.add_argument("--duration", type=float, default=1.0)
    add_common_args(p_mix)

    p_compose = subparsers.add_parser("compose", help="Render overlapping arrangement")
    add_common_args(p_compose)

    p_chord = subparsers.add_parser("chord", help="Render arrangement from JSON")
    p_chord.add_argument("arrangement_json")
    add_common_args(p_chord)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    commands = {
        "tone": cmd_tone,
        "noise": cmd_noise,
        "mix": cmd_mix,
        "compose": cmd_compose,
        "chord": cmd_chord,
    }
    try:
        return commands[args.command](args)
    except LightmixError as err:
        logger.error("Render failed: %s", err)
        return 1


if __name__ == "__main__":
    sys.exit(main())
