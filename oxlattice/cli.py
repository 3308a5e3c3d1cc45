"""Command-line interface for oxlattice."""
import argparse
import logging
import sys
from pathlib import Path

from .cadnano_reader import convert_cadnano
from .errors import ConversionError

logger = logging.getLogger(__name__)


def write_system(system, output, fmt):
    """Write the system; returns the paths written."""
    if fmt == 'oxview':
        output.write_text(system.to_oxview_string())
        return [output]
    top, conf = system.to_oxdna()
    top_path = output.with_suffix('.top')
    conf_path = output.with_suffix('.dat')
    top_path.write_text(top)
    conf_path.write_text(conf)
    return [top_path, conf_path]


def cmd_convert(args):
    """Run the convert subcommand."""
    cadnano_json = args.input.read_text()

    sequence = None
    if args.sequence:
        seq_path = Path(args.sequence)
        if seq_path.is_file():
            sequence = seq_path.read_text().strip()
        else:
            sequence = args.sequence

    system = convert_cadnano(
        cadnano_json,
        grid=args.grid,
        sequence=sequence,
        box_side=args.box,
        default_val=args.default_base,
    )

    if args.output is None:
        suffix = '.oxview' if args.format == 'oxview' else '.top'
        args.output = args.input.with_suffix(suffix)

    written = write_system(system, args.output, args.format)

    print(f"{args.input.name} -> {', '.join(p.name for p in written)}")
    print(f"  {system.N_strands} strands, {system.N} nucleotides")
    if system.issues:
        print(f"  {len(system.issues)} warnings")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="oxlattice",
        description="Convert cadnano DNA origami designs to oxDNA/oxView.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- convert subcommand --
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a cadnano JSON file to oxView or oxDNA format.",
    )
    convert_parser.add_argument(
        "input", type=Path,
        help="Input cadnano JSON file",
    )
    convert_parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output file (default: <input>.oxview, or <input>.top/.dat "
             "for oxdna)",
    )
    convert_parser.add_argument(
        "-f", "--format", choices=["oxview", "oxdna"], default="oxview",
        help="Output format (default: oxview).",
    )
    convert_parser.add_argument(
        "-g", "--grid", choices=["sq", "square", "he", "honeycomb"],
        default=None,
        help="Lattice type: sq (square) or he (honeycomb). "
             "Auto-detected if omitted.",
    )
    convert_parser.add_argument(
        "-s", "--sequence", default=None,
        help="Scaffold sequence: a nucleotide string or path to a text file. "
             "Random sequence if omitted.",
    )
    convert_parser.add_argument(
        "-b", "--box", type=float, default=None,
        help="Simulation box side length. Auto-calculated if omitted.",
    )
    convert_parser.add_argument(
        "-d", "--default-base", default="N",
        help="Default base for unsequenced staples (IUPAC code, default: N).",
    )
    convert_parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log progress information.",
    )
    convert_parser.set_defaults(func=cmd_convert)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        args.func(args)
    except ConversionError as e:
        logger.error("%s", e.message)
        sys.exit(2)


if __name__ == "__main__":
    main()
