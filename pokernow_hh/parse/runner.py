"""
Main orchestrator for converting PokerNow exports.
Coordinates format detection, hand reconstruction and rendering.
"""

import json
import logging
import argparse
import sys
from typing import Optional, Union
from pathlib import Path

from .interfaces import HandReader
from .result import ConversionResult, ParseOutcome
from .site_pokernow import PokerNowParser
from .site_ohh import OHHReader
from .filters import PlayerCountFilter
from ..classify.format_detector import detect_input_format, FORMAT_JSON, FORMAT_JSONL
from ..config.loader import load_options
from ..config.options import ConvertOptions
from ..errors import ConversionError, SpectatorLogError
from ..export.pokerstars import PokerStarsFormatter
from ..upload.ingest import smart_decode

logger = logging.getLogger(__name__)


class ConversionRunner:
    """Runs one export through detection, reconstruction and rendering."""

    def __init__(self):
        self.log_parser: HandReader = PokerNowParser()
        self.json_reader = OHHReader()

    def reconstruct(self, text: str, input_format: str, player_filter: PlayerCountFilter) -> ParseOutcome:
        """
        Rebuild hands with the reader matching ``input_format``.

        Raises:
            ConversionError: on structural errors or a spectator log
        """
        if input_format == FORMAT_JSON:
            return self.json_reader.parse(text, player_filter)
        if input_format == FORMAT_JSONL:
            return self.json_reader.parse_lines(text, player_filter)
        return self.log_parser.parse(text, player_filter)

    def convert(self, data: Union[bytes, str], options: Optional[ConvertOptions] = None) -> ConversionResult:
        """
        Convert a raw export into PokerStars hand history text.

        Args:
            data: Export content (CSV, JSON or JSON Lines)
            options: Conversion options, defaults when omitted

        Returns:
            ConversionResult with rendered text and skip diagnostics

        Raises:
            InputFormatError: if the input is malformed
            SpectatorLogError: if the log has no hero cards
        """
        options = options or ConvertOptions()
        text = smart_decode(data)

        input_format = detect_input_format(text)
        logger.info(f"Detected input format: {input_format}")

        outcome = self.reconstruct(text, input_format, options.player_count_filter)
        rendered = PokerStarsFormatter(options).format_hands(outcome.hands)

        return ConversionResult(
            text=rendered,
            input_format=input_format,
            hands=outcome.hands,
            skipped_hands_info=outcome.skipped,
        )

    def convert_file(self, file_path: Union[str, Path], options: Optional[ConvertOptions] = None) -> ConversionResult:
        """
        Convert an export file.

        Args:
            file_path: Path to the export

        Returns:
            ConversionResult for the file
        """
        file_path = Path(file_path)
        logger.info(f"Converting {file_path}")
        return self.convert(file_path.read_bytes(), options)


# Convenience functions for module-level usage
_default_runner = None


def get_default_runner() -> ConversionRunner:
    """Get or create the default conversion runner."""
    global _default_runner
    if _default_runner is None:
        _default_runner = ConversionRunner()
    return _default_runner


def convert(data: Union[bytes, str], options: Optional[ConvertOptions] = None) -> ConversionResult:
    """
    Convert export content using the default runner.

    Args:
        data: Export content
        options: Conversion options

    Returns:
        ConversionResult
    """
    return get_default_runner().convert(data, options)


def convert_file(file_path: Union[str, Path], options: Optional[ConvertOptions] = None) -> ConversionResult:
    """Convert an export file using the default runner."""
    return get_default_runner().convert_file(file_path, options)


def _player_filter_from_args(args) -> Optional[PlayerCountFilter]:
    player_filter = PlayerCountFilter.ALL
    if args.filter_hu:
        player_filter |= PlayerCountFilter.HU
    if args.filter_spinandgo:
        player_filter |= PlayerCountFilter.SPIN_AND_GO
    if args.filter_mtt:
        player_filter |= PlayerCountFilter.MTT
    # No flag given: keep whatever the config file says
    return player_filter if player_filter else None


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pokernow-hh',
        description='Convert PokerNow logs (CSV, JSON, JSON Lines) to PokerStars hand histories',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument('-i', '--input', dest='input_file',
                        help='Input file (default: stdin)')
    parser.add_argument('-o', '--output', dest='output_file',
                        help='Output file (default: stdout)')
    parser.add_argument('--hero-name', dest='hero_name',
                        help='Your display name at the table (required unless set in the config)')
    parser.add_argument('--config', dest='config_path',
                        help='YAML file with conversion options')
    parser.add_argument('--site-name', dest='site_name',
                        help='Site label written in hand headers (default: the site named in JSON input, else PokerStars)')
    parser.add_argument('--timezone', dest='timezone',
                        help='Timezone for hand timestamps, e.g. Asia/Tokyo (default: UTC)')
    parser.add_argument('--tournament-name', dest='tournament_name',
                        help='Tournament name')
    parser.add_argument('--tournament-id', dest='tournament_id',
                        help='Tournament id (default: first hand id)')
    parser.add_argument('--filter-hu', action='store_true',
                        help='Keep heads-up hands (2 players)')
    parser.add_argument('--filter-spinandgo', action='store_true',
                        help='Keep Spin & Go hands (3 players)')
    parser.add_argument('--filter-mtt', action='store_true',
                        help='Keep MTT hands (4-9 players)')
    parser.add_argument('--cash', action='store_true',
                        help='Write cash game histories instead of tournament ones')
    parser.add_argument('--rake-percent', dest='rake_percent', type=float,
                        help='Cash game rake percentage, e.g. 5.0')
    parser.add_argument('--rake-cap-bb', dest='rake_cap_bb', type=float,
                        help='Cash game rake cap in big blinds, e.g. 4.0')
    parser.add_argument('--skipped-report', dest='skipped_report',
                        help='Write skipped hand diagnostics to this JSON file')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable verbose logging')
    return parser


# CLI interface
def main(argv=None):
    """CLI entry point for the converter."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        options = load_options(
            args.config_path,
            hero_name=args.hero_name,
            site_name=args.site_name,
            timezone=args.timezone,
            tournament_name=args.tournament_name,
            tournament_id=args.tournament_id,
            player_count_filter=_player_filter_from_args(args),
            game_type="cash" if args.cash else None,
            rake_percent=args.rake_percent,
            rake_cap_bb=args.rake_cap_bb,
        )
    except (OSError, ValueError) as e:
        print(f"Error: invalid options: {e}", file=sys.stderr)
        sys.exit(1)

    if not options.hero_name:
        parser.error('--hero-name is required')

    try:
        if args.input_file:
            data = Path(args.input_file).read_bytes()
        elif not sys.stdin.isatty():
            data = sys.stdin.buffer.read()
        else:
            parser.error('no input: pass -i/--input or pipe a log on stdin')

        result = convert(data, options)

        if args.output_file:
            Path(args.output_file).write_text(result.text, encoding='utf-8')
        else:
            sys.stdout.write(result.text)

        if args.skipped_report:
            report = result.to_dict()
            Path(args.skipped_report).write_text(json.dumps(report, ensure_ascii=False, indent=2),
                                                 encoding='utf-8')

        if result.skipped_hands > 0:
            print(f"Skipped {result.skipped_hands} hand(s)", file=sys.stderr)

        sys.exit(0)

    except SpectatorLogError as e:
        print(f"Error: {e}. Export the log from your own seat, not as a spectator.", file=sys.stderr)
        sys.exit(1)
    except (ConversionError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
