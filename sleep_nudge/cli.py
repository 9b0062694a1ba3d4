#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Command line report for sleep regularity.

Loads nights from a CSV export (or the demo week), prints the baseline,
drift and risk level, and optionally the recent history and the nudge the
notification layer would show.

Usage:
    sleep-nudge --csv data/nights.csv --history 14 --nudge bedtime
    sleep-nudge --seed --export demo_nights.csv
"""

import argparse
import logging
import sys

from pydantic import ValidationError

from sleep_nudge.config.config_manager import ConfigManager
from sleep_nudge.core.errors import SleepDataError
from sleep_nudge.core.models.data_models import NudgeKind
from sleep_nudge.core.recommendation.nudge_generator import format_clock
from sleep_nudge.core.services.sleep_service import SleepRegularityService


def non_negative_int(value):
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return number


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='sleep-nudge',
        description='Compute a sleep regularity baseline and decide whether to nudge'
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        '--csv',
        type=str,
        help='CSV file with date,sleep_start,sleep_end columns'
    )
    source.add_argument(
        '--seed',
        action='store_true',
        help='Use a generated demo week instead of a CSV file'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to a YAML configuration file (default: packaged config.yaml)'
    )
    parser.add_argument(
        '--window-days',
        type=int,
        default=None,
        help='Nights in the baseline window'
    )
    parser.add_argument(
        '--drift-threshold',
        type=int,
        default=None,
        help='Minutes of lateness that count as drift'
    )
    parser.add_argument(
        '--min-nights',
        type=int,
        default=None,
        help='Nights required before a risk decision is made'
    )
    parser.add_argument(
        '--align-days',
        action='store_const',
        const=True,
        default=None,
        help='Compare nights by clock time instead of absolute epoch minutes'
    )
    parser.add_argument(
        '--history',
        type=non_negative_int,
        default=0,
        help='Print this many recent nights (default: 0)'
    )
    parser.add_argument(
        '--nudge',
        choices=[k.value for k in NudgeKind],
        default=None,
        help='Print the nudge of this kind'
    )
    parser.add_argument(
        '--export',
        type=str,
        default=None,
        help='Write the loaded nights to this CSV file'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args(argv)


def print_assessment(assessment):
    """Print the stats block of the report."""
    stats = assessment.stats
    print("\n" + "=" * 70)
    print("SLEEP REGULARITY")
    print("=" * 70)
    print(f"  Nights in window:  {stats.coverage}")
    print(f"  Baseline midsleep: {format_clock(stats.baseline_mid)} UTC")
    print(f"  Last night:        {stats.recent_lateness:+d} min vs baseline")
    print(f"  Regularity loss:   {stats.regularity_loss} min")
    print(f"  Drift:             {'yes' if stats.drift else 'no'}")
    print(f"\n  Risk: {assessment.risk_label}")
    print(f"  {assessment.explanation}")


def print_history(history):
    print("\n" + "=" * 70)
    print("RECENT NIGHTS (UTC)")
    print("=" * 70)
    if history.empty:
        print("\n  No nights logged yet.")
        return
    print(history.to_string(index=False))


def print_nudge(nudge):
    print("\n" + "=" * 70)
    print(f"NUDGE ({nudge.kind.value})")
    print("=" * 70)
    print(f"  {nudge.title}: {nudge.body}")
    print(f"  Would fire: {'yes' if nudge.should_fire else 'no'}")


def main(argv=None):
    """Main entry point for the command line tool."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )

    try:
        service = SleepRegularityService.from_config_manager(
            ConfigManager(args.config),
            baseline_window_days=args.window_days,
            drift_threshold_min=args.drift_threshold,
            min_nights_for_decision=args.min_nights,
            align_days=args.align_days
        )

        if args.seed:
            service.seed_demo_week()
        else:
            with open(args.csv, 'r', encoding='utf-8') as f:
                summary = service.import_csv(f.read())
            print(f"{summary.message} from {args.csv}")

        print_assessment(service.assess())

        if args.history:
            print_history(service.history(args.history))

        if args.nudge:
            print_nudge(service.nudge(args.nudge))

        if args.export:
            with open(args.export, 'w') as f:
                f.write(service.export_csv())
            print(f"\nCSV export saved to: {args.export}")

    except FileNotFoundError as e:
        print(f"\nFile Error: {e}", flush=True)
        return 1
    except OSError as e:
        print(f"\nFile Error: could not read or write {e.filename}: {e.strerror}", flush=True)
        return 1
    except UnicodeDecodeError as e:
        print(f"\nFile Error: {args.csv} is not UTF-8 text ({e.reason} at byte {e.start})", flush=True)
        return 1
    except ValidationError as e:
        print(f"\nConfiguration Error: {e}", flush=True)
        return 1
    except SleepDataError as e:
        print(f"\nData Validation Error: {e}", flush=True)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
