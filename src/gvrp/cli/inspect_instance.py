"""
Command-line tool to parse GVRP instance files and print what was read.
"""

import argparse
import logging
import sys
from pathlib import Path

from gvrp.builder import DepotPolicy
from gvrp.config.parameters import Parameters
from gvrp.exceptions import GVRPError
from gvrp.pipeline.batch import load_instance, summarize_instances
from gvrp.utils.logging import Colors, ProgressTracker, Symbols, setup_logging


def print_info():
    print("\nGVRP Instance Inspector")
    print("=" * 80)

    print("\nDescription:")
    print("  Parses GVRP (clustered CVRP) instance files and reports their contents")
    print("  One file prints the full instance; several files print a summary table")

    print("\nDepot Policies:")
    print("-" * 80)
    print("last_unassigned:")
    print("  - The last node that belongs to no set is the depot")
    print("  - Every node, depot included, stays in the customer list")
    print("  - Several unassigned nodes only raise a warning")
    print("\nfirst_unassigned:")
    print("  - Exactly one node may belong to no set; it becomes the depot")
    print("  - The depot is excluded from the customer list")

    print("\nUsage Examples:")
    print("-" * 80)
    print("1. Print one instance:")
    print("   gvrp-inspect data/A-n32-k5-C11-V2.gvrp")
    print("\n2. Summarise a folder and save the table:")
    print("   gvrp-inspect data/*.gvrp --summary-file summary.csv")
    print("\n3. Show the 5 nearest candidates of every customer:")
    print("   gvrp-inspect data/A-n32-k5-C11-V2.gvrp --k 5 --show-candidates")
    print("=" * 80)


def main(argv=None) -> int:
    """Main function to inspect one or more GVRP instance files."""
    setup_logging()
    logger = logging.getLogger(__name__)

    parser = argparse.ArgumentParser(description='Parse GVRP instance files and print their contents')
    parser.add_argument('instances',
                        nargs='*',
                        help='Path(s) to .gvrp instance files')
    parser.add_argument('--config',
                        help='Path to custom config file')
    parser.add_argument('--k',
                        type=int,
                        help='Size of each customer\'s candidate neighbour list')
    parser.add_argument('--show-candidates',
                        action='store_true',
                        help='Log the candidate neighbour lists')
    parser.add_argument('--depot-policy',
                        choices=[policy.value for policy in DepotPolicy],
                        help='How the depot is chosen among nodes without a set')
    parser.add_argument('--summary-file',
                        help='Write the multi-file summary table to this CSV file')
    parser.add_argument('--info',
                        action='store_true',
                        help='Show detailed information about the tool and exit')

    args = parser.parse_args(argv)

    if args.info:
        print_info()
        return 0

    if not args.instances:
        parser.error("at least one instance file is required")

    try:
        params = Parameters.from_yaml(args.config).with_overrides(
            k=args.k,
            show_candidates=args.show_candidates or None,
            depot_policy=args.depot_policy,
        )
    except (OSError, ValueError) as e:
        logger.error(f"{Symbols.CROSS} Invalid configuration: {e}")
        return 1

    if len(args.instances) == 1:
        path = Path(args.instances[0])
        print(path)
        try:
            instance = load_instance(path, params)
        except (GVRPError, OSError) as e:
            logger.error(f"{Symbols.CROSS} {path}: {e}")
            return 1
        print(instance)
        return 0

    progress = ProgressTracker(args.instances)
    summary = summarize_instances(args.instances, params, progress=progress)
    progress.close()

    print(summary.to_string(index=False))
    if args.summary_file:
        summary.to_csv(args.summary_file, index=False)
        print(f"{Colors.GREEN}{Symbols.CHECK} Summary saved to {args.summary_file}{Colors.RESET}")

    return 0 if (summary['Status'] == 'ok').all() else 1


if __name__ == "__main__":
    sys.exit(main())
