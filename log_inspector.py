"""CLI log inspector — list, read, and search a log file and its archives."""

import argparse
import os
import sys

from logrotor.inspector import human_size, list_rotation_files, read_file, search_files


def main():
    parser = argparse.ArgumentParser(description="Inspect a rotating log file")
    parser.add_argument("--log-file", default=os.environ.get("LOG_FILE", "./logs/application.log"),
                        help="Target log file whose archives to inspect")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--list", action="store_true", help="List the target and its archives")
    group.add_argument("--read", metavar="PATH", help="Read a specific log file")
    group.add_argument("--search", metavar="TEXT", help="Search text across target and archives")
    args = parser.parse_args()

    if args.list:
        files = list_rotation_files(args.log_file)
        if not files:
            print("No log files found.")
            return
        for path in files:
            print(f"  {os.path.basename(path)}  ({human_size(os.path.getsize(path))})")

    elif args.read:
        try:
            sys.stdout.write(read_file(args.read))
        except FileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

    elif args.search:
        results = search_files(args.log_file, args.search)
        if not results:
            print(f"No matches found for '{args.search}'.")
            return
        for path, line_num, line in results:
            print(f"  [{os.path.basename(path)}:{line_num}] {line}")


if __name__ == "__main__":
    main()
