#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Main CLI entry point for the photo de-duplication tool.
"""

import argparse
import logging
import sys

from .config import (
    DEFAULT_ACTION, DEFAULT_EXTENSIONS, DEFAULT_KEEP_PREFERENCES, DEFAULT_SIMILARITY_BAR,
    DEFAULT_THREADS, DEFAULT_TOP,
)
from .engine import CLUSTER_METHODS, DedupEngine
from .errors import DedupError
from .models.preferences import DuplicateAction, KeepPreference


def setup_logging(verbose: bool):
    """Configure logging for the CLI tool."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    logging.debug("Verbose logging enabled (DEBUG level).")


def _add_common_options(parser, keep: bool = True):
    parser.add_argument("--duplicate-similar", "-ds", dest="similarity_bar", type=int,
                        default=DEFAULT_SIMILARITY_BAR,
                        help="Two images are duplicates when their similarity is at least this value. "
                             f"Suggested values: [96-100] (default: {DEFAULT_SIMILARITY_BAR})")
    parser.add_argument("--recursive", "-r", action="store_true",
                        help="Search subdirectories too (.trash content will be ignored)")
    if keep:
        parser.add_argument("--keep", "-k", nargs="+", default=list(DEFAULT_KEEP_PREFERENCES),
                            help="Preferences deciding which duplicate to keep. Available options: "
                                 + "|".join(p.value for p in KeepPreference))
    parser.add_argument("--extensions", "-e", nargs="+", default=list(DEFAULT_EXTENSIONS),
                        help="Extensions of files to dedup")
    parser.add_argument("--threads", "-t", type=int, default=DEFAULT_THREADS,
                        help=f"Number of threads to use for image indexing (default: {DEFAULT_THREADS})")


def create_parser():
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Photo de-duplication tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  # Move duplicates to .trash without asking
  %(prog)s dedup --path ~/Pictures --yes --duplicate-similar 96

  # Copy only the photos the destination does not have yet
  %(prog)s dedup-copy --source /mnt/phone --destination ~/Pictures --yes

  # Compare two images
  %(prog)s compare -i a.jpg -i b.jpg
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose (DEBUG) output")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    dedup_parser = subparsers.add_parser("dedup", help="Find and act on duplicate images in a folder")
    dedup_parser.add_argument("--path", "-p", required=True,
                              help="Folder to de-duplicate (symbolic links will be ignored)")
    _add_common_options(dedup_parser)
    dedup_parser.add_argument("--action", "-a", default=DEFAULT_ACTION,
                              help="Action to take when duplicates are found. Available options: "
                                   + "|".join(a.value for a in DuplicateAction))
    dedup_parser.add_argument("--yes", "-y", action="store_true",
                              help="No interactive mode. Take action without asking for confirmation")

    copy_parser = subparsers.add_parser("dedup-copy",
                                        help="Copy images to a folder without creating duplicates")
    copy_parser.add_argument("--source", "-s", required=True, help="Folder to copy from")
    copy_parser.add_argument("--destination", "-d", required=True, help="Folder to copy into")
    _add_common_options(copy_parser)
    copy_parser.add_argument("--yes", "-y", action="store_true",
                             help="No interactive mode. Take action without asking for confirmation")

    patch_parser = subparsers.add_parser("dedup-patch",
                                         help="Replace destination images with better source duplicates")
    patch_parser.add_argument("--source", "-s", required=True, help="Folder with the better images")
    patch_parser.add_argument("--destination", "-d", required=True, help="Folder to patch")
    _add_common_options(patch_parser)

    cluster_parser = subparsers.add_parser("cluster-distribute",
                                           help="Distribute images into folders by similarity")
    cluster_parser.add_argument("--path", "-p", required=True, help="Folder to distribute")
    _add_common_options(cluster_parser, keep=False)
    cluster_parser.add_argument("--method", "-m", choices=CLUSTER_METHODS, default="threshold",
                                help="Group by similarity threshold or by k-means (default: threshold)")
    cluster_parser.add_argument("--yes", "-y", action="store_true",
                                help="No interactive mode. Take action without asking for confirmation")

    compare_parser = subparsers.add_parser("compare", help="Compare images to see their similarity")
    compare_parser.add_argument("--images", "-i", action="append", required=True,
                                help="Image to compare. Pass at least twice")

    top_parser = subparsers.add_parser("dup-top", help="Find the images most similar to one image")
    top_parser.add_argument("--input", "-i", required=True, help="Image to compare against")
    top_parser.add_argument("--source", "-s", required=True, help="Folder to search")
    top_parser.add_argument("--top", type=int, default=DEFAULT_TOP,
                            help=f"Number of results (default: {DEFAULT_TOP})")
    top_parser.add_argument("--recursive", "-r", action="store_true", help="Search subdirectories too")
    top_parser.add_argument("--extensions", "-e", nargs="+", default=list(DEFAULT_EXTENSIONS),
                            help="Extensions of files to search")
    top_parser.add_argument("--threads", "-t", type=int, default=DEFAULT_THREADS,
                            help=f"Number of threads to use for image indexing (default: {DEFAULT_THREADS})")

    return parser


def run(args, engine: DedupEngine) -> int:
    """Dispatch parsed arguments to the engine."""
    if args.command == "dedup":
        engine.dedup(path=args.path, similarity_bar=args.similarity_bar, recursive=args.recursive,
                     keep_preferences=args.keep, action=args.action, interactive=not args.yes,
                     extensions=args.extensions, verbose=args.verbose, threads=args.threads)

    elif args.command == "dedup-copy":
        engine.dedup_copy(source=args.source, destination=args.destination,
                          similarity_bar=args.similarity_bar, recursive=args.recursive,
                          keep_preferences=args.keep, interactive=not args.yes,
                          extensions=args.extensions, verbose=args.verbose, threads=args.threads)

    elif args.command == "dedup-patch":
        engine.dedup_patch(source=args.source, destination=args.destination, recursive=args.recursive,
                           similarity_bar=args.similarity_bar, keep_preferences=args.keep,
                           extensions=args.extensions, verbose=args.verbose, threads=args.threads)

    elif args.command == "cluster-distribute":
        engine.cluster_distribute(path=args.path, similarity_bar=args.similarity_bar,
                                  recursive=args.recursive, interactive=not args.yes,
                                  extensions=args.extensions, verbose=args.verbose,
                                  threads=args.threads, method=args.method)

    elif args.command == "compare":
        for first, second, ratio in engine.compare(args.images):
            if args.verbose:
                for record in (first, second):
                    print(f"Image: {record.physical_path}")
                    print(f"\tHash: \t\t{record.fingerprint:016X}")
                    print(f"\tSize: \t\t{record.size_bytes}")
                    print(f"\tResolution: \t{record.resolution_px}")
            print(f"Similarity between {first.physical_path} and {second.physical_path}: {ratio:.2%}")

    elif args.command == "dup-top":
        results = engine.dup_top(image=args.input, folder=args.source, top=args.top,
                                 recursive=args.recursive, extensions=args.extensions,
                                 verbose=args.verbose, threads=args.threads)
        print(f"Top {args.top} similar images for '{args.input}':")
        for record, ratio in results:
            print(f"{record.physical_path}: {ratio:.2%}")

    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    logging.debug("Parsed arguments: %s", args)

    try:
        return run(args, DedupEngine())
    except KeyboardInterrupt:
        logging.warning("Operation interrupted by user.")
        return 130
    except DedupError as e:
        logging.error("%s", e)
        return 1
    except Exception as e:
        logging.error("Error occurred: %s", e, exc_info=args.verbose)
        return 1


if __name__ == "__main__":
    sys.exit(main())
