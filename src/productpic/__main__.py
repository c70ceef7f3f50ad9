import argparse
import asyncio
import logging
from pprint import pprint
from typing import Optional

from productpic import Editor
from productpic.constants import LoadStatus
from productpic.version import __version__

logger = logging.getLogger(__name__)


def parse_patch(items: Optional[list[str]]) -> dict[str, str]:
    """Turn ``FIELD=VALUE`` items into a patch mapping."""
    patch = {}
    for item in items or []:
        key, sep, value = item.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError("Expected FIELD=VALUE, got %r" % item)
        patch[key.strip()] = value
    return patch


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="productpic command line utility.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Be more verbose.")
    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export the composition as PNG")
    export_parser.add_argument("output_file", help="Output PNG file")
    export_parser.add_argument("-i", "--image", help="Product photo")
    export_parser.add_argument(
        "-s", "--scale", type=float, default=1.0, help="Resolution multiplier"
    )
    export_parser.add_argument(
        "--set",
        dest="patch",
        action="append",
        metavar="FIELD=VALUE",
        help="Override a composition parameter, may be repeated",
    )

    show_parser = subparsers.add_parser("show", help="Show the composition parameters")
    show_parser.add_argument(
        "--set",
        dest="patch",
        action="append",
        metavar="FIELD=VALUE",
        help="Override a composition parameter, may be repeated",
    )

    return parser.parse_args(argv)


async def export(args: argparse.Namespace) -> int:
    editor = Editor()
    editor.patch(parse_patch(args.patch))
    editor.show()
    if args.image:
        result = await editor.load(args.image)
        if result.status != LoadStatus.LOADED:
            logger.error("Failed to load %s: %s" % (args.image, result.error))
            return 1
    exported = editor.export(args.scale)
    if exported.image is None:
        logger.error("Nothing to export")
        return 1
    exported.image.save(args.output_file)
    logger.info(
        "Wrote %s (%dx%d)"
        % (args.output_file, exported.image.width, exported.image.height)
    )
    return 0


def main(argv: Optional[list[str]] = None) -> Optional[int]:
    args = parse_args(argv)

    logging.basicConfig(level=logging.WARNING)
    package_logger = logging.getLogger("productpic")
    if args.verbose:
        package_logger.setLevel(logging.DEBUG)
    else:
        package_logger.setLevel(logging.INFO)

    try:
        if args.command == "export":
            return asyncio.run(export(args))
        elif args.command == "show":
            editor = Editor()
            editor.patch(parse_patch(args.patch))
            pprint(editor.parameters.asdict())
    except (argparse.ArgumentTypeError, ValueError) as e:
        logger.error(str(e))
        return 1

    return None


if __name__ == "__main__":
    main()
