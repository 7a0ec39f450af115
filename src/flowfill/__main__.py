import logging
import sys

USAGE = "Usage: flowfill <width> <height> <spacing> <output> <src> [<src> ...]"


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    match argv:
        case l if "-h" in l or "--help" in l:
            print(USAGE)
        case [width, height, spacing, output, *srcs] if srcs:
            try:
                size = float(width), float(height), float(spacing)
            except ValueError:
                print(USAGE)
                return 2
            from flowfill import run

            logging.basicConfig(level=logging.INFO)
            run(srcs, output, *size)
        case _:
            print(USAGE)
            return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
