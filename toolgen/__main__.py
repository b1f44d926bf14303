"""Entry point: python -m toolgen [SPEC_PATH] [OUTPUT_PATH]

Reads spec/outline-openapi.yml (or SPEC_PATH), generates
generated/outline_tools.py (or OUTPUT_PATH).
"""

from __future__ import annotations

import logging
import sys

from .codegen import write_tools
from .errors import SpecError

logger = logging.getLogger("toolgen")


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    spec_path = args[0] if len(args) > 0 else None
    output_path = args[1] if len(args) > 1 else None
    try:
        write_tools(spec_path, output_path)
    except SpecError as e:
        logger.error("Generation aborted, no output written: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
