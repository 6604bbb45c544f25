"""Command line entry: python -m _review_action {setup,main,cleanup}"""

import argparse
import sys

from .actions_toolkit import configure_logging
from .review_request_main import STAGES


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m _review_action",
        description="Run one stage of the code review request action.",
    )
    parser.add_argument("stage", choices=sorted(STAGES), help="Which stage to run.")
    parser.add_argument("--log-level", default=None, help="Override REVIEW_LOG_LEVEL.")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    return STAGES[args.stage]()


# Console scripts used as the docker action's entrypoints


def setup() -> int:
    return main(["setup"])


def request() -> int:
    return main(["main"])


def cleanup() -> int:
    return main(["cleanup"])


if __name__ == "__main__":
    sys.exit(main())
