"""Entry point for entitlectl.

Usage::

    python main.py --target https://idm.example.com entitlement get user alice
    python main.py entitlement create group Engineering Slack
"""

import sys

from cli.dispatcher import run


def main() -> None:
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()
