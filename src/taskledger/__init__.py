# SPDX-License-Identifier: MIT

from taskledger.cleanup import register_cleanup
from taskledger.initialize import initialize
from taskledger.terminal.app import run


def main() -> None:
    initialize()
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
