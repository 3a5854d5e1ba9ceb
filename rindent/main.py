"""
Standalone application entry point.

    python -m rindent.main [--verbose] [file.rb]
"""

import argparse
import sys
from pathlib import Path
from typing import Optional
from typing import Sequence

from PySide6TK import QtWrappers

from rindent.core import log
from rindent.core.client import RindentClientWindow


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='rindent', description='Ruby editor with auto-indentation.')
    parser.add_argument('file', nargs='?', type=Path, help='Ruby file to open.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log indentation decisions.')
    parser.add_argument('--log-file', type=Path, help='Also write the log to this file.')
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    log.init_logging(args.verbose, args.log_file)
    RindentClientWindow.startup_file = args.file

    return QtWrappers.exec_app(
        RindentClientWindow,
        'RindentClientWindow'
    )


if __name__ == '__main__':
    sys.exit(main())
