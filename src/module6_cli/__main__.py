# file: module6_cli/__main__.py
import sys

from .cli import main

sys.exit(main())
