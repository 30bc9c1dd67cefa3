# main.py
import sys

from route_sketch.cli import main

if __name__ == "__main__":
    sys.exit(main())
