"""Entry point for the i3 autosplit daemon when run as a module."""

from .daemon import main

if __name__ == "__main__":
    main()
