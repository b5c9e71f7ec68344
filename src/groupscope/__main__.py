"""Entry point for 'python -m groupscope' command."""

from groupscope.cli import main

if __name__ == "__main__":
    main()
