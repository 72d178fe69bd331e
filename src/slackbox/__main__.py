"""CLI entry point.

Allows running slackbox as a module:
    python -m slackbox
"""

from slackbox.cli import main

if __name__ == "__main__":
    main()
