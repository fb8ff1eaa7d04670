"""
policylink.cli.__main__ - ``python -m policylink.cli`` entry point
"""

from policylink.cli import main

if __name__ == "__main__":
    main()
