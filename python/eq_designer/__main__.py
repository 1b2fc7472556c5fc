"""
EQ Designer entry point

Run with: python -m eq_designer
"""

import sys


def main():
    """Main entry point for EQ Designer."""
    try:
        from .ui import run_app
        return run_app()
    except ImportError as e:
        print(f"Error: {e}")
        print("\nMake sure to install the dependencies: pip install -e .")
        return 1


if __name__ == "__main__":
    sys.exit(main())
