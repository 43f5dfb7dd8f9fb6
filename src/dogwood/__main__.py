"""Run with: python -m dogwood"""

from dogwood.cli import main

if __name__ == "__main__":
    main()
