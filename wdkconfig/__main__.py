"""
Entry point for running wdkconfig as a module.

Usage: python -m wdkconfig [command] [options]
"""

from wdkconfig.cli.parser import main

if __name__ == "__main__":
    main()
