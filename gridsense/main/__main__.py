"""
Main module entry point.

This allows running the consumer as: python -m gridsense.main
"""

from .worker import main

if __name__ == "__main__":
    main()
