"""Entry point for 'python -m uptask'."""

from uptask.cli import main

if __name__ == "__main__":
    main()
