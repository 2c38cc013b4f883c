"""Allow `python -m todoserver serve`."""

from todoserver.cli.main import main

if __name__ == "__main__":
    main()
