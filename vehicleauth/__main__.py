"""Allow `python -m vehicleauth`."""

from vehicleauth.cli import main

if __name__ == "__main__":
    main()
