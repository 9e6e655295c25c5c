"""Allow ``python -m playpack`` to invoke the CLI."""

from playpack.cli.main import main

if __name__ == "__main__":
    main()
