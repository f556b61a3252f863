"""Entry point for ``python -m splitwise_mcp``."""

from splitwise_mcp.cli.main import main

if __name__ == "__main__":
    main()
