"""Entry point for ``python -m splitwise_mcp.adapter``."""

from splitwise_mcp.adapter.server import main

if __name__ == "__main__":
    main()
