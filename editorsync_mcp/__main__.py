"""Entry point for running the MCP tool adapter."""

from .server import main

if __name__ == "__main__":
    main()
