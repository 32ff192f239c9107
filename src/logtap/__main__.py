"""Run logtap as REPL or MCP server."""

from logtap import main

if __name__ == "__main__":
    main()
