"""Entry point for running db_inspect_bridge as a module."""

from db_inspect_bridge.server import cli_entry

if __name__ == "__main__":
    cli_entry()
