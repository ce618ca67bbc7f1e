import sys

import typer

import cli.cli

if __name__ == "__main__":
    # With no arguments, start a round
    if len(sys.argv) == 1:
        sys.argv = ["run_cli.py", "play"]
    typer_app: typer.Typer = cli.cli.app
    typer_app()
