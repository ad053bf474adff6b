"""Entry point for running sip_test_util as a module.

This allows the package to be executed as:
    python -m sip_test_util
"""

from sip_test_util.cli.main import cli

if __name__ == "__main__":
    cli()
