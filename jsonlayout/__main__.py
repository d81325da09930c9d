"""
Allow running the layout tools as a module: python -m jsonlayout
"""
from jsonlayout.cli import cli


if __name__ == '__main__':
    cli()
