"""
Command-line tool for checking layout configs and encoding single events.
"""

import logging
import sys

import click
import yaml

from jsonlayout import context
from jsonlayout.config import load_config
from jsonlayout.errors import ConfigError
from jsonlayout.layout import JSONLayout

LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def parse_context_items(items):
    """
    Parse KEY=VALUE pairs; values are read as YAML

    Raises:
        click.BadParameter: If an item has no '='
    """
    data = {}
    for item in items:
        key, sep, raw = item.partition('=')
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint='--context')
        try:
            data[key] = yaml.safe_load(raw) if raw else ''
        except yaml.YAMLError:
            data[key] = raw
    return data


def _load_layout(config_file):
    try:
        return JSONLayout(load_config(config_file))
    except ConfigError as e:
        click.echo(click.style(f'❌ Invalid layout config: {e}', fg='red'), err=True)
        sys.exit(1)


@click.group()
@click.version_option(version='1.0.0')
def cli():
    """Size-bounded JSON log layout tools"""
    pass


@cli.command()
@click.argument('config_file', type=click.Path())
def check(config_file):
    """Validate a layout config file"""
    layout = _load_layout(config_file)
    click.echo(click.style(f'✓ Layout config valid: {config_file}', fg='green'))
    click.echo(f'Budget: {int(layout.config.budget)} bytes')


@cli.command()
@click.argument('config_file', type=click.Path())
@click.argument('message')
@click.option('--category', default='jsonlayout', help='Logger name for the event')
@click.option('--level', type=click.Choice(LEVELS), default='INFO', help='Event level')
@click.option('--context', 'context_items', multiple=True, metavar='KEY=VALUE',
              help='Context entry (repeatable); VALUE is parsed as YAML')
def encode(config_file, message, category, level, context_items):
    """Encode MESSAGE with the layout in CONFIG_FILE and print the line"""
    layout = _load_layout(config_file)
    items = parse_context_items(context_items)
    if items and not layout.config.include_context:
        click.echo(click.style('⚠ --context ignored: include_context is false in the layout config',
                               fg='yellow'), err=True)

    with context.bound(**items):
        record = layout.make_log_record(message, category, getattr(logging, level))
        line = layout.format(record)

    click.echo(line)
