"""
pagegraph CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import click

from .commands import inspect, map, stats


@click.group()
@click.version_option(package_name="pagegraph")
def main():
    """pagegraph: Map an HTML page into one queryable graph.

    Elements, inline styles, scripts and stylesheets are linked by
    containment, data flow and rule application.

    \b
    Quick Start:
      pagegraph map index.html -o pagegraph.json
      pagegraph stats
      pagegraph inspect inline-script
    """
    pass


# Register commands
main.add_command(map.map_page)
main.add_command(inspect.inspect)
main.add_command(stats.stats)

if __name__ == "__main__":
    main()
