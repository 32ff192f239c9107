"""logtap command modules.

Importing a module registers its @app.command functions with the app.
"""

from logtap.commands import (
    connection,
    console,
    network,
    javascript,
)

__all__ = ["connection", "console", "network", "javascript"]
