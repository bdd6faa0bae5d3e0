"""Mine keyword classification rules from labeled accounting entries."""

__version__ = "0.1.0"


def __getattr__(name):
    # The CLI pulls in click, so it is only loaded on demand
    if name == "main":
        from ledgerrules.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
