"""Release automation for modules shipping module.prop + update.json."""

__version__ = "0.1.0"
