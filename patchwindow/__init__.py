"""patchwindow - align maintenance windows to Patch Tuesday."""

__version__ = "1.0.0"
