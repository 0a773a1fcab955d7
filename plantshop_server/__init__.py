"""Plant Shop server: storefront for the Green Earth plant catalog."""

__version__ = "0.1.0"
