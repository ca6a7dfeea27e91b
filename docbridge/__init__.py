"""docbridge: wires a documentation generator into a multi-module build model."""

__version__ = "0.1.0"
