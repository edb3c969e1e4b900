"""etlgraph: dataflow node graphs with runtime-defined plugin nodes."""

__version__ = "0.1.0"
