"""mdtasks - task metadata parsing and sorting for markdown documents."""

__version__ = "0.1.0"
