"""Memory store modelled on human memory: strengthening, forgetting, similarity search and merging."""

__version__ = "0.1.0"