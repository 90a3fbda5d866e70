"""dircensus - browse directories with background recursive file counts."""

__version__ = "0.1.0"
