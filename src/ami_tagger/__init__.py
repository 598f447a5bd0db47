"""Tag owned, publicly executable AMIs that lack a tag across all enabled regions."""

__version__ = "0.1.0"
