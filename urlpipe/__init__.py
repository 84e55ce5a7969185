"""urlpipe: shareable, link-encoded pipelines of URL transforms."""

__version__ = "0.1.0"
