"""Cut signed library releases: validate, tag, push and publish."""

__version__ = "0.3.0"
