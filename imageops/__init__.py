"""Image operations service: a fixed catalog of image transformations over HTTP."""

__version__ = "1.0.0"
