"""defectview: overlay machine-generated defect annotations on an image and inspect them by hover."""

__version__ = "0.1.0"
