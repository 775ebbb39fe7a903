from .dataset import Dataset
from .validation import validate_centroids, validate_output_buffers

__all__ = ["Dataset", "validate_centroids", "validate_output_buffers"]
