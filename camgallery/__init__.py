"""ESP32-CAM photo upload and gallery service."""

__version__ = "1.0.0"
