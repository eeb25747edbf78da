"""imgsign - sign container images and submit the signatures to a signing service."""

__version__ = "0.1.0"
__author__ = "imgsign Contributors"

from imgsign.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
