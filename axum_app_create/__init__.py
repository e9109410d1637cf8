"""axum-app-create — scaffold and update Axum web applications."""

__version__ = "0.3.0"
