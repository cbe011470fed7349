"""composables -- scaffolds Compose Multiplatform projects."""

__version__ = "0.1.0"
