"""Building blocks for a struct-of-arrays unstructured mesh with lazily computed fields."""

__version__ = "0.1.0"