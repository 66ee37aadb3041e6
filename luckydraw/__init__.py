"""Lucky draw engine: prize-tier rounds, winner log and store sync."""

__version__ = "0.1.0"
