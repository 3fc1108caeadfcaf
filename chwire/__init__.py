"""Native wire format of a columnar database: column codecs, blocks, LZ4 and CityHash."""

__version__ = "0.1.0"