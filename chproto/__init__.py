"""Codecs, LZ4 framing, CityHash checksums, column types and data blocks for the ClickHouse native protocol."""

__version__ = "0.1.0"