# chproto

Pure-Python building blocks for the ClickHouse native binary protocol.
The package has no runtime dependencies.

## What is in it

- `chproto.codec`: `Encoder` and `Decoder` read and write the protocol's
  little-endian integers and floats, unsigned varints (`write_uvarint` /
  `read_uvarint`), booleans and length-prefixed strings. When you build one
  with `compressed=True`, `select_compress(True)` sends traffic through
  checksummed LZ4 frames, and `select_compress(False)` switches back to
  plain traffic.
- `chproto.lz4`: raw LZ4 blocks through `encode(src)`, `decode(src, size)`
  and `compress_bound(size)`. Broken input raises `CorruptInputError`, and
  input that is too large to compress raises `InputTooLargeError`.
- `chproto.cityhash`: CityHash 1.0.2. It provides `city_hash64`,
  `city_hash64_with_seed`, `city_hash64_with_seeds`, `city_hash128` and
  `city_hash128_with_seed`. The 128-bit functions return a `Uint128`. There is
  also an incremental `City64` hasher with `update`, `intdigest`, `digest` and
  `reset`.
- `chproto.compress`: `CompressReader` and `CompressWriter` handle the framed
  format, in which each LZ4 block is preceded by a 16-byte CityHash128
  checksum and a 9-byte header. The writer emits a frame when its 1 MiB buffer
  fills or when you call `flush()`. A malformed frame raises
  `CompressionError`.
- `chproto.writebuffer`: `WriteBuffer` is a chunked append-only buffer with
  `write`, `write_to`, `getvalue` and `reset`. It is backed by a small shared
  `BytePool` that you can size with `init_byte_pool`.
- `chproto.protocol`: the packet codes (`ClientPacket`, `ServerPacket`) and the
  revision constants.
- `chproto.columns`: the column types. Build one from a server type name with
  `chproto.columns.factory.factory(name, ch_type, timezone)`, where
  `timezone=None` means local time. Supported names:
  - `Int8` … `Int64`, `UInt8` … `UInt64`, `Float32`, `Float64`, `String` and
    `UUID`.
  - `Date`, `DateTime` and `DateTime(...)`, `DateTime64(p)`. These are read
    as `datetime`.
  - `IPv4` and `IPv6`. These are read as `ipaddress` objects.
  - `Decimal(P, S)` with `P <= 18`. It is read as the raw scaled integer.
  - `Enum8(...)` and `Enum16(...)`. These are read as names.
  - `Nullable(T)`, through `read_null` and `write_null`.
  - `Array(T)`, nested to any depth, through `read_array`.
  - `SimpleAggregateFunction(f, T)`, which resolves to `T`.

  A value of the wrong type raises `UnexpectedTypeError`. The helper class
  `chproto.columns.ip.IP` converts between raw, textual and 16-byte
  address forms.
- `chproto.block`: `Block` holds the columns and values of one data block.
  `read` decodes a block from the wire. `append_row` and the typed `write_*`
  methods fill a block, and `write` encodes it.
- `chproto.info`: `ClientInfo` writes the client hello fields. `ServerInfo`
  reads the server hello fields, including the server time zone.
- `chproto.sqltypes`: parameter helpers. `Date` and `DateTime` drop the time
  zone and keep the wall-clock value. `UUID` is a UUID string that converts
  to and from 16 raw bytes.

## Installation

```
pip install .
```

## Example

```python
import io
from chproto.codec import Encoder, Decoder
from chproto.columns.factory import factory

buf = io.BytesIO()
column = factory("id", "UInt32", None)
column.write(Encoder(buf), 42)

buf.seek(0)
assert column.read(Decoder(buf), False) == 42
```

An LZ4 block round trip:

```python
from chproto import lz4

data = b"hello hello hello hello hello"
assert lz4.decode(lz4.encode(data), len(data)) == data
```

## What it does not do

- It opens no connections and runs no queries. There is no client, no
  handshake driver and no command-line tool. You supply the streams and
  decide the order of packets.
- `FixedString(N)`, `Decimal` with a precision above 18, and other types not
  listed above are rejected by `factory` with a `ValueError`.
- Compressed frames must use LZ4. Frames with any other method byte,
  including ZSTD, raise `CompressionError`. Frame checksums are written but
  not verified when frames are read.

## Running the tests

```
pip install .[test]
pytest
```