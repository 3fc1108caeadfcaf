# chwire

`chwire` reads and writes the native binary format that a column-oriented
database server uses on the wire. It uses only the standard library.

## What is in it

- `chwire.binary`: `Encoder` and `Decoder` handle little-endian integers,
  floats, varints and length-prefixed strings. Calling
  `select_compress(True)` sends the traffic through `CompressWriter` /
  `CompressReader`. Those produce and consume LZ4 frames, each led by a
  CityHash128 checksum and a small size header. The reader does not verify
  the checksum.
- `chwire.lz4`: functions for raw LZ4 blocks.
  - `encode(src)` compresses a block.
  - `decode(src, size)` decompresses a block whose size is known.
  - `compress_bound(isize)` gives the largest possible compressed size.
  - Errors are raised as `CorruptInputError` and `InputTooLargeError`.
- `chwire.cityhash`: the hash functions are `city_hash64`,
  `city_hash64_with_seed`, `city_hash64_with_seeds`, `city_hash128` and
  `city_hash128_with_seed`. There is also the incremental `City64` hasher.
  128-bit results come back as `UInt128(low, high)`.
- Column codecs:
  - `chwire.numeric.IntegerColumn` for `Int8` to `UInt64`.
  - `chwire.numeric.FloatColumn` for `Float32` and `Float64`.
  - `chwire.text.StringColumn` and `chwire.text.UUIDColumn`.
  - `chwire.temporal.DateColumn` and `chwire.temporal.DateTimeColumn`.
  - `chwire.network.IPv4Column` and `chwire.network.IPv6Column`.
  - `chwire.enums.EnumColumn` for `Enum8` and `Enum16`.
  - `chwire.decimals.DecimalColumn` for precision up to 18.
  - `chwire.columns.NullableColumn` and `chwire.columns.ArrayColumn`.

  `chwire.columns.column_factory(name, ch_type, timezone)` builds the right
  codec from a server type name such as `"Nullable(Int32)"` or
  `"Array(Array(String))"`. Any value a column cannot write raises
  `chwire.column_base.UnexpectedTypeError`.
- `chwire.block`:
  - `Block` buffers insert rows column by column and writes them as a data
    block.
  - `Block.read` parses data blocks sent by the server.
  - `BlockInfo` is the block header.
- `chwire.info`: `ClientInfo` and `ServerInfo`, the handshake structures.
- `chwire.protocol`:
  - the packet kinds `ClientPacket` and `ServerPacket`;
  - `CompressionMethod`;
  - revision and frame-size constants.
- `chwire.types`: the value types `Date` and `DateTime`, which both drop
  the timezone, and the textual `UUID`.
- `chwire.network`: `ip_to_binary` and `ip_from_binary` for 16-byte
  address values.
- `chwire.writebuffer`: `WriteBuffer` is a chunked, growable byte buffer.
  It draws from a small shared `BytePool`.
- `chwire.wordmatch.WordMatcher`: spots a keyword in text fed to it one
  character at a time, ignoring case.
- `chwire.tls`: a process-wide registry of named `ssl.SSLContext` objects:
  `register_tls_config`, `deregister_tls_config` and `get_tls_config`.

## What it does not do

`chwire` is a codec library. It does not do any of the following:

- open connections;
- perform the handshake over a socket;
- send queries or bind query parameters;
- stream result sets.

There is no database driver and no command-line program. The caller moves
the bytes.

Not every server type has a codec. `FixedString(N)` is among those
`column_factory` rejects, and so are 128-bit decimals.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Round-trip values through one column:

```python
import io
from datetime import timezone

from chwire.binary import Decoder, Encoder
from chwire.columns import column_factory

stream = io.BytesIO()
column = column_factory("n", "UInt32", timezone.utc)
column.write(Encoder(stream), 42)

stream.seek(0)
assert column.read(Decoder(stream)) == 42
```

Build a block for an insert, write it compressed, and read it back:

```python
import io
from datetime import timezone

from chwire.binary import Decoder, Encoder
from chwire.block import Block
from chwire.columns import column_factory

block = Block([
    column_factory("id", "UInt64", timezone.utc),
    column_factory("name", "String", timezone.utc),
])
block.append_row([1, "first"])
block.append_row([2, "second"])

stream = io.BytesIO()
encoder = Encoder(stream)
encoder.select_compress(True)
block.write(None, encoder)
encoder.flush()

stream.seek(0)
decoder = Decoder(stream)
decoder.select_compress(True)
received = Block()
received.read(None, decoder)
assert received.values == [[1, 2], ["first", "second"]]
```

Checksum a frame:

```python
from chwire.cityhash import city_hash128

digest = city_hash128(b"payload")
print(digest.to_bytes().hex())
```

Spot a keyword in query text:

```python
from chwire.wordmatch import WordMatcher

matcher = WordMatcher("limit")
assert any(matcher.match(char) for char in "SELECT 1 LIMIT 5")
```