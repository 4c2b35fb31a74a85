# wiscvlog

`wiscvlog` is a value log in the WiscKey style. Values are written to an
append-only file, and an in-memory index maps each key to the location of its
value. Each record in the file starts with a 12-byte header: a masked CRC32C
checksum (4 bytes, little-endian) followed by the payload length (8 bytes,
little-endian). When the part of the log that has not been collected reaches a
threshold, a garbage collector copies records whose keys are still in the index
to the head of the log.

The package uses only the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Building blocks

- `wiscvlog.format` encodes and decodes the parts of a log entry.
  - `put_value(value_type, data)` and `get_value(src)` handle a `Value`: a
    `VlogValueType` byte and length-prefixed data.
  - `put_kv(value_type, key, value)` and `get_kv(src)` handle a `KV`: a
    `ValueType` byte, a length-prefixed key and a length-prefixed encoded value.
  - `put_meta(offset, size)` and `get_meta(src)` handle a `Meta`, a location
    stored as two varints.
  - If the input is truncated or malformed, decoding raises `CorruptionError`.
    If a type or number is out of range, encoding raises `InvalidArgumentError`.
- `wiscvlog.files` provides `SequentialFile` and `WritableFile`, along with
  `new_sequential_file(path)` and `new_writable_file(path)`. A `WritableFile`
  always creates a new file and replaces any file that already has the same
  name.
- `wiscvlog.writer`:
  - `RecordWriter` appends framed records and flushes after each one.
  - It also provides `crc32c(data, crc=0)`, `mask_crc`, `unmask_crc`,
    `encode_header`, and the constants `HEADER_SIZE` (12) and `BLOCK_SIZE`
    (32768).
- `wiscvlog.reader`:
  - `RecordReader` reads records one after another. Use `read_record()`, which
    returns `None` at the end of the file or when a record is damaged, or
    iterate over the reader.
  - `read(size, pos)` reads raw bytes at any offset.
  - Checksum mismatches, short reads and I/O failures are reported to an
    optional `Reporter`.
- `wiscvlog.vlogfile.VlogFile` puts a writer and a reader on the same path. It
  provides `write_record`, `read_record`, `read(offset, length)`,
  `check_crc(src)`, `sync` and `close`. `check_crc` verifies a raw framed
  record and returns its payload. Failures raise `CorruptionError`.
- `wiscvlog.handler.VlogHandler` is the index. It maps each key to an encoded
  location and provides `update`, `put`, `get` and `is_key_valid`.
- `wiscvlog.batch.WriteBatch` collects puts and deletes and replays them, in
  order, to a `BatchHandler`.
- `wiscvlog.wisckey.VlogWisckey` ties these parts together:
  - `add_batch(batch)` writes each put to the log and updates the index.
  - When `size` (that is, `head - tail`) reaches the threshold, garbage
    collection runs.
  - `read(key, meta_val)` returns the stored value.
- All errors are subclasses of `wiscvlog.errors.VlogError`: `NotFoundError`,
  `CorruptionError`, `NotSupportedError`, `InvalidArgumentError` and
  `VlogIOError`.

Strings passed as data or keys are encoded as UTF-8. Values are always
returned as `bytes`.

## Example

```python
from wiscvlog.batch import WriteBatch
from wiscvlog.handler import VlogHandler
from wiscvlog.wisckey import VlogWisckey

handler = VlogHandler()

with VlogWisckey("data.vlog", 400, handler) as store:
    batch = WriteBatch()
    batch.put(b"key1", b"value1")
    batch.put(b"key2", b"value2")
    store.add_batch(batch)

    meta = handler.get(b"key1")      # encoded (offset, size) of the record
    assert store.read(b"key1", meta) == b"value1"
```

`read` checks the record's CRC. It also checks that the record is a put holding
a plain value and that the stored key matches the given key. If any of these
checks fails, it raises `CorruptionError`. If `meta_val` is `None`, for example
because `handler.get` did not find the key, `read` raises `NotFoundError`.

## What it does not do

- The index lives only in memory and is never written to disk. Opening a
  `VlogWisckey` or `VlogFile` on a path creates a new, empty file, so there is
  no way to reopen or recover an existing log.
- Deletes in a batch are passed to the handler but are not written to the log,
  and they do not remove keys from the index.
- Garbage collection keeps any record whose key is still in the index and moves
  `tail` forward. It does not shrink the file: `deallocate_disk_space` is not
  supported and raises `NotSupportedError`, and `RecordReader` turns that error
  into `False`.
- There is no sorted key store, no range scans, no command-line tool and no
  server.