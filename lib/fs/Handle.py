"""
lib/fs/Handle.py

Purpose:
Provides the byte streams handed out by File.OpenRead, File.OpenWrite and File.OpenAppend.

Place in Architecture:
Part of the FS layer. A RecordReader is a snapshot of a payload. A RecordWriter buffers writes and commits them to the record when flushed or closed; while it is open it holds the Volume's lease on that record.

Interface:

	RecordReader(payload): Read-only, seekable stream over a payload.
	RecordWriter(file, record_id, payload, append=False): Writable stream for a File handle. Starts at offset 0 (or at the end when appending) and never truncates bytes it did not overwrite.
	RecordWriter.flush(): Commit the buffer to the record if anything changed, then refresh the owning File.
	RecordWriter.close(): Commit and release the lease.

TODOs/FIXMEs:
None.
"""

import io
import logging


class RecordReader(io.BytesIO):
	def writable(this):
		return False

	def write(this, data):
		raise io.UnsupportedOperation("stream not writable")

	def writelines(this, lines):
		raise io.UnsupportedOperation("stream not writable")

	def truncate(this, size=None):
		raise io.UnsupportedOperation("stream not writable")


class RecordWriter(io.BytesIO):
	"""
	Logical writable handle on one record. There may be only one open writer per record.
	"""

	def __init__(this, file, record_id, payload=b"", append=False):
		super().__init__(payload)
		this.file = file
		this.volume = file.volume
		this.record_id = record_id
		this.upath = file.upath
		this.dirty = False

		this.volume.Lease(record_id, this)
		if append:
			this.seek(0, io.SEEK_END)

	def readable(this):
		return False

	def read(this, size=-1):
		raise io.UnsupportedOperation("stream not readable")

	def write(this, data):
		this.dirty = True
		return super().write(data)

	def writelines(this, lines):
		for line in lines:
			this.write(line)

	def truncate(this, size=None):
		this.dirty = True
		return super().truncate(size)

	def flush(this):
		if this.closed:
			return
		super().flush()
		if this.dirty:
			payload = this.getvalue()
			this.volume.namespace.store.Write(this.record_id, payload)
			this.dirty = False
			logging.debug(f"Committed {len(payload)} bytes to {this.upath}.")

			# The owner caches length and write time.
			this.file.Resolve()

	def close(this):
		if this.closed:
			return
		try:
			this.flush()
		finally:
			this.volume.Release(this.record_id, this)
			super().close()
