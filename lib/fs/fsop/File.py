"""
lib/fs/fsop/File.py

Purpose:
Implements the one-shot file operations: each call takes a Volume and a path, does one job and closes whatever it opened.

Place in Architecture:
A thin layer over the File handle for callers that do not want to keep handles around. Nothing here touches the Namespace or the store directly.

Interface:

	file_exists(volume, path): RETURNS False for invalid paths instead of raising.
	file_copy / file_move / file_replace / file_delete: Structural operations.
	file_read_all_bytes / file_write_all_bytes: Whole-payload binary access.
	file_read_all_text / file_write_all_text / file_append_all_text: Whole-payload text access.
	file_read_all_lines / file_read_lines / file_write_all_lines / file_append_all_lines: Line based text access.
	file_open_read / file_open_write / file_create / file_open_text / file_create_text / file_append_text: Streams. The caller closes them.
	file_get_attributes: getattr-style dict.
	file_{get,set}_{creation,last_access,last_write}_time[_utc]: Timestamps.

TODOs/FIXMEs:
None.
"""

import logging

from ...Exceptions import InvalidPath
from ..File import File

NEWLINE = "\n"


def file_exists(volume, path):
	try:
		return File(volume, path).exists
	except InvalidPath:
		return False

def file_copy(volume, source, destination, overwrite=False):
	return File(volume, source).CopyTo(destination, overwrite=overwrite)

def file_move(volume, source, destination):
	File(volume, source).MoveTo(destination)

# Replace the contents of `destination` with those of `source` and remove `source`.
# The old contents of `destination` are kept in `backup` when one is given.
def file_replace(volume, source, destination, backup=None):
	source = File(volume, source)
	target = File(volume, destination)
	source.Require()
	target.Require()

	with volume.store.Batch():
		if (backup is not None):
			target.CopyTo(backup, overwrite=True)
		source.CopyTo(target.upath, overwrite=True)
		source.Delete()
	logging.info(f"Replaced {target.upath} with {source.upath}.")

def file_delete(volume, path):
	File(volume, path).Delete()


def file_open_read(volume, path):
	return File(volume, path).OpenRead()

def file_open_write(volume, path):
	return File(volume, path).OpenWrite()

def file_create(volume, path):
	return File(volume, path).Create()

def file_open_text(volume, path, encoding=None):
	return File(volume, path).OpenText(encoding)

def file_create_text(volume, path, encoding=None):
	return File(volume, path).CreateText(encoding)

def file_append_text(volume, path, encoding=None):
	return File(volume, path).AppendText(encoding)


def file_read_all_bytes(volume, path):
	with file_open_read(volume, path) as stream:
		return stream.read()

# Creates the file if needed. Existing contents are replaced, not overlaid.
def file_write_all_bytes(volume, path, data):
	with file_open_write(volume, path) as stream:
		stream.write(data)
		stream.truncate()

def file_read_all_text(volume, path, encoding=None):
	return file_read_all_bytes(volume, path).decode(encoding or volume.encoding)

def file_write_all_text(volume, path, text, encoding=None):
	file_write_all_bytes(volume, path, text.encode(encoding or volume.encoding))

def file_append_all_text(volume, path, text, encoding=None):
	with file_append_text(volume, path, encoding) as stream:
		stream.write(text)


# Lazily yields the lines of a file without their line endings.
# "\n", "\r\n" and "\r" all end a line.
def file_read_lines(volume, path, encoding=None):
	with file_open_text(volume, path, encoding) as stream:
		for line in stream:
			if (line.endswith(NEWLINE)):
				line = line[:-1]
			yield line

def file_read_all_lines(volume, path, encoding=None):
	return list(file_read_lines(volume, path, encoding))

def _write_lines(stream, lines):
	for line in lines:
		stream.write(line)
		stream.write(NEWLINE)

def file_write_all_lines(volume, path, lines, encoding=None):
	with file_create_text(volume, path, encoding) as stream:
		_write_lines(stream, lines)
		stream.truncate()

def file_append_all_lines(volume, path, lines, encoding=None):
	with file_append_text(volume, path, encoding) as stream:
		_write_lines(stream, lines)


def file_get_attributes(volume, path):
	return File(volume, path).GetAttributes()


def file_get_creation_time(volume, path):
	return File(volume, path).creation_time

def file_set_creation_time(volume, path, value):
	File(volume, path).creation_time = value

def file_get_creation_time_utc(volume, path):
	return File(volume, path).creation_time_utc

def file_set_creation_time_utc(volume, path, value):
	File(volume, path).creation_time_utc = value

def file_get_last_access_time(volume, path):
	return File(volume, path).last_access_time

def file_set_last_access_time(volume, path, value):
	File(volume, path).last_access_time = value

def file_get_last_access_time_utc(volume, path):
	return File(volume, path).last_access_time_utc

def file_set_last_access_time_utc(volume, path, value):
	File(volume, path).last_access_time_utc = value

def file_get_last_write_time(volume, path):
	return File(volume, path).last_write_time

def file_set_last_write_time(volume, path, value):
	File(volume, path).last_write_time = value

def file_get_last_write_time_utc(volume, path):
	return File(volume, path).last_write_time_utc

def file_set_last_write_time_utc(volume, path, value):
	File(volume, path).last_write_time_utc = value
