"""
lib/fs/fsop/Directory.py

Purpose:
Implements the one-shot directory operations, the directory counterpart of lib/fs/fsop/File.py.

Place in Architecture:
A thin layer over the Directory handle. Listings return full paths rather than handles.

Interface:

	directory_create(volume, path): RETURNS the Directory, creating any missing ancestors.
	directory_delete / directory_move / directory_exists / directory_get_parent
	directory_get_files / directory_get_directories: Lists of full paths of the immediate children.
	directory_enumerate_files / directory_enumerate_directories: Generator versions.
	directory_{get,set}_{creation,last_access,last_write}_time[_utc]: Timestamps.

TODOs/FIXMEs:
None.
"""

from ...Exceptions import InvalidPath
from ..Directory import Directory


def directory_create(volume, path):
	ret = Directory(volume, path)
	ret.Create()
	return ret

def directory_delete(volume, path):
	Directory(volume, path).Delete()

def directory_move(volume, source, destination):
	Directory(volume, source).MoveTo(destination)

def directory_exists(volume, path):
	try:
		return Directory(volume, path).exists
	except InvalidPath:
		return False

# RETURNS None for the root.
def directory_get_parent(volume, path):
	return Directory(volume, path).parent


def directory_enumerate_files(volume, path, pattern=None):
	for file in Directory(volume, path).EnumerateFiles(pattern):
		yield file.full_name

def directory_enumerate_directories(volume, path, pattern=None):
	for directory in Directory(volume, path).EnumerateDirectories(pattern):
		yield directory.full_name

def directory_get_files(volume, path, pattern=None):
	return list(directory_enumerate_files(volume, path, pattern))

def directory_get_directories(volume, path, pattern=None):
	return list(directory_enumerate_directories(volume, path, pattern))


def directory_get_creation_time(volume, path):
	return Directory(volume, path).creation_time

def directory_set_creation_time(volume, path, value):
	Directory(volume, path).creation_time = value

def directory_get_creation_time_utc(volume, path):
	return Directory(volume, path).creation_time_utc

def directory_set_creation_time_utc(volume, path, value):
	Directory(volume, path).creation_time_utc = value

def directory_get_last_access_time(volume, path):
	return Directory(volume, path).last_access_time

def directory_set_last_access_time(volume, path, value):
	Directory(volume, path).last_access_time = value

def directory_get_last_access_time_utc(volume, path):
	return Directory(volume, path).last_access_time_utc

def directory_set_last_access_time_utc(volume, path, value):
	Directory(volume, path).last_access_time_utc = value

def directory_get_last_write_time(volume, path):
	return Directory(volume, path).last_write_time

def directory_set_last_write_time(volume, path, value):
	Directory(volume, path).last_write_time = value

def directory_get_last_write_time_utc(volume, path):
	return Directory(volume, path).last_write_time_utc

def directory_set_last_write_time_utc(volume, path, value):
	Directory(volume, path).last_write_time_utc = value
