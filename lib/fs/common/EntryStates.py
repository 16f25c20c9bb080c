"""
lib/fs/common/EntryStates.py

Purpose:
Defines the states an entry handle can be in with respect to its backing record.

Place in Architecture:
Used by Entry (and so Directory and File) instead of a nullable record reference.

Interface:

	Enum members: UNRESOLVED, RESOLVED, and DELETED.

TODOs/FIXMEs:
None.
"""

from enum import Enum

# A handle is bound to one path. Whether that path has a record behind it is one of:
# UNRESOLVED: nothing is there (yet). Not an error; e.g. a file that has not been written.
# RESOLVED: the record was found and is cached on the handle.
# DELETED: the handle itself deleted the record.
class EntryState(Enum):
	UNRESOLVED = 0
	RESOLVED = 1
	DELETED = 2

	def __str__(self):
		return self.name
