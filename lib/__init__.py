from .Exceptions import NamespaceError, InvalidPath, DirectoryNotFound, FileNotFound, DirectoryNotEmpty, RootProtected, PathCollision, AccessDenied, StoreFault, WrongPassword
from .Volume import Volume
from .fs.Directory import Directory
from .fs.File import File
from .fs.common.EntryStates import EntryState
