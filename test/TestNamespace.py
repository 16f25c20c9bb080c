from StandardTestFixture import StandardTestFixture

from libstratafs import InvalidPath, DirectoryNotFound, FileNotFound, DirectoryNotEmpty, RootProtected, PathCollision, StoreFault


class TestNamespace(StandardTestFixture):

	def setup_method(this, method):
		super().setup_method(method)
		this.namespace = this.volume.namespace

	def Paths(this, records):
		return sorted(record.path for record in records)

	def test_root_exists(this):
		assert this.namespace.Exists("/")

	def test_initialize_is_idempotent(this):
		this.namespace.Initialize()
		this.assert_equal(this.Paths(this.namespace.ListAll()), ["/"])

	def test_create_directory_creates_ancestors(this):
		this.namespace.CreateDirectory("/a/b/c/")
		for path in ["/a/", "/a/b/", "/a/b/c/"]:
			assert this.namespace.Exists(path)

	def test_create_directory_is_idempotent(this):
		first = this.namespace.CreateDirectory("/a/")
		second = this.namespace.CreateDirectory("/a/")
		this.assert_equal(first.id, second.id)
		this.assert_equal(this.Paths(this.namespace.ListAll()), ["/", "/a/"])

	def test_create_directory_over_file(this):
		this.namespace.CreateFile("/a")
		this.assert_raises(PathCollision, this.namespace.CreateDirectory, "/a/b/")
		assert not this.namespace.Exists("/a/")

	def test_list_children_filters_depth(this):
		this.namespace.CreateDirectory("/a/b/c/")
		this.namespace.CreateFile("/a/f")
		this.namespace.CreateFile("/a/b/g")
		this.assert_equal(this.Paths(this.namespace.ListChildren("/a/")), ["/a/b/", "/a/f"])
		this.assert_equal(this.Paths(this.namespace.ListChildren("/")), ["/a/"])

	def test_list_children_ignores_sibling_prefix(this):
		this.namespace.CreateDirectory("/a/")
		this.namespace.CreateDirectory("/ab/")
		this.namespace.CreateFile("/ab/f")
		this.assert_equal(this.Paths(this.namespace.ListChildren("/a/")), [])

	def test_delete_directory(this):
		this.namespace.CreateDirectory("/a/")
		assert this.namespace.DeleteDirectory("/a/")
		assert not this.namespace.Exists("/a/")
		assert not this.namespace.DeleteDirectory("/a/")

	def test_delete_root(this):
		this.assert_raises(RootProtected, this.namespace.DeleteDirectory, "/")

	def test_delete_non_empty(this):
		this.namespace.CreateDirectory("/a/b/")
		this.assert_raises(DirectoryNotEmpty, this.namespace.DeleteDirectory, "/a/")
		this.namespace.CreateDirectory("/c/")
		this.namespace.CreateFile("/c/f")
		this.assert_raises(DirectoryNotEmpty, this.namespace.DeleteDirectory, "/c/")

	def test_move_subtree(this):
		this.namespace.CreateDirectory("/a/b/")
		this.namespace.CreateFile("/a/f")
		this.namespace.CreateFile("/a/b/g")
		this.namespace.MoveSubtree("/a/", "/x/y/")
		this.assert_equal(this.Paths(this.namespace.ListAll()), ["/", "/x/", "/x/y/", "/x/y/b/", "/x/y/b/g", "/x/y/f"])

	def test_move_subtree_replaces_prefix_only(this):
		this.namespace.CreateDirectory("/a/a/")
		this.namespace.MoveSubtree("/a/", "/b/")
		this.assert_equal(this.Paths(this.namespace.ListAll()), ["/", "/b/", "/b/a/"])

	def test_move_subtree_errors(this):
		this.namespace.CreateDirectory("/a/b/")
		this.namespace.CreateDirectory("/c/")
		this.assert_raises(RootProtected, this.namespace.MoveSubtree, "/", "/z/")
		this.assert_raises(PathCollision, this.namespace.MoveSubtree, "/a/", "/")
		this.assert_raises(PathCollision, this.namespace.MoveSubtree, "/a/", "/c/")
		this.assert_raises(InvalidPath, this.namespace.MoveSubtree, "/a/", "/a/b/z/")
		this.assert_raises(DirectoryNotFound, this.namespace.MoveSubtree, "/nope/", "/z/")

	def test_move_subtree_rolls_back(this):
		this.namespace.CreateDirectory("/a/")
		this.namespace.CreateFile("/a/f")
		this.namespace.CreateFile("/blocker")

		# The destination's parent collides with a file.
		this.assert_raises(PathCollision, this.namespace.MoveSubtree, "/a/", "/blocker/a/")
		this.assert_equal(this.Paths(this.namespace.ListAll()), ["/", "/a/", "/a/f", "/blocker"])

	def test_create_file(this):
		this.assert_raises(DirectoryNotFound, this.namespace.CreateFile, "/nope/f")
		this.namespace.CreateDirectory("/d/")
		this.assert_raises(PathCollision, this.namespace.CreateFile, "/d")
		record = this.namespace.CreateFile("/f")
		this.assert_equal(record.length, 0)
		this.assert_raises(PathCollision, this.namespace.CreateFile, "/f")

	def test_delete_file(this):
		this.namespace.CreateFile("/f")
		this.namespace.DeleteFile("/f")
		this.assert_raises(FileNotFound, this.namespace.DeleteFile, "/f")

	def test_move_file(this):
		this.namespace.CreateDirectory("/d/")
		id = this.namespace.CreateFile("/f").id
		this.namespace.MoveFile("/f", "/d/g")
		this.assert_equal(this.namespace.GetRecord("/d/g").id, id)
		this.assert_raises(DirectoryNotFound, this.namespace.MoveFile, "/d/g", "/nope/g")
		this.namespace.CreateFile("/h")
		this.assert_raises(PathCollision, this.namespace.MoveFile, "/d/g", "/h")

	def test_copy_file(this):
		record = this.namespace.CreateFile("/f")
		this.namespace.store.Write(record.id, b"abc")
		copy = this.namespace.CopyFile("/f", "/g")
		this.assert_equal(this.namespace.store.Read(copy.id), b"abc")
		this.assert_raises(PathCollision, this.namespace.CopyFile, "/f", "/g")

		this.namespace.store.Write(record.id, b"xyz")
		this.namespace.CopyFile("/f", "/g", overwrite=True)
		this.assert_equal(this.namespace.store.Read(copy.id), b"xyz")

	def test_move_subtree_is_atomic(this, monkeypatch):
		this.namespace.CreateDirectory("/a/")
		this.namespace.CreateFile("/a/f")
		this.namespace.CreateFile("/a/g")

		store = this.namespace.store
		realSetPath = store.SetPath
		moved = []

		def FailingSetPath(id, path):
			if (moved):
				raise StoreFault("disk on fire")
			moved.append(path)
			realSetPath(id, path)

		monkeypatch.setattr(store, "SetPath", FailingSetPath)
		this.assert_raises(StoreFault, this.namespace.MoveSubtree, "/a/", "/b/")
		monkeypatch.undo()

		this.assert_equal(len(moved), 1)
		this.assert_equal(this.Paths(this.namespace.ListAll()), ["/", "/a/", "/a/f", "/a/g"])
