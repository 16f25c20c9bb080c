import io

import pytest

from StandardTestFixture import StandardTestFixture

from libstratafs import Volume, Directory, File, EntryState, StoreFault, WrongPassword, AccessDenied, FileNotFound

ITERATIONS = 10000


class TestVolume(StandardTestFixture):

	def Populate(this, volume):
		Directory(volume, "/data/sub").Create()
		with File(volume, "/data/f.txt").OpenWrite() as stream:
			stream.write(b"hello")

	def test_in_memory(this):
		assert this.volume.in_memory
		this.assert_equal(this.volume.name, "MEMORY")
		this.assert_equal(this.volume.drive_format, "MEMORY")
		assert not this.volume.encrypted
		assert this.volume.root.exists

	def test_file_volume(this):
		with Volume.Open(this.file_name) as volume:
			assert not volume.in_memory
			this.assert_equal(volume.drive_format, "FILE")
			this.assert_equal(volume.name, this.file_name)
			this.Populate(volume)

		with Volume.Open(this.file_name) as volume:
			this.assert_equal(File(volume, "/data/f.txt").length, 5)

	def test_read_only(this):
		with Volume.Open(this.file_name) as volume:
			this.Populate(volume)

		with Volume.Open(this.file_name, read_only=True) as volume:
			with File(volume, "/data/f.txt").OpenRead() as stream:
				this.assert_equal(stream.read(), b"hello")
			this.assert_raises(StoreFault, Directory(volume, "/other").Create)

	def test_read_only_requires_file(this):
		this.assert_raises(ValueError, Volume, read_only=True)
		this.assert_raises(StoreFault, Volume.Open, this.file_name, read_only=True)

	@pytest.mark.parametrize("options", [{'timeout': 0}, {'timeout': "soon"}, {'kdf_iterations': "many"}, {'encoding': "klingon"}])
	def test_invalid_options(this, options):
		this.assert_raises(ValueError, Volume, **options)

	def test_unknown_option(this):
		this.assert_raises(TypeError, Volume, colour="blue")

	def test_options(this):
		this.assert_equal((this.volume.timeout, this.volume.kdf_iterations, this.volume.encoding), (30.0, None, "utf-8"))
		with Volume(timeout="5", kdf_iterations="1000", encoding="latin-1") as volume:
			this.assert_equal((volume.timeout, volume.kdf_iterations, volume.encoding), (5.0, 1000, "latin-1"))

	def test_list_all(this):
		this.Populate(this.volume)
		entries = this.volume.ListAll()
		this.assert_equal([entry.full_name for entry in entries], ["/", "/data/", "/data/f.txt", "/data/sub/"])
		this.assert_equal([type(entry) for entry in entries], [Directory, Directory, File, Directory])
		this.assert_equal({entry.state for entry in entries}, {EntryState.RESOLVED})

	def test_save_load_stream(this):
		this.Populate(this.volume)
		buffer = io.BytesIO()
		this.volume.SaveTo(buffer)

		buffer.seek(0)
		with Volume.Load(buffer) as loaded:
			assert loaded.in_memory
			this.assert_equal(File(loaded, "/data/f.txt").length, 5)
			assert Directory(loaded, "/data/sub").exists

	def test_save_load_file(this):
		this.Populate(this.volume)
		this.volume.SaveTo(this.file_name)

		with Volume.Load(this.file_name) as loaded:
			this.assert_equal(File(loaded, "/data/f.txt").length, 5)

		with Volume.Open(this.file_name) as opened:
			this.assert_equal(File(opened, "/data/f.txt").length, 5)

	def test_save_commits_open_writers(this):
		stream = File(this.volume, "/f.txt").OpenWrite()
		stream.write(b"pending")
		buffer = io.BytesIO()
		this.volume.SaveTo(buffer)
		stream.close()

		buffer.seek(0)
		with Volume.Load(buffer) as loaded:
			this.assert_equal(File(loaded, "/f.txt").length, 7)

	def test_load_from_replaces_contents(this):
		other = Volume()
		this.Populate(other)
		buffer = io.BytesIO()
		other.SaveTo(buffer)
		other.Close()

		handle = Directory(this.volume, "/data")
		assert not handle.exists
		buffer.seek(0)
		this.volume.LoadFrom(buffer)
		assert handle.exists

	def test_load_from_with_open_writer(this):
		stream = File(this.volume, "/f.txt").OpenWrite()
		try:
			this.assert_raises(AccessDenied, this.volume.LoadFrom, io.BytesIO())
		finally:
			stream.close()

	def test_close_commits_writers(this):
		volume = Volume.Open(this.file_name)
		stream = File(volume, "/f.txt").OpenWrite()
		stream.write(b"abc")
		volume.Close()
		assert volume.closed
		assert stream.closed

		with Volume.Open(this.file_name) as volume:
			this.assert_equal(File(volume, "/f.txt").length, 3)

	def test_close_releases_store_when_a_writer_fails(this):
		stream = File(this.volume, "/f.txt").OpenWrite()
		stream.write(b"x")
		File(this.volume, "/f.txt").Delete()

		# The writer has nothing left to commit to.
		this.assert_raises(FileNotFound, this.volume.Close)
		assert this.volume.closed
		assert stream.closed
		assert not this.volume.open_items

	def test_closed_volume(this):
		this.volume.Close()
		this.assert_raises(StoreFault, lambda: Directory(this.volume, "/data"))


class TestPasswords(StandardTestFixture):

	def test_encrypted_volume(this):
		with Volume.Open(this.file_name, password="secret", kdf_iterations=ITERATIONS) as volume:
			assert volume.encrypted
			with File(volume, "/f.txt").OpenWrite() as stream:
				stream.write(b"hidden")

		with Volume.Open(this.file_name, password="secret") as volume:
			with File(volume, "/f.txt").OpenRead() as stream:
				this.assert_equal(stream.read(), b"hidden")

		this.assert_raises(WrongPassword, Volume.Open, this.file_name, password="wrong")
		this.assert_raises(WrongPassword, Volume.Open, this.file_name)

	def test_password_helpers(this):
		Volume.Open(this.file_name).Close()
		assert not Volume.IsPasswordProtected(this.file_name)

		Volume.SetPassword(this.file_name, "secret", kdf_iterations=ITERATIONS)
		assert Volume.IsPasswordProtected(this.file_name)
		assert Volume.CheckPassword(this.file_name, "secret")
		assert not Volume.CheckPassword(this.file_name, "wrong")

		Volume.ChangePassword(this.file_name, "secret", "other", kdf_iterations=ITERATIONS)
		assert not Volume.CheckPassword(this.file_name, "secret")
		assert Volume.CheckPassword(this.file_name, "other")

		Volume.ChangePassword(this.file_name, "other", None)
		assert not Volume.IsPasswordProtected(this.file_name)

	def test_rebuild_keeps_contents(this):
		with Volume.Open(this.file_name, kdf_iterations=ITERATIONS) as volume:
			with File(volume, "/f.txt").OpenWrite() as stream:
				stream.write(b"abc")
			volume.RebuildWithPassword("secret")

		with Volume.Open(this.file_name, password="secret") as volume:
			with File(volume, "/f.txt").OpenRead() as stream:
				this.assert_equal(stream.read(), b"abc")

	def test_save_load_encrypted(this):
		volume = Volume(password="secret", kdf_iterations=ITERATIONS)
		with File(volume, "/f.txt").OpenWrite() as stream:
			stream.write(b"abc")
		buffer = io.BytesIO()
		volume.SaveTo(buffer)
		volume.Close()

		buffer.seek(0)
		this.assert_raises(WrongPassword, Volume.Load, buffer)
		buffer.seek(0)
		with Volume.Load(buffer, password="secret") as loaded:
			with File(loaded, "/f.txt").OpenRead() as stream:
				this.assert_equal(stream.read(), b"abc")
