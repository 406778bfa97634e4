import io
import os
import sys
import stat
import time
import contextlib
import hashlib
import tempfile
import unittest
import doctest
from pathlib import Path
from unittest import mock

import gonc

def hash_directory(root:Path, *, ignore_hidden:bool=True, verbose:bool=False):
	if verbose:
		print("--- Hash Start ---")
	hasher = hashlib.sha256()
	for dir, dirnames, filenames in os.walk(root, followlinks=True):
		if ignore_hidden:
			dirnames[:] = [d for d in dirnames if not d.startswith(".")]
			filenames = [f for f in filenames if not f.startswith(".")]
		dirnames.sort()
		filenames.sort()
		dir_relpath = os.path.relpath(dir, root)
		hasher.update(dir_relpath.encode())
		if verbose:
			print(dir_relpath)
		for file in filenames:
			file_path = os.path.join(dir, file)
			file_relpath = os.path.relpath(file_path, root)
			hasher.update(file_relpath.encode())
			if verbose:
				print(file_relpath)
			try:
				with open(file_path, "rb") as f:
					while True:
						buf = f.read(4096)
						if not buf:
							break
						hasher.update(buf)
						if verbose:
							print(buf)
			except OSError as e:
				print(f"Error hashing {file_path}: {e}")
	if verbose:
		print("--- Hash End ---")
	return hasher.hexdigest()

def create_file_structure(root_dir:Path, structure:dict):
	'''Recursively creates a directory structure with files.'''
	root_dir.mkdir(parents=True, exist_ok=True)
	for name, content in structure.items():
		file_path = root_dir / name
		if isinstance(content, Path):
			# create symlink
			os.symlink(content, file_path)
		elif isinstance(content, dict):
			# create dir
			create_file_structure(file_path, content)
		elif isinstance(content, (tuple, list)):
			# Create file with modtime and content
			file_path.write_text(content[0] or "")
			mtime = float(content[1])
			os.utime(file_path, (mtime, mtime))
		elif content is None:
			# Create an empty file
			file_path.touch()
		else:
			# Create a file with content
			file_path.write_text(content)

def load_tests(loader, tests, ignore):
	tests.addTests(doctest.DocTestSuite(gonc))
	return tests

@contextlib.contextmanager
def umask(mask:int):
	old = os.umask(mask)
	try:
		yield
	finally:
		os.umask(old)

def record(relpath:str, mtime:int, size:int = 1) -> gonc._FileRecord:
	return gonc._FileRecord(relpath, os.path.join("root", relpath), mtime, size, 0o644)

class ShortWriter:
	'''Wraps a copy destination so that every write reports one byte less than it wrote.'''

	def __init__(self, f):
		self.f = f

	def write(self, data):
		return self.f.write(data) - 1

	def __enter__(self):
		return self

	def __exit__(self, *exc):
		self.f.close()

class FailingReader:
	'''Wraps a copy source so that every read fails with an I/O error.'''

	def __init__(self, f):
		self.f = f

	def fileno(self):
		return self.f.fileno()

	def readinto(self, buf):
		raise OSError(5, "Input/output error", self.f.name)

	def __enter__(self):
		return self

	def __exit__(self, *exc):
		self.f.close()

class TestGonc(unittest.TestCase):
	def test_strip_trailing_sep(self):
		self.assertEqual(gonc._strip_trailing_sep("a" + os.sep + "b" + os.sep), "a" + os.sep + "b")
		self.assertEqual(gonc._strip_trailing_sep("a" + os.sep + "b"), "a" + os.sep + "b")
		self.assertEqual(gonc._strip_trailing_sep(""), "")
		path = "a" + os.sep
		gonc._strip_trailing_sep(path)
		self.assertEqual(path, "a" + os.sep)

	#~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

	def test_registry(self):
		r = gonc._Registry("root")
		for name in ["c", "a", "b"]:
			r.append(record(name, 1))
		self.assertEqual(len(r), 3)
		self.assertEqual([f.relpath for f in r], ["c", "a", "b"])
		self.assertIn("a", r)
		self.assertEqual(r.remove("a").relpath, "a")
		self.assertNotIn("a", r)
		self.assertIsNone(r.find("a"))
		self.assertEqual([f.relpath for f in r], ["c", "b"])
		with self.assertRaises(KeyError):
			r.remove("a")
		with self.assertRaises(ValueError):
			r.append(record("b", 2))

	#~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

	def test_scandir(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			file_structure = {
				"root": {
					"a": {
						"aa": {
							"1.txt": ("one", 1000),
						},
						"2.txt": "two",
						".git": {
							"config": "hidden",
						},
					},
					"b": {},
					".hidden": "hidden",
				},
			}
			create_file_structure(test_root, file_structure)
			root = test_root / "root"
			os.chmod(root / "a" / "2.txt", 0o640)

			files = gonc._scandir(str(root))
			self.assertEqual(
				sorted(f.relpath for f in files),
				sorted(f.replace("/", os.sep) for f in ["a/aa/1.txt", "a/2.txt"])
			)

			one = files.find(os.path.join("a", "aa", "1.txt"))
			self.assertEqual(one.full_path, os.path.join(str(root), "a", "aa", "1.txt"))
			self.assertEqual(one.mtime, 1000)
			self.assertEqual(one.size, 3)
			if os.name != "nt":
				self.assertEqual(files.find(os.path.join("a", "2.txt")).mode, 0o640)

			# a trailing separator on the root gives the same relative paths
			files = gonc._scandir(str(root) + os.sep)
			self.assertIn(os.path.join("a", "2.txt"), files)

	@unittest.skipIf(os.name == "nt", "symlinks need privileges on Windows")
	def test_scandir_symlinks(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			file_structure = {
				"outside": {
					"o.txt": "outside",
				},
				"root": {
					"a": {
						"1.txt": "one",
					},
				},
			}
			create_file_structure(test_root, file_structure)
			root = test_root / "root"
			create_file_structure(root, {
				"lnk"     : test_root / "outside",
				"f.txt"   : test_root / "outside" / "o.txt",
				"dangling": test_root / "missing",
			})
			create_file_structure(root / "a", {
				"loop": root / "a",
			})

			with self.assertLogs("gonc", level="WARNING") as cm:
				files = gonc._scandir(str(root))
			self.assertEqual(
				sorted(f.relpath for f in files),
				sorted(f.replace("/", os.sep) for f in ["a/1.txt", "lnk/o.txt", "f.txt"])
			)
			self.assertTrue(any("Symlink cycle" in line for line in cm.output))
			self.assertTrue(any("dangling" in line for line in cm.output))

			# the root itself may be a symlink
			create_file_structure(test_root, {"root2": root})
			with self.assertLogs("gonc", level="WARNING"):
				files = gonc._scandir(str(test_root / "root2"))
			self.assertIn(os.path.join("a", "1.txt"), files)

	@unittest.skipIf(os.name == "nt", "symlinks need privileges on Windows")
	def test_scandir_sibling_symlink(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			root = test_root / "root"
			create_file_structure(root, {
				"real": {
					"x.txt": "x",
				},
			})
			create_file_structure(root, {
				"alias": root / "real",
			})

			# the same dir reached through two branches is not a cycle
			files = gonc._scandir(str(root))
			self.assertEqual(
				sorted(f.relpath for f in files),
				sorted(f.replace("/", os.sep) for f in ["alias/x.txt", "real/x.txt"])
			)

			dst = test_root / "dst"
			create_file_structure(dst, {
				"real": {
					"x.txt": ("x", 1000),
				},
				"alias": {
					"x.txt": ("x", 1000),
				},
			})
			results = gonc.sync(root, dst, delete=True, veryquiet=True)
			self.assertTrue(results.success)
			self.assertEqual(results.extraneous, [])
			self.assertEqual(results.delete_success, 0)
			self.assertEqual(results.update_success, 2)
			self.assertTrue((dst / "real" / "x.txt").exists())
			self.assertTrue((dst / "alias" / "x.txt").exists())

	def test_scandir_missing_root(self):
		with tempfile.TemporaryDirectory() as temp_root:
			with self.assertRaises(gonc.ScanError):
				gonc._scandir(os.path.join(temp_root, "missing"))

	#~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

	def test_operations(self):
		src_files = gonc._Registry("src")
		dst_files = gonc._Registry("dst")
		for f in [record("new", 5), record("older", 5), record("equal", 5), record("newer", 5)]:
			src_files.append(f)
		for f in [record("extra", 5), record("older", 4), record("equal", 5), record("newer", 6)]:
			dst_files.append(f)

		actual = [(op, src.relpath, dst.relpath if dst else None, summary) for op, src, dst, summary in gonc._operations(src_files, dst_files)]
		expected = [
			("+", "new",   None,    "+ new"),
			("U", "older", "older", "U older"),
			("=", "equal", "equal", "= equal"),
			("=", "newer", "newer", "= newer"),
		]
		self.assertEqual(actual, expected)
		self.assertEqual([f.relpath for f in dst_files], ["extra"])
		self.assertEqual(len(src_files), 4)

	#~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

	def test_ensure_path(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			create_file_structure(test_root, {
				"a": {},
				"x": "not a dir",
			})

			self.assertTrue(gonc._ensure_path(temp_root, os.path.join("a", "b", "c", "f.txt")))
			self.assertTrue((test_root / "a" / "b" / "c").is_dir())
			self.assertFalse((test_root / "a" / "b" / "c" / "f.txt").exists())

			self.assertTrue(gonc._ensure_path(temp_root, "f.txt"))

			with self.assertLogs("gonc", level="ERROR"):
				self.assertFalse(gonc._ensure_path(temp_root, os.path.join("x", "y", "f.txt")))
			self.assertTrue((test_root / "x").is_file())
			self.assertEqual((test_root / "x").read_text(), "not a dir")

	@unittest.skipIf(os.name == "nt", "POSIX permission bits")
	def test_ensure_path_mode(self):
		with tempfile.TemporaryDirectory() as temp_root:
			with umask(0o027):
				self.assertTrue(gonc._ensure_path(temp_root, os.path.join("d", "f.txt")))
			self.assertEqual(stat.S_IMODE(os.stat(os.path.join(temp_root, "d")).st_mode), 0o750)

	#~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

	def test_copy_file_mapped(self):
		with tempfile.TemporaryDirectory() as temp_root:
			src = os.path.join(temp_root, "src.bin")
			dst = os.path.join(temp_root, "dst.bin")
			data = os.urandom(5000)
			Path(src).write_bytes(data)

			self.assertTrue(gonc._copy_file(src, dst, len(data), 0o644, False))
			self.assertEqual(Path(dst).read_bytes(), data)

	def test_copy_file_streamed(self):
		with tempfile.TemporaryDirectory() as temp_root:
			src = os.path.join(temp_root, "src.bin")
			dst = os.path.join(temp_root, "dst.bin")
			data = os.urandom(1000)
			Path(src).write_bytes(data)

			# chunk size does not divide the file size
			self.assertTrue(gonc._copy_file(src, dst, len(data), 0o644, False, mmap_threshold=16, chunk_size=7))
			self.assertEqual(Path(dst).read_bytes(), data)

			# overwrite with a shorter file
			Path(src).write_bytes(data[:100])
			self.assertTrue(gonc._copy_file(src, dst, 100, 0o644, True, mmap_threshold=16, chunk_size=64))
			self.assertEqual(Path(dst).read_bytes(), data[:100])

	@unittest.skipIf(os.name == "nt", "POSIX permission bits")
	def test_copy_file_mode(self):
		with tempfile.TemporaryDirectory() as temp_root:
			src = os.path.join(temp_root, "src.txt")
			dst = os.path.join(temp_root, "dst.txt")
			Path(src).write_text("some content")

			with umask(0o022):
				self.assertTrue(gonc._copy_file(src, dst, 12, 0o6775, False))
			self.assertEqual(stat.S_IMODE(os.stat(dst).st_mode), 0o755)

			# overwriting keeps the existing permission bits
			os.chmod(dst, 0o600)
			Path(src).write_text("other")
			with umask(0o022):
				self.assertTrue(gonc._copy_file(src, dst, 5, 0o777, True))
			self.assertEqual(stat.S_IMODE(os.stat(dst).st_mode), 0o600)
			self.assertEqual(Path(dst).read_text(), "other")

	def test_copy_file_short_write(self):
		with tempfile.TemporaryDirectory() as temp_root:
			src = os.path.join(temp_root, "src.bin")
			dst = os.path.join(temp_root, "dst.bin")
			data = os.urandom(100)
			Path(src).write_bytes(data)

			open_dst = gonc._open_dst
			with mock.patch.object(gonc, "_open_dst", lambda *args: ShortWriter(open_dst(*args))):
				# mapped
				with self.assertLogs("gonc", level="ERROR") as cm:
					self.assertFalse(gonc._copy_file(src, dst, len(data), 0o644, False))
				self.assertIn("Short write", cm.output[0])

				# streamed
				with self.assertLogs("gonc", level="ERROR") as cm:
					self.assertFalse(gonc._copy_file(src, dst, len(data), 0o644, True, mmap_threshold=16, chunk_size=32))
				self.assertIn("Short write", cm.output[0])

	def test_copy_file_read_error(self):
		with tempfile.TemporaryDirectory() as temp_root:
			src = os.path.join(temp_root, "src.bin")
			dst = os.path.join(temp_root, "dst.bin")
			Path(src).write_bytes(os.urandom(100))

			real_open = open
			def failing_open(file, *args, **kwargs):
				f = real_open(file, *args, **kwargs)
				return FailingReader(f) if file == src else f

			with mock.patch.object(gonc, "open", failing_open, create=True):
				with self.assertLogs("gonc", level="ERROR") as cm:
					self.assertFalse(gonc._copy_file(src, dst, 100, 0o644, False, mmap_threshold=16))
			self.assertIn("Input/output error", cm.output[0])

	def test_copy_file_errors(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			create_file_structure(test_root, {
				"empty.txt": None,
				"full.txt": "content",
			})

			dst = str(test_root / "dst.txt")
			with self.assertLogs("gonc", level="ERROR") as cm:
				self.assertFalse(gonc._copy_file(str(test_root / "empty.txt"), dst, 0, 0o644, False))
			self.assertIn("File size is 0", cm.output[0])
			self.assertFalse(os.path.exists(dst))

			with self.assertLogs("gonc", level="ERROR"):
				self.assertFalse(gonc._copy_file(str(test_root / "missing.txt"), dst, 10, 0o644, False))
			self.assertFalse(os.path.exists(dst))

			# destination parent does not exist
			with self.assertLogs("gonc", level="ERROR"):
				self.assertFalse(gonc._copy_file(str(test_root / "full.txt"), str(test_root / "no" / "dst.txt"), 7, 0o644, False))

	#~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

	def test_sync_update_and_delete(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			file_structure = {
				"src": {
					"a": {
						"b.txt": ("hello world!", 2000),
					},
				},
				"dst": {
					"a": {
						"b.txt": ("old", 1000),
					},
					"c": {
						"d.txt": "stale",
					},
				},
			}
			create_file_structure(test_root, file_structure)
			src = test_root / "src"
			dst = test_root / "dst"

			results = gonc.sync(src, dst, delete=True, veryquiet=True)
			self.assertTrue(results.success)
			self.assertEqual((dst / "a" / "b.txt").read_text(), "hello world!")
			self.assertFalse((dst / "c" / "d.txt").exists())
			self.assertEqual(results.update_success, 1)
			self.assertEqual(results.delete_success, 1)
			self.assertEqual(results.extraneous, [os.path.join("c", "d.txt")])
			self.assertEqual(results.byte_diff, 12 - 3 - 5)
			self.assertEqual(results.err_count, 0)

	def test_sync_dry_run(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			file_structure = {
				"src": {
					"new.txt": "new",
					"sub": {
						"new.txt": "new",
					},
					"updated.txt": ("new info", 2000),
				},
				"dst": {
					"updated.txt": ("old info", 1000),
					"extra.txt": "extra",
				},
			}
			create_file_structure(test_root, file_structure)
			src = test_root / "src"
			dst = test_root / "dst"
			hash_dst_old = hash_directory(dst)

			results = gonc.sync(src, dst, delete=True, dry_run=True, veryquiet=True)
			self.assertTrue(results.success)
			self.assertEqual(hash_directory(dst), hash_dst_old)
			self.assertFalse((dst / "sub").exists())
			self.assertEqual(os.stat(dst / "updated.txt").st_mtime, 1000)
			self.assertEqual(results.create_success + results.update_success + results.delete_success, 0)
			# an updated file is matched, not extraneous
			self.assertEqual(results.extraneous, ["extra.txt"])

	def test_sync_without_delete(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			file_structure = {
				"src": {
					"a.txt": "a",
				},
				"dst": {
					"extra": {
						"b.txt": "b",
					},
				},
			}
			create_file_structure(test_root, file_structure)
			src = test_root / "src"
			dst = test_root / "dst"

			results = gonc.sync(src, dst, veryquiet=True)
			self.assertTrue(results.success)
			self.assertEqual((dst / "a.txt").read_text(), "a")
			self.assertEqual((dst / "extra" / "b.txt").read_text(), "b")
			self.assertEqual(results.extraneous, [os.path.join("extra", "b.txt")])
			self.assertEqual(results.delete_success, 0)

	def test_sync_newer_destination_kept(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			file_structure = {
				"src": {
					"same.txt": ("source", 1000),
					"newer.txt": ("source", 1000),
				},
				"dst": {
					"same.txt": ("destination", 1000),
					"newer.txt": ("destination", 3000),
				},
			}
			create_file_structure(test_root, file_structure)
			src = test_root / "src"
			dst = test_root / "dst"

			results = gonc.sync(src, dst, delete=True, veryquiet=True)
			self.assertTrue(results.success)
			self.assertEqual(results.skip_count, 2)
			for name, mtime in [("same.txt", 1000), ("newer.txt", 3000)]:
				self.assertEqual((dst / name).read_text(), "destination")
				self.assertEqual(os.stat(dst / name).st_mtime, mtime)

	def test_sync_twice(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			file_structure = {
				"src": {
					"a": {
						"a": {
							"1.txt": "1",
						},
						"1.txt": "new info",
						"2.txt": "2",
					},
					"b": {
						"1.txt": "1",
					},
					".cache": {
						"junk": "junk",
					},
				},
				"dst": {
					"a": {
						"1.txt": ("old info", 1),
						"3.txt": "3",
					},
					".keep": "keep",
				},
			}
			create_file_structure(test_root, file_structure)
			src = test_root / "src"
			dst = test_root / "dst"

			results = gonc.sync(src, dst, delete=True, veryquiet=True)
			self.assertTrue(results.success)
			self.assertEqual(hash_directory(src), hash_directory(dst))
			self.assertEqual(results.create_success, 3)
			self.assertEqual(results.update_success, 1)
			self.assertEqual(results.delete_success, 1)
			# hidden entries are ignored on both sides
			self.assertFalse((dst / ".cache").exists())
			self.assertTrue((dst / ".keep").exists())

			results = gonc.sync(src, dst, delete=True, veryquiet=True)
			self.assertTrue(results.success)
			self.assertEqual(results.create_success + results.update_success + results.delete_success, 0)
			self.assertEqual(results.skip_count, 4)

	def test_sync_delete_error(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			create_file_structure(test_root, {
				"src": {
					"a.txt": "a",
				},
				"dst": {
					"b.txt": "b",
					"c.txt": "c",
				},
			})
			src = test_root / "src"
			dst = test_root / "dst"

			real_unlink = os.unlink
			def unlink(path, *args, **kwargs):
				if os.path.basename(path) == "b.txt":
					raise PermissionError(13, "Permission denied", path)
				return real_unlink(path, *args, **kwargs)

			with mock.patch.object(gonc.os, "unlink", unlink):
				results = gonc.sync(src, dst, delete=True, veryquiet=True)
			self.assertTrue(results.success)
			self.assertEqual(results.delete_error, 1)
			self.assertEqual(results.delete_success, 1)
			self.assertEqual(len(results.errors), 1)
			self.assertIn("Permission denied", results.errors[0])
			self.assertTrue((dst / "b.txt").exists())
			self.assertFalse((dst / "c.txt").exists())

	def test_sync_future_mtime(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			future = time.time() + 3600
			create_file_structure(test_root, {
				"src": {
					"future.txt": ("from the future", future),
				},
				"dst": {},
			})
			src = test_root / "src"
			dst = test_root / "dst"

			results = gonc.sync(src, dst, veryquiet=True)
			self.assertEqual(results.create_success, 1)

			# copies get the write time, so the source stays newer
			results = gonc.sync(src, dst, veryquiet=True)
			self.assertEqual(results.update_success, 1)
			self.assertLess(os.stat(dst / "future.txt").st_mtime, future)

	def test_sync_per_file_errors(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			file_structure = {
				"src": {
					"x": {
						"f.txt": "blocked",
					},
					"empty.txt": None,
					"ok.txt": "ok",
				},
				"dst": {
					"x": "a file where a dir is needed",
				},
			}
			create_file_structure(test_root, file_structure)
			src = test_root / "src"
			dst = test_root / "dst"

			results = gonc.sync(src, dst, veryquiet=True)
			self.assertTrue(results.success)
			self.assertEqual(results.create_success, 1)
			self.assertEqual(results.create_error, 2)
			self.assertEqual(len(results.errors), 2)
			self.assertEqual((dst / "ok.txt").read_text(), "ok")
			self.assertTrue((dst / "x").is_file())
			self.assertFalse((dst / "empty.txt").exists())

	def test_sync_streamed(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			src = test_root / "src"
			dst = test_root / "dst"
			create_file_structure(test_root, {"src": {"d": {}}, "dst": {}})
			data = os.urandom(10000)
			(src / "d" / "big.bin").write_bytes(data)

			results = gonc.sync(src, dst, mmap_threshold=1024, chunk_size=1000, veryquiet=True)
			self.assertTrue(results.success)
			self.assertEqual((dst / "d" / "big.bin").read_bytes(), data)

	#~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

	def test_sync_input_errors(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			create_file_structure(test_root, {
				"src": {
					"a.txt": "a",
				},
				"dst": {},
				"file.txt": "not a dir",
			})
			src = test_root / "src"
			dst = test_root / "dst"

			self.assertFalse(gonc.sync(src, test_root / "file.txt", veryquiet=True).success)
			self.assertFalse(gonc.sync(test_root / "missing", dst, veryquiet=True).success)
			self.assertFalse(gonc.sync(src, test_root / "missing", veryquiet=True).success)
			self.assertFalse(gonc.sync(src, str(src) + os.sep, veryquiet=True).success)
			self.assertFalse(gonc.sync(src, dst, mmap_threshold=0, veryquiet=True).success)
			self.assertFalse(gonc.sync(src, dst, chunk_size=-1, veryquiet=True).success)
			self.assertFalse(gonc.sync(src, dst, delete="yes", veryquiet=True).success)
			self.assertFalse(gonc.sync(1, dst, veryquiet=True).success)
			self.assertFalse((dst / "a.txt").exists())

	def test_sync_log_file(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			create_file_structure(test_root, {
				"src": {
					"a.txt": "a",
				},
				"dst": {},
			})
			log = test_root / "gonc.log"

			results = gonc.sync(test_root / "src", test_root / "dst", log=log, veryquiet=True)
			self.assertTrue(results.success)
			self.assertEqual(results.log_file, log)
			self.assertIn("INFO: + a.txt", log.read_text(encoding="utf-8"))

			# an existing log is never overwritten
			results = gonc.sync(test_root / "src", test_root / "dst", log=log, veryquiet=True)
			self.assertFalse(results.success)

	def test_sync_output(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			create_file_structure(test_root, {
				"src": {
					"a.txt": "a",
					"empty.txt": None,
				},
				"dst": {
					"b.txt": "b",
				},
			})

			out, err = io.StringIO(), io.StringIO()
			with mock.patch.object(sys, "stdout", out), mock.patch.object(sys, "stderr", err):
				results = gonc.sync(test_root / "src", test_root / "dst", delete=True)
			self.assertTrue(results.success)
			self.assertIn("+ a.txt", out.getvalue())
			self.assertIn("- b.txt", out.getvalue())
			self.assertIn("Delete Success: 1", out.getvalue())
			self.assertIn("File size is 0", err.getvalue())

	#~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

	def test_sync_cmd(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			create_file_structure(test_root, {
				"src": {
					"a.txt": "a",
				},
				"dst": {
					"b.txt": "b",
				},
			})
			src = str(test_root / "src") + os.sep
			dst = str(test_root / "dst") + os.sep

			results = gonc.sync_cmd(["-n", "-d", "-qq", src, dst])
			self.assertTrue(results.success)
			self.assertFalse((test_root / "dst" / "a.txt").exists())
			self.assertTrue((test_root / "dst" / "b.txt").exists())

			results = gonc.sync_cmd(["-d", "-qq", "--chunk-size", "4", "--mmap-threshold", "1", src, dst])
			self.assertTrue(results.success)
			self.assertEqual((test_root / "dst" / "a.txt").read_text(), "a")
			self.assertFalse((test_root / "dst" / "b.txt").exists())

	def test_main_exit_status(self):
		with tempfile.TemporaryDirectory() as temp_root:
			test_root = Path(temp_root)
			create_file_structure(test_root, {
				"src": {
					"a.txt": "a",
				},
				"dst": {},
			})
			src = str(test_root / "src")
			dst = str(test_root / "dst")

			for argv, code in [
				(["gonc", "-qq", src, dst], 0),
				(["gonc", "-qq", src, str(test_root / "missing")], 1),
			]:
				with mock.patch.object(sys, "argv", argv):
					with self.assertRaises(SystemExit) as cm:
						gonc.main()
				self.assertEqual(cm.exception.code, code)

			out = io.StringIO()
			for argv, code in [
				(["gonc", "-v"], 0),
				(["gonc", "-h"], 0),
				(["gonc", src], 2),
				(["gonc", "-x", src, dst], 2),
			]:
				with mock.patch.object(sys, "argv", argv), contextlib.redirect_stdout(out), contextlib.redirect_stderr(io.StringIO()):
					with self.assertRaises(SystemExit) as cm:
						gonc.main()
				self.assertEqual(cm.exception.code, code)
			self.assertIn(f"version {gonc.__version__}", out.getvalue())

if __name__ == "__main__":
	try:
		unittest.main()
	except SystemExit as e:
		pass
