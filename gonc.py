# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import sys
import argparse
import errno
import io
import os
import mmap
import stat
import logging
import tempfile
import time
import traceback
from pathlib import Path
from typing import NamedTuple, Iterator

__version__ = "0.9"

MMAP_THRESHOLD = 8 * 1024 * 1024
CHUNK_SIZE     = 64 * 1024

logger = logging.getLogger(__name__)
logger.setLevel(logging.DEBUG)

class _DebugInfoFilter(logging.Filter):
	'''Logging filter that only allows DEBUG and INFO records to pass.'''

	def filter(self, record):
		return logging.DEBUG <= record.levelno <= logging.INFO

class _ErrorListHandler(logging.Handler):
	'''Logging handler that collects per-file ERROR messages so they can be reprinted after the run.'''

	def __init__(self, errors:list[str]) -> None:
		super().__init__(logging.ERROR)
		self.errors = errors

	def emit(self, record):
		if record.levelno == logging.ERROR:
			self.errors.append(record.getMessage())

class ScanError(Exception):
	'''Raised when a directory hierarchy cannot be opened for traversal.'''

class _ArgParser:
	'''Argument parser for when this python file is run with arguments instead of an imported module.'''

	parser = argparse.ArgumentParser(
		prog="gonc",
		description="Copy new and updated files from one directory to another, and optionally delete files in the destination that are not in the source.",
		epilog="(c) 2025 Joe Walter"
	)

	parser.add_argument("src_root", help="The root directory to copy files from.")
	parser.add_argument("dst_root", help="The root directory to copy files to.")
	parser.add_argument("-d", "--delete", action="store_true", default=False, help="Delete files in `dst_root` that are not present in `src_root`. Otherwise they are only listed.")
	parser.add_argument("-n", "--dry-run", action="store_true", default=False, help="Forgo performing any operation that would make a file system change. Changes that would have occurred will still be printed to console.")
	parser.add_argument("--mmap-threshold", metavar="bytes", type=int, default=MMAP_THRESHOLD, help=f"Files up to this size are copied through a read-only memory map in a single write. Larger files are streamed in chunks. (Defaults to {MMAP_THRESHOLD}.)")
	parser.add_argument("--chunk-size", metavar="bytes", type=int, default=CHUNK_SIZE, help=f"The chunk size used when streaming large files. (Defaults to {CHUNK_SIZE}.)")

	parser.add_argument("--log", metavar="path", nargs="?", type=str, default=None, const="auto", help="The path of the log file to use. It will be created if it does not exist. With \"auto\" or no argument, a tempfile will be used for the log, and it will be moved to the user's home directory after the sync is done. If this flag is absent, then no logging will be performed.")
	parser.add_argument("--debug", action="store_true", default=False, help="Log debug messages.")
	parser.add_argument("-q", action="count", default=0, help="Forgo printing to stdout (-q) and stderr (-qq).")
	parser.add_argument("-v", "--version", action="version", version=f"This is %(prog)s version {__version__}.")

	@staticmethod
	def parse(args:list[str]) -> argparse.Namespace:
		parsed_args = _ArgParser.parser.parse_args(args)
		parsed_args.quiet     = parsed_args.q >= 1
		parsed_args.veryquiet = parsed_args.q >= 2
		del parsed_args.q
		return parsed_args

class _FileRecord(NamedTuple):
	'''A regular file found by `_scandir()`.'''

	relpath   : str
	full_path : str
	mtime     : int
	size      : int
	mode      : int

class _Registry:
	'''
	The files of one scanned tree, keyed by relative path and kept in scan order.

	>>> r = _Registry("root")
	>>> r.append(_FileRecord("a", os.path.join("root", "a"), 1, 3, 0o644))
	>>> r.find("a").size
	3
	>>> r.remove("a").relpath
	'a'
	>>> r.find("a") is None
	True
	'''

	def __init__(self, root:str) -> None:
		self.root = root
		self._records : dict[str, _FileRecord] = {}

	def append(self, record:_FileRecord) -> None:
		if record.relpath in self._records:
			raise ValueError(f"Duplicate relative path: {record.relpath}")
		self._records[record.relpath] = record

	def find(self, relpath:str) -> _FileRecord | None:
		return self._records.get(relpath)

	def remove(self, relpath:str) -> _FileRecord:
		return self._records.pop(relpath)

	def __iter__(self) -> Iterator[_FileRecord]:
		return iter(self._records.values())

	def __len__(self) -> int:
		return len(self._records)

	def __contains__(self, relpath:str) -> bool:
		return relpath in self._records

class Results:
	'''Various statistics and other information returned by `sync()`.'''

	def __init__(self) -> None:
		self.log_file   : Path | None = None

		self.success    : bool        = False
		self.errors     : list[str]   = []
		self.extraneous : list[str]   = []

		self.create_success = 0
		self.update_success = 0
		self.delete_success = 0
		self.create_error = 0
		self.update_error = 0
		self.delete_error = 0
		self.skip_count = 0
		self.byte_diff = 0

	@property
	def err_count(self) -> int:
		return self.create_error + self.update_error + self.delete_error

def sync_cmd(args:list[str]) -> Results:
	'''Run `sync()` with command line arguments.'''

	parsed_args = _ArgParser.parse(args)
	return sync(
		parsed_args.src_root,
		parsed_args.dst_root,
		delete         = parsed_args.delete,
		dry_run        = parsed_args.dry_run,
		mmap_threshold = parsed_args.mmap_threshold,
		chunk_size     = parsed_args.chunk_size,
		log            = parsed_args.log,
		debug          = parsed_args.debug,
		quiet          = parsed_args.quiet,
		veryquiet      = parsed_args.veryquiet
	)

def sync(
		src            : str | os.PathLike[str],
		dst            : str | os.PathLike[str],
		*,
		delete         : bool = False,
		dry_run        : bool = False,
		mmap_threshold : int  = MMAP_THRESHOLD,
		chunk_size     : int  = CHUNK_SIZE,
		log            : str | os.PathLike[str] | None = None,
		debug          : bool = False,
		quiet          : bool = False,
		veryquiet      : bool = False,
	) -> Results:
	'''
	Copies new and updated files from `src` to `dst`, and optionally deletes files from `dst` if they are not present in `src`. A file is updated when its modification time in `src` is newer than in `dst` (compared in whole seconds). Hidden files and directories (names starting with a dot) are ignored in both trees, and symbolic links are followed.

	Args
		src (str or PathLike)    : The path of the root directory to copy files from. Can be a symlink to a directory.
		dst (str or PathLike)    : The path of the root directory to copy files to. Must already exist. Can be a symlink to a directory.

		delete (bool)            : Whether to delete files in `dst` that have no counterpart in `src`. If `False`, such files are listed but left alone. (Defaults to `False`.)
		dry_run (bool)           : Whether to hold off performing any operation that would make a file system change. Changes that would have occurred will still be printed to console. (Defaults to `False`.)
		mmap_threshold (int)     : Files up to this many bytes are copied through a read-only memory map. Larger files are streamed. (Defaults to 8 MiB.)
		chunk_size (int)         : The number of bytes read and written per step when streaming a file. (Defaults to 64 KiB.)

		log (str or PathLike)    : The path of the log file to use. It will be created if it does not exist. A value of "auto" means a tempfile will be used for the log, and it will be copied to the user's home directory after the sync is done. A value of `None` will skip logging to a file. (Defaults to `None`.)
		debug (bool)             : Whether to log debug messages. (Default to `False`.)
		quiet (bool)             : Whether to forgo printing to stdout.
		veryquiet (bool)         : Whether to forgo printing to stdout and stderr.

	Example Console Output
		   path/to/src
		-> path/to/dst
		--------------
		+ not-in-dst.txt
		U updated.txt
		- not-in-src.txt

		*** gonc finished successfully. ***

		Summary
		-------
		Create Success: 1
		Update Success: 1
		Delete Success: 1
		Skipped: 12
		Net Change: +3 KB

	Returns
		A `Results` object containing various statistics.
	'''
	results = Results()

	if logger.handlers:
		for handler in list(logger.handlers):
			logger.removeHandler(handler)

	log_file       = None
	handler_stdout = None
	handler_stderr = None
	handler_file   = None
	handler_errors = _ErrorListHandler(results.errors)
	logger.addHandler(handler_errors)

	if veryquiet:
		quiet = True

	if not quiet:
		handler_stdout = logging.StreamHandler(sys.stdout)
		handler_stdout.setFormatter(logging.Formatter("%(message)s"))
		handler_stdout.addFilter(_DebugInfoFilter())
		if debug:
			handler_stdout.setLevel(logging.DEBUG)
		else:
			handler_stdout.setLevel(logging.INFO)
		logger.addHandler(handler_stdout)

	if not veryquiet:
		handler_stderr = logging.StreamHandler(sys.stderr)
		handler_stderr.setFormatter(logging.Formatter("%(message)s"))
		handler_stderr.setLevel(logging.WARNING)
		logger.addHandler(handler_stderr)

	try:
		if not isinstance(src, (str, os.PathLike)):
			msg = f"Bad type for arg 'src' (expected str or PathLike): {src}"
			raise TypeError(msg)
		if not isinstance(dst, (str, os.PathLike)):
			msg = f"Bad type for arg 'dst' (expected str or PathLike): {dst}"
			raise TypeError(msg)
		if not isinstance(delete, bool):
			msg = f"Bad type for arg 'delete' (expected bool): {delete}"
			raise TypeError(msg)
		if not isinstance(dry_run, bool):
			msg = f"Bad type for arg 'dry_run' (expected bool): {dry_run}"
			raise TypeError(msg)
		if not isinstance(mmap_threshold, int) or isinstance(mmap_threshold, bool):
			msg = f"Bad type for arg 'mmap_threshold' (expected int): {mmap_threshold}"
			raise TypeError(msg)
		if not isinstance(chunk_size, int) or isinstance(chunk_size, bool):
			msg = f"Bad type for arg 'chunk_size' (expected int): {chunk_size}"
			raise TypeError(msg)
		if log is not None and not isinstance(log, (str, os.PathLike)):
			msg = f"Bad type for arg 'log' (expected str or PathLike): {log}"
			raise TypeError(msg)
		if not isinstance(quiet, bool):
			msg = f"Bad type for arg 'quiet' (expected bool): {quiet}"
			raise TypeError(msg)
		if not isinstance(veryquiet, bool):
			msg = f"Bad type for arg 'veryquiet' (expected bool): {veryquiet}"
			raise TypeError(msg)

		src_root = _strip_trailing_sep(os.fspath(src))
		dst_root = _strip_trailing_sep(os.fspath(dst))

		timestamp = str(int(time.time()*1000))
		if log is None:
			log_file = None
		elif log == "auto":
			log_file = Path.home() / f"gonc.{timestamp}.log"
		else:
			log_file = Path(log)
		results.log_file = log_file

		_check_dir(src_root, "src")
		_check_dir(dst_root, "dst")
		if os.path.samefile(src_root, dst_root):
			msg = f"Chosen 'src' and 'dst' point to the same directory"
			raise ValueError(msg)
		if mmap_threshold <= 0:
			msg = f"mmap_threshold must be positive: {mmap_threshold}"
			raise ValueError(msg)
		if chunk_size <= 0:
			msg = f"chunk_size must be positive: {chunk_size}"
			raise ValueError(msg)
		if log_file is not None and os.path.exists(log_file):
			msg = f"Chosen log already exists: {log_file}"
			raise ValueError(msg)

		tmp_log_file = None
		if log_file is not None:
			with tempfile.NamedTemporaryFile(mode="w+", encoding="utf-8", delete=False) as tmp_log:
				tmp_log_file = Path(tmp_log.name)
			formatter = logging.Formatter("%(levelname)s: %(message)s")
			handler_file = logging.FileHandler(tmp_log_file, encoding="utf-8")
			handler_file.setFormatter(formatter)
			if debug:
				handler_file.setLevel(logging.DEBUG)
			else:
				handler_file.setLevel(logging.INFO)
			logger.addHandler(handler_file)

		logger.debug(f"Starting sync: {src_root=} {dst_root=} {delete=} {dry_run=} {mmap_threshold=} {chunk_size=} {log_file=} {debug=} {quiet=} {veryquiet=}")

		width = max(len(src_root), len(dst_root)) + 3
		logger.info("   " + src_root)
		logger.info("-> " + dst_root)
		logger.info("-" * width)

		src_files = _scandir(src_root)
		dst_files = _scandir(dst_root)
		logger.debug(f"Scanned {len(src_files)} files in src and {len(dst_files)} files in dst")

		for op, src_file, dst_file, summary in _operations(src_files, dst_files):
			if op == "=":
				logger.debug(summary)
				results.skip_count += 1
				continue

			logger.info(summary)

			if not dry_run:
				if op == "+":
					dst_path = os.path.join(dst_root, src_file.relpath)
					if _ensure_path(dst_root, src_file.relpath) and _copy_file(
						src_file.full_path,
						dst_path,
						src_file.size,
						src_file.mode,
						False,
						mmap_threshold = mmap_threshold,
						chunk_size     = chunk_size
					):
						results.create_success += 1
						results.byte_diff += src_file.size
					else:
						results.create_error += 1
				elif op == "U":
					assert dst_file is not None
					if _copy_file(
						src_file.full_path,
						dst_file.full_path,
						src_file.size,
						src_file.mode,
						True,
						mmap_threshold = mmap_threshold,
						chunk_size     = chunk_size
					):
						results.update_success += 1
						results.byte_diff += src_file.size - dst_file.size
					else:
						results.update_error += 1
				else:
					assert False

		_cleanup(dst_files, results, delete=delete, dry_run=dry_run)

		logger.info("")
		logger.info("*** gonc finished successfully. ***")

		results.success = True

	except KeyboardInterrupt:
		logger.critical(f"Cancelled by user.")
	except (TypeError, ValueError) as e:
		logger.critical(f"Input Error: {e}")
	except ScanError as e:
		logger.critical(f"Scan Error: {e}")
	except Exception as e:
		logger.critical("Unexpected error: " + _error_summary(e))
		logger.critical(traceback.format_exc())

	finally:
		if dry_run:
			logger.info("")
			logger.info("*** DRY RUN ***")
		else:
			logger.info("")
			logger.info("Summary")
			logger.info("-------")
			logger.info(f"Create Success: {results.create_success}" + (f" / Failed: {results.create_error}" if results.create_error else ""))
			logger.info(f"Update Success: {results.update_success}" + (f" / Failed: {results.update_error}" if results.update_error else ""))
			if delete:
				logger.info(f"Delete Success: {results.delete_success}" + (f" / Failed: {results.delete_error}" if results.delete_error else ""))
			logger.info(f"Skipped: {results.skip_count}")
			logger.info(f"Net Change: {_human_readable_size(results.byte_diff)}")

		if results.err_count:
			logger.info("")
			logger.info(f"There were {results.err_count} errors.")
			if len(results.errors) <= 10:
				logger.info("Errors are reprinted below for convenience.")
				for error in results.errors:
					logger.info(error)

		if log_file:
			logger.info("")
			logger.info(f"Log file: {log_file}")

		logger.removeHandler(handler_errors)

		if handler_stdout:
			logger.removeHandler(handler_stdout)

		if handler_stderr:
			logger.removeHandler(handler_stderr)

		if handler_file:
			logger.removeHandler(handler_file)
			handler_file.close()
			assert tmp_log_file is not None
			assert log_file is not None
			tmp_log_file.replace(log_file)

	return results

def _strip_trailing_sep(path:str) -> str:
	'''
	Returns `path` without one trailing path separator. The filesystem root is returned unchanged.

	>>> _strip_trailing_sep("src" + os.sep)
	'src'
	>>> _strip_trailing_sep("src")
	'src'
	>>> _strip_trailing_sep(os.sep) == os.sep
	True
	'''

	seps = (os.sep, os.altsep) if os.altsep else (os.sep,)
	if len(path) > 1 and path[-1] in seps:
		return path[:-1]
	return path

def _check_dir(path:str, name:str) -> None:
	'''Raises a `ValueError` unless `path` exists and is a directory (or a symlink to one).'''

	if not os.path.exists(path):
		raise ValueError(f"Chosen '{name}' does not exist: {path}")
	if not os.path.isdir(path):
		raise ValueError(f"Chosen '{name}' is not a directory: {path}")

def _scandir(root:str) -> _Registry:
	'''
	Retrieves file information for all regular files under `root`, including relative paths (relative to `root`), sizes, mtimes and permission bits. Symbolic links are followed, hidden entries are skipped, and directories themselves are not recorded.

	Raises a `ScanError` if `root` cannot be opened. No partial registry is returned in that case.
	'''

	files = _Registry(root)

	for dir, file_entries in _walk(root):
		logger.debug(f"scanning: {dir}")

		for entry in file_entries:
			try:
				st = entry.stat(follow_symlinks=True)
			except OSError as e:
				# dangling symlink, or the file vanished mid-scan
				logger.warning(f"Skipping file: {_error_summary(e)}")
				continue
			if not stat.S_ISREG(st.st_mode):
				continue

			file_relpath = entry.path[len(root):].lstrip(os.sep)
			files.append(_FileRecord(
				relpath   = file_relpath,
				full_path = entry.path,
				mtime     = int(st.st_mtime),
				size      = st.st_size,
				mode      = stat.S_IMODE(st.st_mode),
			))

	return files

def _walk(root:str) -> Iterator[tuple[str, list[os.DirEntry]]]:
	'''
	Yields `(dir, file_entries)` for each directory under `root`, top-down and in directory order. Directory symlinks are descended into, but a directory that is one of its own ancestors (a symlink cycle) is not. The same directory reached through two different branches is scanned under both paths. Hidden entries are never yielded or descended into.
	'''

	# each dir is paired with the (st_dev, st_ino) ids of its ancestors
	stack : list[tuple[str, frozenset[tuple[int, int]]]] = [(root, frozenset())]

	while stack:
		dir, ancestors = stack.pop()

		try:
			dir_stat = os.stat(dir)
			scanner = os.scandir(dir)
		except OSError as e:
			if dir == root:
				raise ScanError(f"Could not open file hierarchy: {_error_summary(e)}") from e
			logger.warning(f"Skipping unreadable dir: {_error_summary(e)}")
			continue

		dir_id = (dir_stat.st_dev, dir_stat.st_ino)
		if dir_id in ancestors:
			scanner.close()
			logger.warning(f"Symlink cycle, not descending again: {dir}")
			continue
		ancestors = ancestors | {dir_id}

		subdirs      : list[str]         = []
		file_entries : list[os.DirEntry] = []

		with scanner as entries:
			for entry in entries:
				if entry.name.startswith("."):
					continue
				try:
					is_dir = entry.is_dir(follow_symlinks=True)
				except OSError as e:
					logger.warning(f"Skipping entry: {_error_summary(e)}")
					continue
				if is_dir:
					subdirs.append(entry.path)
				else:
					file_entries.append(entry)

		yield dir, file_entries

		# reversed so subdirs are popped in directory order
		stack.extend((subdir, ancestors) for subdir in reversed(subdirs))

def _operations(src_files:_Registry, dst_files:_Registry) -> Iterator[tuple[str, _FileRecord, _FileRecord | None, str]]:
	'''
	Generator of file operations for this sync, as `(op, src_file, dst_file, summary)`. `op` is "+" (create), "U" (update) or "=" (skip).

	Every destination file that is matched by a source file is removed from `dst_files`, so once the generator is exhausted `dst_files` holds only files that are not in the source.

	>>> src, dst = _Registry("s"), _Registry("d")
	>>> src.append(_FileRecord("new", "s/new", 5, 1, 0o644))
	>>> src.append(_FileRecord("old", "s/old", 5, 1, 0o644))
	>>> src.append(_FileRecord("same", "s/same", 5, 1, 0o644))
	>>> dst.append(_FileRecord("old", "d/old", 4, 1, 0o644))
	>>> dst.append(_FileRecord("same", "d/same", 5, 1, 0o644))
	>>> dst.append(_FileRecord("extra", "d/extra", 5, 1, 0o644))
	>>> [op for op, _, _, _ in _operations(src, dst)]
	['+', 'U', '=']
	>>> [f.relpath for f in dst]
	['extra']
	'''

	for src_file in src_files:
		relpath = src_file.relpath
		dst_file = dst_files.find(relpath)

		if dst_file is None:
			yield ("+", src_file, None, f"+ {relpath}")
		elif dst_file.mtime < src_file.mtime:
			# matched even if the copy later fails or is skipped by a dry run
			dst_files.remove(relpath)
			yield ("U", src_file, dst_file, f"U {relpath}")
		else:
			dst_files.remove(relpath)
			if dst_file.mtime > src_file.mtime:
				logger.debug(f"Destination copy is newer, skipping: {relpath}")
			yield ("=", src_file, dst_file, f"= {relpath}")

def _cleanup(dst_files:_Registry, results:Results, *, delete:bool, dry_run:bool) -> None:
	'''Deletes (or, without `delete`, only lists) the destination files left over after `_operations()`.'''

	if not len(dst_files):
		return

	if not delete:
		logger.info("")
		logger.info("Not present in src:")
		for dst_file in dst_files:
			logger.info(f"  {dst_file.relpath}")
			results.extraneous.append(dst_file.relpath)
		return

	for dst_file in list(dst_files):
		results.extraneous.append(dst_file.relpath)
		logger.info(f"- {dst_file.relpath}")
		if dry_run:
			continue
		try:
			os.unlink(dst_file.full_path)
		except OSError as e:
			results.delete_error += 1
			logger.error(f"Could not delete: {_error_summary(e)}")
			continue
		dst_files.remove(dst_file.relpath)
		results.delete_success += 1
		results.byte_diff -= dst_file.size

def _ensure_path(dst_root:str, relpath:str) -> bool:
	'''
	Creates the missing parent directories of `relpath` under `dst_root`, left to right. New directories get mode 0o777, reduced by the umask.

	Returns `False` (after logging the error) if one of the parents exists but is not a directory, or cannot be created. Existing entries are never replaced.
	'''

	path = dst_root
	for part in relpath.split(os.sep)[:-1]:
		path = os.path.join(path, part)
		try:
			st = os.stat(path)
		except FileNotFoundError:
			try:
				os.mkdir(path, 0o777)
			except OSError as e:
				logger.error(f"Could not create dir: {_error_summary(e)}")
				return False
			logger.debug(f"+ {os.path.relpath(path, dst_root)}{os.sep}")
			continue
		except OSError as e:
			logger.error(f"Could not create dir: {_error_summary(e)}")
			return False
		if not stat.S_ISDIR(st.st_mode):
			logger.error(f"Cannot create dir, path exists and is not a dir: {path}")
			return False
	return True

def _copy_file(
		src_path       : str,
		dst_path       : str,
		size           : int,
		mode           : int,
		dst_exists     : bool,
		*,
		mmap_threshold : int = MMAP_THRESHOLD,
		chunk_size     : int = CHUNK_SIZE,
	) -> bool:
	'''
	Copy the contents of `src_path` to `dst_path`.

	If `dst_exists`, the destination is truncated and overwritten and keeps its permission bits. Otherwise it is created with `mode` minus the set-user-ID and set-group-ID bits, further reduced by the umask. Files of at most `mmap_threshold` bytes are written from a read-only memory map in one write, larger files are streamed in `chunk_size` pieces. Timestamps are not copied: the destination gets the write time, so a source file whose mtime lies in the future stays newer than its copy and is copied again on every run.

	Empty files are refused. Returns `False` (after logging the error) if the copy failed.
	'''

	if size == 0:
		logger.error(f"File size is 0, not copying: {src_path}")
		return False

	try:
		with open(src_path, "rb", buffering=0) as fsrc, _open_dst(dst_path, mode, dst_exists) as fdst:
			if size <= mmap_threshold:
				_copy_mapped(fsrc, fdst, size, dst_path)
			else:
				_copy_streamed(fsrc, fdst, chunk_size, dst_path)
	except (OSError, ValueError) as e:
		# ValueError: mmap length exceeds a file that shrank since the scan
		logger.error(f"Could not copy {src_path} -> {dst_path}: {_error_summary(e)}")
		return False

	return True

def _open_dst(path:str, mode:int, exists:bool) -> io.FileIO:
	'''Opens the copy destination for unbuffered writing, truncating an existing file or creating a new one.'''

	flags = os.O_WRONLY | os.O_TRUNC | getattr(os, "O_BINARY", 0)
	if exists:
		fd = os.open(path, flags)
	else:
		fd = os.open(path, flags | os.O_CREAT, mode & ~(stat.S_ISUID | stat.S_ISGID))
	try:
		return open(fd, "wb", buffering=0)
	except OSError:
		os.close(fd)
		raise

def _copy_mapped(fsrc:io.FileIO, fdst:io.FileIO, size:int, dst_path:str) -> None:
	with mmap.mmap(fsrc.fileno(), size, access=mmap.ACCESS_READ) as data:
		if hasattr(mmap, "MADV_SEQUENTIAL"):
			data.madvise(mmap.MADV_SEQUENTIAL)
		written = fdst.write(data)
	if written != size:
		raise OSError(errno.EIO, f"Short write ({written} of {size} bytes)", dst_path)

def _copy_streamed(fsrc:io.FileIO, fdst:io.FileIO, chunk_size:int, dst_path:str) -> None:
	buf = bytearray(chunk_size)
	view = memoryview(buf)
	while True:
		n = fsrc.readinto(buf)
		if not n:
			break
		written = fdst.write(view[:n])
		if written != n:
			raise OSError(errno.EIO, f"Short write ({written} of {n} bytes)", dst_path)

def _human_readable_size(n:int) -> str:
	'''
	Translates `n` bytes into a human-readable size.

	>>> _human_readable_size(1023)
	'+1023 bytes'
	>>> _human_readable_size(-1024)
	'-1 KB'
	>>> _human_readable_size(2.1 * 1024 * 1024)
	'+2 MB'
	'''

	sign = "-" if n < 0 else "+"
	n = abs(n)
	units = ["bytes", "KB", "MB", "GB", "TB", "PB"]
	i = 0
	while n >= 1024 and i < len(units) - 1:
		n //= 1024
		i += 1
	return f"{sign}{round(n)} {units[i]}"

def _error_summary(e:BaseException) -> str:
	'''
	Get a one-line summary of an Error.

	>>> _error_summary(FileNotFoundError(2, "No such file or directory", "a.txt"))
	'FileNotFoundError: No such file or directory: a.txt'
	>>> _error_summary(ValueError("bad value"))
	'ValueError: bad value'
	'''

	error_type = type(e).__name__
	if isinstance(e, OSError) and e.strerror:
		msg = f"{error_type}: {e.strerror}"
		if e.filename is not None:
			msg += f": {e.filename}"
	else:
		msg = f"{error_type}: {e}"
	return msg

def main() -> None:
	results = sync_cmd(sys.argv[1:])
	sys.exit(0 if results.success else 1)

if __name__ == "__main__":
	main()
