# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

"""Mirror, archive and age-encrypt a fixed list of paths."""

from .archive import archive_staging_dir
from .core import ArchiveError, MirrorIssue, MirrorReport, mirror
from .crypto import AgeError, encrypt_file

__all__ = [
    "AgeError",
    "ArchiveError",
    "MirrorIssue",
    "MirrorReport",
    "archive_staging_dir",
    "encrypt_file",
    "mirror",
]
