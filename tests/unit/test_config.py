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

import unittest
from pathlib import Path

from mirrorvault.config import (
    CONFIG_ENV,
    BackupSettings,
    apply_overrides,
    load_app_config,
    load_public_key,
    load_source_paths,
    resolve_config_path,
)
from tests.test_support import temp_directory, temp_env


class TestResolveConfigPath(unittest.TestCase):
    def test_defaults_when_nothing_configured(self) -> None:
        with temp_directory() as tmp_path:
            with temp_env({"XDG_CONFIG_HOME": str(tmp_path / "xdg"), CONFIG_ENV: ""}):
                self.assertIsNone(resolve_config_path(None))
                config = load_app_config(None)
        self.assertEqual(config.backup, BackupSettings())
        self.assertEqual(config.backup.staging_dir, Path("laptop-backup"))
        self.assertIsNone(config.source)

    def test_user_config_file_is_picked_up(self) -> None:
        with temp_directory() as tmp_path:
            user_file = tmp_path / "xdg" / "mirrorvault" / "config.toml"
            user_file.parent.mkdir(parents=True)
            user_file.write_text('[backup]\nstaging_dir = "nightly"\n', encoding="utf-8")
            with temp_env({"XDG_CONFIG_HOME": str(tmp_path / "xdg"), CONFIG_ENV: ""}):
                config = load_app_config(None)
        self.assertEqual(config.source, user_file)
        self.assertEqual(config.backup.staging_dir, Path("nightly"))

    def test_env_var_beats_user_config(self) -> None:
        with temp_directory() as tmp_path:
            env_file = tmp_path / "env.toml"
            env_file.write_text('[backup]\nstaging_dir = "from-env"\n', encoding="utf-8")
            overrides = {"XDG_CONFIG_HOME": str(tmp_path / "xdg"), CONFIG_ENV: str(env_file)}
            with temp_env(overrides):
                self.assertEqual(resolve_config_path(None), env_file)

    def test_missing_explicit_config_is_an_error(self) -> None:
        with temp_directory() as tmp_path:
            with self.assertRaisesRegex(ValueError, "config file not found"):
                resolve_config_path(tmp_path / "nope.toml")


class TestLoadAppConfig(unittest.TestCase):
    def test_parses_backup_and_ui_sections(self) -> None:
        with temp_directory() as tmp_path:
            path = tmp_path / "config.toml"
            path.write_text(
                "[backup]\n"
                'paths_file = "/etc/mirrorvault/paths.txt"\n'
                'public_key_file = "/etc/mirrorvault/key.txt"\n'
                'staging_dir = "/var/tmp/stage"\n'
                'output_dir = "/srv/backups"\n'
                "[ui]\n"
                "quiet = true\n"
                'no_color = "yes"\n',
                encoding="utf-8",
            )
            config = load_app_config(path)
        self.assertEqual(config.backup.paths_file, Path("/etc/mirrorvault/paths.txt"))
        self.assertEqual(config.backup.public_key_file, Path("/etc/mirrorvault/key.txt"))
        self.assertEqual(config.backup.staging_dir, Path("/var/tmp/stage"))
        self.assertEqual(config.backup.output_dir, Path("/srv/backups"))
        self.assertTrue(config.ui.quiet)
        self.assertTrue(config.ui.no_color)

    def test_blank_values_fall_back_to_defaults(self) -> None:
        with temp_directory() as tmp_path:
            path = tmp_path / "config.toml"
            path.write_text('[backup]\nstaging_dir = "  "\noutput_dir = ""\n', encoding="utf-8")
            config = load_app_config(path)
        self.assertEqual(config.backup.staging_dir, Path("laptop-backup"))
        self.assertIsNone(config.backup.output_dir)

    def test_invalid_values_name_the_field(self) -> None:
        cases = (
            ("[backup]\npaths_file = 3\n", "backup.paths_file must be a string"),
            ("[ui]\nquiet = 7\n", "ui.quiet must be a boolean"),
            ("backup = 1\n", r"\[backup\] must be a table"),
            ("[backup\n", "invalid config file"),
        )
        for text, message in cases:
            with self.subTest(text=text):
                with temp_directory() as tmp_path:
                    path = tmp_path / "config.toml"
                    path.write_text(text, encoding="utf-8")
                    with self.assertRaisesRegex(ValueError, message):
                        load_app_config(path)

    def test_overrides_replace_only_given_values(self) -> None:
        base = BackupSettings(staging_dir=Path("stage"), output_dir=Path("out"))
        updated = apply_overrides(base, paths_file="list.txt", staging_dir=None)
        self.assertEqual(updated.paths_file, Path("list.txt"))
        self.assertEqual(updated.staging_dir, Path("stage"))
        self.assertEqual(updated.output_dir, Path("out"))
        self.assertIs(apply_overrides(base), base)


class TestRunFiles(unittest.TestCase):
    def test_source_paths_keep_order_and_skip_comments(self) -> None:
        with temp_directory() as tmp_path:
            paths_file = tmp_path / "paths.txt"
            paths_file.write_text(
                "/home/me/docs\n\n# photos are synced elsewhere\n  /etc/hosts  \n/tmp/a\n",
                encoding="utf-8",
            )
            self.assertEqual(
                load_source_paths(paths_file),
                ["/home/me/docs", "/etc/hosts", "/tmp/a"],
            )

    def test_missing_paths_file_is_a_config_error(self) -> None:
        with temp_directory() as tmp_path:
            with self.assertRaisesRegex(ValueError, "could not read paths from"):
                load_source_paths(tmp_path / "paths.txt")

    def test_public_key_is_stripped(self) -> None:
        with temp_directory() as tmp_path:
            key_file = tmp_path / "public_key.txt"
            key_file.write_text("age1example\n", encoding="utf-8")
            self.assertEqual(load_public_key(key_file), "age1example")

    def test_public_key_errors(self) -> None:
        with temp_directory() as tmp_path:
            with self.assertRaisesRegex(ValueError, "could not read public key from"):
                load_public_key(tmp_path / "missing.txt")
            empty = tmp_path / "empty.txt"
            empty.write_text("\n", encoding="utf-8")
            with self.assertRaisesRegex(ValueError, "is empty"):
                load_public_key(empty)


if __name__ == "__main__":
    unittest.main()
