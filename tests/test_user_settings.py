# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  test_user_settings.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Test blobref/user_settings.py

"""
import os
import unittest
from pathlib import Path
from unittest.mock import patch

from securesystemslib.exceptions import FormatError

import blobref.settings
import blobref.user_settings
from tests.common import TmpDirMixin

RC_CONTENT = """[blobref]
HTTP_RAISE_FOR_STATUS = yes
new_rc_setting = new rc setting
"""


class TestUserSettings(TmpDirMixin, unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.set_up_test_dir()
        Path(".blobrefrc").write_text(RC_CONTENT)

        # Backup settings to restore them in `tearDownClass`
        cls.settings_backup = {}
        for key in blobref.user_settings.BLOBREF_SETTINGS:
            cls.settings_backup[key] = getattr(blobref.settings, key)

    @classmethod
    def tearDownClass(cls):
        # Other unittests might depend on defaults
        for key, val in cls.settings_backup.items():
            setattr(blobref.settings, key, val)

        cls.tear_down_test_dir()

    def setUp(self):
        # Only read the rcfile in the test dir, but not e.g. ~/.blobrefrc
        rc_patcher = patch.object(
            blobref.user_settings, "RC_PATHS", [".blobrefrc"]
        )
        rc_patcher.start()
        self.addCleanup(rc_patcher.stop)

        env_patcher = patch.dict(
            os.environ,
            {
                "BLOBREF_HTTP_RAISE_FOR_STATUS": "false",
                "BLOBREF_HTTP_MAX_REDIRECTS": "3",
                "BLOBREF_NOT_WHITELISTED": "parsed",
                "NOT_PARSED": "ignored",
            },
        )
        env_patcher.start()
        self.addCleanup(env_patcher.stop)

    def test_get_rc(self):
        """Test rcfile parsing in CWD."""
        rc_dict = blobref.user_settings.get_rc()
        self.assertEqual(rc_dict["HTTP_RAISE_FOR_STATUS"], "yes")
        # Parsed but ignored in `set_settings` (not in whitelist)
        self.assertEqual(rc_dict["new_rc_setting"], "new rc setting")

    def test_get_env(self):
        """Test environment variables parsing and prefix."""
        env_dict = blobref.user_settings.get_env()
        self.assertEqual(env_dict["HTTP_RAISE_FOR_STATUS"], "false")
        self.assertEqual(env_dict["HTTP_MAX_REDIRECTS"], "3")
        self.assertEqual(env_dict["NOT_WHITELISTED"], "parsed")
        self.assertNotIn("NOT_PARSED", env_dict)

    def test_set_settings(self):
        """Test precedence of rc over env, conversion and whitelisting."""
        blobref.user_settings.set_settings()

        # From RCfile setting (has precedence over envvar setting)
        self.assertIs(blobref.settings.HTTP_RAISE_FOR_STATUS, True)
        # From envvar, converted to int
        self.assertEqual(blobref.settings.HTTP_MAX_REDIRECTS, 3)

        self.assertFalse(hasattr(blobref.settings, "NEW_RC_SETTING"))
        self.assertFalse(hasattr(blobref.settings, "NOT_WHITELISTED"))

    def test_set_settings_invalid(self):
        """Test that unconvertible values are rejected."""
        for name, value in [
            ("BLOBREF_HTTP_MAX_REDIRECTS", "many"),
            ("BLOBREF_HTTP_RAISE_FOR_STATUS", "maybe"),
        ]:
            with patch.dict(os.environ, {name: value}), patch.object(
                blobref.user_settings, "RC_PATHS", []
            ):
                with self.assertRaises(FormatError, msg=name):
                    blobref.user_settings.set_settings()


if __name__ == "__main__":
    unittest.main()
