#!/usr/bin/env python

# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  common.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Common code for blobref unittests, import like so:
  `import tests.common`

  Tests importing this module, should be run from the project root, e.g.:
  `python -m unittest tests.test_loader`
  or using the aggregator script (preferred way):
  `python tests/runtests.py`.

"""
import os
import shutil
import tempfile
from unittest.mock import MagicMock

HELLO_SHA256 = (
    "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
)
HELLO_SHA512 = (
    "9b71d224bd62f3785d96d46ad3ea3d73319bfbc2890caadae2dff72519673ca7"
    "2323c3d99ba5c11d7c7acc6e14b8c5da0c4663475c2e5c3adef46f73bcdec043"
)


class TmpDirMixin:
    """Mixin with classmethods to create and change into a temporary directory,
    and to change back to the original CWD and remove the temporary directory.

    """

    @classmethod
    def set_up_test_dir(cls):
        """Back up CWD, and create and change into temporary directory."""
        cls.original_cwd = os.getcwd()
        cls.test_dir = os.path.realpath(tempfile.mkdtemp())
        os.chdir(cls.test_dir)

    @classmethod
    def tear_down_test_dir(cls):
        """Change back to original CWD and remove temporary directory."""
        os.chdir(cls.original_cwd)
        shutil.rmtree(cls.test_dir)


def mock_pool_manager(status=200, data=b"", headers=None):
    """Return a mock urllib3.PoolManager, whose `request` method returns a
    mock response with passed status, body and headers."""
    response = MagicMock()
    response.status = status
    response.data = data
    response.headers = headers or {}
    response.read.return_value = data

    http = MagicMock()
    http.request.return_value = response
    return http
