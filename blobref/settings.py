# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  settings.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  A central place to define default settings that can be used throughout the
  package.

  Defaults can be changed,
   - here (hardcoded),
   - programmatically, e.g.
     ```
     import blobref.settings
     blobref.settings.HTTP_RAISE_FOR_STATUS = True
     ```
  - or with environment variables or RCfiles, see the `blobref.user_settings`
    module

"""
# The debug setting is used to set the blobref base logger to logging.DEBUG
DEBUG = False

# Hash algorithm used for checksums that don't name one, e.g. a bare hex digest
DEFAULT_CHECKSUM_ALGORITHM = "sha256"

# If True, HTTP(S) responses with a status code >= 400 are treated as errors.
# Per default the response body is returned regardless of the status.
HTTP_RAISE_FOR_STATUS = False

# Max number of redirects followed for a single HTTP(S) GET
HTTP_MAX_REDIRECTS = 10
