# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  checksum.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Parse checksum specifiers of the form `[<algorithm>:]<hex digest>` and
  verify content against them.

  Supported algorithms are "sha256" (the default if no algorithm is named)
  and "sha512".

"""
import logging

import attr
from securesystemslib.hash import digest

import blobref.settings
from blobref.exceptions import (
    ChecksumMismatchError,
    MalformedChecksumError,
    UnsupportedAlgorithmError,
)

LOG = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ["sha256", "sha512"]


@attr.s(frozen=True, slots=True)
class Checksum:
    """Expected digest of some content.

    Attributes:
      algorithm: Name of the hash algorithm, one of `SUPPORTED_ALGORITHMS`.
      digest: Expected hex digest, as passed by the user.

    """

    algorithm = attr.ib()
    digest = attr.ib()


def parse_checksum(checksum):
    """Parse passed checksum specifier.

    Arguments:
      checksum: A string of the form "<algorithm>:<hex digest>" or
          "<hex digest>". In the latter case the algorithm defaults to
          `blobref.settings.DEFAULT_CHECKSUM_ALGORITHM`.

    Raises:
      blobref.exceptions.MalformedChecksumError: The specifier has more than
          one colon.
      blobref.exceptions.UnsupportedAlgorithmError: The algorithm is not
          supported.

    Returns:
      A Checksum.

    """
    parts = checksum.split(":")
    if len(parts) > 2:
        raise MalformedChecksumError(checksum)

    if len(parts) == 2:
        algorithm, value = parts

    else:
        algorithm = blobref.settings.DEFAULT_CHECKSUM_ALGORITHM
        value = parts[0]

    if algorithm not in SUPPORTED_ALGORITHMS:
        raise UnsupportedAlgorithmError(algorithm)

    return Checksum(algorithm=algorithm, digest=value)


def compute_digest(data, algorithm):
    """Return lowercase hex digest of passed bytes for passed algorithm."""
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise UnsupportedAlgorithmError(algorithm)

    digest_obj = digest(algorithm)
    digest_obj.update(data)
    return digest_obj.hexdigest()


def verify_checksum(data, checksum, uri):
    """Verify passed content against an expected checksum.

    Hex digests are compared case-insensitively.

    Arguments:
      data: The content as bytes.
      checksum: A Checksum, or a checksum specifier string (see
          `parse_checksum`).
      uri: The reference the content was resolved from, used in errors.

    Raises:
      blobref.exceptions.ChecksumMismatchError: The computed digest differs
          from the expected one.
      Errors raised by `parse_checksum`, if a string is passed.

    Returns:
      The passed data.

    """
    if not isinstance(checksum, Checksum):
        checksum = parse_checksum(checksum)

    computed = compute_digest(data, checksum.algorithm)
    if computed != checksum.digest.lower():
        LOG.warning(
            "Checksum mismatch for '%s': expected %s:%s, got %s:%s",
            uri,
            checksum.algorithm,
            checksum.digest,
            checksum.algorithm,
            computed,
        )
        raise ChecksumMismatchError(uri, checksum.digest, computed)

    LOG.debug("Verified %s checksum for '%s'", checksum.algorithm, uri)
    return data
