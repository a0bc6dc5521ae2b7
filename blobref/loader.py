# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""
<Program Name>
  loader.py

<Copyright>
  See LICENSE for licensing information.

<Purpose>
  Provides functions to load content from file paths, HTTP(S) URLs and
  environment variables ("env://NAME"), optionally verifying it against a
  checksum.

  Example:

  ```
  from blobref.loader import load_file_or_url_with_checksum

  data = load_file_or_url_with_checksum(
      "https://example.com/root.json", "sha512:1a2b...")
  ```

"""
from blobref.checksum import parse_checksum, verify_checksum
from blobref.resolver import Resolver


def load_file_or_url(uri, environ=None, http=None, raise_for_status=None):
    """Read the full content of a file, URL or environment variable.

    Arguments:
      uri: A file path, an "http://" or "https://" URL, or "env://NAME".
      environ (optional): Mapping used to look up environment variables.
          Default is ``os.environ``.
      http (optional): ``urllib3.PoolManager`` used for HTTP(S) requests.
      raise_for_status (optional): Treat HTTP(S) error statuses as errors.
          Default is ``blobref.settings.HTTP_RAISE_FOR_STATUS``.

    Raises:
      blobref.exceptions.UnrecognizedSchemeError: The reference uses an
          unknown scheme.
      blobref.exceptions.EnvVarNotFoundError: The referenced environment
          variable is not set.
      blobref.exceptions.HttpStatusError: The server returned an error status
          and ``raise_for_status`` is set.
      OSError: The file cannot be read.
      urllib3.exceptions.HTTPError: The request failed.

    Returns:
      The content as bytes.

    """
    resolver = Resolver.for_uri(
        uri, environ=environ, http=http, raise_for_status=raise_for_status
    )
    return resolver.load()


def open_file_or_url(uri, environ=None, http=None, raise_for_status=None):
    """Open a file, URL or environment variable for reading.

    Takes the same arguments and raises the same errors as
    `load_file_or_url`.

    The returned binary file object is owned by the caller, who must close
    it, e.g. by using it as a context manager::

        with open_file_or_url("https://example.com/blob") as stream:
            for chunk in iter(lambda: stream.read(8192), b""):
                ...

    For URLs the object is the ``urllib3`` response, whose body is read from
    the network as it is consumed.

    Returns:
      A binary file object.

    """
    resolver = Resolver.for_uri(
        uri, environ=environ, http=http, raise_for_status=raise_for_status
    )
    return resolver.open()


def load_file_or_url_with_checksum(
    uri, checksum, environ=None, http=None, raise_for_status=None
):
    """Read the full content of a file, URL or environment variable and
    verify it against a checksum.

    The checksum is parsed before the content is resolved, so that a bad
    checksum never triggers a request or file read.

    Arguments:
      uri: See `load_file_or_url`.
      checksum: A string of the form "[<algorithm>:]<hex digest>", where
          algorithm is "sha256" (the default) or "sha512".
      environ, http, raise_for_status (optional): See `load_file_or_url`.

    Raises:
      blobref.exceptions.MalformedChecksumError: The checksum has more than
          one colon.
      blobref.exceptions.UnsupportedAlgorithmError: The checksum algorithm is
          not supported.
      blobref.exceptions.ChecksumMismatchError: The content does not match
          the checksum.
      Errors raised by `load_file_or_url`.

    Returns:
      The verified content as bytes.

    """
    expected = parse_checksum(checksum)
    data = load_file_or_url(
        uri, environ=environ, http=http, raise_for_status=raise_for_status
    )
    return verify_checksum(data, expected, uri)
