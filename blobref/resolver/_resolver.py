# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolver interface and implementations for file, HTTP(S) and environment
variable references."""

import enum
import io
import logging
import os
from abc import ABCMeta, abstractmethod

import attr
import urllib3
from urllib3.util import Retry

import blobref.settings
from blobref.exceptions import (
    EnvVarNotFoundError,
    HttpStatusError,
    UnrecognizedSchemeError,
)

logger = logging.getLogger(__name__)

SCHEME_SEPARATOR = "://"


class SchemeKind(enum.Enum):
    """Closed set of reference kinds, see ``parse_reference``."""

    FILESYSTEM = "file"
    HTTP = "http"
    ENV = "env"
    UNRECOGNIZED = "unrecognized"


# Scheme tokens include the separator, e.g. "https://"
SCHEME_KIND_FOR_TOKEN = {
    "http://": SchemeKind.HTTP,
    "https://": SchemeKind.HTTP,
    "env://": SchemeKind.ENV,
}


@attr.s(frozen=True, slots=True)
class ParsedReference:
    """Classified reference string.

    Attributes:
      uri: The original reference string.
      kind: A ``SchemeKind`` member.
      scheme: The scheme token up to and including "://", or an empty string
          for filesystem paths.
      body: The part after the scheme token, or the whole reference for
          filesystem paths.

    """

    uri = attr.ib()
    kind = attr.ib()
    scheme = attr.ib(default="")
    body = attr.ib(default="")


def parse_reference(uri):
    """Classify passed reference string without performing any I/O.

    A reference that contains "://" is schemed, the scheme token being
    everything up to and including the first "://". Schemed references with a
    token other than "http://", "https://" or "env://" are classified as
    ``SchemeKind.UNRECOGNIZED``, and never as filesystem paths.

    Arguments:
      uri: A reference string.

    Returns:
      A ParsedReference.

    """
    scheme, separator, body = uri.partition(SCHEME_SEPARATOR)
    if not separator:
        return ParsedReference(uri=uri, kind=SchemeKind.FILESYSTEM, body=uri)

    scheme += separator
    kind = SCHEME_KIND_FOR_TOKEN.get(scheme, SchemeKind.UNRECOGNIZED)
    return ParsedReference(uri=uri, kind=kind, scheme=scheme, body=body)


class Resolver(metaclass=ABCMeta):
    """Resolver interface and factory.

    A resolver is created for a single reference and provides two modes to
    obtain its content: ``load`` reads the content fully into memory, ``open``
    returns a binary file object, which the caller must close.

    """

    def __init__(self, reference):
        self.reference = reference

    @classmethod
    def for_uri(cls, uri, environ=None, http=None, raise_for_status=None):
        """Return resolver instance for passed reference string.

        Arguments:
          uri: A file path, an "http://" or "https://" URL, or an "env://"
              reference naming an environment variable.
          environ (optional): Mapping used to look up environment variables.
              Default is ``os.environ``.
          http (optional): ``urllib3.PoolManager`` used for HTTP(S) requests.
          raise_for_status (optional): Treat HTTP(S) error statuses as
              errors. Default is ``blobref.settings.HTTP_RAISE_FOR_STATUS``.

        Raises:
          blobref.exceptions.UnrecognizedSchemeError: The reference uses an
              unknown scheme.

        Returns:
          A Resolver.

        """
        reference = parse_reference(uri)

        if reference.kind is SchemeKind.HTTP:
            return HttpResolver(
                reference, http=http, raise_for_status=raise_for_status
            )

        if reference.kind is SchemeKind.ENV:
            return EnvResolver(reference, environ=environ)

        if reference.kind is SchemeKind.FILESYSTEM:
            return FileResolver(reference)

        raise UnrecognizedSchemeError(reference.scheme)

    @abstractmethod
    def load(self):
        """Return the full content of the reference as bytes."""
        raise NotImplementedError

    @abstractmethod
    def open(self):
        """Return a binary file object to read the content of the reference.

        The caller owns the returned object and must close it.
        """
        raise NotImplementedError


class FileResolver(Resolver):
    """Resolver for local file paths.

    Paths are normalized before they are read. Errors from the filesystem,
    e.g. ``FileNotFoundError`` or ``PermissionError``, are not caught.

    """

    @property
    def path(self):
        """Normalized path of the reference."""
        path = self.reference.body
        # NUL bytes can't be passed to the OS and would make the path
        # ambiguous after normalization
        if "\0" in path:
            raise ValueError(f"path contains a NUL byte: {path!r}")

        return os.path.normpath(path)

    def load(self):
        path = self.path
        logger.debug("Loading '%s' from filesystem", path)
        with open(path, "rb") as file_object:
            return file_object.read()

    def open(self):
        path = self.path
        logger.debug("Opening '%s' from filesystem", path)
        return open(path, "rb")  # pylint: disable=consider-using-with


class HttpResolver(Resolver):
    """Resolver for "http://" and "https://" URLs.

    Issues a single unauthenticated GET request for the reference, following
    redirects but never retrying failed requests. Transport errors (subclasses
    of ``urllib3.exceptions.HTTPError``) are not caught. The body is returned
    as sent by the server, i.e. without content decoding.

    Response status codes are only checked if ``raise_for_status`` is set.

    """

    def __init__(self, reference, http=None, raise_for_status=None):
        super().__init__(reference)
        # Connections of a pool manager created here are closed after load
        self._owns_http = http is None
        if http is None:
            http = urllib3.PoolManager()

        if raise_for_status is None:
            raise_for_status = blobref.settings.HTTP_RAISE_FOR_STATUS

        self._http = http
        self._raise_for_status = raise_for_status

    @staticmethod
    def _retries():
        """Helper to disable retries while still following redirects."""
        return Retry(
            total=None,
            connect=0,
            read=0,
            other=0,
            redirect=blobref.settings.HTTP_MAX_REDIRECTS,
        )

    def _request(self, preload_content):
        """Helper to send the GET request for the reference."""
        url = self.reference.uri
        logger.debug("Fetching '%s'", url)
        response = self._http.request(
            "GET",
            url,
            retries=self._retries(),
            preload_content=preload_content,
            decode_content=False,
        )
        logger.debug("Got status %s for '%s'", response.status, url)
        return response

    def _check_status(self, response):
        """Helper to raise on error statuses, if configured."""
        if self._raise_for_status and response.status >= 400:
            raise HttpStatusError(self.reference.uri, response.status)

    def load(self):
        # Preloading reads the whole body and releases the connection
        try:
            response = self._request(preload_content=True)

        finally:
            if self._owns_http:
                self._http.clear()

        self._check_status(response)
        return response.data

    def open(self):
        response = self._request(preload_content=False)
        try:
            self._check_status(response)

        except HttpStatusError:
            response.drain_conn()
            response.release_conn()
            raise

        return response


class EnvResolver(Resolver):
    """Resolver for "env://NAME" references.

    The content is the value of the environment variable NAME, as bytes. The
    environment is only read, never modified.

    """

    def __init__(self, reference, environ=None):
        super().__init__(reference)
        if environ is None:
            environ = os.environ

        self._environ = environ

    @property
    def name(self):
        """Name of the referenced environment variable."""
        return self.reference.body

    def load(self):
        name = self.name
        logger.debug("Loading '$%s' from environment", name)
        try:
            value = self._environ[name]

        except KeyError:
            raise EnvVarNotFoundError(name) from None

        # os.environ decodes with the filesystem encoding, encoding it back
        # yields the original bytes
        if isinstance(value, str):
            value = os.fsencode(value)

        return value

    def open(self):
        return io.BytesIO(self.load())
