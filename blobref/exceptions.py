# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""Errors raised when resolving references and verifying their checksums.

Errors are grouped in three categories, so that callers can tell apart
invalid caller input (``InputError``), content that could not be obtained
(``SourceError``) and content that failed verification (``IntegrityError``).
Filesystem and network errors are not wrapped and keep their own types.

"""
import securesystemslib.exceptions
from securesystemslib.exceptions import Error, FormatError


class InputError(Error):
    """Indicates invalid caller input, e.g. a malformed checksum."""


class SourceError(Error):
    """Indicates that the content for a reference could not be obtained."""


class IntegrityError(Error):
    """Indicates that obtained content failed verification."""


class UnrecognizedSchemeError(InputError):
    """Indicates that a reference uses a scheme no resolver exists for."""

    def __init__(self, scheme):
        super().__init__(f"loading URL: unrecognized scheme: {scheme}")
        self.scheme = scheme


class EnvVarNotFoundError(SourceError):
    """Indicates that an ``env://`` reference names an unset variable."""

    def __init__(self, name):
        super().__init__(f"loading URL: env var ${name} not found")
        self.name = name


class HttpStatusError(SourceError):
    """Indicates an HTTP(S) error status, if status checking is enabled."""

    def __init__(self, url, status):
        super().__init__(f"loading URL: {url} returned HTTP status {status}")
        self.url = url
        self.status = status


class MalformedChecksumError(InputError, FormatError):
    """Indicates a checksum that is not of the form
    ``[<algorithm>:]<hex digest>``."""

    def __init__(self, checksum):
        super().__init__(
            "wrong checksum input format, must have at most 1 colon: "
            f"{checksum}"
        )
        self.checksum = checksum


class UnsupportedAlgorithmError(
    InputError, securesystemslib.exceptions.UnsupportedAlgorithmError
):
    """Indicates a checksum algorithm other than sha256 or sha512."""

    def __init__(self, algorithm):
        super().__init__(f"unsupported checksum algorithm: {algorithm}")
        self.algorithm = algorithm


class ChecksumMismatchError(IntegrityError):
    """Indicates that the digest of resolved content differs from the
    expected digest."""

    def __init__(self, uri, expected, computed):
        super().__init__(
            f"incorrect checksum for file {uri}: expected {expected} but got "
            f"{computed}"
        )
        self.uri = uri
        self.expected = expected
        self.computed = computed


class InvalidDigestReferenceError(InputError, FormatError):
    """Indicates a registry reference that is not of the form
    ``[<registry>/]<repository>@<algorithm>:<hex digest>``."""


class RegistryError(SourceError):
    """Indicates an unexpected response from an OCI registry."""

    def __init__(self, url, status):
        super().__init__(f"registry request {url} failed with status {status}")
        self.url = url
        self.status = status
