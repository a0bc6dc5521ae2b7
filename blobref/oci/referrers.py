# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""Look up OCI artifacts that refer to a content-addressed manifest.

Implements the client side of the referrers API of the OCI distribution
spec, including the fallback to the referrers tag schema for registries that
don't support the API.

"""
import json
import logging
import re

import attr
import urllib3

from blobref.exceptions import InvalidDigestReferenceError, RegistryError

LOG = logging.getLogger(__name__)

OCI_IMAGE_INDEX_MEDIA_TYPE = "application/vnd.oci.image.index.v1+json"

DEFAULT_REGISTRY = "index.docker.io"
_DOCKER_HUB_NAMES = ("docker.io", "index.docker.io")
_DOCKER_HUB_API_HOST = "registry-1.docker.io"

_ALGORITHM_PATTERN = re.compile(r"^[a-z0-9]+(?:[+._-][a-z0-9]+)*$")
_HEX_LENGTH_FOR_ALGORITHM = {"sha256": 64, "sha512": 128}
_HEX_PATTERN = re.compile(r"^[a-f0-9]+$")
_AUTH_PARAM_PATTERN = re.compile(r'(\w+)="([^"]*)"')


@attr.s(frozen=True, slots=True)
class DigestReference:
    """Reference to a manifest by digest, e.g.
    ``ghcr.io/org/app@sha256:<hex>``."""

    registry = attr.ib()
    repository = attr.ib()
    digest = attr.ib()

    @property
    def api_host(self):
        """Host serving the registry API."""
        if self.registry == DEFAULT_REGISTRY:
            return _DOCKER_HUB_API_HOST

        return self.registry

    def __str__(self):
        return f"{self.registry}/{self.repository}@{self.digest}"


@attr.s
class RegistryOptions:
    """Options to connect to a registry.

    Attributes:
      plain_http: Use "http" instead of "https".
      headers: Additional request headers, e.g. "Authorization". Without
          an "Authorization" header, an anonymous bearer token is requested
          from registries that ask for one.
      http: A ``urllib3.PoolManager``, a new one is created if None.

    """

    plain_http = attr.ib(default=False)
    headers = attr.ib(default=None)
    http = attr.ib(default=None)


def _is_registry(component):
    """Helper to tell a registry host from a repository path component."""
    return "." in component or ":" in component or component == "localhost"


def parse_digest_reference(digest_ref):
    """Parse "[<registry>/]<repository>[:<tag>]@<algorithm>:<hex>".

    Docker Hub is used if no registry is named, and single component Docker
    Hub repositories are expanded to "library/<name>". A tag is ignored.

    Raises:
      blobref.exceptions.InvalidDigestReferenceError: The reference is
          malformed.

    Returns:
      A DigestReference.

    """
    name, separator, digest = digest_ref.partition("@")
    if not separator or not name:
        raise InvalidDigestReferenceError(
            f"'{digest_ref}' is not a digest reference, expected "
            "'<repository>@<algorithm>:<hex>'"
        )

    algorithm, colon, hex_digest = digest.partition(":")
    expected_length = _HEX_LENGTH_FOR_ALGORITHM.get(algorithm)
    if (
        not colon
        or not _ALGORITHM_PATTERN.match(algorithm)
        or not _HEX_PATTERN.match(hex_digest)
        or (expected_length and len(hex_digest) != expected_length)
    ):
        raise InvalidDigestReferenceError(
            f"'{digest}' in '{digest_ref}' is not a valid digest"
        )

    first, slash, rest = name.partition("/")
    if slash and _is_registry(first):
        registry, repository = first, rest

    else:
        registry, repository = DEFAULT_REGISTRY, name

    # Strip tag from last path component, but keep registry ports intact
    head, slash, last = repository.rpartition("/")
    last = last.partition(":")[0]
    repository = head + slash + last

    if not repository:
        raise InvalidDigestReferenceError(
            f"'{digest_ref}' has an empty repository"
        )

    if registry in _DOCKER_HUB_NAMES:
        registry = DEFAULT_REGISTRY
        if "/" not in repository:
            repository = "library/" + repository

    return DigestReference(
        registry=registry, repository=repository, digest=digest
    )


def _empty_index():
    return {
        "schemaVersion": 2,
        "mediaType": OCI_IMAGE_INDEX_MEDIA_TYPE,
        "manifests": [],
    }


def _filter_index(index, artifact_type):
    """Helper to keep only descriptors of passed artifact type."""
    index = dict(index)
    index["manifests"] = [
        descriptor
        for descriptor in index.get("manifests") or []
        if descriptor.get("artifactType") == artifact_type
    ]
    return index


def _filters_applied(response):
    """Helper to check if the registry filtered by artifact type."""
    applied = response.headers.get("OCI-Filters-Applied", "")
    return "artifactType" in [name.strip() for name in applied.split(",")]


def _has_authorization(headers):
    return any(name.lower() == "authorization" for name in headers)


def _anonymous_token(http, challenge, repository):
    """Helper to get a pull token for a "WWW-Authenticate: Bearer" challenge.

    Returns None if the challenge is not a bearer challenge with a realm.
    """
    auth_scheme, _, params = challenge.strip().partition(" ")
    if auth_scheme.lower() != "bearer":
        return None

    params = dict(_AUTH_PARAM_PATTERN.findall(params))
    realm = params.get("realm")
    if not realm:
        return None

    fields = {"scope": params.get("scope", f"repository:{repository}:pull")}
    if "service" in params:
        fields["service"] = params["service"]

    LOG.debug("Requesting anonymous token from '%s'", realm)
    response = http.request("GET", realm, fields=fields)
    if response.status != 200:
        raise RegistryError(realm, response.status)

    data = json.loads(response.data)
    return data.get("token") or data.get("access_token")


def _get(http, url, headers, repository, fields=None):
    """Helper to send a GET request, authenticating anonymously on 401.

    Returns the response and the headers to use for subsequent requests.
    """
    response = http.request("GET", url, fields=fields, headers=headers)
    if response.status != 401 or _has_authorization(headers):
        return response, headers

    challenge = response.headers.get("WWW-Authenticate", "")
    token = _anonymous_token(http, challenge, repository)
    if not token:
        return response, headers

    headers = dict(headers, Authorization=f"Bearer {token}")
    response = http.request("GET", url, fields=fields, headers=headers)
    return response, headers


def _referrers_from_tag(http, base_url, reference, headers, artifact_type):
    """Helper to fetch referrers from the "<alg>-<hex>" tag schema."""
    tag = reference.digest.replace(":", "-")
    url = f"{base_url}/manifests/{tag}"
    response, _ = _get(http, url, headers, reference.repository)

    if response.status == 404:
        LOG.debug("No referrers tag '%s' for '%s'", tag, reference)
        return _empty_index()

    if response.status != 200:
        raise RegistryError(url, response.status)

    index = json.loads(response.data)
    if artifact_type:
        index = _filter_index(index, artifact_type)

    return index


def referrers(digest_ref, artifact_type="", options=None):
    """Fetch the index of artifacts that refer to a manifest digest.

    Registries that answer with a "WWW-Authenticate: Bearer" challenge get an
    anonymous pull token, unless an "Authorization" header is passed in the
    options. Private repositories need such a header.

    Arguments:
      digest_ref: A DigestReference or a string accepted by
          `parse_digest_reference`.
      artifact_type (optional): Only return referrers of this artifact type.
      options (optional): RegistryOptions.

    Raises:
      blobref.exceptions.InvalidDigestReferenceError: The reference is
          malformed.
      blobref.exceptions.RegistryError: The registry or its token service
          returned an unexpected status.
      urllib3.exceptions.HTTPError: The request failed.
      ValueError: The registry response is not JSON.

    Returns:
      The OCI image index as dictionary.

    """
    if not isinstance(digest_ref, DigestReference):
        digest_ref = parse_digest_reference(digest_ref)

    if options is None:
        options = RegistryOptions()

    http = options.http
    if http is None:
        http = urllib3.PoolManager()

    scheme = "http" if options.plain_http else "https"
    base_url = f"{scheme}://{digest_ref.api_host}/v2/{digest_ref.repository}"
    headers = {"Accept": OCI_IMAGE_INDEX_MEDIA_TYPE}
    headers.update(options.headers or {})

    url = f"{base_url}/referrers/{digest_ref.digest}"
    fields = {"artifactType": artifact_type} if artifact_type else None
    LOG.debug("Fetching referrers for '%s'", digest_ref)
    response, headers = _get(
        http, url, headers, digest_ref.repository, fields=fields
    )

    if response.status == 404:
        LOG.debug(
            "Referrers API unavailable for '%s', falling back to tag schema",
            digest_ref,
        )
        return _referrers_from_tag(
            http, base_url, digest_ref, headers, artifact_type
        )

    if response.status != 200:
        raise RegistryError(url, response.status)

    index = json.loads(response.data)
    if artifact_type and not _filters_applied(response):
        index = _filter_index(index, artifact_type)

    return index
