# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""Reference resolver API.

Resolve file paths, HTTP(S) URLs and environment variable references to
their content.

Example usage::

    from blobref.resolver import Resolver

    # Fully read content into memory
    data = Resolver.for_uri("env://SIGNING_CERT").load()

    # Or stream it
    with Resolver.for_uri("https://example.com/blob").open() as stream:
        chunk = stream.read(1024)

"""

from blobref.resolver._resolver import (
    EnvResolver,
    FileResolver,
    HttpResolver,
    ParsedReference,
    Resolver,
    SchemeKind,
    parse_reference,
)
