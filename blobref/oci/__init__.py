# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""OCI registry helpers."""

from blobref.oci.referrers import (
    DigestReference,
    RegistryOptions,
    parse_digest_reference,
    referrers,
)
