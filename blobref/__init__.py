# Copyright New York University and the in-toto contributors
# SPDX-License-Identifier: Apache-2.0

"""
Configure base logger for blobref (see blobref.log for details).

"""
import blobref.log

# blobref version
__version__ = "0.3.0"
