# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
mblas
=====

The dense-matrix primitive the decoder is written against. A "Matrix" is a
plain 2-D NumPy array: rows are batch entries (one per live hypothesis),
columns are features.

Public API
~~~~~~~~~~
- Row-wise arithmetic
    - `add_bias_by_row`, `broadcast`, `softmax_rows`, `mean_rows`
- Shape utilities
    - `reshape`, `check_rows`, `as_matrix`
- Gathers
    - `assemble_rows`, `assemble_cols`

Everything returns a fresh array; no function writes into its arguments.

Example
-------
>>> import numpy as np, mblas
>>> P = mblas.softmax_rows(np.random.randn(3, 5))
>>> np.allclose(P.sum(axis=1), 1.0)
True
"""

from importlib.metadata import version as _pkg_version

from .assemble import assemble_cols, assemble_rows
from .matrix_functions import (
    add_bias_by_row,
    broadcast,
    mean_rows,
    reshape,
    softmax_rows,
)
from .utils import DTYPE, as_matrix, check_rows

__all__ = [
    "add_bias_by_row",
    "broadcast",
    "mean_rows",
    "reshape",
    "softmax_rows",
    "assemble_rows",
    "assemble_cols",
    "as_matrix",
    "check_rows",
    "DTYPE",
]

# ---------------------------------------------------------------------
# Version string (helps "pip show dl4mt-decoder", Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version("dl4mt-decoder")
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Optional: lightweight default logging config so users see warnings
# only if they deliberately enable them.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
