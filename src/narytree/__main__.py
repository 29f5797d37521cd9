# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Allow running the CLI with ``python -m narytree``."""

import sys

from .cli import main

sys.exit(main())
