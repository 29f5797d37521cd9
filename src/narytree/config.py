# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Runtime settings for the narytree command line tools."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

ENV_PREFIX = 'NARYTREE_'


@dataclass
class Settings:
    """Settings for file storage and the interactive CLI.

    Attributes:
        encoding: Text encoding of tree files.
        log_level: Name of the logging level used by the CLI.
        prompt: Prompt shown when asking for a story choice.
    """

    encoding: str = 'utf-8'
    log_level: str = 'WARNING'
    prompt: str = 'Enter your choice (1-{count}, q to quit): '

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from NARYTREE_ENCODING and NARYTREE_LOG_LEVEL.

        A log level that names no logging level falls back to the default.

        Args:
            environ: Mapping to read instead of os.environ.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        log_level = env.get(f'{ENV_PREFIX}LOG_LEVEL', defaults.log_level).strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            log_level = defaults.log_level
        return cls(
            encoding=env.get(f'{ENV_PREFIX}ENCODING', defaults.encoding),
            log_level=log_level,
        )
