#!/usr/bin/env python3
"""GitHub Actions input/output helpers (step outputs, inputs, failure annotations)."""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


def get_input(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Return action input ``name`` (read from ``INPUT_<NAME>``), or ''."""
    env = os.environ if environ is None else environ
    key = "INPUT_" + name.replace(" ", "_").upper()
    return (env.get(key) or "").strip()


def set_output(name: str, value: str, environ: Optional[Mapping[str, str]] = None) -> None:
    """Publish a step output readable by later steps.

    Appends ``name=value`` to the ``GITHUB_OUTPUT`` file. Outside a runner
    there is no such file, so the pair is printed for local runs.
    """
    env = os.environ if environ is None else environ
    github_output = env.get("GITHUB_OUTPUT")
    if github_output:
        with open(github_output, "a", encoding="utf-8") as f:
            f.write(f"{name}={value}\n")
    else:
        logger.warning("GITHUB_OUTPUT is not set; printing output instead")
        print(f"{name}={value}")
    logger.debug(f"Output {name}={value}")


def set_failed(message: str) -> None:
    """Report a failed step through the workflow error annotation."""
    # Workflow commands are single-line
    escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    print(f"::error::{escaped}")
    sys.stdout.flush()
