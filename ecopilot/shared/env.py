"""Docker secret resolution for environment-driven settings."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, MutableMapping, Optional

logger = logging.getLogger(__name__)

SECRET_SUFFIX = "_FILE"


def load_secret_file_variables(
    environ: Optional[MutableMapping[str, str]] = None,
) -> List[str]:
    """
    Expose the contents of ``KEY_FILE`` secrets as ``KEY``.

    Used for credentials such as ``GEMINI_API_KEY_FILE`` mounted by Docker
    or Kubernetes. A variable that is already set wins over its file.
    Unreadable files are logged and skipped.

    Returns:
        Names of the variables that were resolved from files.
    """
    env = os.environ if environ is None else environ
    resolved: List[str] = []

    for key, file_path in list(env.items()):
        if not key.endswith(SECRET_SUFFIX) or not file_path:
            continue
        target_key = key[: -len(SECRET_SUFFIX)]
        if env.get(target_key):
            continue
        try:
            env[target_key] = Path(file_path).read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(
                "env.secret_file.unreadable",
                extra={"key": key, "path": file_path, "error": str(exc)},
            )
            continue
        resolved.append(target_key)

    return resolved


load_secret_file_variables()
