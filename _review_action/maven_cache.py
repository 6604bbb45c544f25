"""
Maven dependency cache - Review Request Action

The main stage restores ~/.m2 before compiling and the cleanup stage saves it
afterwards, keyed by a hash of the test repository's pom.xml. Archives live in
CACHE_DIR on the runner (the tool cache directory on self-hosted runners
persists between jobs).
"""

import hashlib
import logging
import os
import shutil
from typing import Optional

from .config import CACHE_DIR, MAVEN_HOME_DIR, RUNNER_OS

logger = logging.getLogger(__name__)

_ARCHIVE_FORMAT = "gztar"
_ARCHIVE_SUFFIX = ".tar.gz"


def maven_cache_key(pom_path: str, runner_os: str = RUNNER_OS) -> Optional[str]:
    """Return the cache key for a pom.xml, or None if the file is missing."""
    try:
        with open(pom_path, "rb") as f:
            digest = hashlib.sha256(f.read()).hexdigest()
    except FileNotFoundError:
        return None
    return f"maven-{runner_os.lower()}-{digest[:16]}"


def restore_maven_cache(
    key: str,
    cache_dir: str = CACHE_DIR,
    maven_dir: str = MAVEN_HOME_DIR,
) -> Optional[str]:
    """Unpack the archive for `key` into `maven_dir`. Returns the key on a hit."""
    archive = os.path.join(cache_dir, key + _ARCHIVE_SUFFIX)
    if not os.path.isfile(archive):
        logger.info(f"Cache not found for key: {key}")
        return None

    os.makedirs(maven_dir, exist_ok=True)
    shutil.unpack_archive(archive, maven_dir, _ARCHIVE_FORMAT)
    logger.info(f"Restored cache {key} into {maven_dir}")
    return key


def save_maven_cache(
    key: str,
    cache_dir: str = CACHE_DIR,
    maven_dir: str = MAVEN_HOME_DIR,
) -> str:
    """Archive `maven_dir` under `key`. Returns the archive path."""
    if not os.path.isdir(maven_dir):
        raise FileNotFoundError(f"Maven directory not found: {maven_dir}")

    os.makedirs(cache_dir, exist_ok=True)
    return shutil.make_archive(os.path.join(cache_dir, key), _ARCHIVE_FORMAT, root_dir=maven_dir)
