"""Entitlements document generation.

The document is a property list consumed by the ad-hoc signing step of
the build. Its content depends only on the recipe, never on the
environment, so repeated writes produce identical bytes.
"""

import logging
import plistlib
from pathlib import Path

from caskforge.core.errors import EntitlementsError
from caskforge.models.recipe import EntitlementsDocument

logger = logging.getLogger(__name__)


def render_entitlements(document: EntitlementsDocument) -> bytes:
    """Render the entitlements document as an XML property list.

    Args:
        document: Entitlement values from the recipe.

    Returns:
        XML plist bytes with sorted keys.
    """
    return plistlib.dumps(document.as_dict(), fmt=plistlib.FMT_XML, sort_keys=True)


def write_entitlements(document: EntitlementsDocument, directory: Path) -> Path:
    """Write the entitlements document into a directory.

    Args:
        document: Entitlement values from the recipe.
        directory: Working directory (the staging checkout).

    Returns:
        Path of the written document.

    Raises:
        EntitlementsError: If the file cannot be written.
    """
    path = directory / document.filename
    try:
        path.write_bytes(render_entitlements(document))
    except OSError as e:
        msg = f"Failed to write entitlements document {path}: {e}"
        raise EntitlementsError(msg) from e

    logger.info("Wrote entitlements document %s", path)
    return path
