"""
Package resolution for the host platform.

Combines platform detection with a catalog lookup and turns a missing
catalog entry into a descriptive error.
"""

import logging
from typing import Optional, Union

from ccachekit.core.exceptions import ConfigError, UnsupportedCombinationError
from ccachekit.core.platform import PlatformInfo, detect_platform
from ccachekit.packages.catalog import (
    Catalog,
    PackageDescriptor,
    Variant,
    default_catalog,
)

logger = logging.getLogger(__name__)


def parse_variant(value: Union[str, Variant]) -> Variant:
    """
    Convert an option value to a :class:`Variant`.

    Raises:
        ConfigError: If the value names no known variant
    """
    if isinstance(value, Variant):
        return value
    try:
        return Variant(value.strip())
    except ValueError:
        raise ConfigError(
            f"Unknown variant '{value}'. "
            f"Expected one of: {', '.join(v.value for v in Variant)}"
        ) from None


def resolve(
    variant: Union[str, Variant],
    platform_info: Optional[PlatformInfo] = None,
    catalog: Optional[Catalog] = None,
) -> PackageDescriptor:
    """
    Select the package for a variant on the host (or given) platform.

    Args:
        variant: Compiler cache tool
        platform_info: Platform to resolve for (auto-detected if None)
        catalog: Catalog to consult (the embedded catalog if None)

    Returns:
        The matching descriptor

    Raises:
        UnsupportedPlatformError: If host detection fails
        UnsupportedCombinationError: If the catalog has no entry for the triple
    """
    variant = parse_variant(variant)
    platform_info = platform_info or detect_platform()
    if catalog is None:
        catalog = default_catalog()

    descriptor = catalog.lookup(variant, platform_info.platform, platform_info.arch)
    if descriptor is None:
        raise UnsupportedCombinationError(
            variant.value, platform_info.platform.value, platform_info.arch.value
        )

    logger.info(f"Resolved {variant.value} package: {descriptor.package_name}")
    return descriptor


__all__ = ["parse_variant", "resolve"]
