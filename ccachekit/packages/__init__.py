"""
Package resolution and installation for ccachekit.

Available Components:
--------------------
- catalog: Artifact catalog (variants, descriptors, naming rules)
- resolver: Pick the catalog entry for the host platform
- extractor: Download, extract and verify a release binary
- managers: System package manager installation
- strategy: Install policies and the post-install check

Example Usage:
-------------
    from ccachekit.packages import InstallEngine, InstallPolicy, resolve

    print(resolve("sccache").download_url)
    InstallEngine("sccache").run(InstallPolicy.BINARY)
"""

from .catalog import (
    Catalog,
    PackageDescriptor,
    Variant,
    VariantTraits,
    VARIANT_TRAITS,
    default_catalog,
)
from .extractor import fetch_and_extract
from .managers import (
    SystemPackageManager,
    detect_package_manager,
    install_with_package_manager,
)
from .resolver import parse_variant, resolve
from .strategy import InstallEngine, InstallPolicy

__all__ = [
    "Catalog",
    "PackageDescriptor",
    "Variant",
    "VariantTraits",
    "VARIANT_TRAITS",
    "default_catalog",
    "fetch_and_extract",
    "SystemPackageManager",
    "detect_package_manager",
    "install_with_package_manager",
    "parse_variant",
    "resolve",
    "InstallEngine",
    "InstallPolicy",
]
