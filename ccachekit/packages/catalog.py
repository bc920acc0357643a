"""
Artifact catalog of installable compiler cache binaries.

The catalog is a fixed table keyed by (variant, platform, architecture). It is
loaded from the embedded ``data/packages.yaml`` file, so supporting another
combination is a data-only change. Everything that differs between the two
variants (release repository, tag format, archive naming) lives in one
capability record per variant, :data:`VARIANT_TRAITS`, which the otherwise
generic naming logic consults.

Example:
    >>> from ccachekit.packages.catalog import Variant, default_catalog
    >>> from ccachekit.core.platform import Platform, Architecture
    >>> descriptor = default_catalog().lookup(
    ...     Variant.SCCACHE, Platform.LINUX, Architecture.AARCH64
    ... )
    >>> descriptor.archive_filename
    'sccache-v0.12.0-aarch64-unknown-linux-musl.tar.gz'
"""

import enum
import functools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from ccachekit.core.exceptions import CatalogError
from ccachekit.core.platform import Architecture, Platform

logger = logging.getLogger(__name__)


class Variant(str, enum.Enum):
    """Supported compiler cache tools."""

    CCACHE = "ccache"
    SCCACHE = "sccache"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class VariantTraits:
    """
    Per-variant capabilities and naming conventions.

    Attributes:
        repository: GitHub repository publishing the releases ('owner/name')
        tag_prefix: Prefix added to the catalog version to form the release tag
        target_names: Per-platform target name template; ``{arch}`` is
            substituted, and a template without it marks a universal binary
        archive_extensions: Per-platform archive extension overrides
        default_extension: Archive extension used when no override applies
        supports_symlinks: Whether compilers can be redirected via symlinks
        runs_server: Whether the tool intercepts compilations via its own server
        supports_eviction: Whether old entries can be evicted by age
    """

    repository: str
    tag_prefix: str
    target_names: Mapping[Platform, str]
    archive_extensions: Mapping[Platform, str] = field(default_factory=dict)
    default_extension: str = ".tar.gz"
    supports_symlinks: bool = False
    runs_server: bool = False
    supports_eviction: bool = False

    def is_universal(self, platform: Platform) -> bool:
        """Whether one binary serves every architecture on this platform."""
        return "{arch}" not in self.target_names[platform]

    def archive_extension(self, platform: Platform) -> str:
        return self.archive_extensions.get(platform, self.default_extension)


VARIANT_TRAITS: Dict[Variant, VariantTraits] = {
    Variant.CCACHE: VariantTraits(
        repository="ccache/ccache",
        tag_prefix="v",
        target_names={
            Platform.LINUX: "linux-{arch}",
            Platform.WINDOWS: "windows-{arch}",
            Platform.DARWIN: "darwin",
        },
        archive_extensions={Platform.WINDOWS: ".zip"},
        supports_symlinks=True,
        supports_eviction=True,
    ),
    Variant.SCCACHE: VariantTraits(
        repository="mozilla/sccache",
        tag_prefix="",
        target_names={
            Platform.LINUX: "{arch}-unknown-linux-musl",
            Platform.WINDOWS: "{arch}-pc-windows-msvc",
            Platform.DARWIN: "{arch}-apple-darwin",
        },
        runs_server=True,
    ),
}


@dataclass(frozen=True)
class PackageDescriptor:
    """
    One installable release binary.

    Attributes:
        variant: Compiler cache tool
        platform: Target operating system
        architecture: Target CPU architecture
        version: Release version as published ('4.12.2', 'v0.12.0')
        checksum: SHA-256 of the extracted executable, or None if not recorded
    """

    variant: Variant
    platform: Platform
    architecture: Architecture
    version: str
    checksum: Optional[str] = None

    @property
    def traits(self) -> VariantTraits:
        return VARIANT_TRAITS[self.variant]

    @property
    def target_name(self) -> str:
        template = self.traits.target_names[self.platform]
        return template.format(arch=self.architecture.value)

    @property
    def package_name(self) -> str:
        """
        Canonical package name, also the archive's top-level directory.

        Example:
            'ccache-4.12.2-windows-x86_64', 'ccache-4.12.2-darwin',
            'sccache-v0.12.0-x86_64-unknown-linux-musl'
        """
        return f"{self.variant.value}-{self.version}-{self.target_name}"

    @property
    def archive_filename(self) -> str:
        return self.package_name + self.traits.archive_extension(self.platform)

    @property
    def executable_name(self) -> str:
        if self.platform is Platform.WINDOWS:
            return f"{self.variant.value}.exe"
        return self.variant.value

    @property
    def member_path(self) -> str:
        """Path of the executable inside the release archive."""
        return f"{self.package_name}/{self.executable_name}"

    @property
    def release_tag(self) -> str:
        return f"{self.traits.tag_prefix}{self.version}"

    @property
    def download_url(self) -> str:
        return (
            f"https://github.com/{self.traits.repository}/releases/download/"
            f"{self.release_tag}/{self.archive_filename}"
        )

    def __str__(self) -> str:
        return f"{self.package_name} ({self.architecture.value})"


CatalogKey = Tuple[Variant, Platform, Architecture]


class Catalog:
    """
    Lookup table from (variant, platform, architecture) to descriptors.

    Exactly one descriptor exists per triple; duplicates are rejected.
    """

    def __init__(self, descriptors: Iterable[PackageDescriptor]):
        self._entries: Dict[CatalogKey, PackageDescriptor] = {}
        for descriptor in descriptors:
            key = (descriptor.variant, descriptor.platform, descriptor.architecture)
            if key in self._entries:
                raise CatalogError(
                    f"Duplicate catalog entry for {key[0].value} "
                    f"{key[1].value}/{key[2].value}"
                )
            self._entries[key] = descriptor

    def lookup(
        self, variant: Variant, platform: Platform, architecture: Architecture
    ) -> Optional[PackageDescriptor]:
        """
        Find the descriptor for a triple.

        Returns:
            The descriptor, or None if the combination is not in the catalog
        """
        return self._entries.get((variant, platform, architecture))

    def entries(self) -> List[PackageDescriptor]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    @classmethod
    def load(cls, path: Path) -> "Catalog":
        """
        Load a catalog from a YAML file.

        Raises:
            CatalogError: If the file is missing or malformed
        """
        path = Path(path)
        if not path.exists():
            raise CatalogError(f"Catalog file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CatalogError(f"Invalid YAML in catalog file {path}: {e}") from e

        catalog = cls(_parse_catalog(data, path))
        logger.debug(f"Loaded catalog with {len(catalog)} packages from {path}")
        return catalog


def _parse_catalog(data, path: Path) -> List[PackageDescriptor]:
    if not isinstance(data, dict):
        raise CatalogError(f"Invalid catalog structure in {path}: expected a mapping")

    descriptors = []
    for variant_name, section in data.items():
        try:
            variant = Variant(variant_name)
            version = str(section["version"])
            packages = section["packages"]
            for entry in packages:
                checksum = entry.get("sha256")
                descriptors.append(
                    PackageDescriptor(
                        variant=variant,
                        platform=Platform(entry["platform"]),
                        architecture=Architecture(entry["arch"]),
                        version=version,
                        checksum=str(checksum).lower() if checksum else None,
                    )
                )
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(
                f"Invalid catalog entry for '{variant_name}' in {path}: {e}"
            ) from e

    return descriptors


def _get_default_catalog_path() -> Path:
    return Path(__file__).parent.parent / "data" / "packages.yaml"


@functools.lru_cache(maxsize=1)
def default_catalog() -> Catalog:
    """Get the catalog shipped with ccachekit (loaded once per process)."""
    return Catalog.load(_get_default_catalog_path())


__all__ = [
    "Variant",
    "VariantTraits",
    "VARIANT_TRAITS",
    "PackageDescriptor",
    "Catalog",
    "default_catalog",
]
