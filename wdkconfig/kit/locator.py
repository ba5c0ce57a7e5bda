"""
wdkconfig/kit/locator.py

Kit discovery - finds Windows Driver Kit installations on the build host.

Candidate roots come from, in order:
- the WDKContentRoot environment variable (exclusive when set)
- the host configuration store (registry key 'Installed Roots')
- fixed standard locations, when the store is absent or inaccessible

Every candidate root is probed for version-named directories. Discovery only
reads from the host.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

from ..core.exceptions import KitNotFound, ProbeFailure
from ..core.filesystem import list_subdirectories
from ..core.interfaces import ConfigurationStore
from .layout import KitLayout
from .registry import default_store
from .version import InvalidKitVersion, KitVersion

logger = logging.getLogger(__name__)

ENV_CONTENT_ROOT = "WDKContentRoot"

INSTALLED_ROOTS_KEY = r"SOFTWARE\Microsoft\Windows Kits\Installed Roots"
INSTALLED_ROOTS_VALUE = "KitsRoot10"

STANDARD_LOCATIONS = (
    Path("C:/Program Files (x86)/Windows Kits/10"),
    Path("C:/Program Files/Windows Kits/10"),
)


@dataclass(frozen=True)
class KitInstallation:
    """
    A kit version found on the host.

    Attributes:
        root_path: Kit content root (e.g., C:/Program Files (x86)/Windows Kits/10)
        version: Installed kit version
        discovery_method: How the root was found
                          ('environment', 'registry', 'standard_location')
    """

    root_path: Path
    version: KitVersion
    discovery_method: str

    def __str__(self) -> str:
        return f"WDK {self.version} ({self.discovery_method}) at {self.root_path}"


@dataclass(frozen=True)
class CandidateRoot:
    """A kit root to probe and how it was found."""

    path: Path
    method: str


class EnvironmentSearcher:
    """Reads the kit root override from the environment."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def search(self) -> List[CandidateRoot]:
        value = self.environ.get(ENV_CONTENT_ROOT, "").strip()
        if not value:
            return []
        logger.debug(f"{ENV_CONTENT_ROOT} override: {value}")
        return [CandidateRoot(Path(value), "environment")]


class RegistrySearcher:
    """
    Reads installed kit roots from the host configuration store.

    An absent store, key or value yields no candidates. A store that denies
    access is logged and also yields no candidates, so the locator falls back
    to standard locations.
    """

    def __init__(self, store: ConfigurationStore):
        self.store = store

    def search(self) -> List[CandidateRoot]:
        if not self.store.is_available():
            logger.debug("Configuration store not available on this host")
            return []

        try:
            value = self.store.read_value(INSTALLED_ROOTS_KEY, INSTALLED_ROOTS_VALUE)
        except OSError as e:
            logger.warning(f"Configuration store query failed, using fallbacks: {e}")
            return []

        if not value:
            logger.debug(f"No {INSTALLED_ROOTS_VALUE} value in configuration store")
            return []

        return [CandidateRoot(Path(value), "registry")]


class StandardLocationSearcher:
    """Lists the conventional kit install locations."""

    def __init__(self, locations=STANDARD_LOCATIONS):
        self.locations = [Path(p) for p in locations]

    def search(self) -> List[CandidateRoot]:
        return [CandidateRoot(path, "standard_location") for path in self.locations]


class KitLocator:
    """
    Discovers installed kits.

    Example:
        >>> locator = KitLocator()
        >>> installations = locator.discover()
        >>> print(installations[0].version)
        10.0.26100.0

    Attributes:
        consulted_paths: Directories read during the last discover() call
    """

    def __init__(
        self,
        store: Optional[ConfigurationStore] = None,
        environ: Optional[Mapping[str, str]] = None,
        layout: Optional[KitLayout] = None,
        standard_locations=STANDARD_LOCATIONS,
    ):
        self.layout = layout or KitLayout()
        self.environment_searcher = EnvironmentSearcher(environ)
        self.registry_searcher = RegistrySearcher(store or default_store())
        self.standard_searcher = StandardLocationSearcher(standard_locations)
        self.consulted_paths: List[Path] = []

    def candidate_roots(self) -> List[CandidateRoot]:
        """
        Determine which roots to probe.

        The environment override is exclusive. Otherwise configuration-store
        roots are used, and standard locations only when the store has none.
        """
        override = self.environment_searcher.search()
        if override:
            return override

        candidates = self.registry_searcher.search()
        if not candidates:
            logger.debug("Falling back to standard kit locations")
            candidates = self.standard_searcher.search()
        return candidates

    def discover(self) -> List[KitInstallation]:
        """
        Discover all installed kit versions.

        Returns:
            Installations sorted by version, newest first. Equal versions keep
            their discovery order.

        Raises:
            KitNotFound: If no installation was found
            ProbeFailure: If an existing root cannot be read
        """
        logger.info("Starting kit discovery")
        self.consulted_paths = []

        installations: List[KitInstallation] = []
        attempted: List[Path] = []
        seen = set()

        for candidate in self.candidate_roots():
            key = os.path.normcase(os.path.abspath(candidate.path))
            if key in seen:
                continue
            seen.add(key)
            attempted.append(candidate.path)
            installations.extend(self._probe_root(candidate))

        if not installations:
            raise KitNotFound(attempted)

        # sorted() is stable, so ties stay in discovery order
        installations = sorted(installations, key=lambda i: i.version, reverse=True)
        logger.info(
            f"Discovered {len(installations)} kit version(s), newest {installations[0].version}"
        )
        return installations

    def _probe_root(self, candidate: CandidateRoot) -> List[KitInstallation]:
        version_root = self.layout.version_root(candidate.path)
        if not version_root.is_dir():
            logger.debug(f"No kit at {candidate.path} ({version_root} missing)")
            return []

        self.consulted_paths.append(version_root)
        try:
            entries = list_subdirectories(version_root)
        except OSError as e:
            raise ProbeFailure(version_root, str(e)) from e

        found = []
        for entry in entries:
            if not self.layout.is_version_candidate(entry.name):
                continue
            try:
                version = KitVersion.parse(entry.name)
            except InvalidKitVersion:
                logger.warning(f"Skipping unrecognized kit directory: {entry}")
                continue

            installation = KitInstallation(
                root_path=candidate.path,
                version=version,
                discovery_method=candidate.method,
            )
            logger.info(f"Found {installation}")
            found.append(installation)

        return found
