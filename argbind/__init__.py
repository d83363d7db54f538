__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'argbind'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .converters import *
from .parameters import *
from .parser import *
from .faults import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__license__",
    "__version__",
    "version_info"
)

# Value converters and choices normalization
__all__ += converters.__all__  # type: ignore[attr-defined]
# Parameter handles (named, flag, positional)
__all__ += parameters.__all__  # type: ignore[attr-defined]
# Registry, parse engine and help rendering
__all__ += parser.__all__  # type: ignore[attr-defined]
# Registration and parse faults
__all__ += faults.__all__  # type: ignore[attr-defined]
