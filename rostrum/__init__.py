__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'rostrum'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .parameters import *
from .parsing import *
from .actions import *
from .shell import *
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
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Parameter declarations
__all__ += parameters.__all__  # type: ignore[attr-defined]
# Argument parsing
__all__ += parsing.__all__  # type: ignore[attr-defined]
# Actions and the trigger registry
__all__ += actions.__all__  # type: ignore[attr-defined]
# Interactive shell
__all__ += shell.__all__  # type: ignore[attr-defined]
# Faults
__all__ += faults.__all__  # type: ignore[attr-defined]
