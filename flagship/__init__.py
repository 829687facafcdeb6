__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'flagship'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from . import validate
from .argv import *
from .arguments import *
from .commands import *
from .entry import *
from .faults import *
from .loaders import *
from .prompts import *
from .resolution import *
from .usage import *
from .utils import Unset

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
    "version_info",
    "validate",
    "Unset",
)

# Load the exposed API of every layer, leaf-first
__all__ += argv.__all__  # type: ignore[attr-defined]
__all__ += arguments.__all__  # type: ignore[attr-defined]
__all__ += prompts.__all__  # type: ignore[attr-defined]
__all__ += resolution.__all__  # type: ignore[attr-defined]
__all__ += usage.__all__  # type: ignore[attr-defined]
__all__ += commands.__all__  # type: ignore[attr-defined]
__all__ += loaders.__all__  # type: ignore[attr-defined]
__all__ += entry.__all__  # type: ignore[attr-defined]
__all__ += faults.__all__  # type: ignore[attr-defined]
