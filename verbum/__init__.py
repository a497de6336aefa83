__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'verbum'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .builder import *
from .faults import *
from .fields import *
from .resolver import *
from .registry import *
from .utils import kebab
from .validation import *
from .verbs import *

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
    "kebab",
)

# Load the exposed API of the fields
__all__ += fields.__all__  # type: ignore[attr-defined]
# Load the exposed API of the verbs
__all__ += verbs.__all__  # type: ignore[attr-defined]
# Load the exposed API of the builder
__all__ += builder.__all__  # type: ignore[attr-defined]
# Load the exposed API of the pre-fill resolver
__all__ += resolver.__all__  # type: ignore[attr-defined]
# Load the exposed API of the registry
__all__ += registry.__all__  # type: ignore[attr-defined]
# Load the exposed API of the validation suite
__all__ += validation.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
