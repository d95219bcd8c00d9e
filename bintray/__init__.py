from .client import API_BASE_URL, DL_BASE_URL, Client  # noqa: F401
from .config import client_from_config, load_config  # noqa: F401
from .content import Content  # noqa: F401
from .meta import __version__  # noqa: F401
from .package import Package  # noqa: F401
from .repository import Repository  # noqa: F401
from .specfile import SpecFile  # noqa: F401
from .subject import Subject  # noqa: F401
from .types import PackageMaturity, RepositoryType  # noqa: F401
from .version import Version  # noqa: F401
