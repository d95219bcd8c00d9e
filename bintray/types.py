from enum import Enum


class RepositoryType(str, Enum):
    """Repository types supported by Bintray."""

    debian = "debian"
    docker = "docker"
    generic = "generic"
    maven = "maven"
    npm = "npm"
    nuget = "nuget"
    opkg = "opkg"
    rpm = "rpm"
    vagrant = "vagrant"

    @classmethod
    def _missing_(cls, value):
        # Bintray reports Debian repositories as `deb` in some places.
        if isinstance(value, str):
            value = value.lower()
            if value == "deb":
                return cls.debian
            for member in cls:
                if member.value == value:
                    return member
        return None

    @property
    def is_indexed(self) -> bool:
        """Whether Bintray builds package indexes for this type of repository."""
        return self in (RepositoryType.debian, RepositoryType.rpm)

    def __str__(self):
        return self.value


class PackageMaturity(str, Enum):
    official = "Official"
    stable = "Stable"
    development = "Development"
    experimental = "Experimental"
    unset = ""

    @classmethod
    def _missing_(cls, value):
        if value is None:
            return cls.unset
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None

    def __str__(self):
        return self.value
