from pathlib import Path

from setuptools import find_packages, setup


HERE = Path(__file__).parent
with (HERE / "requirements.txt").open("r") as f:
    INSTALL_REQUIRES = [x.strip() for x in f.readlines() if x.strip()]
with (HERE / "test_requirements.txt").open("r") as f:
    TESTS_REQUIRE = [x.strip() for x in f.readlines() if x.strip()]
with (HERE / "bintray" / "meta.py").open("r") as f:
    meta = {}
    exec(f.read(), meta)
    VERSION = meta["__version__"]


setup(
    name="bintray",
    version=VERSION,
    description="Client library and CLI tool for the Bintray REST API",
    # Possible options are at https://pypi.python.org/pypi?%3Aaction=list_classifiers
    classifiers=[
        "Development Status :: 3 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Build Tools",
        "Topic :: System :: Software Distribution",
    ],
    license="MIT",
    platforms=["GNU/Linux"],
    keywords="bintray rpm debian packaging",
    packages=find_packages(include=["bintray", "bintray.*"]),
    include_package_data=True,
    package_data={},
    zip_safe=False,
    python_requires=">=3.10",
    install_requires=INSTALL_REQUIRES,
    extras_require={"test": TESTS_REQUIRE},
    entry_points={"console_scripts": ["bintray = bintray.cli:cli"]},
)
