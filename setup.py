#!/usr/bin/env python
import sys
from setuptools import setup, find_packages
from pathlib import Path


PACKAGES = find_packages(include=["flatarray", "flatarray.*"])
INSTALL_REQUIRES = [
    "numpy>=1.19.0",
    "srsly>=2.4.0,<3.0.0",
    "catalogue>=2.0.4,<2.1.0",
    "pydantic>=1.7.4,!=1.8,!=1.8.1,<3.0.0",
    "wasabi>=0.8.1,<1.2.0",
]
TESTS_REQUIRE = [
    "pytest>=5.2.0",
    "hypothesis>=3.27.0",
]


def clean(path):
    for path in path.glob("**/*"):
        if path.is_file() and path.suffix in (".pyc", ".pyo"):
            print(f"Deleting {path.name}")
            path.unlink()


def setup_package():
    root = Path(__file__).parent

    if len(sys.argv) > 1 and sys.argv[1] == "clean":
        return clean(root / "flatarray")

    with (root / "flatarray" / "about.py").open("r") as f:
        about = {}
        exec(f.read(), about)

    setup(
        name="flatarray",
        packages=PACKAGES,
        version=about["__version__"],
        description=about["__summary__"],
        license=about["__license__"],
        python_requires=">=3.8",
        install_requires=INSTALL_REQUIRES,
        extras_require={"test": TESTS_REQUIRE},
    )


if __name__ == "__main__":
    setup_package()
