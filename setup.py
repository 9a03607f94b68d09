"""
Setup file.
"""

from setuptools import find_packages, setup

URL = "https://github.com/zackees/makevars"
KEYWORDS = "build make makefile soong kati ninja variables export"


if __name__ == "__main__":
    setup(
        name="makevars",
        version="0.1.0",
        description="Export build variables to a legacy Make build",
        maintainer="Zachary Vorhies",
        keywords=KEYWORDS,
        url=URL,
        package_dir={"": "src"},
        packages=find_packages(where="src"),
        python_requires=">=3.8",
        install_requires=[],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["makevars=makevars.cli:main"]},
        include_package_data=True)
