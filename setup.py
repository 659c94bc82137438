import os

from setuptools import setup, find_packages

# Read version from src/qlog/_version.py without importing the package
version_ns = {}
with open(os.path.join("src", "qlog", "_version.py"), encoding="utf-8") as f:
    exec(f.read(), version_ns)

setup(
    name="qlog",
    version=version_ns["PIP_VERSION"],
    description="Severity log channels over a synchronous stream-multiplexing engine",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[],
    extras_require={
        "test": ["pytest>=7.0", "pytest-cov>=4.0"],
    },
    entry_points={
        "console_scripts": [
            "qlog=qlog.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Logging",
    ],
    python_requires=">=3.10",
)
