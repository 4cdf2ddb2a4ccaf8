# setup.py
from setuptools import setup, find_packages


def parse_reqs(fname="requirements.txt"):
    with open(fname) as f:
        # strip comments and empty lines
        return [l.strip() for l in f if l.strip() and not l.startswith("#")]


setup(
    name="tsdecomp",
    version="0.1.0",
    description="Classical multiplicative time-series decomposition",
    package_dir={"tsdecomp": "tsdecomp"},
    packages=find_packages(include=["tsdecomp", "tsdecomp.*"]),
    install_requires=parse_reqs(),
    extras_require={"test": ["pytest>=7"]},
    package_data={"tsdecomp.datasets": ["data/*.csv"]},
    include_package_data=True,
    python_requires=">=3.10",
    entry_points={"console_scripts": ["tsdecomp=tsdecomp.core.cli:cli"]},
)
