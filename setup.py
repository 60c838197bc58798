from setuptools import setup, find_packages

setup(
    name="uireuse",
    version="1.0.0",
    description="Resilient interaction primitives for browser UI tests",
    packages=find_packages(include=["uireuse", "uireuse.*"]),
    install_requires=[
        "pyyaml>=5.4",
        "jsonschema>=4.0.0",
        "selenium>=4.10",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    package_data={
        "uireuse": ["schemas/*.json"],
    },
    entry_points={
        "console_scripts": [
            "uireuse=uireuse.cli:main",
        ],
    },
)
