from setuptools import setup, find_packages

setup(
    name="flaggroups",
    version="0.1.0a0",
    description="Grouped, column-aligned help text for command-line flags, on top of argparse",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[],
    extras_require={
        "test": ["pytest", "pytest-cov"],
    },
    entry_points={
        "console_scripts": [
            "flaggroups-demo=flaggroups.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Environment :: Console",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
)
