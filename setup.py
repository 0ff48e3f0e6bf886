"""Setup script for Suite Insight"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
this_directory = Path(__file__).parent
long_description = ""
readme_path = this_directory / "README.md"
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

setup(
    name="suite-insight",
    version="0.1.0",
    description="Coverage and health diagnostics for Kubernetes operator e2e test suites",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Quality Assurance",
        "Topic :: Software Development :: Testing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.11",
    install_requires=[
        "typer>=0.9.0",
        "click>=8.0",
        "rich>=13.0.0",
        "tree-sitter>=0.23.0",
        "tree-sitter-go>=0.23.0",
        "tree-sitter-python>=0.23.0",
        "kubernetes>=28.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "suite-insight=suite_insight.cli:app",
        ],
    },
    keywords="e2e testing coverage traceability kubernetes operator health-check",
)
