"""Setup script for Corpus Forensics"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
this_directory = Path(__file__).parent
long_description = ""
readme_path = this_directory / "README.md"
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

setup(
    name="corpus-forensics",
    version="0.1.0",
    description="Engine for replaying and analyzing the commit history of a specification corpus",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Version Control :: Git",
        "Topic :: Text Processing",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "numpy>=1.20.0",
        "pydantic>=2.0",
        "rich>=13.0",
        "tomli>=2.0; python_version < '3.11'",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    keywords="diff myers levenshtein inverted-index spec-evolution forensics",
)
