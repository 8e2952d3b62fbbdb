"""
Setup script for lexiquiz.

lexiquiz is the quiz core of a reading-comprehension platform. It:

1. Validates quiz questions and answers across pluggable question types
2. Grades submissions and gates re-attempts (cooldown, retakes, attempt cap)
3. Calibrates a student's Lexile reading level and scores book matches

The 'lexiquiz' command exposes validation, grading and calibration
from the terminal.
"""

from setuptools import find_packages, setup

setup(
    name="lexiquiz",
    version="1.0.0",
    description="Reading-comprehension quiz grading, attempt policy and reading-level calibration",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["lexiquiz", "lexiquiz.*"]),
    py_modules=["config"],
    python_requires=">=3.11",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
        "postgres": [
            "psycopg2-binary>=2.9.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "lexiquiz=lexiquiz.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="reading comprehension quiz grading lexile education",
)
