"""
Setup script for korean-drill.

korean-drill is a terminal spaced repetition companion for Korean study.
It serves two roles:

1. Study Companion - Quick vocab, grammar and correction drills from the terminal
2. Content Pipeline - Validation of drill content files

The 'kdrill' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="korean-drill",
    version="1.0.0",
    description="Terminal spaced repetition drills for Korean vocabulary and grammar",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["korean_drill", "korean_drill.*"]),
    py_modules=["config"],
    package_data={"korean_drill": ["data/*.json"]},
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
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
    },
    entry_points={
        "console_scripts": [
            "kdrill=korean_drill.delivery.drill_cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition cli korean language",
)
