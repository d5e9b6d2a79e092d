#!/usr/bin/env python3
"""
Setup configuration for tube-archive
Keep a local, curated archive of YouTube playlists
"""

from pathlib import Path

from setuptools import setup, find_packages

# Read README for long description
readme = Path(__file__).parent / "README.md"
long_description = readme.read_text(encoding="utf-8") if readme.exists() else ""

# Core requirements (always installed)
core_requirements = [
    "yt-dlp>=2023.12.30",
    "click>=8.1.7",
    "rich-click>=1.7.0",
    "rich>=13.0.0",
    "pyyaml>=6.0.1",
    "requests>=2.31.0",
    "tqdm>=4.66.1",
    "python-dotenv>=1.0.0",
    "python-dateutil>=2.8.2",
    "fastapi>=0.110.0",
    "uvicorn>=0.27.0",
    "pydantic>=2.5.0",
]

setup(
    name="tube-archive",
    version="0.1.0",
    author="tube-archive contributors",
    description="Keep a local, curated archive of YouTube playlists",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["tube_archive", "tube_archive.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Video",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "test": [
            "pytest>=7.4.3",
            "httpx>=0.25.0",  # FastAPI TestClient
        ],
        "dev": [
            "pytest>=7.4.3",
            "httpx>=0.25.0",
            "black>=23.11.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "tube-archive=tube_archive.cli:main",
        ],
    },
    keywords="youtube playlist archive download yt-dlp cli",
)
