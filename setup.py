from __future__ import annotations

from setuptools import find_packages, setup

setup(
    name="watchpick",
    version="0.1.0",
    # Repo convention: backend code lives under `backend/`.
    package_dir={"": "backend"},
    packages=find_packages(where="backend", include=["watchpick", "watchpick.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.10",
        "python-dotenv>=1.0",
        "aiohttp>=3.9",
    ],
    extras_require={
        # HTTP API surface.
        "server": ["fastapi>=0.110", "uvicorn>=0.29"],
        # Terminal surface.
        "cli": ["rich>=13.9"],
        # Test tooling (fastapi.testclient needs httpx).
        "test": ["pytest>=8.0", "httpx>=0.27", "fastapi>=0.110", "uvicorn>=0.29", "rich>=13.9"],
        # Convenience: all optional deps.
        "full": ["fastapi>=0.110", "uvicorn>=0.29", "rich>=13.9"],
    },
    entry_points={
        "console_scripts": [
            "watchpick=watchpick.cli.main:main",
            "watchpick-server=watchpick.server.main:main",
        ],
    },
)
