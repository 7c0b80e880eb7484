"""Setup script for TrackProxy."""

from setuptools import setup, find_packages

setup(
    name="trackproxy",
    version="1.0.0",
    description="Caching and error-normalizing front end for parcel tracking lookups.",
    python_requires=">=3.11",
    packages=find_packages(include=["trackproxy", "trackproxy.*"]),
    install_requires=[
        "fastapi>=0.110",
        "starlette>=0.37",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "typing_extensions>=4.8",
        "uvicorn>=0.27",
        "python-dotenv>=1.0",
        "anyio>=4.0",
        "httpx>=0.27",
        "aiofiles>=23.2",
        "orjson>=3.9",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "respx>=0.21",
        ],
    },
)
