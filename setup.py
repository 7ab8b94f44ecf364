"""Setup configuration for the jigcut package."""

from setuptools import find_packages, setup

setup(
    name="jigcut",
    version="0.1.0",
    description="Interlocking jigsaw puzzle cut lines with SVG and DXF export",
    packages=find_packages(include=["jigcut", "jigcut.*", "app", "app.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "ezdxf",
        "svgwrite",
        "fastapi",
        "uvicorn",
        "python-multipart",
        "pillow",
        "pydantic>=2",
        "pydantic-settings",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "httpx",
            "black",
            "flake8",
            "mypy",
            "isort",
        ],
    },
)
