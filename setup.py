"""Setup script for the case dashboard services following Cosmic Python pattern."""

from setuptools import setup, find_namespace_packages

setup(
    name="case-dashboard",
    version="1.0.0",
    description="Case management dashboard - case store API, document uploads and review UI",
    author="Case Dashboard Team",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["cases*", "dashboard*", "shared*", "uploads*"]),
    py_modules=["config"],
    package_data={"dashboard": ["templates/*.html"]},
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "fastapi",
        "uvicorn[standard]",
        "pydantic",
        "redis",
        "minio",
        "requests",
        "python-multipart",
        "jinja2",
        "pyuca",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-cov",
            "httpx",
            "fakeredis",
            "tenacity",
        ],
        "dev": [
            "black",
            "flake8",
            "mypy",
            "pre-commit",
        ],
    },
    entry_points={
        "console_scripts": [
            "case-api=cases.entrypoints.case_api:main",
            "case-dashboard=dashboard.entrypoints.dashboard_app:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.11",
        "Framework :: FastAPI",
    ],
)
