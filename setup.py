import os
from setuptools import setup, find_packages

# Each service keeps its own src/ tree
SERVICE_SOURCES = {
    "gateway_common": "services/gateway-common/src",
    "record_gateway": "services/record_gateway/src",
    "activity_import": "services/activity_import/src",
}

packages = []
for package, source in SERVICE_SOURCES.items():
    packages += find_packages(where=source, include=[package, f"{package}.*"])

setup(
    name="activity-record-gateway",
    version="0.1.0",
    packages=packages,
    package_dir={package: f"{source}/{package}" for package, source in SERVICE_SOURCES.items()},
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "sqlalchemy[asyncio]>=2.0.0",
        "asyncpg>=0.29.0",
        "prometheus-client>=0.19.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23.0",
            "pytest-mock>=3.12.0",
            "httpx>=0.26.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "record-gateway=record_gateway.main:main",
            "activity-import=activity_import.main:main",
        ],
    },
    description="REST gateway and batch importer for Strava activity, athlete, token and session records",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
