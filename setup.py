"""
Setup script for the etcd_backup_ops package.
"""

from setuptools import setup, find_packages

setup(
    name="etcd_backup_ops",
    version="0.1.0",
    description="etcd Cluster Backup Operations Package",
    author="Shubham Singh",
    author_email="shubh2014shiv@gmail.com",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["etcd_backup_ops_exceptions"],
    install_requires=[
        "pydantic>=2.0.0,<3.0.0",
        "pydantic-settings>=2.0.0",
        "pydantic-yaml>=1.1.0",
        "pyyaml>=6.0",
        "tenacity>=8.0.0",  # For retry logic
        "etcd3>=0.12.0",
        "grpcio>=1.38.0",
        "protobuf>=3.20.0,<4.0.0",  # etcd3 ships protobuf 3 generated stubs
        "kubernetes>=24.2.0",
        "boto3>=1.26.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
            "flake8>=6.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
)
