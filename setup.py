"""Setup configuration for marketplace-cart project."""

from setuptools import setup, find_packages

setup(
    name="marketplace-cart",
    version="1.0.0",
    description="Client-side shopping cart store with debounced durable persistence",
    author="Your Name",
    packages=find_packages(include=["cart", "cart.*", "shared", "shared.*"]),
    python_requires=">=3.11",
    install_requires=[
        "redis>=5.0.0",
        "pydantic>=2.6.0",
        "pydantic-settings>=2.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
)
