from setuptools import setup

info = {}

with open("mcpanel/info.py") as fp:
    exec(fp.read(), info)

version = ""
with open("mcpanel/VERSION", "r") as f:
    version = f.read().strip()

with open("README.md", "r") as f:
    long_description = f.read()

with open("requirements.txt") as f:
    requirements = [line.strip() for line in f if line.strip()]

setup(
    name=info["__package_name__"],
    version=version,
    description=info["__description__"],
    long_description=long_description,
    long_description_content_type="text/markdown",
    license=info["__license__"],
    author=info["__author__"],
    author_email=info["__author_email__"],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
            "pytest-aiohttp>=1.0.5",
        ],
    },
    packages=[
        "mcpanel",
        "mcpanel.endpoints",
        "mcpanel.libraries",
        "mcpanel.libraries.containers",
        "mcpanel.middlewares",
        "mcpanel.schemas",
        "mcpanel.services",
        "mcpanel.utils",
    ],
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX :: Linux",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Topic :: Utilities",
    ],
    entry_points={
        "console_scripts": [
            "mcpanel = mcpanel:main",
        ],
    },
    include_package_data=True,
    package_data={
        "mcpanel": [
            "VERSION",
        ],
    },
)
