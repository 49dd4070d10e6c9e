from setuptools import setup

from oosshuffler.version import __version__

setup(
    name="oosshuffler",
    version=__version__,
    description=("Oracle of Seasons Randomiser logic core"),
    license="GPL-3.0",
    python_requires=">=3.9",
    install_requires=[
        "typing_extensions",
    ],
    extras_require={
        "maps": ["graphviz"],
        "test": ["pytest", "graphviz"],
    },
    packages=["oosshuffler"],
)
