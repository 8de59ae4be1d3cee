from setuptools import setup, find_packages
setup(
    name="twinbank",
    version="0.1",
    description="Partition layout planner for dual-bank, verified-boot OS images",
    packages=find_packages(exclude=["tests", "tests.*"]),
    entry_points = {
        'console_scripts': ['twinbank=twinbank.cli:main'],
    },
    install_requires=[
        'pyyaml>=5.1',
    ],
    extras_require={
        'test': ['avocado-framework'],
    },
)
