import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="hoptrace",
    version="0.1.0.dev1",
    description="UDP traceroute with per-hop round-trip times",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(include=['hoptrace', 'hoptrace.*']),
    install_requires=[
        'scapy>=2.5.0',
        'netifaces~=0.11.0',
        'prettytable>=2.0',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    classifiers=[
        "Environment :: Console",
        "Intended Audience :: System Administrators",
        "Operating System :: POSIX :: Linux",
        "Topic :: System :: Networking",

        "Programming Language :: Python :: 3",
        'Programming Language :: Python :: 3 :: Only',
        "Typing :: Typed",
    ],
    python_requires='>=3.7',
    entry_points={
        'console_scripts': [
            'hoptrace=hoptrace.run:main'
        ]
    },
)
