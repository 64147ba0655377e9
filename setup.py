import setuptools

setuptools.setup(
    name="lapimg",
    version="1.0.0",
    author="The lapimg contributors",
    description=("Upgrade image creation for WAP4410N style firmware"),
    license="Apache Software License",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        'intelhex>=2.2.1',
        'click',
        'PyYAML>=5.1',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        "console_scripts": ["lapimg=lapimg.main:lapimg"]
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Development Status :: 4 - Beta",
        "Topic :: Software Development :: Build Tools",
        "License :: OSI Approved :: Apache Software License",
    ],
)
