import setuptools


with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="biot-savart-grid",
    version="0.1.0",
    author="Ondrej Grover",
    author_email="grover@ipp.cas.cz",
    description="Direct Biot-Savart summation of the magnetic field of a current density grid",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(exclude=['tests']),
    install_requires=['numpy', 'scipy', 'numba', 'xarray', 'dask'],
    extras_require={'test': ['pytest']},
)
