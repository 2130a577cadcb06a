from setuptools import setup, find_packages

setup(name='fitsrw',
      version='0.1.0',
      description='Read and write FITS images and spectral cubes with their header records',
      packages=find_packages(),
      install_requires=['numpy', 'astropy', 'lcogt-logging'],
      extras_require={'test': ['pytest', 'pytest-cov']},
      entry_points={'console_scripts': ['fits_header=fitsrw.dump_header:main']})
